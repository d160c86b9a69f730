"""Fully connected layer of neurons."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from convnet.neuron import Neuron, NeuronMemento


class NeuralLayer:
    """A layer of ``size`` neurons, each connected to all ``inputs``."""

    def __init__(
        self, size: int, inputs: int, activation: Any, neuron_type: type[Neuron] = Neuron
    ) -> None:
        self.inputs = inputs
        self.activation = activation
        self._neurons = [neuron_type(inputs, activation) for _ in range(size)]

    def __getitem__(self, index: int) -> Neuron:
        return self._neurons[index]

    def __len__(self) -> int:
        return len(self._neurons)

    def __iter__(self) -> Iterator[Neuron]:
        return iter(self._neurons)

    def set_input(self, input_id: int, value: float) -> None:
        """Feed ``value`` into input ``input_id`` of every neuron."""
        for neuron in self._neurons:
            neuron.set_input(input_id, value)

    def calculate_outputs(self, next_layer: Any = None) -> list[float]:
        """Compute every neuron's output, forwarding them to ``next_layer`` if given."""
        outputs = [neuron.calculate_output() for neuron in self._neurons]
        if next_layer is not None:
            for index, output in enumerate(outputs):
                next_layer.set_input(index, output)
        return outputs

    def get_memento(self) -> tuple[NeuronMemento, ...]:
        return tuple(neuron.get_memento() for neuron in self._neurons)

    def set_memento(self, memento: tuple[NeuronMemento, ...]) -> None:
        if len(memento) != len(self._neurons):
            raise ValueError(
                f"memento holds {len(memento)} neurons, layer has {len(self._neurons)}"
            )
        for neuron, neuron_memento in zip(self._neurons, memento):
            neuron.set_memento(neuron_memento)
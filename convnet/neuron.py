"""Neurons: weighted inputs, a bias and an activation function."""

from __future__ import annotations

import random
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any


@dataclass
class Input:
    """One neuron input: the value fed in and its weight."""

    value: float = 0.0
    weight: float = 0.0


@dataclass(frozen=True)
class NeuronMemento:
    """Snapshot of a neuron's trainable state."""

    weights: tuple[float, ...]
    bias: float


class Neuron:
    """A neuron with ``size`` weighted inputs."""

    def __init__(self, size: int, activation: Any) -> None:
        if size < 0:
            raise ValueError("a neuron cannot have a negative number of inputs")
        self.activation = activation
        self._inputs = [Input(0.0, random.uniform(-0.5, 0.5)) for _ in range(size)]
        self.bias = random.uniform(-0.5, 0.5)
        self.output = 0.0
        self.delta = 0.0

    def __getitem__(self, index: int) -> Input:
        return self._inputs[index]

    def __len__(self) -> int:
        return len(self._inputs)

    def __iter__(self) -> Iterator[Input]:
        return iter(self._inputs)

    def set_input(self, input_id: int, value: float) -> None:
        """Set the value of input ``input_id``."""
        if not 0 <= input_id < len(self._inputs):
            raise IndexError(f"input {input_id} out of range for {len(self._inputs)} inputs")
        self._inputs[input_id].value = value

    def calc_dot_product(self) -> float:
        """Weighted sum of the inputs plus the bias."""
        return self.activation.sum(
            (item.value * item.weight for item in self._inputs), self.bias
        )

    def calculate_output(self) -> float:
        """Compute, store and return the neuron's output."""
        self.output = self.activation.calculate(self.calc_dot_product(), self._inputs)
        return self.output

    def get_memento(self) -> NeuronMemento:
        return NeuronMemento(tuple(item.weight for item in self._inputs), self.bias)

    def set_memento(self, memento: NeuronMemento) -> None:
        if len(memento.weights) != len(self._inputs):
            raise ValueError(
                f"memento has {len(memento.weights)} weights, neuron has {len(self._inputs)} inputs"
            )
        for item, weight in zip(self._inputs, memento.weights):
            item.weight = weight
        self.bias = memento.bias


class RecurrentNeuron(Neuron):
    """A neuron whose last input is fed back from its own previous output."""

    def __init__(self, size: int, activation: Any) -> None:
        super().__init__(size + 1, activation)

    def calculate_output(self) -> float:
        output = super().calculate_output()
        self.set_input(len(self) - 1, output)
        return output
"""Multi-layer perceptron and its adapter to a neural layer."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class PerceptronMemento:
    """Snapshot of every layer's trainable state, in layer order."""

    layers: tuple[Any, ...]


def _input_count(layer: Any) -> int:
    grid = getattr(layer, "grid", None)
    if grid is not None:
        return grid.size
    return layer.inputs


class Perceptron:
    """An input layer, one or more hidden layers and an output layer."""

    def __init__(self, layers: Iterable[Any]) -> None:
        self.layers = tuple(layers)
        if len(self.layers) < 2:
            raise ValueError("Invalid number of layers, at least two layers need to be set")

    def __len__(self) -> int:
        return len(self.layers)

    def inputs(self) -> int:
        """Number of values the perceptron takes."""
        return _input_count(self.layers[0])

    def outputs(self) -> int:
        """Number of values the perceptron produces."""
        return len(self.layers[-1])

    def calculate(self, inputs: Iterable[float]) -> list[float]:
        """Feed ``inputs`` forward and return the output layer's values."""
        first = self.layers[0]
        for input_id, value in enumerate(inputs):
            first.set_input(input_id, value)

        for layer, next_layer in zip(self.layers, self.layers[1:]):
            layer.calculate_outputs(next_layer)

        last = self.layers[-1]
        last.calculate_outputs()
        return [neuron.output for neuron in last]

    def get_memento(self) -> PerceptronMemento:
        return PerceptronMemento(tuple(layer.get_memento() for layer in self.layers))

    def set_memento(self, memento: PerceptronMemento) -> None:
        if len(memento.layers) != len(self.layers):
            raise ValueError(
                f"memento holds {len(memento.layers)} layers, perceptron has {len(self.layers)}"
            )
        for layer, layer_memento in zip(self.layers, memento.layers):
            layer.set_memento(layer_memento)


class ComplexLayer:
    """Lets a whole perceptron act as a single layer of another network."""

    def __init__(self, perceptron: Perceptron) -> None:
        self.perceptron = perceptron
        self._inputs = [0.0] * perceptron.inputs()
        self.outputs = [0.0] * perceptron.outputs()

    @property
    def inputs(self) -> int:
        return len(self._inputs)

    def __len__(self) -> int:
        return self.perceptron.outputs()

    def __iter__(self) -> Iterator[Any]:
        return iter(self.perceptron.layers[-1])

    def set_input(self, input_id: int, value: float) -> None:
        if not 0 <= input_id < len(self._inputs):
            raise IndexError(f"input {input_id} out of range for {len(self._inputs)} inputs")
        self._inputs[input_id] = value

    def calculate_outputs(self, next_layer: Any = None) -> list[float]:
        """Run the wrapped perceptron, forwarding its outputs to ``next_layer`` if given."""
        self.outputs = self.perceptron.calculate(self._inputs)
        if next_layer is not None:
            for index, output in enumerate(self.outputs):
                next_layer.set_input(index, output)
        return list(self.outputs)

    def get_memento(self) -> PerceptronMemento:
        return self.perceptron.get_memento()

    def set_memento(self, memento: PerceptronMemento) -> None:
        self.perceptron.set_memento(memento)


def _as_list(values: Sequence[float]) -> list[float]:
    return list(values)
"""Back-propagation training for perceptrons."""

from __future__ import annotations

import copy
import math
import random
from collections.abc import Callable, Iterable, Iterator, Sequence
from typing import Any

from convnet.convolution import ConvolutionLayer
from convnet.perceptron import Perceptron, PerceptronMemento

Momentum = Callable[[float, float], float]
Prototype = tuple[Sequence[float], Sequence[float]]

_EPSILON = 1e-12


def _no_momentum(old_delta: float, new_delta: float) -> float:
    return new_delta


def squared_error(outputs: Iterable[float], expected: Iterable[float]) -> float:
    """Half the sum of squared differences between outputs and expected values."""
    return 0.5 * sum((out - exp) ** 2 for out, exp in zip(outputs, expected, strict=True))


def cross_entropy_error(outputs: Iterable[float], expected: Iterable[float]) -> float:
    """Categorical cross entropy -sum(expected * log(output))."""
    return -sum(
        exp * math.log(max(out, _EPSILON)) for out, exp in zip(outputs, expected, strict=True)
    )


def calculate_weights(layer: Any, learning_rate: float) -> None:
    """Move every weight and bias of ``layer`` against its gradient."""
    if isinstance(layer, BPConvolutionLayer):
        layer.calculate_weights(learning_rate)
        return
    for neuron in layer:
        for item in neuron:
            item.weight -= learning_rate * neuron.delta * item.value
        neuron.bias -= learning_rate * neuron.delta


def calculate_deltas(layer: Any, expected: Sequence[float], momentum: Momentum | None = None) -> None:
    """Set the deltas of an output layer from the expected values."""
    momentum = momentum or _no_momentum
    neurons = list(layer)
    if len(neurons) != len(expected):
        raise ValueError(f"{len(expected)} expected values for {len(neurons)} neurons")
    for neuron, target in zip(neurons, expected):
        neuron.delta = momentum(neuron.delta, neuron.activation.delta(neuron.output, target))


def _downstream(affected_layer: Any, input_id: int) -> Iterator[tuple[float, float]]:
    grid = getattr(affected_layer, "grid", None)
    if grid is not None:
        for frame in grid.frames:
            if frame.area.does_intersect(input_id):
                neuron = affected_layer[frame.neuron_id]
                yield neuron.delta, neuron[frame.area.localize(input_id)].weight
    else:
        for neuron in affected_layer:
            yield neuron.delta, neuron[input_id].weight


def calculate_hidden_deltas(
    layer: Any, affected_layer: Any, momentum: Momentum | None = None
) -> None:
    """Set the deltas of ``layer`` from the deltas of the layer it feeds."""
    momentum = momentum or _no_momentum
    for input_id, neuron in enumerate(layer):
        total = sum(delta * weight for delta, weight in _downstream(affected_layer, input_id))
        new_delta = neuron.activation.derivate(neuron.output) * total
        neuron.delta = momentum(neuron.delta, new_delta)


class BPConvolutionLayer(ConvolutionLayer):
    """A convolution layer that can be trained by back-propagation."""

    def calculate_weights(self, learning_rate: float) -> None:
        for input_id in range(self.grid.size):
            gradient = self._gradient(input_id)
            self._adjust_weight(input_id, gradient, learning_rate)
        for neuron in self:
            neuron.bias -= learning_rate * neuron.delta

    def calculate_hidden_deltas(self, affected_layer: Any, momentum: Momentum | None = None) -> None:
        calculate_hidden_deltas(self, affected_layer, momentum)

    def get_delta(self, neuron_id: int) -> float:
        return self[neuron_id].delta

    def _covering(self, input_id: int) -> Iterator[tuple[Any, int]]:
        for frame in self.grid.frames:
            if frame.area.does_intersect(input_id):
                yield self[frame.neuron_id], frame.area.localize(input_id)

    def _gradient(self, input_id: int) -> float:
        return sum(neuron.delta * neuron[local].value for neuron, local in self._covering(input_id))

    def _adjust_weight(self, input_id: int, gradient: float, learning_rate: float) -> None:
        for neuron, local in self._covering(input_id):
            neuron[local].weight -= learning_rate * gradient


def _hidden_deltas(layer: Any, affected_layer: Any, momentum: Momentum) -> None:
    if isinstance(layer, BPConvolutionLayer):
        layer.calculate_hidden_deltas(affected_layer, momentum)
    else:
        calculate_hidden_deltas(layer, affected_layer, momentum)


class BepAlgorithm:
    """Trains a perceptron by error back-propagation."""

    def __init__(
        self,
        perceptron: Perceptron,
        learning_rate: float,
        error_calculator: Callable[[Sequence[float], Sequence[float]], float] = squared_error,
    ) -> None:
        self.perceptron = perceptron
        self.learning_rate = learning_rate
        self.error_calculator = error_calculator

    def execute_training_step(self, prototype: Prototype, momentum: Momentum | None = None) -> float:
        """Run one forward/backward pass on ``prototype`` and return the resulting error."""
        momentum = momentum or _no_momentum
        inputs, expected = prototype
        layers = self.perceptron.layers

        self.perceptron.calculate(inputs)

        calculate_deltas(layers[-1], expected, momentum)
        for index in range(len(layers) - 1, 0, -1):
            _hidden_deltas(layers[index - 1], layers[index], momentum)

        for layer in layers[1:]:
            calculate_weights(layer, self.learning_rate)

        outputs = self.perceptron.calculate(inputs)
        return self.error_calculator(outputs, expected)

    def calculate(
        self,
        prototypes: Iterable[Prototype],
        error_func: Callable[[int, float], bool],
        momentum: Momentum | None = None,
    ) -> Perceptron:
        """Train until ``error_func(epoch, mean_error)`` returns false; return a trained copy."""
        prototypes = list(prototypes)
        if not prototypes:
            raise ValueError("at least one prototype is needed for training")

        epoch = 0
        while True:
            order = list(range(len(prototypes)))
            random.shuffle(order)
            error = sum(self.execute_training_step(prototypes[idx], momentum) for idx in order)
            epoch += 1
            if not error_func(epoch, error / len(prototypes)):
                break

        return copy.deepcopy(self.perceptron)

    def set_memento(self, memento: PerceptronMemento) -> None:
        self.perceptron.set_memento(memento)
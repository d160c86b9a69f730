import math
import random

import pytest

from convnet.activation import SigmoidFunction
from convnet.backprop import (
    BepAlgorithm,
    BPConvolutionLayer,
    calculate_deltas,
    calculate_hidden_deltas,
    calculate_weights,
    cross_entropy_error,
    squared_error,
)
from convnet.convolution import ConvolutionGrid, Kernel
from convnet.layer import NeuralLayer
from convnet.perceptron import Perceptron


def _build():
    activation = SigmoidFunction()
    return Perceptron(
        [
            NeuralLayer(2, 2, activation),
            NeuralLayer(3, 2, activation),
            NeuralLayer(1, 3, activation),
        ]
    )


def _prototypes():
    return [
        ([0.0, 0.0], [0.0]),
        ([0.0, 1.0], [0.0]),
        ([1.0, 0.0], [0.0]),
        ([1.0, 1.0], [1.0]),
    ]


def test_squared_error_zero_for_equal():
    assert squared_error([0.3, 0.7], [0.3, 0.7]) == 0.0


def test_squared_error_symmetric_and_positive():
    a = squared_error([0.1, 0.9], [0.4, 0.2])
    b = squared_error([0.4, 0.2], [0.1, 0.9])
    assert a == b
    assert a > 0.0


def test_squared_error_length_mismatch():
    with pytest.raises(ValueError):
        squared_error([0.1], [0.1, 0.2])


def test_cross_entropy_perfect_is_zero():
    assert cross_entropy_error([0.0, 1.0, 0.0], [0.0, 1.0, 0.0]) == 0.0


def test_cross_entropy_decreases_with_better_output():
    worse = cross_entropy_error([0.6, 0.4], [0.0, 1.0])
    better = cross_entropy_error([0.2, 0.8], [0.0, 1.0])
    assert better < worse
    assert math.isfinite(cross_entropy_error([1.0, 0.0], [0.0, 1.0]))


def test_calculate_deltas_uses_activation_delta():
    random.seed(1)
    layer = NeuralLayer(2, 2, SigmoidFunction())
    layer.set_input(0, 0.5)
    layer.set_input(1, 0.25)
    outputs = layer.calculate_outputs()
    calculate_deltas(layer, [1.0, 0.0])
    activation = SigmoidFunction()
    assert layer[0].delta == activation.delta(outputs[0], 1.0)
    assert layer[1].delta == activation.delta(outputs[1], 0.0)


def test_calculate_deltas_applies_momentum():
    random.seed(2)
    layer = NeuralLayer(1, 1, SigmoidFunction())
    layer.set_input(0, 0.5)
    layer.calculate_outputs()
    calculate_deltas(layer, [1.0])
    first = layer[0].delta
    calculate_deltas(layer, [1.0], lambda old, new: old + new)
    assert layer[0].delta == pytest.approx(2 * first)


def test_calculate_deltas_length_mismatch():
    layer = NeuralLayer(2, 1, SigmoidFunction())
    with pytest.raises(ValueError):
        calculate_deltas(layer, [1.0])


def test_calculate_weights_zero_delta_keeps_memento():
    random.seed(3)
    layer = NeuralLayer(2, 2, SigmoidFunction())
    layer.set_input(0, 1.0)
    layer.set_input(1, 1.0)
    before = layer.get_memento()
    calculate_weights(layer, 0.5)
    assert layer.get_memento() == before


def test_calculate_weights_positive_delta_lowers_weights():
    random.seed(4)
    layer = NeuralLayer(1, 2, SigmoidFunction())
    layer.set_input(0, 1.0)
    layer.set_input(1, 2.0)
    layer[0].delta = 0.5
    before = layer.get_memento()[0]
    calculate_weights(layer, 0.1)
    after = layer.get_memento()[0]
    assert all(new < old for new, old in zip(after.weights, before.weights))
    assert after.bias < before.bias


def test_hidden_deltas_zero_when_front_deltas_zero():
    random.seed(5)
    hidden = NeuralLayer(3, 2, SigmoidFunction())
    front = NeuralLayer(2, 3, SigmoidFunction())
    hidden.set_input(0, 0.5)
    hidden.calculate_outputs(front)
    calculate_hidden_deltas(hidden, front)
    assert [neuron.delta for neuron in hidden] == [0.0, 0.0, 0.0]


def test_hidden_deltas_sign_follows_weight():
    hidden = NeuralLayer(1, 1, SigmoidFunction())
    front = NeuralLayer(1, 1, SigmoidFunction())
    hidden.set_input(0, 0.5)
    hidden.calculate_outputs(front)
    front[0][0].weight = 1.0
    front[0].delta = 1.0
    calculate_hidden_deltas(hidden, front)
    positive = hidden[0].delta
    front[0][0].weight = -1.0
    calculate_hidden_deltas(hidden, front)
    assert positive > 0.0
    assert hidden[0].delta == pytest.approx(-positive)


def test_bp_convolution_get_delta_and_weights():
    random.seed(6)
    grid = ConvolutionGrid(5, 5, Kernel(3, 3, 2))
    layer = BPConvolutionLayer(grid, SigmoidFunction())
    for cell in range(25):
        layer.set_input(cell, 1.0)
    before = layer.get_memento()
    layer.calculate_weights(0.1)
    assert layer.get_memento() == before

    layer[0].delta = 0.25
    assert layer.get_delta(0) == 0.25
    layer.calculate_weights(0.1)
    after = layer.get_memento()
    assert all(new < old for new, old in zip(after[0].weights, before[0].weights))
    assert after[0].bias < before[0].bias


def test_bp_convolution_hidden_deltas():
    random.seed(7)
    grid = ConvolutionGrid(5, 5, Kernel(3, 3, 2))
    conv = BPConvolutionLayer(grid, SigmoidFunction())
    front = NeuralLayer(2, len(conv), SigmoidFunction())
    for cell in range(25):
        conv.set_input(cell, 0.5)
    conv.calculate_outputs(front)
    conv.calculate_hidden_deltas(front, None)
    assert all(conv.get_delta(index) == 0.0 for index in range(len(conv)))


def test_training_step_reduces_error():
    random.seed(8)
    algorithm = BepAlgorithm(_build(), 0.5)
    prototype = ([1.0, 1.0], [1.0])
    first = algorithm.execute_training_step(prototype)
    for _ in range(50):
        last = algorithm.execute_training_step(prototype)
    assert last < first


def test_calculate_runs_until_error_func_stops():
    random.seed(9)
    algorithm = BepAlgorithm(_build(), 0.5)
    errors = []

    def error_func(epoch, error):
        errors.append((epoch, error))
        return epoch < 200

    trained = algorithm.calculate(_prototypes(), error_func)
    assert [epoch for epoch, _ in errors] == list(range(1, 201))
    assert errors[-1][1] < errors[0][1]
    assert trained is not algorithm.perceptron
    assert trained.get_memento() == algorithm.perceptron.get_memento()


def test_calculate_requires_prototypes():
    algorithm = BepAlgorithm(_build(), 0.5)
    with pytest.raises(ValueError):
        algorithm.calculate([], lambda epoch, error: False)


def test_set_memento_updates_perceptron():
    random.seed(10)
    source = _build()
    algorithm = BepAlgorithm(_build(), 0.5)
    algorithm.set_memento(source.get_memento())
    assert algorithm.perceptron.get_memento() == source.get_memento()


def test_training_with_convolution_layer():
    random.seed(11)
    grid = ConvolutionGrid(5, 5, Kernel(3, 3, 2))
    conv = BPConvolutionLayer(grid, SigmoidFunction())
    hidden = BPConvolutionLayer(grid, SigmoidFunction())
    perceptron = Perceptron([conv, NeuralLayer(2, len(conv), SigmoidFunction())])
    algorithm = BepAlgorithm(perceptron, 0.3, cross_entropy_error)
    prototype = ([0.5] * 25, [1.0, 0.0])
    first = algorithm.execute_training_step(prototype)
    for _ in range(30):
        last = algorithm.execute_training_step(prototype)
    assert math.isfinite(last)
    assert last < first
    assert len(hidden) == len(conv)
# convnet

A small neural network toolkit in plain Python:

- `SigmoidFunction` (with a `slope`, default 1.0) and `TanhFunction` activation
  functions (`convnet.activation`)
- `Input`, `Neuron` and `RecurrentNeuron`, a neuron whose last input is fed back
  from its own previous output (`convnet.neuron`)
- the fully connected `NeuralLayer` (`convnet.layer`)
- `ConvolutionGrid`, `Kernel`, `Area`, `Frame` and `ConvolutionLayer`
  (`convnet.convolution`)
- `Perceptron`, built from a list of layers, and `ComplexLayer`, which lets a
  whole perceptron act as one layer of a larger network (`convnet.perceptron`)
- back-propagation training with `BepAlgorithm`, the trainable
  `BPConvolutionLayer`, and the error functions `squared_error` and
  `cross_entropy_error` (`convnet.backprop`)
- a digit recognition command, `ocr` (`convnet.ocr`)

## Installation

```
pip install .
```

Images are read with Pillow, which is installed as a dependency. To run the
tests, install the `test` extra and run `pytest`.

## Convolution grids

A convolution grid tiles a `width × height` input with frames, each covering a
kernel-sized window and placed a stride apart:

```python
from convnet.activation import SigmoidFunction
from convnet.convolution import ConvolutionGrid, ConvolutionLayer, Kernel

grid = ConvolutionGrid(5, 5, Kernel(3, 3, 2))
layer = ConvolutionLayer(grid, SigmoidFunction())

for i in range(25):
    layer.set_input(i, float(i + 1))

print([inp.value for inp in layer[0]])  # [1.0, 2.0, 3.0, 6.0, 7.0, 8.0, 11.0, 12.0, 13.0]
```

The layer has one neuron per frame. Each input cell is passed to every frame
whose window contains it, at that frame's local position; window cells that fall
outside the grid keep the value 0. `ConvolutionGrid.calc_point(i)` gives the
top-left cell of frame `i`, and `frames_number()` the number of frames.

## Training a perceptron

When a perceptron runs, input `i` is given to input `i` of every neuron of the
first layer, and each layer's outputs become the next layer's inputs. Training
adjusts the weights of every layer after the first.

```python
from convnet.activation import SigmoidFunction
from convnet.backprop import BepAlgorithm, squared_error
from convnet.layer import NeuralLayer
from convnet.perceptron import Perceptron

sigmoid = SigmoidFunction()
perceptron = Perceptron([
    NeuralLayer(2, 2, sigmoid),
    NeuralLayer(4, 2, sigmoid),
    NeuralLayer(1, 4, sigmoid),
])

algorithm = BepAlgorithm(perceptron, 0.5, squared_error)
prototypes = [
    ([0.0, 0.0], [0.0]),
    ([0.0, 1.0], [1.0]),
    ([1.0, 0.0], [1.0]),
    ([1.0, 1.0], [0.0]),
]

trained = algorithm.calculate(
    prototypes,
    lambda epoch, error: epoch < 1000 and error > 0.01,
)
print(trained.calculate([1.0, 0.0]))
```

`calculate` runs epochs over the prototypes in a shuffled order until the error
function returns false. The error function is given the epoch number and the
mean error of that epoch. The result is a trained copy of the perceptron. An
optional momentum callback takes the old and the new delta and returns the delta
to use. `execute_training_step` runs a single prototype and returns its error.

Weights start at random values between -0.5 and 0.5. A perceptron's weights and
biases can be taken with `get_memento()` and restored with `set_memento()`.

## The `ocr` command

The `ocr` command recognises single digits in small images. Each image is
converted to grey, scaled to 12×15 pixels with bilinear resampling, and its
pixels, scaled to 0..1, are fed into a network of 180 inputs, 30 hidden sigmoid
neurons and 10 sigmoid outputs.

Train a network on a folder of sample images. The first character of each file
name is the digit it shows, e.g. `3_sample.png`; files that cannot be read or
whose names do not start with a digit are reported and skipped:

```
ocr samples/
```

Training uses cross-entropy error with a learning rate of 0.0009, prints the
mean error of each epoch, and stops once it is 0.1 or below. The weights are
written to `perceptron.json` in the current directory.

Recognise an image with a trained network:

```
ocr perceptron.json digit.png
```

For each symbol `0`–`9` the command prints the network's score. If the network
file does not exist, an untrained network is used. Run `ocr` with no arguments
to see the usage text.

## What it does not do

There is no softmax activation; the `ocr` network ends in sigmoid outputs, so
its scores are not probabilities that sum to one. Mementos have no file format
of their own: only the `ocr` module stores a network, as JSON, and it reads back
only networks of its own shape.
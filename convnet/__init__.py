"""Feed-forward and convolutional neural networks with back-propagation training and a digit OCR command."""

__version__ = "0.1.0"

__all__ = ["activation", "neuron", "layer", "convolution", "perceptron", "backprop", "ocr"]
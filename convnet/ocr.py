"""Digit recognition from small PNG images with a three-layer perceptron."""

from __future__ import annotations

import json
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from PIL import Image

from convnet.activation import SigmoidFunction
from convnet.backprop import BepAlgorithm, cross_entropy_error
from convnet.layer import NeuralLayer
from convnet.neuron import NeuronMemento
from convnet.perceptron import Perceptron, PerceptronMemento

ALPHABET = "0123456789"
WIDTH = 12
HEIGHT = 15
INPUTS_NUMBER = WIDTH * HEIGHT
HIDDEN_NEURONS = 30
LEARNING_RATE = 0.0009
MAX_ERROR = 0.1
OUTPUT_FILE = "perceptron.json"

_USAGE = (
    "\nUsage : \n\n"
    "ocr [folder] where  [folder] is a directory with your samples, "
    "this command will generate a perceptron.json file\n\n"
    "ocr perceptron.json [file] where [file] is a png image which has to be recognized\n"
)


class _InputLayer(NeuralLayer):
    """One single-input neuron per network input; input ``i`` feeds neuron ``i``."""

    def __init__(self, size: int, activation: Any) -> None:
        super().__init__(size, 1, activation)
        self.inputs = size
        for neuron in self:
            neuron[0].weight = 1.0
            neuron.bias = 0.0

    def set_input(self, input_id: int, value: float) -> None:
        self[input_id].set_input(0, value)


def build_perceptron() -> Perceptron:
    """Create an untrained network: 180 inputs, 30 hidden neurons, 10 outputs."""
    sigmoid = SigmoidFunction()
    return Perceptron(
        [
            _InputLayer(INPUTS_NUMBER, sigmoid),
            NeuralLayer(HIDDEN_NEURONS, INPUTS_NUMBER, sigmoid),
            NeuralLayer(len(ALPHABET), HIDDEN_NEURONS, sigmoid),
        ]
    )


def read_image(file_name: str | Path) -> list[float]:
    """Load an image as grey levels scaled to 12x15, each in the range 0..1."""
    with Image.open(file_name) as source:
        gray = source.convert("RGB").convert("L")
    scaled = gray.resize((WIDTH, HEIGHT), Image.BILINEAR)
    return [scaled.getpixel((x, y)) / 255.0 for y in range(HEIGHT) for x in range(WIDTH)]


def _memento_to_json(memento: PerceptronMemento) -> dict[str, Any]:
    return {
        "layers": [
            [{"weights": list(neuron.weights), "bias": neuron.bias} for neuron in layer]
            for layer in memento.layers
        ]
    }


def _memento_from_json(data: dict[str, Any]) -> PerceptronMemento:
    try:
        return PerceptronMemento(
            tuple(
                tuple(
                    NeuronMemento(tuple(float(w) for w in neuron["weights"]), float(neuron["bias"]))
                    for neuron in layer
                )
                for layer in data["layers"]
            )
        )
    except (KeyError, TypeError) as error:
        raise ValueError(f"malformed perceptron data: {error}") from error


def read_perceptron(file_name: str | Path) -> Perceptron:
    """Load a perceptron from ``file_name``, or return an untrained one if it does not exist."""
    perceptron = build_perceptron()
    path = Path(file_name)
    if path.exists():
        try:
            with path.open(encoding="utf-8") as stream:
                data = json.load(stream)
        except OSError as error:
            raise ValueError("Invalid perceptron file name") from error
        perceptron.set_memento(_memento_from_json(data))
    return perceptron


def save(perceptron: Perceptron, name: str | Path) -> None:
    """Write the perceptron's weights and biases to ``name`` as JSON."""
    with Path(name).open("w", encoding="utf-8") as stream:
        json.dump(_memento_to_json(perceptron.get_memento()), stream, indent=2)


def recognize(perceptron_file: str | Path, image_file: str | Path) -> list[tuple[str, float]]:
    """Print and return the network's score for each symbol of the alphabet."""
    try:
        inputs = read_image(image_file)
        outputs = read_perceptron(perceptron_file).calculate(inputs)
    except Exception as error:  # reported to the user, as the command line does
        print(error)
        return []
    results = list(zip(ALPHABET, outputs))
    for symbol, value in results:
        print(f"Symbol: {symbol} {value:g}")
    return results


def _prototype(image: Path) -> tuple[list[float], list[float]]:
    inputs = read_image(image)
    position = ALPHABET.find(image.name[:1])
    if position < 0:
        raise ValueError(f"file name does not start with one of {ALPHABET!r}")
    expected = [0.0] * len(ALPHABET)
    expected[position] = 1.0
    return inputs, expected


def _report_epoch(epoch: int, error: float) -> bool:
    print(f"Epoch:{epoch} error:{error:g}")
    return error > MAX_ERROR


def calculate_weights(images_path: str | Path) -> None:
    """Train on the images in ``images_path`` and write perceptron.json."""
    directory = Path(images_path)
    files: list[Path] = []
    if directory.is_dir():
        files = sorted(entry for entry in directory.iterdir() if entry.is_file())

    print("Perceptron calculation started")
    algorithm = BepAlgorithm(build_perceptron(), LEARNING_RATE, cross_entropy_error)

    prototypes = []
    for image in files:
        try:
            prototypes.append(_prototype(image))
        except Exception as error:
            print(f"Invalid image found :{image} exception: {error}")

    if prototypes:
        perceptron = algorithm.calculate(prototypes, _report_epoch)
    else:
        perceptron = algorithm.perceptron
    save(perceptron, OUTPUT_FILE)


def main(argv: Sequence[str] | None = None) -> int:
    """Train with one argument, recognise with two, otherwise print usage."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) == 2:
        recognize(args[0], args[1])
        return 0
    if len(args) == 1:
        calculate_weights(args[0])
        return 0
    print(_USAGE)
    return -1


if __name__ == "__main__":
    sys.exit(main())
"""Convolution grid and the layer that maps a 2-D input onto kernel windows."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from convnet.layer import NeuralLayer
from convnet.neuron import Neuron, NeuronMemento


def ceil(num: float) -> int:
    """Round up towards positive infinity for non-negative values, truncate otherwise."""
    whole = int(num)
    if whole == num:
        return whole
    return whole + (1 if num > 0 else 0)


@dataclass(frozen=True)
class Kernel:
    """Convolution window of ``width`` x ``height`` moved by ``stride``."""

    width: int
    height: int
    stride: int

    @property
    def size(self) -> int:
        return self.width * self.height


@dataclass(frozen=True)
class Area:
    """A kernel window placed at ``start`` on a grid ``grid_width`` wide."""

    start: int
    grid_width: int
    kernel: Kernel

    @property
    def x(self) -> int:
        return self.start % self.grid_width

    @property
    def y(self) -> int:
        return self.start // self.grid_width

    def does_intersect(self, input_id: int) -> bool:
        """Whether grid cell ``input_id`` lies inside this window."""
        x = input_id % self.grid_width
        y = input_id // self.grid_width
        return (
            self.y <= y < self.y + self.kernel.height
            and self.x <= x < self.x + self.kernel.width
        )

    def localize(self, input_id: int) -> int:
        """Index of grid cell ``input_id`` within this window."""
        x = input_id % self.grid_width
        y = input_id // self.grid_width
        return (y - self.y) * self.kernel.width + x - self.x


@dataclass(frozen=True)
class Frame:
    """A window together with the neuron that reads it."""

    area: Area
    neuron_id: int


@dataclass
class ConvolutionGrid:
    """Tiles a ``width`` x ``height`` input with kernel windows."""

    width: int
    height: int
    kernel: Kernel
    frames: list[Frame] = field(init=False)

    def __post_init__(self) -> None:
        if self.kernel.stride <= 0:
            raise ValueError("kernel stride must be positive")
        self.frames = [
            Frame(Area(self.calc_point(index), self.width, self.kernel), index)
            for index in range(self.frames_number())
        ]

    @property
    def size(self) -> int:
        return self.width * self.height

    def calc_point(self, index: int) -> int:
        """Grid position of the top-left cell of frame ``index``."""
        stride = self.kernel.stride
        per_line = ceil(self.width / stride)
        lines = index // per_line
        return lines * stride * self.width + (index % per_line) * stride

    def frames_number(self) -> int:
        stride = self.kernel.stride
        return ceil((self.width + 1) // stride) * ceil((self.height + 1) // stride)


class ConvolutionLayer:
    """One neuron per grid frame; each neuron sees only its window."""

    def __init__(self, grid: ConvolutionGrid, activation: Any) -> None:
        self.grid = grid
        self.activation = activation
        self._layer = NeuralLayer(grid.frames_number(), grid.kernel.size, activation, Neuron)

    @property
    def inputs(self) -> int:
        return self._layer.inputs

    def __getitem__(self, index: int) -> Neuron:
        return self._layer[index]

    def __len__(self) -> int:
        return len(self._layer)

    def __iter__(self) -> Iterator[Neuron]:
        return iter(self._layer)

    def set_input(self, input_id: int, value: float) -> None:
        """Route grid cell ``input_id`` to every window that covers it."""
        for frame in self.grid.frames:
            if frame.area.does_intersect(input_id):
                self._layer[frame.neuron_id].set_input(frame.area.localize(input_id), value)

    def calculate_outputs(self, next_layer: Any = None) -> list[float]:
        return self._layer.calculate_outputs(next_layer)

    def get_memento(self) -> tuple[NeuronMemento, ...]:
        return self._layer.get_memento()

    def set_memento(self, memento: tuple[NeuronMemento, ...]) -> None:
        self._layer.set_memento(memento)
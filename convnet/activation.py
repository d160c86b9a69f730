"""Activation functions used by neurons: sigmoid and hyperbolic tangent."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass


def _safe_exp(value: float) -> float:
    try:
        return math.exp(value)
    except OverflowError:
        return math.inf


@dataclass(frozen=True)
class SigmoidFunction:
    """Logistic sigmoid 1 / (1 + exp(-slope * x))."""

    slope: float = 1.0

    def calculate(self, total: float, inputs: Sequence = ()) -> float:
        """Return the sigmoid of the weighted sum ``total``."""
        return 1.0 / (1.0 + _safe_exp(-(self.slope * total)))

    def sum(self, values: Iterable[float], start: float) -> float:
        """Accumulate ``values`` onto ``start``."""
        total = start
        for value in values:
            total += value
        return total

    def delta(self, output: float, expected: float) -> float:
        """Return (output - expected) * f'(output)."""
        return (output - expected) * self.derivate(output)

    def derivate(self, output: float) -> float:
        """Derivative expressed through the function's output."""
        return self.slope * output * (1.0 - output)


@dataclass(frozen=True)
class TanhFunction:
    """Hyperbolic tangent 2 / (1 + exp(-2x)) - 1."""

    def calculate(self, total: float, inputs: Sequence = ()) -> float:
        """Return the hyperbolic tangent of the weighted sum ``total``."""
        return 2.0 / (1.0 + _safe_exp(-2.0 * total)) - 1.0

    def sum(self, values: Iterable[float], start: float) -> float:
        """Accumulate ``values`` onto ``start``."""
        total = start
        for value in values:
            total += value
        return total

    def delta(self, output: float, expected: float) -> float:
        """Return (output - expected) * f'(output)."""
        return (output - expected) * self.derivate(output)

    def derivate(self, output: float) -> float:
        """Derivative expressed through the function's output."""
        return 1.0 - output * output
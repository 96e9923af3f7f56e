"""Shared pieces for atom sources: the velocity cap and a weighted sampler."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np


@dataclass
class VelocityCap:
    """Largest speed, m/s, of an atom an atom source may emit."""

    value: float


class WeightedProbabilityDistribution:
    """Draws values at random, each with probability proportional to its weight."""

    def __init__(self, values: Sequence[float], weights: Sequence[float]):
        values = list(values)
        weights = [float(w) for w in weights]
        if len(values) != len(weights):
            raise ValueError("values and weights must have the same length")
        if not weights:
            raise ValueError("a distribution needs at least one value")
        if any(not math.isfinite(w) or w < 0.0 for w in weights):
            raise ValueError("weights must be finite and non-negative")
        cumulative = np.cumsum(weights)
        if cumulative[-1] <= 0.0:
            raise ValueError("weights must not all be zero")
        self.values = values
        self._cumulative = cumulative

    def __len__(self) -> int:
        return len(self.values)

    def sample(self, rng: np.random.Generator | None = None) -> float:
        """Draw one value."""
        if rng is None:
            rng = np.random.default_rng()
        target = rng.random() * self._cumulative[-1]
        index = int(np.searchsorted(self._cumulative, target, side="right"))
        return self.values[min(index, len(self.values) - 1)]
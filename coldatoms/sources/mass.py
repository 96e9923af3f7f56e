"""Isotope masses and their relative abundances."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace

import numpy as np

from ..atom import Mass


@dataclass
class MassRatio:
    """The relative abundance of one isotope."""

    #: Mass of the isotope, atomic mass units.
    mass: float
    #: Relative abundance.
    ratio: float


class MassDistribution:
    """Abundances of each mass; new atoms get a mass drawn from it."""

    def __init__(self, distribution: Iterable[MassRatio]):
        self.distribution = [replace(entry) for entry in distribution]
        self.normalised = False
        self.normalise()

    def __repr__(self) -> str:
        return f"MassDistribution({self.distribution!r})"

    def normalise(self) -> None:
        """Scale the ratios so that they add up to one."""
        total = sum(entry.ratio for entry in self.distribution)
        if total == 0.0:
            raise ValueError("mass ratios must not add up to zero")
        for entry in self.distribution:
            entry.ratio /= total
        self.normalised = True

    def draw_random_mass(self, rng: np.random.Generator | None = None) -> Mass:
        """Draw a mass at random according to the abundances."""
        if not self.normalised:
            raise RuntimeError("the mass distribution is not normalised")
        if rng is None:
            rng = np.random.default_rng()
        luck = rng.random()
        level = 0.0
        final_mass = 0.0
        for entry in self.distribution:
            level += entry.ratio
            if level > luck:
                return Mass(value=entry.mass)
            final_mass = entry.mass
        return Mass(value=final_mass)
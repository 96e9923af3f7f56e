"""Precalculated mass and speed distributions for thermal atom sources."""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass

import numpy as np

from ..constant import AMU, BOLTZCONST
from ..world import World
from .distribution import WeightedProbabilityDistribution
from .mass import MassDistribution

_log = logging.getLogger(__name__)

#: Number of points the speed distribution is discretised into.
_SPEED_RESOLUTION = 2000


class MaxwellBoltzmannSource(ABC):
    """A source emitting atoms with a thermal speed distribution.

    Subclasses provide a ``temperature`` attribute, in kelvin, and the power
    of the speed in the emitted distribution.
    """

    temperature: float

    @property
    @abstractmethod
    def v_dist_power(self) -> float:
        """Power ``n`` in ``p(v) ~ v^n exp(-v^2)``."""


def probability_v(temperature: float, mass: float, v: float, power: float) -> float:
    """Unnormalised probability of speed ``v`` (m/s) for a particle of ``mass`` (kg).

    The distribution goes as ``v^power * exp(-v^2)`` in units of the most
    probable thermal speed ``sqrt(2 k T / m)``.
    """
    norm_v = v / math.sqrt(2.0 * BOLTZCONST * temperature / mass)
    return 2.0 * norm_v**power * math.exp(-(norm_v**2))


def create_v_distribution(
    temperature: float, mass: float, power: float
) -> WeightedProbabilityDistribution:
    """Discretised speed distribution for ``mass`` (kg) at ``temperature`` (K).

    Speeds run up to seven times the most probable thermal speed.
    """
    max_velocity = 7.0 * math.sqrt(2.0 * BOLTZCONST * temperature / mass)
    n = _SPEED_RESOLUTION
    velocities = [(i + 0.5) / (n + 1.0) * max_velocity for i in range(n)]
    weights = [probability_v(temperature, mass, v, power) for v in velocities]
    return WeightedProbabilityDistribution(velocities, weights)


@dataclass(eq=False)
class Species:
    """Precalculated information for one species."""

    #: Mass, atomic mass units.
    mass: float
    #: Distribution of speeds, m/s.
    v_distribution: WeightedProbabilityDistribution

    @classmethod
    def create(cls, mass: float, temperature: float, power: float) -> "Species":
        """Precalculate a species of ``mass`` (amu) at ``temperature`` (K)."""
        return cls(mass, create_v_distribution(temperature, mass * AMU, power))


@dataclass(eq=False)
class PrecalculatedSpeciesInformation:
    """Every species a source can emit, with the chance of emitting each."""

    species: list[Species]
    distribution: WeightedProbabilityDistribution

    @classmethod
    def create(
        cls, temperature: float, mass_distribution: MassDistribution, power: float
    ) -> "PrecalculatedSpeciesInformation":
        entries = mass_distribution.distribution
        species = [Species.create(entry.mass, temperature, power) for entry in entries]
        distribution = WeightedProbabilityDistribution(
            list(range(len(species))), [entry.ratio for entry in entries]
        )
        return cls(species, distribution)

    def generate_random_mass_v(
        self, rng: np.random.Generator | None = None
    ) -> tuple[float, float]:
        """Draw ``(mass, speed)``: mass in amu, speed in m/s."""
        if rng is None:
            rng = np.random.default_rng()
        chosen = self.species[self.distribution.sample(rng)]
        return chosen.mass, chosen.v_distribution.sample(rng)


def precalculate_for_species(world: World, source_type: type) -> None:
    """Replace the mass distribution of each new source of ``source_type``.

    Sources holding a ``MassDistribution`` but no precalculated information
    have the distribution removed and a ``PrecalculatedSpeciesInformation``
    attached in its place.
    """
    pending = [
        (
            entity,
            PrecalculatedSpeciesInformation.create(
                source.temperature, mass_distribution, source.v_dist_power
            ),
        )
        for entity, source, mass_distribution in world.join(
            source_type, MassDistribution, without=(PrecalculatedSpeciesInformation,)
        )
    ]
    for entity, information in pending:
        world.remove_component(entity, MassDistribution)
        world.insert_component(entity, information)
        _log.info("Precalculated velocity and mass distributions for a source.")
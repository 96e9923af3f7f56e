"""Atom sources with gaussian velocity distributions."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from ..atom import Atom, AtomicTransition, Force, InitialVelocity, Mass, Position, Velocity
from ..initiate import NewlyCreated
from ..world import World
from .distribution import WeightedProbabilityDistribution
from .emit import AtomNumberToEmit

_log = logging.getLogger(__name__)

#: Half the number of points each velocity component is discretised into.
_HALF_RESOLUTION = 1000


@dataclass(eq=False)
class GaussianVelocityDistributionSourceDefinition:
    """Mean and standard deviation of each velocity component, m/s."""

    mean: np.ndarray
    std: np.ndarray

    def __post_init__(self):
        self.mean = np.array(self.mean, dtype=float)
        self.std = np.array(self.std, dtype=float)


@dataclass(eq=False)
class GaussianVelocityDistributionSource:
    """Precalculated distributions of the three velocity components."""

    vx_distribution: WeightedProbabilityDistribution
    vy_distribution: WeightedProbabilityDistribution
    vz_distribution: WeightedProbabilityDistribution

    def random_velocity(self, rng: np.random.Generator | None = None) -> np.ndarray:
        if rng is None:
            rng = np.random.default_rng()
        return np.array(
            [
                self.vx_distribution.sample(rng),
                self.vy_distribution.sample(rng),
                self.vz_distribution.sample(rng),
            ]
        )


def create_gaussian_velocity_distribution(
    mean: float, std: float
) -> WeightedProbabilityDistribution:
    """Discretised gaussian of velocities (m/s), spanning five deviations each side."""
    if std == 0.0:
        raise ValueError("the standard deviation must not be zero")
    n = _HALF_RESOLUTION
    offsets = [i / n * 5.0 * std for i in range(-n, n)]
    weights = [math.exp(-((v / std) ** 2) / 2.0) for v in offsets]
    return WeightedProbabilityDistribution([v + mean for v in offsets], weights)


def precalculate_for_gaussian_source(world: World) -> None:
    """Attach precalculated distributions to each definition that lacks them."""
    pending = [
        (
            entity,
            GaussianVelocityDistributionSource(
                *(
                    create_gaussian_velocity_distribution(m, s)
                    for m, s in zip(definition.mean, definition.std)
                )
            ),
        )
        for entity, definition in world.join(
            GaussianVelocityDistributionSourceDefinition,
            without=(GaussianVelocityDistributionSource,),
        )
    ]
    for entity, source in pending:
        world.insert_component(entity, source)
        _log.info("Precalculated velocity distributions for a gaussian source.")


def gaussian_create_atoms(world: World, rng: np.random.Generator | None = None) -> None:
    """Create the atoms each gaussian source emits this frame, at its position."""
    if rng is None:
        rng = np.random.default_rng()
    for _, source, transition, to_emit, position, mass in world.join(
        GaussianVelocityDistributionSource,
        AtomicTransition,
        AtomNumberToEmit,
        Position,
        Mass,
    ):
        for _ in range(to_emit.number):
            velocity = source.random_velocity(rng)
            atom = world.create_entity()
            for component in (
                Velocity(velocity),
                Position(position.pos.copy()),
                Force(),
                Mass(mass.value),
                transition,
                Atom(),
                InitialVelocity(velocity.copy()),
                NewlyCreated(),
            ):
                world.lazy_insert(atom, component)
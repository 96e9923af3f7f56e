"""Atom sources that spawn atoms around a centre from simple distributions.

A central creator is useful to seed a later stage of an experiment, such as a
second MOT stage, with atoms that resemble the end state of an earlier stage
without simulating the oven that produced them.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from ..atom import Atom, AtomicTransition, Force, InitialVelocity, Position, Velocity
from ..initiate import NewlyCreated
from ..world import World
from .distribution import VelocityCap
from .emit import AtomNumberToEmit
from .mass import MassDistribution


@dataclass(frozen=True)
class UniformCuboidPosition:
    """Positions spread evenly over a box centred on the creator.

    ``size`` holds the full widths along x, y and z, metres.
    """

    size: tuple[float, float, float]


@dataclass(frozen=True)
class UniformSpeed:
    """The same characteristic speed, m/s, everywhere in space."""

    speed: float


@dataclass(frozen=True)
class UniformCentralSpeed:
    """Speeds spread evenly over ``width`` either side of the characteristic speed.

    Speeds below zero are cut off.
    """

    width: float


@dataclass(frozen=True)
class CentralCreator:
    """A source spawning atoms at random about its position.

    Directions of the velocities are drawn without any preferred direction.
    """

    position_density_distribution: UniformCuboidPosition
    spatial_speed_distribution: UniformSpeed
    speed_density_distribution: UniformCentralSpeed

    @classmethod
    def uniform_cubic(cls, size_of_cube: float, speed: float) -> "CentralCreator":
        """Atoms spread over a cube of side ``size_of_cube`` (m) with speeds about ``speed`` (m/s)."""
        return cls(
            position_density_distribution=UniformCuboidPosition(
                (size_of_cube, size_of_cube, size_of_cube)
            ),
            spatial_speed_distribution=UniformSpeed(speed),
            speed_density_distribution=UniformCentralSpeed(0.5 * speed),
        )

    def random_spawn_condition(
        self, rng: np.random.Generator | None = None
    ) -> tuple[np.ndarray, np.ndarray]:
        """Draw ``(position, velocity)``; the position is relative to the creator."""
        if rng is None:
            rng = np.random.default_rng()

        half = 0.5 * np.asarray(self.position_density_distribution.size, dtype=float)
        position = np.array([rng.uniform(-h, h) for h in half])

        characteristic_speed = self.spatial_speed_distribution.speed
        width = self.speed_density_distribution.width
        low = max(0.0, characteristic_speed - width)
        speed = rng.uniform(low, characteristic_speed + width)

        direction = rng.uniform(-1.0, 1.0, size=3)
        direction = direction / np.linalg.norm(direction)

        return position, speed * direction


def central_creator_create_atoms(
    world: World, rng: np.random.Generator | None = None
) -> None:
    """Create the atoms each central creator emits this frame.

    Atoms faster than the ``VelocityCap`` resource, if present, are not
    created. Their components land at the next ``maintain``.
    """
    if rng is None:
        rng = np.random.default_rng()
    cap = world.try_resource(VelocityCap)
    max_vel = cap.value if cap is not None else math.inf

    for _, creator, transition, to_emit, creator_position, mass_distribution in world.join(
        CentralCreator, AtomicTransition, AtomNumberToEmit, Position, MassDistribution
    ):
        for _ in range(to_emit.number):
            mass = mass_distribution.draw_random_mass(rng)
            offset, velocity = creator.random_spawn_condition(rng)
            start = creator_position.pos + offset
            if float(np.linalg.norm(velocity)) > max_vel:
                continue
            atom = world.create_entity()
            for component in (
                Position(start),
                Velocity(velocity),
                Force(),
                mass,
                transition,
                Atom(),
                InitialVelocity(velocity.copy()),
                NewlyCreated(),
            ):
                world.lazy_insert(atom, component)
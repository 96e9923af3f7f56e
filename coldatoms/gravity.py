"""The force of gravity."""

from dataclasses import dataclass

import numpy as np

from . import constant
from .atom import Force, Mass
from .world import World

_DOWN = np.array([0.0, 0.0, -1.0])


@dataclass(frozen=True)
class ApplyGravityOption:
    """Resource whose presence switches gravity on."""


def apply_gravitational_force(world: World) -> None:
    """Add gravity, along -z, to every entity with a mass and a force."""
    if world.try_resource(ApplyGravityOption) is None:
        return
    for _, force, mass in world.join(Force, Mass):
        force.force = force.force + mass.value * constant.AMU * constant.GC * _DOWN
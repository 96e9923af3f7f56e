"""How many atoms a source emits each frame."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from ..integrator import Timestep
from ..world import World


@dataclass
class EmitNumberPerFrame:
    """The source emits this many atoms every frame."""

    number: int


@dataclass
class EmitFixedRate:
    """The source emits atoms at this average rate, atoms per second."""

    rate: float


@dataclass(frozen=True)
class EmitOnce:
    """The source emits only on its first frame."""


@dataclass
class AtomNumberToEmit:
    """Number of atoms the source emits in the current frame."""

    number: int


def emit_number_per_frame(world: World) -> None:
    """Set the number to emit for fixed atoms-per-frame sources."""
    for _, emit, to_emit in world.join(EmitNumberPerFrame, AtomNumberToEmit):
        to_emit.number = emit.number


def emit_fixed_rate(world: World, rng: np.random.Generator | None = None) -> None:
    """Set the number to emit for fixed-rate sources.

    When rate times timestep is not whole, the fraction is emitted at random,
    so the average rate is right while single frames fluctuate by one.
    """
    if rng is None:
        rng = np.random.default_rng()
    delta = world.resource(Timestep).delta
    for _, emit, to_emit in world.join(EmitFixedRate, AtomNumberToEmit):
        average = emit.rate * delta
        guaranteed = math.floor(average)
        extra = 1 if rng.random() < average - guaranteed else 0
        to_emit.number = int(guaranteed) + extra


def emit_once(world: World) -> None:
    """Set the number to emit to zero for ``EmitOnce`` sources."""
    for _, _, to_emit in world.join(EmitOnce, AtomNumberToEmit):
        to_emit.number = 0
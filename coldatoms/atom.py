"""Common atom components and the force-clearing system."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace

import numpy as np

from .constant import BOHRMAG, C
from .world import World


def _vector(value) -> np.ndarray:
    array = np.array(value, dtype=float)
    if array.shape != (3,):
        raise ValueError(f"expected a 3-vector, got shape {array.shape}")
    return array


def _zeros() -> np.ndarray:
    return np.zeros(3)


def _format(vector: np.ndarray) -> str:
    return "(" + ",".join(repr(float(x)) for x in vector) + ")"


@dataclass(eq=False)
class Position:
    """Position in space, metres."""

    pos: np.ndarray = field(default_factory=_zeros)

    def __post_init__(self):
        self.pos = _vector(self.pos)

    def __str__(self) -> str:
        return _format(self.pos)

    def data(self) -> list[float]:
        return [float(x) for x in self.pos]


@dataclass(eq=False)
class Velocity:
    """Velocity, metres per second."""

    vel: np.ndarray = field(default_factory=_zeros)

    def __post_init__(self):
        self.vel = _vector(self.vel)

    def __str__(self) -> str:
        return _format(self.vel)

    def data(self) -> list[float]:
        return [float(x) for x in self.vel]


@dataclass(eq=False)
class InitialVelocity:
    """Velocity an atom was created with, metres per second."""

    vel: np.ndarray = field(default_factory=_zeros)

    def __post_init__(self):
        self.vel = _vector(self.vel)


@dataclass(eq=False)
class Force:
    """Force acting on an entity, newtons."""

    force: np.ndarray = field(default_factory=_zeros)

    def __post_init__(self):
        self.force = _vector(self.force)


@dataclass
class Mass:
    """Inertial and gravitational mass, atomic mass units."""

    value: float


@dataclass(frozen=True)
class Atom:
    """Marks an entity as an atom."""


@dataclass(frozen=True)
class AtomicTransition:
    """Parameters of the laser cooling transition of an atom."""

    #: Zeeman shift coefficient of the sigma+ transition, J/T.
    mup: float
    #: Zeeman shift coefficient of the sigma- transition, J/T.
    mum: float
    #: Zeeman shift coefficient of the pi transition, J/T.
    muz: float
    #: Transition frequency, Hz.
    frequency: float
    #: Transition linewidth, Hz.
    linewidth: float
    #: Saturation intensity, W/m^2.
    saturation_intensity: float
    #: Prefactor used for rate coefficients; set by :meth:`calculate`.
    rate_prefactor: float = 0.0

    def calculate(self) -> "AtomicTransition":
        """Return a copy with ``rate_prefactor`` filled in (two-level system)."""
        return replace(
            self, rate_prefactor=self.gamma() ** 3 / (self.saturation_intensity * 8.0)
        )

    @classmethod
    def rubidium(cls) -> "AtomicTransition":
        """Rubidium-87 D2 cycling transition."""
        return cls(
            mup=BOHRMAG,
            mum=-BOHRMAG,
            muz=0.0,
            frequency=C / 780.0e-9,
            linewidth=6.065e6,
            saturation_intensity=16.69,
        ).calculate()

    @classmethod
    def strontium(cls) -> "AtomicTransition":
        """Strontium blue (461 nm) transition."""
        return cls(
            mup=BOHRMAG,
            mum=-BOHRMAG,
            muz=0.0,
            frequency=650_759_219_088_937.0,
            linewidth=32e6,
            saturation_intensity=430.0,
        ).calculate()

    @classmethod
    def strontium_red(cls) -> "AtomicTransition":
        """Strontium red (689 nm) intercombination transition."""
        return cls(
            mup=3.0 / 2.0 * BOHRMAG,
            mum=-3.0 / 2.0 * BOHRMAG,
            muz=0.0,
            frequency=434_829_121_311_000.0,
            linewidth=7_400.0,
            saturation_intensity=0.0295,
        ).calculate()

    @classmethod
    def erbium(cls) -> "AtomicTransition":
        return cls(
            mup=BOHRMAG,
            mum=-BOHRMAG,
            muz=0.0,
            frequency=5.142e14,
            linewidth=190e3,
            saturation_intensity=0.13,
        ).calculate()

    @classmethod
    def erbium_401(cls) -> "AtomicTransition":
        return cls(
            mup=1.1372 * BOHRMAG,
            mum=1.1372 * -BOHRMAG,
            muz=0.0,
            frequency=7.476e14,
            linewidth=30e6,
            saturation_intensity=56.0,
        ).calculate()

    def gamma(self) -> float:
        """Angular linewidth, rad/s."""
        return self.linewidth * 2.0 * math.pi


def clear_forces(world: World) -> None:
    """Set every force to zero, ready for a new simulation step."""
    for _, force in world.join(Force):
        force.force = np.zeros(3)
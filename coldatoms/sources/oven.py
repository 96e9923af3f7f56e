"""Ovens: thermal sources releasing atoms through an aperture into a beam."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from ..atom import Atom, AtomicTransition, Force, InitialVelocity, Mass, Position, Velocity
from ..constant import PI
from ..initiate import NewlyCreated
from ..world import World
from .distribution import VelocityCap, WeightedProbabilityDistribution
from .emit import AtomNumberToEmit
from .precalc import MaxwellBoltzmannSource, PrecalculatedSpeciesInformation

_TILT = np.array([2.0, 1.0, 0.5])

#: Number of points the angular distribution is discretised into.
_THETA_RESOLUTION = 1000


def _normalize(vector) -> np.ndarray:
    vector = np.asarray(vector, dtype=float)
    return vector / np.linalg.norm(vector)


def _perpendicular_basis(direction) -> tuple[np.ndarray, np.ndarray]:
    first = _normalize(np.cross(direction, _TILT))
    second = _normalize(np.cross(direction, first))
    return first, second


@dataclass(frozen=True)
class CubicAperture:
    """Box-shaped aperture; ``size`` holds the full widths along x, y, z, metres."""

    size: tuple[float, float, float]


@dataclass(frozen=True)
class CircularAperture:
    """Disc-shaped aperture across the oven axis, metres."""

    radius: float
    thickness: float


OvenAperture = CubicAperture | CircularAperture


def jtheta(theta: float, channel_radius: float, channel_length: float) -> float:
    """Angular emission per solid angle through a cylindrical channel.

    Collision-free (transparent) flow; ``theta`` is the angle from the oven
    axis in radians, the channel sizes are in metres.
    """
    beta = 2.0 * channel_radius / channel_length
    q = math.tan(theta) / beta
    alpha = 0.5 - 1.0 / (3.0 * beta**2) * (
        1.0 - 2.0 * beta**3 + (2.0 * beta**2 - 1.0) * math.sqrt(1.0 + beta**2)
    ) / (math.sqrt(1.0 + beta**2) - beta**2 * math.asinh(1.0 / beta))

    cos_theta = math.cos(theta)
    if q <= 1.0:
        r_q = math.acos(q) - q * math.sqrt(1.0 - q**2)
        return alpha * cos_theta + (2.0 / PI) * cos_theta * (
            (1.0 - alpha) * r_q
            + 2.0 / (3.0 * q) * (1.0 - 2.0 * alpha) * (1.0 - (1.0 - q**2) ** 1.5)
        )
    return alpha * cos_theta + 4.0 / (3.0 * PI * q) * (1.0 - 2.0 * alpha) * cos_theta


def create_jtheta_distribution(
    channel_radius: float, channel_length: float
) -> WeightedProbabilityDistribution:
    """Distribution of polar angle, ``p(theta) ~ j(theta) sin(theta)``, on (0, pi/2)."""
    n = _THETA_RESOLUTION
    thetas = [(i + 0.5) / (n + 1.0) * PI / 2.0 for i in range(n)]
    weights = [
        jtheta(theta, channel_radius, channel_length) * math.sin(theta) for theta in thetas
    ]
    return WeightedProbabilityDistribution(thetas, weights)


def velocity_generate(
    speed: float,
    direction,
    theta_distribution: WeightedProbabilityDistribution,
    rng: np.random.Generator | None = None,
) -> tuple[np.ndarray, float]:
    """Random velocity of the given speed about ``direction``; returns ``(v, theta)``."""
    if rng is None:
        rng = np.random.default_rng()
    axis = _normalize(direction)
    first, second = _perpendicular_basis(direction)
    theta = theta_distribution.sample(rng)
    phi = rng.uniform(0.0, 2.0 * PI)
    divergence = (
        first * math.sin(theta) * math.cos(phi) + second * math.sin(theta) * math.sin(phi)
    )
    return (axis * math.cos(theta) + divergence) * speed, theta


@dataclass(eq=False)
class Oven(MaxwellBoltzmannSource):
    """A source of hot atoms.

    Atoms leave along ``direction`` with a polar angle drawn from the j(theta)
    distribution of the aperture's microchannels; atoms drawn with an angle
    above ``max_theta`` (set, for example, by a hot lip) are dropped.
    """

    #: Temperature, kelvin.
    temperature: float
    aperture: OvenAperture
    #: Unit vector along the oven axis.
    direction: np.ndarray
    theta_distribution: WeightedProbabilityDistribution
    #: Largest emission angle, radians.
    max_theta: float

    @property
    def v_dist_power(self) -> float:
        return 3.0

    def random_spawn_position(self, rng: np.random.Generator | None = None) -> np.ndarray:
        """Random point within the aperture, relative to the oven position."""
        if rng is None:
            rng = np.random.default_rng()
        aperture = self.aperture
        if isinstance(aperture, CubicAperture):
            half = 0.5 * np.asarray(aperture.size, dtype=float)
            return np.array([rng.uniform(-h, h) for h in half])
        axis = _normalize(self.direction)
        first, second = _perpendicular_basis(axis)
        angle = rng.uniform(0.0, 2.0 * PI)
        r = rng.uniform(0.0, aperture.radius)
        h = rng.uniform(-0.5 * aperture.thickness, 0.5 * aperture.thickness)
        return axis * h + r * first * math.sin(angle) + r * second * math.cos(angle)


class OvenBuilder:
    """Builds an :class:`Oven`, with defaults for the parts not given."""

    def __init__(self, temperature: float, direction):
        self.temperature = temperature
        self.aperture: OvenAperture = CircularAperture(radius=3.0e-3, thickness=1.0e-3)
        self.direction = _normalize(direction)
        self.microchannel_length = 4e-3
        self.microchannel_radius = 0.2e-3
        self.max_theta = PI / 2.0

    def with_microchannels(
        self, microchannel_length: float, microchannel_radius: float
    ) -> "OvenBuilder":
        self.microchannel_length = microchannel_length
        self.microchannel_radius = microchannel_radius
        return self

    def with_lip(self, lip_length: float, lip_radius: float) -> "OvenBuilder":
        self.max_theta = math.atan(lip_radius / lip_length)
        return self

    def with_aperture(self, aperture: OvenAperture) -> "OvenBuilder":
        self.aperture = aperture
        return self

    def build(self) -> Oven:
        return Oven(
            temperature=self.temperature,
            aperture=self.aperture,
            direction=_normalize(self.direction),
            theta_distribution=create_jtheta_distribution(
                self.microchannel_radius, self.microchannel_length
            ),
            max_theta=self.max_theta,
        )


def oven_create_atoms(world: World, rng: np.random.Generator | None = None) -> None:
    """Create the atoms each oven emits this frame; components land at ``maintain``."""
    if rng is None:
        rng = np.random.default_rng()
    cap = world.try_resource(VelocityCap)
    max_vel = cap.value if cap is not None else math.inf

    for _, oven, transition, to_emit, oven_position, species in world.join(
        Oven, AtomicTransition, AtomNumberToEmit, Position, PrecalculatedSpeciesInformation
    ):
        for _ in range(to_emit.number):
            mass, speed = species.generate_random_mass_v(rng)
            if speed > max_vel:
                continue
            velocity, theta = velocity_generate(
                speed, oven.direction, oven.theta_distribution, rng
            )
            if theta > oven.max_theta:
                continue
            start = oven_position.pos + oven.random_spawn_position(rng)
            atom = world.create_entity()
            for component in (
                Position(start),
                Velocity(velocity),
                Force(),
                Mass(mass),
                transition,
                Atom(),
                InitialVelocity(velocity.copy()),
                NewlyCreated(),
            ):
                world.lazy_insert(atom, component)
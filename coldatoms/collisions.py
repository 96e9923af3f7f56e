"""S-wave collisions between atoms by Direct Simulation Monte Carlo.

Space is divided into a cubic grid of collision boxes. From kinetic theory the
number of collisions expected in each box is worked out from the density and
the mean speed of the atoms in it, and that many random pairs are collided.

The atoms in a box are assumed to be roughly thermal, so that the mean
relative speed is sqrt(2) times the mean speed. A single species with a
constant cross section is assumed.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

from .atom import Atom, Position, Velocity
from .constant import PI, SQRT2
from .integrator import Timestep
from .world import World

#: Box id given to atoms outside the grid; they take part in no collisions.
OUT_OF_GRID = 2**63 - 1


@dataclass(frozen=True)
class ApplyCollisionsOption:
    """Resource whose presence switches collisions on."""


@dataclass
class BoxID:
    """Id of the collision box an atom is in."""

    id: int = 0


@dataclass
class CollisionParameters:
    """Settings of the collision model."""

    #: Number of real atoms one simulated particle stands for.
    macroparticle: float
    #: Number of boxes along each side of the grid.
    box_number: int
    #: Width of one box, metres.
    box_width: float
    #: Collisional cross section, m^2.
    sigma: float
    #: Largest number of collisions allowed in one box in one frame.
    collision_limit: float


@dataclass
class CollisionsTracker:
    """Statistics of the last frame, one entry per occupied box."""

    num_collisions: list[int] = field(default_factory=list)
    num_particles: list[int] = field(default_factory=list)
    num_atoms: list[float] = field(default_factory=list)


class CollisionLimitExceeded(RuntimeError):
    """The collisions expected in one box exceed the configured limit."""


@dataclass
class CollisionBox:
    """A partition of space within which atoms may collide."""

    velocities: list[Velocity] = field(default_factory=list)
    expected_collision_number: float = 0.0
    collision_number: int = 0
    density: float = 0.0
    volume: float = 0.0
    atom_number: float = 0.0
    particle_number: int = 0

    def do_collisions(
        self,
        params: CollisionParameters,
        dt: float,
        rng: np.random.Generator | None = None,
    ) -> None:
        """Collide random pairs of atoms in the box for one timestep."""
        if rng is None:
            rng = np.random.default_rng()
        self.particle_number = len(self.velocities)
        self.atom_number = self.particle_number * params.macroparticle

        if self.particle_number <= 1:
            return

        mean_speed = sum(float(np.linalg.norm(v.vel)) for v in self.velocities) / len(
            self.velocities
        )
        # N_p * n * sigma * vrel * dt / 2, with vrel = sqrt(2) * mean speed.
        density = self.atom_number / params.box_width**3
        self.expected_collision_number = (
            self.particle_number * density * params.sigma * mean_speed * dt / SQRT2
        )

        remaining = self.expected_collision_number
        if remaining > params.collision_limit:
            raise CollisionLimitExceeded(
                "Number of collisions in a box in a single frame exceeds limit. "
                f"Number of collisions={remaining}, limit={params.collision_limit}, "
                f"particles={self.particle_number}."
            )

        count = len(self.velocities)
        while remaining > 0.0:
            collide = remaining > 1.0 or rng.random() < remaining
            if collide:
                first = int(rng.integers(count))
                second = first
                while second == first:
                    second = int(rng.integers(count))
                a, b = self.velocities[first], self.velocities[second]
                a.vel, b.vel = do_collision(a.vel, b.vel, rng)
                self.collision_number += 1
            remaining -= 1.0


def do_collision(
    v1, v2, rng: np.random.Generator | None = None
) -> tuple[np.ndarray, np.ndarray]:
    """Scatter two velocities isotropically in their centre-of-mass frame.

    Momentum and kinetic energy are conserved.
    """
    if rng is None:
        rng = np.random.default_rng()
    v1 = np.asarray(v1, dtype=float)
    v2 = np.asarray(v2, dtype=float)
    vcm = 0.5 * (v1 + v2)
    energy = 0.5 * (
        float(np.dot(v1 - vcm, v1 - vcm)) + float(np.dot(v2 - vcm, v2 - vcm))
    )

    cos_theta = rng.uniform(-1.0, 1.0)
    sin_theta = math.sqrt(1.0 - cos_theta**2)
    phi = rng.uniform(0.0, 2.0 * PI)
    speed = math.sqrt(energy)
    v_prime = np.array(
        [
            speed * sin_theta * math.cos(phi),
            speed * sin_theta * math.sin(phi),
            speed * cos_theta,
        ]
    )
    return vcm + v_prime, vcm - v_prime


def pos_to_id(pos, n: int, width: float) -> int:
    """Id of the grid box holding ``pos``, or :data:`OUT_OF_GRID`.

    With an even number of boxes a box corner lies on the origin; with an odd
    number a box centre does. Boxes include their lower bound only.
    """
    bound = n / 2.0 * width
    if any(abs(float(x)) > bound for x in pos):
        return OUT_OF_GRID
    xp, yp, zp = (math.floor(float(x) / width + 0.5 * n) for x in pos)
    return xp + n * yp + n**2 * zp


def apply_collisions(world: World, rng: np.random.Generator | None = None) -> None:
    """Collide atoms within each box of the grid, if collisions are switched on.

    Atoms without a box id get one at the next ``maintain`` and take part from
    the following frame.
    """
    if world.try_resource(ApplyCollisionsOption) is None:
        return
    if rng is None:
        rng = np.random.default_rng()
    params = world.resource(CollisionParameters)
    dt = world.resource(Timestep).delta
    tracker = world.resource(CollisionsTracker)

    for entity, _ in world.join(Atom, without=(BoxID,)):
        world.lazy_insert(entity, BoxID())

    for _, position, box_id in world.join(Position, BoxID):
        box_id.id = pos_to_id(position.pos, params.box_number, params.box_width)

    boxes: dict[int, CollisionBox] = {}
    for _, velocity, box_id in world.join(Velocity, BoxID):
        if box_id.id == OUT_OF_GRID:
            continue
        boxes.setdefault(box_id.id, CollisionBox()).velocities.append(velocity)

    for collision_box in boxes.values():
        collision_box.do_collisions(params, dt, rng)

    tracker.num_atoms = [b.atom_number for b in boxes.values()]
    tracker.num_collisions = [b.collision_number for b in boxes.values()]
    tracker.num_particles = [b.particle_number for b in boxes.values()]
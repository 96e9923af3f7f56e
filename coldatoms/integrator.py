"""Time integration of the classical equations of motion."""

from __future__ import annotations

from dataclasses import dataclass

from .atom import Force, Mass, Position, Velocity
from .constant import AMU
from .initiate import NewlyCreated
from .world import World

INTEGRATE_POSITION_SYSTEM_NAME = "integrate_position"
INTEGRATE_VELOCITY_SYSTEM_NAME = "integrate_velocity"


@dataclass
class Step:
    """Number of the current integration step."""

    n: int = 0


@dataclass
class Timestep:
    """Duration of one integration step, seconds.

    It must resolve the fastest motion being simulated; about 1 us suits a
    typical magneto-optical trap.
    """

    delta: float


@dataclass(eq=False)
class OldForce(Force):
    """The force that acted on an entity during the previous step, newtons."""


def euler_update(
    velocity: Velocity, position: Position, force: Force, mass: Mass, dt: float
) -> None:
    """Advance one entity by one Euler step: position first, then velocity."""
    position.pos = position.pos + velocity.vel * dt
    velocity.vel = velocity.vel + force.force * dt / (AMU * mass.value)


def euler_integrate(world: World) -> None:
    """Integrate every entity with the Euler method and advance the step count."""
    dt = world.resource(Timestep).delta
    world.resource(Step).n += 1
    for _, velocity, position, force, mass in world.join(Velocity, Position, Force, Mass):
        euler_update(velocity, position, force, mass, dt)


def verlet_integrate_position(world: World) -> None:
    """Velocity-Verlet position update; remembers this step's force as ``OldForce``."""
    dt = world.resource(Timestep).delta
    world.resource(Step).n += 1
    for _, position, velocity, old_force, force, mass in world.join(
        Position, Velocity, OldForce, Force, Mass
    ):
        acceleration = force.force / (AMU * mass.value)
        position.pos = position.pos + velocity.vel * dt + acceleration / 2.0 * dt * dt
        old_force.force = force.force.copy()


def verlet_integrate_velocity(world: World) -> None:
    """Velocity-Verlet velocity update from the mean of ``Force`` and ``OldForce``."""
    dt = world.resource(Timestep).delta
    for _, velocity, force, old_force, mass in world.join(Velocity, Force, OldForce, Mass):
        mean_force = (force.force + old_force.force) / 2.0
        velocity.vel = velocity.vel + mean_force / (AMU * mass.value) * dt


def add_old_force_to_new_atoms(world: World) -> None:
    """Queue a zero ``OldForce`` for each newly created entity lacking one."""
    for entity, _ in world.join(NewlyCreated, without=(OldForce,)):
        world.lazy_insert(entity, OldForce())
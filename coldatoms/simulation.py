"""Assembly of the world resources and the dispatcher for a full simulation."""

from __future__ import annotations

from collections.abc import Iterable
from functools import partial

import numpy as np

from .atom import clear_forces
from .destructor import delete_to_be_destroyed_entities
from .gravity import apply_gravitational_force
from .initiate import deflag_new_atoms
from .integrator import (
    INTEGRATE_POSITION_SYSTEM_NAME,
    INTEGRATE_VELOCITY_SYSTEM_NAME,
    Step,
    add_old_force_to_new_atoms,
    verlet_integrate_position,
    verlet_integrate_velocity,
)
from .sources.central_creator import central_creator_create_atoms
from .sources.emit import emit_fixed_rate, emit_number_per_frame, emit_once
from .sources.gaussian import gaussian_create_atoms, precalculate_for_gaussian_source
from .sources.oven import Oven, oven_create_atoms
from .sources.precalc import precalculate_for_species
from .world import Dispatcher, World


def register_resources(world: World) -> None:
    """Insert the resources every simulation needs."""
    world.insert_resource(Step(n=0))


def add_source_systems(
    dispatcher: Dispatcher,
    after: Iterable[str] = (),
    rng: np.random.Generator | None = None,
) -> Dispatcher:
    """Add the systems that create atoms from atom sources.

    ``after`` names systems that must run before the sources are handled.
    """
    if rng is None:
        rng = np.random.default_rng()
    after = (after,) if isinstance(after, str) else tuple(after)

    dispatcher.add(emit_number_per_frame, "emit_number_per_frame", after)
    dispatcher.add(partial(emit_fixed_rate, rng=rng), "emit_fixed_rate", ["emit_number_per_frame"])
    dispatcher.add(
        partial(precalculate_for_species, source_type=Oven), "precalculated_oven", after
    )
    dispatcher.add(precalculate_for_gaussian_source, "precalculate_gaussian", after)
    dispatcher.add(
        partial(oven_create_atoms, rng=rng),
        "oven_create_atoms",
        ["emit_number_per_frame", "precalculated_oven"],
    )
    dispatcher.add(
        partial(gaussian_create_atoms, rng=rng),
        "gaussian_create_atoms",
        ["emit_number_per_frame", "precalculate_gaussian"],
    )
    dispatcher.add(
        partial(central_creator_create_atoms, rng=rng),
        "central_create_system",
        ["emit_number_per_frame"],
    )
    dispatcher.add(
        emit_once,
        "emit_once_system",
        ["oven_create_atoms", "gaussian_create_atoms", "central_create_system"],
    )
    return dispatcher


def create_simulation_dispatcher(rng: np.random.Generator | None = None) -> Dispatcher:
    """Dispatcher running one full simulation frame per dispatch.

    Each frame integrates positions, clears and recalculates forces, creates
    atoms from sources, integrates velocities and deletes entities marked for
    destruction. Call ``world.maintain()`` after each dispatch.
    """
    if rng is None:
        rng = np.random.default_rng()
    dispatcher = Dispatcher()
    dispatcher.add(verlet_integrate_position, INTEGRATE_POSITION_SYSTEM_NAME)
    dispatcher.add(clear_forces, "clear", [INTEGRATE_POSITION_SYSTEM_NAME])
    dispatcher.add(deflag_new_atoms, "deflag")
    dispatcher.add(add_old_force_to_new_atoms, "add_old_force")
    add_source_systems(dispatcher, (), rng)
    dispatcher.add(
        apply_gravitational_force, "add_gravity", ["clear", INTEGRATE_POSITION_SYSTEM_NAME]
    )
    dispatcher.add(verlet_integrate_velocity, INTEGRATE_VELOCITY_SYSTEM_NAME, ["add_gravity"])
    dispatcher.add(
        delete_to_be_destroyed_entities, "delete_to_be_destroyed", [INTEGRATE_VELOCITY_SYSTEM_NAME]
    )
    return dispatcher
import math

import numpy as np
import pytest

from coldatoms.atom import Atom, Force, Mass, Position, Velocity, clear_forces
from coldatoms.collisions import (
    OUT_OF_GRID,
    ApplyCollisionsOption,
    BoxID,
    CollisionBox,
    CollisionLimitExceeded,
    CollisionParameters,
    CollisionsTracker,
    apply_collisions,
    do_collision,
    pos_to_id,
)
from coldatoms.initiate import NewlyCreated, deflag_new_atoms
from coldatoms.integrator import (
    Step,
    Timestep,
    add_old_force_to_new_atoms,
    verlet_integrate_position,
    verlet_integrate_velocity,
)
from coldatoms.world import Dispatcher, World


@pytest.mark.parametrize(
    "pos, expected",
    [
        ((0.0, 0.0, 0.0), 555),
        ((1.0, 0.0, 0.0), 555),
        ((2.0, 0.0, 0.0), 556),
        ((9.9, 0.0, 0.0), 559),
        ((-9.9, 0.0, 0.0), 550),
        ((10.1, 0.0, 0.0), OUT_OF_GRID),
        ((-9.9, -9.9, -9.9), 0),
    ],
)
def test_pos_to_id(pos, expected):
    assert pos_to_id(np.array(pos), 10, 2.0) == expected


def test_out_of_grid_is_largest_64_bit_integer():
    assert pos_to_id((0.0, 0.0, -30.0), 10, 2.0) == 9223372036854775807


def test_do_collision_conserves_momentum_and_energy():
    rng = np.random.default_rng(1)
    for _ in range(50):
        v1 = np.array([0.5, 1.0, 0.75])
        v2 = np.array([0.2, 0.0, 1.25])
        momentum_before = v1 + v2
        energy_before = 0.5 * (v1 @ v1 + v2 @ v2)

        v1new, v2new = do_collision(v1, v2, rng)

        momentum_after = v1new + v2new
        energy_after = 0.5 * (v1new @ v1new + v2new @ v2new)
        assert np.all(np.abs(momentum_before - momentum_after) <= 1e-6)
        assert abs(energy_before - energy_after) / energy_before <= 1e-12
        assert not np.array_equal(v1, v1new)
        assert not np.array_equal(v2, v2new)


def test_collision_rate():
    macro_atom_number = 100
    vel = np.array([1.0, 0.0, 0.0])
    collision_box = CollisionBox(
        velocities=[Velocity(vel.copy()) for _ in range(macro_atom_number)]
    )
    params = CollisionParameters(
        macroparticle=10.0,
        box_number=1,
        box_width=1e-3,
        sigma=1e-8,
        collision_limit=10_000.0,
    )
    collision_box.do_collisions(params, 1e-3, np.random.default_rng(0))
    assert collision_box.particle_number == macro_atom_number
    assert collision_box.atom_number == 1000.0
    assert collision_box.expected_collision_number == pytest.approx(
        1000.0 / math.sqrt(2.0), abs=0.01
    )
    assert collision_box.collision_number == 708


def test_single_particle_box_does_not_collide():
    collision_box = CollisionBox(velocities=[Velocity([1.0, 2.0, 3.0])])
    params = CollisionParameters(2.0, 1, 1.0, 1.0, 10.0)
    collision_box.do_collisions(params, 1.0, np.random.default_rng(0))
    assert collision_box.particle_number == 1
    assert collision_box.atom_number == 2.0
    assert collision_box.collision_number == 0
    assert collision_box.velocities[0].data() == [1.0, 2.0, 3.0]


def test_collision_limit_exceeded_raises():
    collision_box = CollisionBox(
        velocities=[Velocity([1.0, 0.0, 0.0]) for _ in range(10)]
    )
    params = CollisionParameters(1.0, 1, 1e-3, 1.0, 5.0)
    with pytest.raises(CollisionLimitExceeded):
        collision_box.do_collisions(params, 1.0, np.random.default_rng(0))


def _collision_world():
    world = World()
    world.insert_resource(Step())
    world.insert_resource(Timestep(delta=1.0))
    world.insert_resource(ApplyCollisionsOption())
    world.insert_resource(CollisionsTracker())
    world.insert_resource(
        CollisionParameters(
            macroparticle=1.0,
            box_number=10,
            box_width=2.0,
            sigma=10.0,
            collision_limit=10_000.0,
        )
    )
    return world


def test_without_option_nothing_happens():
    world = World()
    atom = world.create_entity(Atom(), Position(), Velocity([1.0, 0.0, 0.0]))
    apply_collisions(world, np.random.default_rng(0))
    world.maintain()
    assert not world.has(atom, BoxID)


def test_box_ids_assigned_lazily_and_tracker_filled():
    world = _collision_world()
    atom = world.create_entity(Atom(), Position([3.0, 0.0, 0.0]), Velocity())
    far = world.create_entity(Atom(), Position([30.0, 0.0, 0.0]), Velocity())
    rng = np.random.default_rng(0)

    apply_collisions(world, rng)
    assert not world.has(atom, BoxID)
    world.maintain()
    assert world.get(atom, BoxID).id == 0

    apply_collisions(world, rng)
    assert world.get(atom, BoxID).id == 556
    assert world.get(far, BoxID).id == OUT_OF_GRID
    tracker = world.resource(CollisionsTracker)
    assert tracker.num_particles == [1]
    assert tracker.num_atoms == [1.0]
    assert tracker.num_collisions == [0]


def test_collisions_in_simulation():
    world = _collision_world()
    rng = np.random.default_rng(3)
    dispatcher = Dispatcher()
    dispatcher.add(verlet_integrate_position, "integrate_position")
    dispatcher.add(clear_forces, "clear", ["integrate_position"])
    dispatcher.add(deflag_new_atoms, "deflag")
    dispatcher.add(add_old_force_to_new_atoms, "old_force")
    dispatcher.add(verlet_integrate_velocity, "integrate_velocity", ["clear"])
    dispatcher.add(
        lambda w: apply_collisions(w, rng), "collisions", ["integrate_velocity"]
    )

    vel1 = np.array([1.0, 0.0, 0.0])
    vel2 = np.array([-1.0, 0.0, 0.0])
    pos1 = np.array([-3.0, 0.0, 0.0])
    pos2 = np.array([3.0, 0.0, 0.0])
    atom1 = world.create_entity(
        Velocity(vel1), Position(pos1), Atom(), Force(), Mass(87.0), NewlyCreated()
    )
    atom2 = world.create_entity(
        Velocity(vel2), Position(pos2), Atom(), Force(), Mass(87.0), NewlyCreated()
    )

    for _ in range(10):
        dispatcher.dispatch(world)
        world.maintain()

    assert not np.array_equal(world.get(atom1, Position).pos, pos1)
    assert not np.array_equal(world.get(atom2, Position).pos, pos2)
    assert not np.array_equal(world.get(atom1, Velocity).vel, vel1)
    assert not np.array_equal(world.get(atom2, Velocity).vel, vel2)
    total = world.get(atom1, Velocity).vel + world.get(atom2, Velocity).vel
    assert np.allclose(total, np.zeros(3), atol=1e-9)
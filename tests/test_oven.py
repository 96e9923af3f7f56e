import math

import numpy as np
import pytest

from coldatoms.atom import Atom, AtomicTransition, InitialVelocity, Mass, Position, Velocity
from coldatoms.initiate import NewlyCreated
from coldatoms.sources.distribution import VelocityCap
from coldatoms.sources.emit import AtomNumberToEmit
from coldatoms.sources.mass import MassDistribution, MassRatio
from coldatoms.sources.oven import (
    CircularAperture,
    CubicAperture,
    Oven,
    OvenBuilder,
    create_jtheta_distribution,
    jtheta,
    oven_create_atoms,
    velocity_generate,
)
from coldatoms.sources.precalc import precalculate_for_species
from coldatoms.world import World


def _oven_world(number, direction=(1.0, 0.0, 0.0)):
    world = World()
    oven = OvenBuilder(776.0, direction).with_aperture(
        CircularAperture(radius=0.005, thickness=0.001)
    ).build()
    source = world.create_entity(
        oven,
        Position([-0.083, 0.0, 0.0]),
        MassDistribution([MassRatio(mass=88.0, ratio=1.0)]),
        AtomicTransition.strontium(),
        AtomNumberToEmit(number),
    )
    precalculate_for_species(world, Oven)
    return world, source


def test_jtheta_continuous_where_branches_meet():
    radius, length = 0.2e-3, 4e-3
    beta = 2.0 * radius / length
    edge = math.atan(beta)
    below = jtheta(edge - 1e-9, radius, length)
    above = jtheta(edge + 1e-9, radius, length)
    assert below == pytest.approx(above, rel=1e-6)


def test_jtheta_decreases_with_angle():
    values = [jtheta(t, 0.2e-3, 4e-3) for t in (0.01, 0.1, 0.5, 1.0, 1.5)]
    assert all(a > b for a, b in zip(values, values[1:]))
    assert all(v > 0.0 for v in values)


def test_jtheta_distribution_covers_quarter_turn():
    dist = create_jtheta_distribution(0.2e-3, 4e-3)
    assert len(dist) == 1000
    assert all(0.0 < t < math.pi / 2 for t in dist.values)


def test_velocity_generate_speed_and_angle():
    dist = create_jtheta_distribution(0.2e-3, 4e-3)
    rng = np.random.default_rng(7)
    direction = np.array([0.0, 3.0, 4.0])
    for _ in range(30):
        velocity, theta = velocity_generate(250.0, direction, dist, rng)
        assert np.linalg.norm(velocity) == pytest.approx(250.0)
        cos_angle = velocity @ direction / (250.0 * np.linalg.norm(direction))
        assert cos_angle == pytest.approx(math.cos(theta))


def test_builder_defaults():
    oven = OvenBuilder(500.0, [0.0, 0.0, 2.0]).build()
    assert np.allclose(oven.direction, [0.0, 0.0, 1.0])
    assert oven.max_theta == pytest.approx(math.pi / 2)
    assert oven.aperture == CircularAperture(radius=3.0e-3, thickness=1.0e-3)
    assert oven.temperature == 500.0
    assert oven.v_dist_power == 3.0


def test_builder_with_lip_and_aperture():
    builder = OvenBuilder(500.0, [1.0, 0.0, 0.0])
    assert builder.with_lip(0.01, 0.01) is builder
    oven = builder.with_aperture(CubicAperture(size=(1.0, 2.0, 3.0))).with_microchannels(
        5e-3, 0.1e-3
    ).build()
    assert oven.max_theta == pytest.approx(math.atan(1.0))
    assert oven.aperture == CubicAperture(size=(1.0, 2.0, 3.0))
    assert builder.microchannel_length == 5e-3
    assert builder.microchannel_radius == 0.1e-3


def test_circular_spawn_within_aperture():
    oven = OvenBuilder(500.0, [1.0, 1.0, 0.0]).with_aperture(
        CircularAperture(radius=0.005, thickness=0.001)
    ).build()
    rng = np.random.default_rng(8)
    for _ in range(100):
        point = oven.random_spawn_position(rng)
        axial = point @ oven.direction
        radial = np.linalg.norm(point - axial * oven.direction)
        assert abs(axial) <= 0.0005 + 1e-12
        assert radial <= 0.005 + 1e-12


def test_cubic_spawn_within_box():
    oven = OvenBuilder(500.0, [1.0, 0.0, 0.0]).with_aperture(
        CubicAperture(size=(1.0, 2.0, 3.0))
    ).build()
    rng = np.random.default_rng(9)
    points = np.array([oven.random_spawn_position(rng) for _ in range(100)])
    assert points.shape == (100, 3)
    largest = np.abs(points).max(axis=0)
    assert float(largest[0]) <= 0.5
    assert float(largest[1]) <= 1.0
    assert float(largest[2]) <= 1.5
    assert float(points[:, 2].std()) > float(points[:, 0].std())


def test_oven_creates_atoms():
    world, _ = _oven_world(40)
    oven_create_atoms(world, np.random.default_rng(10))
    world.maintain()
    atoms = list(world.join(Atom, Velocity, Position, Mass, InitialVelocity, NewlyCreated))
    assert len(atoms) == 40
    for _, _, velocity, position, mass, initial, _ in atoms:
        assert mass.value == 88.0
        assert velocity.vel[0] > 0.0
        assert np.allclose(initial.vel, velocity.vel)
        assert abs(position.pos[0] + 0.083) <= 0.0005 + 1e-12


def test_velocity_cap_stops_emission():
    world, _ = _oven_world(20)
    world.insert_resource(VelocityCap(0.0))
    oven_create_atoms(world, np.random.default_rng(11))
    world.maintain()
    assert list(world.join(Atom)) == []


def test_oven_without_precalculation_emits_nothing():
    world = World()
    world.create_entity(
        OvenBuilder(776.0, [1.0, 0.0, 0.0]).build(),
        Position(),
        AtomicTransition.strontium(),
        AtomNumberToEmit(10),
    )
    oven_create_atoms(world, np.random.default_rng(12))
    world.maintain()
    assert list(world.join(Atom)) == []
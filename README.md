# coldatoms

A small simulation library for cold atoms. Atoms, ovens and other parts of an
experiment are entities in a `World` (`coldatoms.world`). Each entity holds at
most one component of each type. Systems are plain callables that take the
world. A `Dispatcher` runs them once per frame in the order they were added.
Changes queued with `World.lazy_insert`, `World.lazy_remove` and
`World.lazy_delete` take effect when `World.maintain()` is called.

## What is in it

- `coldatoms.atom`: the components `Position`, `Velocity`, `InitialVelocity`,
  `Force`, `Mass` and `Atom`, plus `AtomicTransition`. `AtomicTransition` has
  presets `rubidium()`, `strontium()`, `strontium_red()`, `erbium()` and
  `erbium_401()`. The system `clear_forces` is also here.
- `coldatoms.integrator`: the resources `Timestep` and `Step` and the component
  `OldForce`. Two integration schemes are provided:
  - Euler: `euler_update` and `euler_integrate`.
  - Velocity Verlet: `verlet_integrate_position` and
    `verlet_integrate_velocity`.

  `add_old_force_to_new_atoms` gives new atoms an `OldForce`.
- `coldatoms.gravity`: `apply_gravitational_force` adds gravity along −z, but
  only while the `ApplyGravityOption` resource is present.
- `coldatoms.collisions`: s-wave collisions by Direct Simulation Monte Carlo on
  a cubic grid of boxes. The module provides `CollisionParameters`,
  `CollisionsTracker`, `apply_collisions`, `do_collision` and `pos_to_id`.
  `CollisionBox.do_collisions` raises `CollisionLimitExceeded` when a box
  expects more collisions than `collision_limit` allows.
- `coldatoms.initiate` and `coldatoms.destructor`: the `NewlyCreated` and
  `ToBeDestroyed` markers, and the systems that clear them.
- `coldatoms.sources`: atom sources.
  - `oven`: `OvenBuilder`, `Oven`, `CircularAperture` and `CubicAperture`, with
    the j(θ) angular distribution in `jtheta`.
  - `gaussian`: sources whose atoms have Gaussian velocity distributions.
  - `central_creator`: `CentralCreator` spawns atoms uniformly in a cube.
  - `mass`: `MassDistribution` and `MassRatio` for isotope mixtures.
  - `emit`: sets how many atoms a source emits. The options are
    `EmitNumberPerFrame`, `EmitFixedRate` and `EmitOnce`, and the count lives in
    `AtomNumberToEmit`.
  - `precalc`: precalculated thermal speed distributions.
  - `distribution`: `WeightedProbabilityDistribution` and the `VelocityCap`
    resource.
- `coldatoms.dipole`: `DipoleLight` and `Polarizability.calculate_for`.
- `coldatoms.fileinput`: archetype records for describing a simulation in
  YAML. `SimArchetype.from_yaml_file` reads one, and `write_file_template`
  writes an example 2D+ MOT file.
- `coldatoms.simulation`: `register_resources`, `add_source_systems` and
  `create_simulation_dispatcher`.

Every random function takes an optional `numpy.random.Generator`. Pass a seeded
generator to get reproducible runs.

## Installation

```
pip install .
```

To install the test dependencies as well:

```
pip install .[test]
```

## Example: free motion with velocity Verlet

```python
import numpy as np

from coldatoms.world import World
from coldatoms.atom import Atom, Force, Mass, Position, Velocity
from coldatoms.initiate import NewlyCreated
from coldatoms.integrator import Timestep
from coldatoms.simulation import create_simulation_dispatcher, register_resources

rng = np.random.default_rng(1)
world = World()
register_resources(world)
world.insert_resource(Timestep(1e-6))
dispatcher = create_simulation_dispatcher(rng)

atom = world.create_entity(
    Position(np.zeros(3)),
    Velocity(np.array([0.0, 0.0, 1.0])),
    Force(),
    Mass(87.0),
    Atom(),
    NewlyCreated(),
)

for _ in range(1000):
    dispatcher.dispatch(world)
    world.maintain()

print(world.get(atom, Position))
```

## Example: an oven that fires once

The oven below emits its atoms on the first frame. `ToBeDestroyed` then
removes the oven at the first `maintain`.

```python
from coldatoms.atom import AtomicTransition, Position
from coldatoms.destructor import ToBeDestroyed
from coldatoms.sources.emit import AtomNumberToEmit
from coldatoms.sources.mass import MassDistribution, MassRatio
from coldatoms.sources.oven import CircularAperture, OvenBuilder

oven = (
    OvenBuilder(776.0, [1.0, 0.0, 0.0])
    .with_aperture(CircularAperture(radius=0.005, thickness=0.001))
    .build()
)
world.create_entity(
    oven,
    Position([-0.083, 0.0, 0.0]),
    MassDistribution([MassRatio(mass=88.0, ratio=1.0)]),
    AtomicTransition.strontium(),
    AtomNumberToEmit(1000),
    ToBeDestroyed(),
)
```

## Example: switching on collisions

`create_simulation_dispatcher` does not include collisions. To use them, add
`apply_collisions` after the velocity integration and insert its resources.

```python
from functools import partial

from coldatoms.collisions import (
    ApplyCollisionsOption,
    CollisionParameters,
    CollisionsTracker,
    apply_collisions,
)
from coldatoms.integrator import INTEGRATE_VELOCITY_SYSTEM_NAME

dispatcher.add(partial(apply_collisions, rng=rng), "collisions", [INTEGRATE_VELOCITY_SYSTEM_NAME])
world.insert_resource(ApplyCollisionsOption())
world.insert_resource(
    CollisionParameters(
        macroparticle=4e2,
        box_number=200,
        box_width=20e-6,
        sigma=3.5e-16,
        collision_limit=1e7,
    )
)
world.insert_resource(CollisionsTracker())
```

After each frame, `CollisionsTracker` holds the counts for every occupied box.

## What it does not do

The package does not model:

- Laser beams, laser-cooling forces or photon scattering.
- Magnetic fields or magnetic forces.
- Surface sources.
- Simulation-volume bounds.

`DipoleLight` and `Polarizability` are components only. No system computes
intensity gradients or dipole forces from them. The laser and magnetic entries
of a `SimArchetype` are read and written, but nothing builds a simulation from
them.

There is no command-line program and no output to trajectory files. You write
the frame loop yourself and read components from the `World`.

## Tests

```
pytest
```
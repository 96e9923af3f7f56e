"""Describing simulations in YAML files.

A simulation is described by archetypes, plain records of the lasers, ovens,
magnetic fields and detector that make it up.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields, is_dataclass
from os import PathLike
from typing import Any

import yaml

from .atom import AtomicTransition
from .sources.mass import MassDistribution, MassRatio

Vector = tuple[float, float, float]


def _vector(value) -> Vector:
    try:
        result = tuple(float(x) for x in value)
    except TypeError as error:
        raise ValueError(f"expected a 3-vector, got {value!r}") from error
    if len(result) != 3:
        raise ValueError(f"expected a 3-vector, got {len(result)} components")
    return result  # type: ignore[return-value]


@dataclass
class LaserArchetype:
    """A gaussian cooling laser beam."""

    direction: Vector
    frequency: float
    polarization: float
    power: float
    e_radius: float
    intersection: Vector

    def __post_init__(self):
        self.direction = _vector(self.direction)
        self.intersection = _vector(self.intersection)


@dataclass
class OvenArchetype:
    """An atomic oven source."""

    position: Vector
    rate: float
    instant_emission: int
    direction: Vector
    temperature: float
    radius_aperture: float
    thickness: float

    def __post_init__(self):
        self.position = _vector(self.position)
        self.direction = _vector(self.direction)
        if isinstance(self.instant_emission, bool) or int(self.instant_emission) < 0:
            raise ValueError("instant_emission must be a non-negative integer")
        self.instant_emission = int(self.instant_emission)


@dataclass
class MagArchetype:
    """The magnetic fields of the simulation."""

    centre: Vector
    gradient: float
    uniform: Vector
    direction_quadru: Vector

    def __post_init__(self):
        self.centre = _vector(self.centre)
        self.uniform = _vector(self.uniform)
        self.direction_quadru = _vector(self.direction_quadru)


@dataclass
class DetectorArchetype:
    """An atom detector."""

    position: Vector
    direction: Vector
    thickness: float
    radius: float
    trigger_time: float

    def __post_init__(self):
        self.position = _vector(self.position)
        self.direction = _vector(self.direction)


def _to_plain(value: Any) -> Any:
    if isinstance(value, MassDistribution):
        return {
            "distribution": [
                {"mass": float(entry.mass), "ratio": float(entry.ratio)}
                for entry in value.distribution
            ],
            "normalised": value.normalised,
        }
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: _to_plain(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, (list, tuple)):
        return [_to_plain(item) for item in value]
    return value


def _mapping(data: Any, what: str) -> Mapping:
    if not isinstance(data, Mapping):
        raise ValueError(f"{what} must be a mapping, got {type(data).__name__}")
    return data


def _require(data: Mapping, key: str, what: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise ValueError(f"{what} is missing the field {key!r}") from None


def _build(cls, data: Any):
    data = _mapping(data, cls.__name__)
    values = {f.name: _require(data, f.name, cls.__name__) for f in fields(cls)}
    try:
        return cls(**values)
    except TypeError as error:
        raise ValueError(f"invalid {cls.__name__}: {error}") from error


def _list(data: Any, what: str) -> list:
    if not isinstance(data, list):
        raise ValueError(f"{what} must be a list")
    return data


def _mass_distribution(data: Any) -> MassDistribution:
    data = _mapping(data, "mass")
    entries = [
        MassRatio(
            mass=float(_require(_mapping(item, "mass ratio"), "mass", "mass ratio")),
            ratio=float(_require(item, "ratio", "mass ratio")),
        )
        for item in _list(_require(data, "distribution", "mass"), "distribution")
    ]
    normalised = bool(_require(data, "normalised", "mass"))
    distribution = MassDistribution(entries)
    # Keep the ratios exactly as they were written.
    distribution.distribution = entries
    distribution.normalised = normalised
    return distribution


@dataclass(eq=False)
class SimArchetype:
    """A complete simulation."""

    lasers: list[LaserArchetype]
    ovens: list[OvenArchetype]
    atominfo: AtomicTransition
    mass: MassDistribution
    magnetic: MagArchetype
    detector: DetectorArchetype
    timestep: float

    def to_dict(self) -> dict:
        """Plain data of lists, dicts and numbers, in field order."""
        return {f.name: _to_plain(getattr(self, f.name)) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Mapping) -> "SimArchetype":
        """Build from plain data; ValueError if a field is missing or malformed."""
        what = "simulation"
        data = _mapping(data, what)
        return cls(
            lasers=[
                _build(LaserArchetype, item)
                for item in _list(_require(data, "lasers", what), "lasers")
            ],
            ovens=[
                _build(OvenArchetype, item)
                for item in _list(_require(data, "ovens", what), "ovens")
            ],
            atominfo=_build(AtomicTransition, _require(data, "atominfo", what)),
            mass=_mass_distribution(_require(data, "mass", what)),
            magnetic=_build(MagArchetype, _require(data, "magnetic", what)),
            detector=_build(DetectorArchetype, _require(data, "detector", what)),
            timestep=float(_require(data, "timestep", what)),
        )

    @classmethod
    def from_yaml_file(cls, path: str | PathLike) -> "SimArchetype":
        """Load a simulation from a YAML file."""
        with open(path, encoding="utf-8") as stream:
            data = yaml.safe_load(stream)
        return cls.from_dict(data)


def _template() -> SimArchetype:
    lasers = [
        LaserArchetype(
            direction=(1.0, 0.0, 0.0),
            frequency=1e10,
            polarization=1.0,
            power=10.0,
            e_radius=0.1,
            intersection=(0.0, 0.0, 1.0),
        ),
        LaserArchetype(
            direction=(-1.0, 0.0, 0.0),
            frequency=1e10,
            polarization=-1.0,
            power=10.0,
            e_radius=0.1,
            intersection=(0.0, 2.0, 1.0),
        ),
    ]
    ovens = [
        OvenArchetype(
            position=(1.0, 0.0, 0.0),
            rate=100.0,
            instant_emission=100,
            direction=(0.0, 0.0, 1.0),
            temperature=300.0,
            radius_aperture=0.01,
            thickness=0.01,
        )
    ]
    magnetic = MagArchetype(
        centre=(1.0, 0.0, 0.0),
        gradient=0.011,
        uniform=(0.0, 0.0, 2.0),
        direction_quadru=(0.0, 0.0, 1.0),
    )
    mass = MassDistribution(
        [MassRatio(mass=87.0, ratio=0.2783), MassRatio(mass=85.0, ratio=0.7217)]
    )
    detector = DetectorArchetype(
        position=(1.0, 0.0, 0.0),
        direction=(1.0, 0.0, 0.0),
        radius=0.01,
        thickness=0.01,
        trigger_time=0.0,
    )
    return SimArchetype(
        lasers=lasers,
        ovens=ovens,
        atominfo=AtomicTransition.rubidium(),
        mass=mass,
        magnetic=magnetic,
        detector=detector,
        timestep=1e-6,
    )


def write_file_template(path: str | PathLike) -> None:
    """Write a sample 2D+ MOT simulation file showing the expected format."""
    text = yaml.safe_dump(_template().to_dict(), sort_keys=False)
    with open(path, "w", encoding="utf-8") as stream:
        stream.write(text)
"""Marking and deflagging of newly created atoms."""

from dataclasses import dataclass

from .world import World


@dataclass(frozen=True)
class NewlyCreated:
    """Marks an entity as added this frame, so modules can attach what it needs."""


def deflag_new_atoms(world: World) -> None:
    """Queue removal of every ``NewlyCreated`` marker; applied at ``maintain``."""
    for entity, _ in world.join(NewlyCreated):
        world.lazy_remove(entity, NewlyCreated)
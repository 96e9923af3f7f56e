"""Removal of entities marked for destruction."""

from dataclasses import dataclass

from .world import World


@dataclass(frozen=True)
class ToBeDestroyed:
    """Marks an entity for deletion at the next ``maintain``."""


def delete_to_be_destroyed_entities(world: World) -> None:
    """Queue deletion of every entity carrying ``ToBeDestroyed``."""
    for entity, _ in world.join(ToBeDestroyed):
        world.lazy_delete(entity)
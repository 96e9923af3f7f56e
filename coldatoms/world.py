"""Entity/component store and the dispatcher that runs simulation systems."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from typing import Any, TypeVar

Entity = int
System = Callable[["World"], None]
T = TypeVar("T")


class World:
    """Holds entities, their components (one per type) and global resources.

    Components are any objects; an entity holds at most one component of each
    type. Resources are singletons keyed by their type. Changes queued with the
    ``lazy_*`` methods take effect on the next call to :meth:`maintain`.
    """

    def __init__(self):
        self._next_entity = 0
        self._alive: set[Entity] = set()
        self._storages: dict[type, dict[Entity, Any]] = {}
        self._resources: dict[type, Any] = {}
        self._pending: list[Callable[[], None]] = []

    # Entities -------------------------------------------------------------

    def create_entity(self, *args) -> Entity:
        """Create a live entity holding the given components and return it."""
        entity = self._next_entity
        self._next_entity += 1
        self._alive.add(entity)
        for component in args:
            self.insert_component(entity, component)
        return entity

    def entities(self) -> list[Entity]:
        """All live entities, in creation order."""
        return sorted(self._alive)

    def is_alive(self, entity: Entity) -> bool:
        return entity in self._alive

    # Components -----------------------------------------------------------

    def insert_component(self, entity: Entity, component: Any) -> Any:
        """Attach a component, replacing one of the same type; return the old one."""
        if entity not in self._alive:
            raise ValueError(f"entity {entity} is not alive")
        storage = self._storages.setdefault(type(component), {})
        previous = storage.get(entity)
        storage[entity] = component
        return previous

    def remove_component(self, entity: Entity, component_type: type[T]) -> T | None:
        """Detach and return the component of the given type, or None."""
        return self._storages.get(component_type, {}).pop(entity, None)

    def get(self, entity: Entity, component_type: type[T]) -> T | None:
        return self._storages.get(component_type, {}).get(entity)

    def has(self, entity: Entity, component_type: type) -> bool:
        return entity in self._storages.get(component_type, {})

    def join(self, *args: type, without: Iterable[type] = ()) -> Iterator[tuple]:
        """Iterate ``(entity, component, ...)`` over entities holding every type in
        ``args`` and none of the types in ``without``, in entity order."""
        if not args:
            raise ValueError("join needs at least one component type")
        storages = [self._storages.get(kind, {}) for kind in args]
        excluded = [self._storages.get(kind, {}) for kind in without]
        return self._join(storages, excluded)

    @staticmethod
    def _join(storages, excluded):
        smallest = min(storages, key=len)
        for entity in sorted(smallest):
            if any(entity in storage for storage in excluded):
                continue
            if all(entity in storage for storage in storages):
                yield (entity, *(storage[entity] for storage in storages))

    # Resources ------------------------------------------------------------

    def insert_resource(self, resource: Any) -> None:
        self._resources[type(resource)] = resource

    def resource(self, resource_type: type[T]) -> T:
        """Return the resource of the given type; KeyError if it is absent."""
        try:
            return self._resources[resource_type]
        except KeyError:
            raise KeyError(f"resource {resource_type.__name__} is not present") from None

    def try_resource(self, resource_type: type[T]) -> T | None:
        return self._resources.get(resource_type)

    # Deferred changes -----------------------------------------------------

    def lazy_insert(self, entity: Entity, component: Any) -> None:
        def apply():
            if entity in self._alive:
                self.insert_component(entity, component)

        self._pending.append(apply)

    def lazy_remove(self, entity: Entity, component_type: type) -> None:
        self._pending.append(lambda: self.remove_component(entity, component_type))

    def lazy_delete(self, entity: Entity) -> None:
        self._pending.append(lambda: self._delete(entity))

    def _delete(self, entity: Entity) -> None:
        self._alive.discard(entity)
        for storage in self._storages.values():
            storage.pop(entity, None)

    def maintain(self) -> None:
        """Apply all queued changes, in the order they were queued."""
        pending, self._pending = self._pending, []
        for change in pending:
            change()


class Dispatcher:
    """Runs systems, each a callable taking the world, in a dependency-respecting order."""

    def __init__(self):
        self._systems: list[tuple[str, System]] = []
        self._names: set[str] = set()

    def add(self, system: System, name: str = "", after: Iterable[str] = ()) -> "Dispatcher":
        """Add a system that runs after the named systems, all of which must exist."""
        if isinstance(after, str):
            after = (after,)
        missing = [dependency for dependency in after if dependency not in self._names]
        if missing:
            raise ValueError(f"unknown dependencies for system {name!r}: {missing}")
        if name:
            if name in self._names:
                raise ValueError(f"a system named {name!r} already exists")
            self._names.add(name)
        self._systems.append((name, system))
        return self

    def __contains__(self, name: str) -> bool:
        return name in self._names

    def __len__(self) -> int:
        return len(self._systems)

    def dispatch(self, world: World) -> None:
        """Run every system once on the world."""
        for _, system in self._systems:
            system(world)
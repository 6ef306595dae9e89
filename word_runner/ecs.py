"""
Entity-Component-System Core
=============================
Integer entity IDs with one component dictionary per component type.

Entity IDs are handed out in increasing order and queries walk them in
that order, so iterating a query visits the oldest entity first.
"""

from typing import Dict, Set, Type, TypeVar, Optional, Iterator, Tuple, Any


# Type variable for component types
C = TypeVar('C')


class World:
    """
    Owns every live entity of a run: scrolling targets, visual
    effects, and anything else with a Position.

    Components are stored in dictionaries keyed by entity ID, with one
    dict per component type.
    """

    def __init__(self):
        self._next_entity_id: int = 0
        self._entities: Dict[int, None] = {}  # insertion-ordered set
        self._components: Dict[Type, Dict[int, Any]] = {}
        self._dead_entities: Set[int] = set()  # Marked for removal

    def create_entity(self) -> int:
        """Create a new entity and return its ID."""
        entity_id = self._next_entity_id
        self._next_entity_id += 1
        self._entities[entity_id] = None
        return entity_id

    def destroy_entity(self, entity_id: int) -> None:
        """Mark an entity for destruction (swept by process_dead_entities)."""
        if entity_id in self._entities:
            self._dead_entities.add(entity_id)

    def process_dead_entities(self) -> None:
        """Remove all entities marked for destruction."""
        for entity_id in self._dead_entities:
            self._entities.pop(entity_id, None)
            for component_store in self._components.values():
                component_store.pop(entity_id, None)
        self._dead_entities.clear()

    def add_component(self, entity_id: int, component: Any) -> None:
        """Add a component to an entity."""
        component_type = type(component)
        if component_type not in self._components:
            self._components[component_type] = {}
        self._components[component_type][entity_id] = component

    def get_component(self, entity_id: int, component_type: Type[C]) -> Optional[C]:
        """Get a component for an entity, or None if not found."""
        if component_type in self._components:
            return self._components[component_type].get(entity_id)
        return None

    def has_component(self, entity_id: int, component_type: Type) -> bool:
        """Check if an entity has a specific component."""
        if component_type in self._components:
            return entity_id in self._components[component_type]
        return False

    def query(self, *component_types: Type) -> Iterator[Tuple[Any, ...]]:
        """
        Query for all live entities that have ALL specified component types.

        Yields (entity_id, component1, component2, ...) in spawn order.
        """
        if not component_types:
            return

        stores = []
        for component_type in component_types:
            store = self._components.get(component_type)
            if not store:
                return
            stores.append(store)

        # Smallest store drives the scan; sort restores spawn order
        driver = min(stores, key=len)
        for entity_id in sorted(driver):
            if entity_id in self._dead_entities:
                continue
            if not all(entity_id in store for store in stores):
                continue
            yield (entity_id,) + tuple(store[entity_id] for store in stores)

    def count(self, *component_types: Type) -> int:
        """Number of live entities carrying all of the given components."""
        return sum(1 for _ in self.query(*component_types))

    def entity_count(self) -> int:
        """Return the number of active entities."""
        return len(self._entities) - len(self._dead_entities)

    def is_alive(self, entity_id: int) -> bool:
        """Check if an entity is alive (exists and not marked for death)."""
        return entity_id in self._entities and entity_id not in self._dead_entities

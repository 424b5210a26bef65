"""
Entity-Component-System Core
=============================
Data-driven ECS using integer entity IDs and component dictionaries.

Queries yield entities in creation order so every pass over the
world is deterministic frame-over-frame.
"""

from typing import Dict, Set, Type, TypeVar, Optional, Iterator, Tuple, Any, List


# Type variable for component types
C = TypeVar('C')


class World:
    """
    The ECS World manages all entities and their components.

    Entities are integer IDs handed out in increasing order. Components
    are stored in dictionaries keyed by entity ID, with one dict per
    component type.
    """

    def __init__(self):
        self._next_entity_id: int = 0
        self._entities: Set[int] = set()
        self._components: Dict[Type, Dict[int, Any]] = {}
        self._dead_entities: Set[int] = set()  # Marked for removal

    def create_entity(self) -> int:
        """Create a new entity and return its ID."""
        entity_id = self._next_entity_id
        self._next_entity_id += 1
        self._entities.add(entity_id)
        return entity_id

    def destroy_entity(self, entity_id: int) -> None:
        """Mark an entity for destruction (processed by process_dead_entities)."""
        if entity_id in self._entities:
            self._dead_entities.add(entity_id)

    def process_dead_entities(self) -> None:
        """Remove all entities marked for destruction."""
        for entity_id in self._dead_entities:
            if entity_id in self._entities:
                self._entities.remove(entity_id)
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

    def query(self, *component_types: Type, newest_first: bool = False) -> Iterator[Tuple[Any, ...]]:
        """
        Query for all entities that have ALL specified component types.

        Yields tuples of (entity_id, component1, component2, ...) in
        creation order, or reverse creation order with newest_first.
        Entities marked dead are skipped.
        """
        if not component_types:
            return

        first_type = component_types[0]
        if first_type not in self._components:
            return

        candidate_entities = set(self._components[first_type].keys())

        for component_type in component_types[1:]:
            if component_type not in self._components:
                return
            candidate_entities &= set(self._components[component_type].keys())

        # Materialize so systems may add or destroy entities while iterating
        ordered: List[int] = sorted(candidate_entities, reverse=newest_first)
        for entity_id in ordered:
            if entity_id in self._dead_entities:
                continue
            store_hit = all(
                entity_id in self._components[ct] for ct in component_types
            )
            if not store_hit:
                continue
            components = tuple(
                self._components[ct][entity_id] for ct in component_types
            )
            yield (entity_id,) + components

    def get_entities_with(self, *component_types: Type) -> Iterator[int]:
        """Get all entity IDs that have all specified components."""
        for result in self.query(*component_types):
            yield result[0]

    def count_with(self, *component_types: Type) -> int:
        """Number of live entities carrying all specified components."""
        return sum(1 for _ in self.query(*component_types))

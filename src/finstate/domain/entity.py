"""Entity domain service."""

from typing import Optional
from finstate.database.base import Database
from finstate.domain import errors
from finstate.domain.entities import Entity


class EntityService:
    """Service for managing business entities."""

    def __init__(self, db: Database):
        """Initialize entity service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_entity(self, name: str, currency: Optional[str] = None) -> int:
        """Create a new entity.

        Args:
            name: Entity name
            currency: Optional ISO 4217 currency code (e.g. "GBP")

        Returns:
            Entity ID

        Raises:
            ValidationError: If the name is empty or the currency is malformed
            ConflictError: If an entity with the same name exists
        """
        name = name.strip()
        if not name:
            raise errors.ValidationError("Entity name cannot be empty")

        if currency is not None:
            currency = currency.strip().upper()
            if len(currency) != 3 or not currency.isalpha():
                raise errors.ValidationError(f"Invalid currency code '{currency}'")

        for entity in self.db.list_entities():
            if entity.name == name:
                raise errors.ConflictError(f"Entity with name '{name}' already exists")

        return self.db.create_entity(name=name, currency=currency)

    def get_entity(self, entity_id: int) -> Optional[Entity]:
        """Get entity by ID."""
        return self.db.get_entity(entity_id)

    def require_entity(self, entity_id: int) -> Entity:
        """Get entity by ID.

        Raises:
            NotFoundError: If the entity does not exist
        """
        entity = self.db.get_entity(entity_id)
        if entity is None:
            raise errors.NotFoundError(errors.entity_not_found(entity_id))
        return entity

    def list_entities(self) -> list[Entity]:
        """List all entities."""
        return self.db.list_entities()

    def resolve_entity(self, entity: str | int) -> int:
        """Resolve an entity name or ID to an entity ID.

        Raises:
            NotFoundError: If no entity matches
        """
        if isinstance(entity, int):
            return self.require_entity(entity).id

        try:
            entity_id = int(entity)
        except (TypeError, ValueError):
            # Not a number, treat as name
            entity_id = None
        if entity_id is not None:
            return self.require_entity(entity_id).id

        for candidate in self.db.list_entities():
            if candidate.name == entity:
                return candidate.id

        raise errors.NotFoundError(f"Entity '{entity}' not found")

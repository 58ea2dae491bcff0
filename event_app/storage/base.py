from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterable


class EntityStorage(ABC):
    @abstractmethod
    def load(self, entity_id: Any) -> Any | None:
        """Return the entity with this id, or None if there is none."""

    @abstractmethod
    def load_multiple(self, ids: Iterable[Any] | None = None) -> list[Any]:
        """Return entities for ids (all entities when ids is None)."""

    @abstractmethod
    def load_by_uuid(self, uuid: str) -> Any | None:
        """Return the entity with this uuid, or None if there is none."""

    @abstractmethod
    def create(self, values: dict[str, Any] | None = None) -> Any:
        """Build a new, unsaved entity from initial field values."""

    @abstractmethod
    def save(self, entity: Any) -> Any:
        """Validate and persist entity; identity fields are assigned on first save."""

    @abstractmethod
    def delete(self, entities: Iterable[Any]) -> None:
        """Delete entities."""

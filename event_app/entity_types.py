"""Entity type and base field declarations.

An entity type is a static description of one record type: its label, ORM
model, ordered base fields and the handlers that serve it. The manager is
the registry the rest of the app consults instead of importing models
directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from typing import TYPE_CHECKING, Any, Iterable

from event_app.services.error_codes import ErrorCode
from event_app.services.exceptions import NotFoundError

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from event_app.storage.base import EntityStorage


FIELD_KINDS = frozenset({"integer", "uuid", "string", "datetime", "text_long"})

# Largest value a signed 64-bit integer id column can hold.
MAX_ENTITY_ID = 2**63 - 1


@dataclass(frozen=True)
class FieldDefinition:
    name: str
    kind: str
    label: str
    required: bool = False
    read_only: bool = False
    default: Any = None
    max_length: int | None = None
    form_weight: int = 0
    view_weight: int = 0
    description: str = ""
    # ORM attributes backing this field; defaults to the field name.
    columns: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.kind not in FIELD_KINDS:
            raise ValueError(f"unknown field kind: {self.kind}")
        if not self.columns:
            object.__setattr__(self, "columns", (self.name,))

    def as_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "kind": self.kind,
            "label": self.label,
            "required": self.required,
            "read_only": self.read_only,
            "default": self.default,
            "max_length": self.max_length,
            "form_weight": self.form_weight,
            "view_weight": self.view_weight,
            "description": self.description,
        }


@dataclass(frozen=True)
class EntityType:
    id: str
    label: str
    model: type
    fields: tuple[FieldDefinition, ...]
    entity_keys: dict[str, str] = field(default_factory=dict)
    handlers: dict[str, str] = field(default_factory=dict)

    @property
    def base_table(self) -> str:
        return self.model.__tablename__

    def get_key(self, key: str) -> str | None:
        return self.entity_keys.get(key)

    def get_field(self, name: str) -> FieldDefinition | None:
        for definition in self.fields:
            if definition.name == name:
                return definition
        return None

    def field_for_column(self, column: str) -> FieldDefinition | None:
        for definition in self.fields:
            if column in definition.columns:
                return definition
        return None

    def required_fields(self) -> list[FieldDefinition]:
        return [f for f in self.fields if f.required]

    def form_display(self) -> list[FieldDefinition]:
        editable = [f for f in self.fields if not f.read_only]
        return sorted(editable, key=lambda f: (f.form_weight, f.name))

    def view_display(self) -> list[FieldDefinition]:
        return sorted(self.fields, key=lambda f: (f.view_weight, f.name))


class EntityTypeManager:
    def __init__(self, entity_types: Iterable[EntityType]) -> None:
        self._definitions: dict[str, EntityType] = {}
        for entity_type in entity_types:
            if entity_type.id in self._definitions:
                raise ValueError(f"duplicate entity type: {entity_type.id}")
            self._definitions[entity_type.id] = entity_type

    def has_definition(self, entity_type_id: str) -> bool:
        return entity_type_id in self._definitions

    def get_definition(self, entity_type_id: str) -> EntityType:
        try:
            return self._definitions[entity_type_id]
        except KeyError:
            raise NotFoundError(
                ErrorCode.ENTITY_TYPE_NOT_FOUND.value,
                f"entity type not found: {entity_type_id}",
            ) from None

    def get_definitions(self) -> dict[str, EntityType]:
        return dict(self._definitions)

    def definition_for_table(self, table_name: str) -> EntityType | None:
        for entity_type in self._definitions.values():
            if entity_type.base_table == table_name:
                return entity_type
        return None

    def get_storage(self, entity_type_id: str, db: Session) -> EntityStorage:
        from event_app.storage.factory import create_storage

        return create_storage(self.get_definition(entity_type_id), db)


@lru_cache(maxsize=1)
def get_entity_type_manager() -> EntityTypeManager:
    from event_app.models.event import EVENT_ENTITY_TYPE

    return EntityTypeManager([EVENT_ENTITY_TYPE])

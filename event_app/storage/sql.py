from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Any, Iterable

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from event_app.entity_types import MAX_ENTITY_ID
from event_app.services.error_codes import ErrorCode
from event_app.services.exceptions import ConflictError, ValidationError
from event_app.storage.base import EntityStorage

if TYPE_CHECKING:
    from event_app.entity_types import EntityType

logger = structlog.get_logger()


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


class SqlEntityStorage(EntityStorage):
    def __init__(self, entity_type: EntityType, db: Session) -> None:
        self.entity_type = entity_type
        self._db = db
        self._model = entity_type.model
        self._id_key = entity_type.get_key("id") or "id"
        self._uuid_key = entity_type.get_key("uuid")

    def load(self, entity_id: Any) -> Any | None:
        if entity_id is None:
            return None
        try:
            entity_id = int(entity_id)
        except (TypeError, ValueError):
            return None
        # Ids outside the column range cannot match a stored row.
        if not 1 <= entity_id <= MAX_ENTITY_ID:
            return None
        return self._db.get(self._model, entity_id)

    def load_multiple(self, ids: Iterable[Any] | None = None) -> list[Any]:
        id_column = getattr(self._model, self._id_key)
        stmt = select(self._model).order_by(id_column)
        if ids is not None:
            stmt = stmt.where(id_column.in_(list(ids)))
        return list(self._db.scalars(stmt))

    def load_by_uuid(self, uuid: str) -> Any | None:
        if not self._uuid_key:
            return None
        uuid_column = getattr(self._model, self._uuid_key)
        return self._db.scalar(select(self._model).where(uuid_column == str(uuid)))

    def create(self, values: dict[str, Any] | None = None) -> Any:
        entity = self._model.from_values(values or {})
        if self._uuid_key and getattr(entity, self._uuid_key, None) is None:
            setattr(entity, self._uuid_key, str(uuid.uuid4()))
        return entity

    def validate(self, entity: Any) -> list[str]:
        violations: list[str] = []
        for definition in self.entity_type.required_fields():
            # The first column carries the field's main value.
            value = getattr(entity, definition.columns[0], None)
            if _is_empty(value):
                violations.append(f"{definition.name}: {definition.label} field is required.")
        for definition in self.entity_type.fields:
            if definition.max_length is None:
                continue
            value = getattr(entity, definition.columns[0], None)
            if isinstance(value, str) and len(value) > definition.max_length:
                violations.append(
                    f"{definition.name}: {definition.label} cannot be longer than "
                    f"{definition.max_length} characters."
                )
        return violations

    def save(self, entity: Any) -> Any:
        violations = self.validate(entity)
        if violations:
            if entity in self._db:
                self._db.rollback()
            logger.info(
                "entity_validation_failed",
                entity_type=self.entity_type.id,
                violations=violations,
            )
            raise ValidationError(
                ErrorCode.VALIDATION_ERROR.value,
                f"{self.entity_type.label} could not be saved",
                violations=violations,
            )

        is_new = getattr(entity, self._id_key, None) is None
        if self._uuid_key and getattr(entity, self._uuid_key, None) is None:
            setattr(entity, self._uuid_key, str(uuid.uuid4()))

        self._db.add(entity)
        try:
            self._db.commit()
        except IntegrityError as exc:
            self._db.rollback()
            raise ConflictError(
                ErrorCode.STORAGE_CONFLICT.value,
                f"{self.entity_type.label} conflicts with a stored record",
            ) from exc
        except SQLAlchemyError:
            self._db.rollback()
            raise

        self._db.refresh(entity)
        logger.info(
            "entity_created" if is_new else "entity_saved",
            entity_type=self.entity_type.id,
            entity_id=getattr(entity, self._id_key),
        )
        return entity

    def delete(self, entities: Iterable[Any]) -> None:
        deleted = []
        for entity in entities:
            self._db.delete(entity)
            deleted.append(getattr(entity, self._id_key))
        if not deleted:
            return
        try:
            self._db.commit()
        except SQLAlchemyError:
            self._db.rollback()
            raise
        logger.info("entity_deleted", entity_type=self.entity_type.id, entity_ids=deleted)

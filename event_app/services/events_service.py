from __future__ import annotations

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from event_app.entity_types import get_entity_type_manager
from event_app.models import Event
from event_app.services.error_codes import ErrorCode
from event_app.services.exceptions import NotFoundError
from event_app.storage.base import EntityStorage

ENTITY_TYPE_ID = "event"


def _storage(db: Session) -> EntityStorage:
    return get_entity_type_manager().get_storage(ENTITY_TYPE_ID, db)


def create_event(db: Session, values: dict[str, Any]) -> Event:
    storage = _storage(db)
    return storage.save(storage.create(values))


def load_event(db: Session, event_id: Any) -> Event | None:
    return _storage(db).load(event_id)


def get_event(db: Session, event_id: Any) -> Event:
    event = load_event(db, event_id)
    if event is None:
        raise NotFoundError(ErrorCode.EVENT_NOT_FOUND.value, "event not found")
    return event


def list_events(db: Session, page: int = 1, page_size: int = 20) -> tuple[list[Event], int]:
    total = int(db.scalar(select(func.count()).select_from(Event)) or 0)
    stmt = (
        select(Event)
        .order_by(Event.date.is_(None), Event.date, Event.id)
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    return list(db.scalars(stmt)), total


def update_event(db: Session, event_id: Any, patch: dict[str, Any]) -> Event:
    event = get_event(db, event_id)
    event.apply_values(patch)
    return _storage(db).save(event)


def delete_event(db: Session, event_id: Any) -> None:
    event = get_event(db, event_id)
    _storage(db).delete([event])

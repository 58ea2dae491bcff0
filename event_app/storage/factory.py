from __future__ import annotations

from sqlalchemy.orm import Session

from event_app.entity_types import EntityType
from event_app.storage.base import EntityStorage
from event_app.storage.sql import SqlEntityStorage


def create_storage(entity_type: EntityType, db: Session) -> EntityStorage:
    return SqlEntityStorage(entity_type, db)

from event_app.models.base import Base
from event_app.models.event import EVENT_ENTITY_TYPE, EVENT_FIELDS, Event

__all__ = ["Base", "Event", "EVENT_FIELDS", "EVENT_ENTITY_TYPE"]

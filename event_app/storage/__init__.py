from event_app.storage.base import EntityStorage
from event_app.storage.factory import create_storage
from event_app.storage.sql import SqlEntityStorage

__all__ = ["EntityStorage", "SqlEntityStorage", "create_storage"]

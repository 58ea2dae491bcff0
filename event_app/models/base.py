from __future__ import annotations

from event_app.db import Base


class EntityMixin:
    """Identity accessors shared by entity models."""

    def is_new(self) -> bool:
        return getattr(self, "id", None) is None

    def label(self) -> str:
        return ""


__all__ = ["Base", "EntityMixin"]

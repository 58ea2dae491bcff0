from __future__ import annotations

from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from event_app.models import Event


def _assume_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return value
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SchemaBase(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra="ignore")


class DescriptionIn(SchemaBase):
    value: str = ""
    format: str | None = None


class DescriptionOut(SchemaBase):
    value: str | None = None
    format: str | None = None
    processed: str = ""


class EventCreate(SchemaBase):
    # Required fields are checked on save so that every violation is reported.
    title: str = ""
    date: datetime | None = None
    description: DescriptionIn | None = None

    @field_validator("date", mode="after")
    @classmethod
    def _validate_date(cls, value: datetime | None) -> datetime | None:
        return _assume_utc(value)


class EventUpdate(SchemaBase):
    title: str | None = None
    date: datetime | None = None
    description: DescriptionIn | None = None

    @field_validator("date", mode="after")
    @classmethod
    def _validate_date(cls, value: datetime | None) -> datetime | None:
        return _assume_utc(value)


class EventOut(SchemaBase):
    id: int
    uuid: UUID
    title: str
    date: datetime
    description: DescriptionOut

    @classmethod
    def from_event(cls, event: Event) -> "EventOut":
        return cls(
            id=event.id,
            uuid=event.uuid,
            title=event.get_title(),
            date=event.get_date(),
            description=DescriptionOut(
                value=event.description__value,
                format=event.description__format,
                processed=event.get_description(),
            ),
        )


class EventListOut(SchemaBase):
    items: list[EventOut]
    page: int = Field(ge=1)
    page_size: int = Field(ge=1)
    total: int = Field(ge=0)


class FieldOut(SchemaBase):
    name: str
    kind: str
    label: str
    required: bool
    read_only: bool
    default: Any = None
    max_length: int | None = None
    form_weight: int
    view_weight: int
    description: str = ""


class FieldListOut(SchemaBase):
    entity_type: str
    label: str
    display: str
    fields: list[FieldOut]


class TextFormatOut(SchemaBase):
    id: str
    label: str
    escape: bool

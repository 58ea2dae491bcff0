from __future__ import annotations

from datetime import date as date_type
from datetime import datetime, time, timezone
from typing import Any

from sqlalchemy import DateTime, Integer, String, Text, UniqueConstraint, inspect
from sqlalchemy.orm import Mapped, mapped_column, validates

from event_app.core.config import settings
from event_app.entity_types import EntityType, FieldDefinition
from event_app.models.base import Base, EntityMixin
from event_app.services.error_codes import ErrorCode
from event_app.services.exceptions import ValidationError
from event_app.text_formats import check_markup, get_format

DATE_STORAGE_FORMAT = "%Y-%m-%d"
READ_ONLY_KEYS = ("id", "uuid")
_UNSET = object()


def to_utc(value: datetime | date_type | str) -> datetime:
    """Normalize a datetime, date or ISO-8601 string to an aware UTC datetime."""
    if isinstance(value, str):
        value = datetime.fromisoformat(value.strip())
    if not isinstance(value, datetime):
        value = datetime.combine(value, time.min)
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Event(Base, EntityMixin):
    __tablename__ = "event"
    __table_args__ = (UniqueConstraint("uuid", name="event_field__uuid__value"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    uuid: Mapped[str] = mapped_column(String(36), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    description__value: Mapped[str | None] = mapped_column(Text, nullable=True)
    description__format: Mapped[str | None] = mapped_column(String(64), nullable=True)

    @validates("id", "uuid")
    def _validate_identity(self, key: str, value: Any) -> Any:
        state = inspect(self)
        if key == "id":
            # The database assigns ids; flushes populate them without this hook.
            stored_id = state.identity[0] if state.identity else None
            if value is not None and value != stored_id:
                raise ValueError("id is assigned by storage and cannot be set")
            return value

        # Expired or rolled back rows no longer hold their uuid in __dict__;
        # a stored row then refuses every assignment.
        current = self.__dict__.get("uuid", _UNSET)
        assigned = state.identity is not None or current not in (_UNSET, None)
        if assigned and value != current:
            raise ValueError("uuid cannot be changed once assigned")
        return value

    @classmethod
    def from_values(cls, values: dict[str, Any]) -> "Event":
        """Build an unsaved event from field values.

        ``description`` may be a string or a ``{"value", "format"}`` mapping.
        """
        read_only = [key for key in READ_ONLY_KEYS if values.get(key) is not None]
        if read_only:
            raise ValidationError(
                ErrorCode.VALIDATION_ERROR.value,
                "identity fields are assigned by storage",
                violations=[f"{key}: field is read-only." for key in read_only],
            )

        event = cls(title="")
        event.apply_values(values)
        return event

    def apply_values(self, values: dict[str, Any]) -> "Event":
        if "title" in values:
            self.set_title(values["title"] or "")
        if "date" in values:
            if values["date"] is None:
                self.date = None
            else:
                try:
                    self.set_date(values["date"])
                except (TypeError, ValueError) as exc:
                    raise ValidationError(
                        ErrorCode.VALIDATION_ERROR.value,
                        "invalid date",
                        violations=[f"date: {exc}"],
                    ) from exc
        if "description" in values:
            description = values["description"]
            if description is None:
                self.description__value = None
                self.description__format = None
            elif isinstance(description, dict):
                self.set_description(description.get("value") or "", description.get("format"))
            else:
                self.set_description(str(description))
        return self

    def label(self) -> str:
        return self.get_title()

    def get_title(self) -> str:
        return self.title or ""

    def set_title(self, title: str) -> "Event":
        self.title = title
        return self

    def get_date(self) -> datetime:
        # Unset dates read as "now"; see DESIGN.md.
        if self.date is None:
            return datetime.now(timezone.utc)
        return to_utc(self.date)

    def set_date(self, value: datetime | date_type | str) -> "Event":
        self.date = to_utc(value)
        return self

    def get_description(self) -> str:
        return check_markup(self.description__value, self.description__format)

    def set_description(self, text: str, format: str | None = None) -> "Event":
        fmt = get_format(format or settings.default_text_format)
        self.description__value = text
        self.description__format = fmt.id
        return self

    def __repr__(self) -> str:
        return f"<Event id={self.id!r} uuid={self.uuid!r} title={self.title!r}>"


EVENT_FIELDS: tuple[FieldDefinition, ...] = (
    FieldDefinition(
        name="id",
        kind="integer",
        label="ID",
        read_only=True,
        form_weight=-10,
        view_weight=-10,
        description="The ID of the event.",
    ),
    FieldDefinition(
        name="uuid",
        kind="uuid",
        label="UUID",
        read_only=True,
        form_weight=-9,
        view_weight=-9,
        description="The UUID of the event.",
    ),
    FieldDefinition(
        name="title",
        kind="string",
        label="Title",
        required=True,
        default="",
        max_length=255,
        form_weight=0,
        view_weight=0,
    ),
    FieldDefinition(
        name="date",
        kind="datetime",
        label="Date",
        required=True,
        form_weight=10,
        view_weight=10,
    ),
    FieldDefinition(
        name="description",
        kind="text_long",
        label="Description",
        form_weight=20,
        view_weight=20,
        columns=("description__value", "description__format"),
    ),
)

EVENT_ENTITY_TYPE = EntityType(
    id="event",
    label="Event",
    model=Event,
    fields=EVENT_FIELDS,
    entity_keys={"id": "id", "uuid": "uuid", "label": "title"},
    handlers={
        "form.add": "event-add",
        "form.edit": "event-edit",
        "form.delete": "event-delete",
        "view_builder": "event-view",
        "list_builder": "event-list",
    },
)

from event_app.api.v1.schemas.events import (
    DescriptionIn,
    DescriptionOut,
    EventCreate,
    EventListOut,
    EventOut,
    EventUpdate,
    FieldListOut,
    FieldOut,
    TextFormatOut,
)
from event_app.api.v1.schemas.render import MessageOut, RenderElement, RenderOut

__all__ = [
    "DescriptionIn",
    "DescriptionOut",
    "EventCreate",
    "EventUpdate",
    "EventOut",
    "EventListOut",
    "FieldOut",
    "FieldListOut",
    "TextFormatOut",
    "MessageOut",
    "RenderElement",
    "RenderOut",
]

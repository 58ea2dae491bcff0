from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Response
from sqlalchemy.orm import Session

from event_app.api.errors import http_error_from_service
from event_app.api.v1.schemas import EventCreate, EventListOut, EventOut, EventUpdate
from event_app.db import get_db
from event_app.entity_types import MAX_ENTITY_ID
from event_app.services import events_service
from event_app.services.exceptions import ServiceError

router = APIRouter(prefix="/events", tags=["events"])

DBSession = Annotated[Session, Depends(get_db)]
EventId = Annotated[int, Path(ge=1, le=MAX_ENTITY_ID)]


@router.post("", response_model=EventOut, name="event-add")
def create_event(payload: EventCreate, db: DBSession):
    try:
        event = events_service.create_event(db, payload.model_dump(exclude_unset=True))
    except ServiceError as err:
        raise http_error_from_service(err) from None
    return EventOut.from_event(event)


@router.get("", response_model=EventListOut, name="event-list")
def list_events(
    db: DBSession,
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
):
    items, total = events_service.list_events(db, page=page, page_size=page_size)
    return EventListOut(
        items=[EventOut.from_event(event) for event in items],
        page=page,
        page_size=page_size,
        total=total,
    )


@router.get("/{event_id}", response_model=EventOut, name="event-view")
def get_event(event_id: EventId, db: DBSession):
    try:
        event = events_service.get_event(db, event_id)
    except ServiceError as err:
        raise http_error_from_service(err) from None
    return EventOut.from_event(event)


@router.patch("/{event_id}", response_model=EventOut, name="event-edit")
def update_event(event_id: EventId, patch: EventUpdate, db: DBSession):
    try:
        event = events_service.update_event(db, event_id, patch.model_dump(exclude_unset=True))
    except ServiceError as err:
        raise http_error_from_service(err) from None
    return EventOut.from_event(event)


@router.delete("/{event_id}", status_code=204, name="event-delete")
def delete_event(event_id: EventId, db: DBSession):
    try:
        events_service.delete_event(db, event_id)
    except ServiceError as err:
        raise http_error_from_service(err) from None
    return Response(status_code=204)

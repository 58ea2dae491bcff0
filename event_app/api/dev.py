"""Administrative utility routes.

``/test`` is a scratchpad: code dropped into ``evaluate_test_code`` runs on
every request to it. ``/update-entity-field-definitions`` lists and applies
pending entity/field definition updates.
"""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Header, HTTPException, Query
from sqlalchemy.orm import Session

from event_app.api.errors import http_error_from_service
from event_app.api.v1.schemas import RenderOut
from event_app.core.config import settings
from event_app.db import engine, get_db
from event_app.entity_types import EntityTypeManager, get_entity_type_manager
from event_app.models.event import DATE_STORAGE_FORMAT
from event_app.services import events_service
from event_app.services.entity_updates import EntityDefinitionUpdateManager
from event_app.services.exceptions import SchemaApplyError

logger = structlog.get_logger()


def require_dev_api_key(x_dev_api_key: Annotated[str | None, Header()] = None) -> None:
    if settings.dev_api_key and x_dev_api_key != settings.dev_api_key:
        raise HTTPException(status_code=403, detail="invalid dev api key")


def get_update_manager() -> EntityDefinitionUpdateManager:
    return EntityDefinitionUpdateManager(engine, get_entity_type_manager())


router = APIRouter(tags=["dev"], dependencies=[Depends(require_dev_api_key)])

DBSession = Annotated[Session, Depends(get_db)]
UpdateManager = Annotated[EntityDefinitionUpdateManager, Depends(get_update_manager)]
EntityTypes = Annotated[EntityTypeManager, Depends(get_entity_type_manager)]


@router.get("/test", response_model=RenderOut)
def evaluate_test_code(db: DBSession, event_id: int | None = Query(default=None)):
    build = RenderOut()

    # This loads an event by its ID and shows what the Event methods return.
    if event_id is not None:
        event = events_service.load_event(db, event_id)
        if event is None:
            build.message(f"No event with ID {event_id} exists.", type="warning")
        else:
            build.message(f"The title of the event with ID {event_id} is {event.get_title()}.")
            date = event.get_date().strftime(DATE_STORAGE_FORMAT)
            build.message(f"The date of the event with ID {event_id} is {date}.")
            build.message(f"The description of the event with ID {event_id} is:")
            build.message(event.get_description())

    return build.markup(
        f"Any code placed in {__name__}.evaluate_test_code() is executed on this page."
    )


@router.get("/update-entity-field-definitions", response_model=RenderOut)
def update_entity_field_definitions(update_manager: UpdateManager, entity_types: EntityTypes):
    build = RenderOut()

    change_summary = update_manager.get_change_summary()
    if not change_summary:
        return build.markup("No outstanding entity/field definition updates.")

    for entity_type_id, changes in change_summary.items():
        if entity_types.has_definition(entity_type_id):
            title = entity_types.get_definition(entity_type_id).label
        else:
            title = entity_type_id
        build.item_list(title, changes)

    try:
        update_manager.apply_updates()
    except SchemaApplyError as err:
        raise http_error_from_service(err) from err

    logger.info("entity_definition_updates_reported", entity_types=list(change_summary))
    return build.message(
        "The entity/field definition updates listed below have been applied successfully."
    )

from typing import Literal

from fastapi import APIRouter, Query

from event_app.api.errors import http_error_from_service
from event_app.api.v1.schemas import FieldListOut, FieldOut, TextFormatOut
from event_app.entity_types import get_entity_type_manager
from event_app.services.exceptions import ServiceError
from event_app.text_formats import available_formats

router = APIRouter(tags=["entity-types"])


@router.get("/entity-types/{entity_type_id}/fields", response_model=FieldListOut)
def list_fields(
    entity_type_id: str,
    display: Literal["form", "view"] = Query(default="form"),
):
    try:
        entity_type = get_entity_type_manager().get_definition(entity_type_id)
    except ServiceError as err:
        raise http_error_from_service(err) from None

    fields = entity_type.form_display() if display == "form" else entity_type.view_display()
    return FieldListOut(
        entity_type=entity_type.id,
        label=entity_type.label,
        display=display,
        fields=[FieldOut(**definition.as_dict()) for definition in fields],
    )


@router.get("/text-formats", response_model=list[TextFormatOut])
def list_text_formats():
    return [TextFormatOut(id=fmt.id, label=fmt.label, escape=fmt.escape) for fmt in available_formats()]

from fastapi import APIRouter

from event_app.api.v1.entity_types import router as entity_types_router
from event_app.api.v1.events import router as events_router

router = APIRouter()
router.include_router(events_router)
router.include_router(entity_types_router)

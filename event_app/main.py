from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_fastapi_instrumentator import Instrumentator

from event_app.api.dev import router as dev_router
from event_app.api.v1.router import router as v1_router
from event_app.core.config import settings
from event_app.core.logging import configure_logging
from event_app.db import engine
from event_app.middleware.request_id import RequestIdMiddleware
from event_app.models import Base

configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.auto_create_schema:
        Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(title="Event API", lifespan=lifespan)

app.add_middleware(RequestIdMiddleware)

if settings.metrics_enabled:
    Instrumentator().instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)


@app.get("/")
def root():
    return {"name": "Event API", "status": "ok"}


@app.get("/health")
def health():
    return {"status": "ok"}


app.include_router(v1_router, prefix="/v1")

if settings.dev_routes_enabled:
    app.include_router(dev_router)

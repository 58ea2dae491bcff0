from fastapi import HTTPException

from event_app.services.exceptions import (
    ConflictError,
    NotFoundError,
    SchemaApplyError,
    ServiceError,
    ValidationError,
)


def http_error_from_service(err: ServiceError) -> HTTPException:
    if isinstance(err, NotFoundError):
        status = 404
    elif isinstance(err, ConflictError):
        status = 409
    elif isinstance(err, ValidationError):
        status = 422
    elif isinstance(err, SchemaApplyError):
        status = 500
    else:
        status = 500

    detail = {"code": err.code, "message": err.message}
    if isinstance(err, ValidationError) and err.violations:
        detail["violations"] = err.violations

    return HTTPException(status_code=status, detail=detail)

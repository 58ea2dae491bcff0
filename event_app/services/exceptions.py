from __future__ import annotations


class ServiceError(Exception):
    def __init__(self, code: str, message: str | None = None) -> None:
        self.code = code
        self.message = message or code
        super().__init__(self.message)


class NotFoundError(ServiceError):
    pass


class ConflictError(ServiceError):
    pass


class ValidationError(ServiceError):
    def __init__(
        self,
        code: str,
        message: str | None = None,
        violations: list[str] | None = None,
    ) -> None:
        super().__init__(code, message)
        self.violations = list(violations or [])


class SchemaApplyError(ServiceError):
    pass

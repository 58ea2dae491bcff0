from enum import Enum


class ErrorCode(str, Enum):
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    ENTITY_TYPE_NOT_FOUND = "ENTITY_TYPE_NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNKNOWN_TEXT_FORMAT = "UNKNOWN_TEXT_FORMAT"
    SCHEMA_APPLY_FAILED = "SCHEMA_APPLY_FAILED"
    STORAGE_CONFLICT = "STORAGE_CONFLICT"

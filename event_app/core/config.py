import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _bool(val: str | None, default: bool = False) -> bool:
    if val is None:
        return default
    return val.strip().lower() in {"1", "true", "yes", "y", "on"}


@dataclass(frozen=True)
class Settings:
    env: str = os.getenv("ENV", "local")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # DB
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./events.db")
    auto_create_schema: bool = _bool(os.getenv("AUTO_CREATE_SCHEMA"), default=False)

    # Admin utility routes (/test, /update-entity-field-definitions)
    dev_routes_enabled: bool = _bool(
        os.getenv("DEV_ROUTES_ENABLED"),
        default=(os.getenv("ENV", "local") == "local"),
    )
    dev_api_key: str | None = os.getenv("DEV_API_KEY") or None

    # Rich text
    default_text_format: str = os.getenv("DEFAULT_TEXT_FORMAT", "basic_html")

    metrics_enabled: bool = _bool(os.getenv("METRICS_ENABLED"), default=True)


settings = Settings()

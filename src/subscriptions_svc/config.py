import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

MAX_COST_HORIZON_YEARS = 1000


def _get_int(name: str, default: int, minimum: Optional[int] = None, maximum: Optional[int] = None) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if (minimum is not None and value < minimum) or (maximum is not None and value > maximum):
        raise ValueError(f"{name} must be between {minimum} and {maximum}, got {value}")
    return value


def _get_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """
    Service settings read from environment variables (a local .env file is
    loaded first if present).
    """

    def __init__(self) -> None:
        self.host = os.getenv("HOST", "0.0.0.0")
        self.port = _get_int("PORT", 8080, minimum=1, maximum=65535)
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        self.cost_horizon_years = _get_int("COST_HORIZON_YEARS", 10, minimum=0, maximum=MAX_COST_HORIZON_YEARS)
        self.create_schema = _get_bool("CREATE_SCHEMA", True)
        self.database_url = os.getenv("DATABASE_URL") or self._database_url_from_parts()

    @staticmethod
    def _database_url_from_parts() -> str:
        host = os.getenv("DB_HOST")
        if not host:
            return "sqlite:///./subscriptions.db"
        return "postgresql+psycopg://{user}:{password}@{host}:{port}/{name}?sslmode={sslmode}".format(
            user=os.getenv("DB_USER", "postgres"),
            password=os.getenv("DB_PASSWORD", ""),
            host=host,
            port=_get_int("DB_PORT", 5432),
            name=os.getenv("DB_NAME", "subscriptions"),
            sslmode=os.getenv("DB_SSLMODE", "disable"),
        )


settings = Settings()

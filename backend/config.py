import os
from pydantic_settings import BaseSettings


def _parse_cors_origins() -> list[str] | None:
    """Parse CORS_ORIGINS env var as comma-separated string or JSON list."""
    raw = os.environ.get("CORS_ORIGINS")
    if not raw:
        return None
    if raw.startswith("["):
        import json
        return json.loads(raw)
    return [o.strip() for o in raw.split(",") if o.strip()]


class Settings(BaseSettings):
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]
    debug: bool = False

    # Persistence
    storage_backend: str = "memory"  # "memory" | "json"
    data_dir: str = "data"  # root of the JSON document store

    # Skill dictionary
    default_dictionary_version: str = "2024.1"  # version of a freshly initialised store
    seed_dictionary: bool = True  # load the starter skills into an empty store

    # Rate limiting (slowapi limit string, applied per client address)
    rate_limit: str = "120/minute"
    rate_limit_enabled: bool = True

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


_cors_override = _parse_cors_origins()
settings = Settings(**{"cors_origins": _cors_override} if _cors_override else {})

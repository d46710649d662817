import os
from typing import List


def _env_flag(name: str, default: str) -> bool:
    raw = os.environ.get(name, default).strip().lower()
    if raw in {"true", "t", "yes", "y", "1", "on"}:
        return True
    if raw in {"false", "f", "no", "n", "0", "off"}:
        return False
    raise ValueError(f"{name} must be a boolean value: {raw}")


SHAREDJOURNAL_DEBUG = _env_flag("SHAREDJOURNAL_DEBUG", "false")

# Database
SHAREDJOURNAL_DB_URI = os.environ.get("SHAREDJOURNAL_DB_URI")
if SHAREDJOURNAL_DB_URI is None:
    raise ValueError("SHAREDJOURNAL_DB_URI environment variable not set")

# Heroku-style URIs are not accepted by SQLAlchemy
if SHAREDJOURNAL_DB_URI.startswith("postgres://"):
    SHAREDJOURNAL_DB_URI = SHAREDJOURNAL_DB_URI.replace(
        "postgres://", "postgresql://", 1
    )

SHAREDJOURNAL_DB_POOL_RECYCLE_SECONDS_RAW = os.environ.get(
    "SHAREDJOURNAL_DB_POOL_RECYCLE_SECONDS"
)
SHAREDJOURNAL_DB_POOL_RECYCLE_SECONDS = 1800
try:
    if SHAREDJOURNAL_DB_POOL_RECYCLE_SECONDS_RAW is not None:
        SHAREDJOURNAL_DB_POOL_RECYCLE_SECONDS = int(
            SHAREDJOURNAL_DB_POOL_RECYCLE_SECONDS_RAW
        )
except ValueError:
    raise ValueError(
        f"SHAREDJOURNAL_DB_POOL_RECYCLE_SECONDS must be an integer: {SHAREDJOURNAL_DB_POOL_RECYCLE_SECONDS_RAW}"
    )

SHAREDJOURNAL_DB_STATEMENT_TIMEOUT_MILLIS_RAW = os.environ.get(
    "SHAREDJOURNAL_DB_STATEMENT_TIMEOUT_MILLIS"
)
SHAREDJOURNAL_DB_STATEMENT_TIMEOUT_MILLIS = 30000
try:
    if SHAREDJOURNAL_DB_STATEMENT_TIMEOUT_MILLIS_RAW is not None:
        SHAREDJOURNAL_DB_STATEMENT_TIMEOUT_MILLIS = int(
            SHAREDJOURNAL_DB_STATEMENT_TIMEOUT_MILLIS_RAW
        )
except ValueError:
    raise ValueError(
        f"SHAREDJOURNAL_DB_STATEMENT_TIMEOUT_MILLIS must be an integer: {SHAREDJOURNAL_DB_STATEMENT_TIMEOUT_MILLIS_RAW}"
    )

SHAREDJOURNAL_DB_POOL_SIZE = 2
SHAREDJOURNAL_DB_POOL_SIZE_RAW = os.environ.get("SHAREDJOURNAL_DB_POOL_SIZE")
SHAREDJOURNAL_DB_MAX_OVERFLOW = 2
SHAREDJOURNAL_DB_MAX_OVERFLOW_RAW = os.environ.get("SHAREDJOURNAL_DB_MAX_OVERFLOW")
try:
    if SHAREDJOURNAL_DB_POOL_SIZE_RAW is not None:
        SHAREDJOURNAL_DB_POOL_SIZE = int(SHAREDJOURNAL_DB_POOL_SIZE_RAW)
except ValueError:
    raise ValueError(
        f"Could not parse SHAREDJOURNAL_DB_POOL_SIZE as int: {SHAREDJOURNAL_DB_POOL_SIZE_RAW}"
    )
try:
    if SHAREDJOURNAL_DB_MAX_OVERFLOW_RAW is not None:
        SHAREDJOURNAL_DB_MAX_OVERFLOW = int(SHAREDJOURNAL_DB_MAX_OVERFLOW_RAW)
except ValueError:
    raise ValueError(
        f"Could not parse SHAREDJOURNAL_DB_MAX_OVERFLOW as int: {SHAREDJOURNAL_DB_MAX_OVERFLOW_RAW}"
    )

# Share keys
SHARE_KEY_LENGTH = 8
# Strict keys are uppercase alphanumeric, otherwise only the length is checked
SHAREDJOURNAL_STRICT_SHARE_KEYS = _env_flag("SHAREDJOURNAL_STRICT_SHARE_KEYS", "true")

# CORS
_origins_raw = os.environ.get("SHAREDJOURNAL_CORS_ALLOWED_ORIGINS", "*")
CORS_ALLOWED_ORIGINS: List[str] = [
    origin.strip() for origin in _origins_raw.split(",") if origin.strip()
]

# OpenAPI
DOCS_TARGET_PATH = "docs"
SHAREDJOURNAL_OPENAPI = _env_flag("SHAREDJOURNAL_OPENAPI", "false")

SERVICE_NAME = "How's You Journal Backend"

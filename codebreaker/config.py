"""
Single place to:
- Load env vars (and a local .env if present)
- Build the immutable game rules shared by every session
- Expose the adapter settings (auth, CORS, static hosting, secret source)

Values are read once at import time. Bad values fail fast with RuntimeError.
"""

import os
from dataclasses import dataclass
from typing import List, Tuple

from dotenv import load_dotenv

from .types import Symbol

# dev convenience; in prod the platform injects env vars
load_dotenv()


@dataclass(frozen=True)
class GameRules:
    symbols: Tuple[Symbol, ...]
    code_length: int
    max_attempts: int


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}.")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be a number, got {raw!r}.")


def build_rules(symbols: str, code_length: int, max_attempts: int) -> GameRules:
    """Validate raw settings and freeze them into GameRules."""
    if symbols == "":
        raise RuntimeError("SYMBOLS must contain at least one character.")
    if len(set(symbols)) != len(symbols):
        raise RuntimeError(f"SYMBOLS must be distinct, got {symbols!r}.")
    if code_length <= 0:
        raise RuntimeError("CODE_LENGTH must be a positive integer.")
    if max_attempts <= 0:
        raise RuntimeError("MAX_ATTEMPTS must be a positive integer.")
    return GameRules(symbols=tuple(symbols), code_length=code_length, max_attempts=max_attempts)


def _split_origins(raw: str) -> List[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip() != ""]


APP_ENV = os.getenv("APP_ENV", "local")
HOST = os.getenv("HOST", "0.0.0.0")
PORT = _env_int("PORT", 8000)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

GAME_RULES = build_rules(
    os.getenv("SYMBOLS", "123456"),
    _env_int("CODE_LENGTH", 4),
    _env_int("MAX_ATTEMPTS", 10),
)

# Ownership: requests without the header share one anonymous owner unless auth is required
REQUIRE_AUTH = _env_bool("REQUIRE_AUTH", False)
ANONYMOUS_OWNER = os.getenv("ANONYMOUS_OWNER", "anonymous")
OWNER_HEADER = os.getenv("OWNER_HEADER", "X-Consumer-ID")

SECRET_SOURCE = os.getenv("SECRET_SOURCE", "local")
RANDOM_ORG_TIMEOUT = _env_float("RANDOM_ORG_TIMEOUT", 3.0)

SERVE_STATIC = _env_bool("SERVE_STATIC", False)
FRONTEND_DIST = os.getenv("FRONTEND_DIST", "frontend/dist")
CORS_ORIGINS = _split_origins(os.getenv("CORS_ORIGINS", "*"))

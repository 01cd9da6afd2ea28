"""
API settings.

Values come from the environment, optionally loaded from a .env file in the
edition-auction directory.

Environment variables:
- AUCTION_STORE_BACKEND: "memory" (default) or "supabase"
- AUCTION_ADMINS: comma-separated accounts that administer every edition
- AUCTION_LOG_LEVEL: logging level name (default: INFO)
- SUPABASE_URL / SUPABASE_KEY: required only for the supabase backend
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

from dotenv import load_dotenv

env_path = Path(__file__).parent.parent / ".env"

_BACKENDS = ("memory", "supabase")


@dataclass(frozen=True, slots=True)
class Settings:
    store_backend: str = "memory"
    admins: Tuple[str, ...] = ()
    log_level: str = "INFO"


def _split_accounts(raw: str | None) -> Tuple[str, ...]:
    if not raw:
        return ()
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def load_settings() -> Settings:
    """Read settings from the environment (after loading .env)."""

    load_dotenv(dotenv_path=env_path)

    backend = os.getenv("AUCTION_STORE_BACKEND", "memory").strip().lower()
    if backend not in _BACKENDS:
        raise RuntimeError(
            f"Invalid AUCTION_STORE_BACKEND: {backend!r}. "
            f"Set it to one of: {', '.join(_BACKENDS)}."
        )

    return Settings(
        store_backend=backend,
        admins=_split_accounts(os.getenv("AUCTION_ADMINS")),
        log_level=os.getenv("AUCTION_LOG_LEVEL", "INFO").strip().upper() or "INFO",
    )


__all__ = ["Settings", "load_settings"]

"""
Supabase client factory for the durable auction store.

Only used when AUCTION_STORE_BACKEND=supabase. Credentials come from the
environment (optionally a .env file in the edition-auction directory):
- SUPABASE_URL: Your Supabase project URL
- SUPABASE_KEY: Your Supabase API key (use a server-side key only on the backend)
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# The dependency is `supabase` (supabase-py). If your editor can't resolve it,
# install it in your environment: `pip install supabase`.
from supabase import Client, create_client  # type: ignore[import-not-found]

env_path = Path(__file__).parent.parent / ".env"


def _require_env(name: str, hint: str) -> str:
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Missing environment variable: {name}. {hint}")
    return value


def create_supabase_client() -> Client:
    """Build a Supabase client from SUPABASE_URL and SUPABASE_KEY."""

    load_dotenv(dotenv_path=env_path)
    url = _require_env("SUPABASE_URL", "Set SUPABASE_URL to your Supabase project URL.")
    key = _require_env("SUPABASE_KEY", "Set SUPABASE_KEY to your Supabase API key.")
    return create_client(url, key)


__all__ = ["create_supabase_client"]

"""
FastAPI dependencies.

One AuctionEngine is built per process. Tests replace it through
`app.dependency_overrides[get_engine]`.
"""

from __future__ import annotations

from functools import lru_cache

from api.settings import Settings, load_settings
from services.auction_engine import AuctionEngine, build_engine


def build_engine_from_settings(settings: Settings) -> AuctionEngine:
    store = None
    lifecycle = None
    if settings.store_backend == "supabase":
        from repositories.auction_repository import SupabaseAuctionRepository
        from repositories.client import create_supabase_client
        from repositories.lifecycle_repository import SupabaseSaleLifecycle

        client = create_supabase_client()
        store = SupabaseAuctionRepository(client)
        lifecycle = SupabaseSaleLifecycle(client)

    return build_engine(store=store, lifecycle=lifecycle, admins=settings.admins)


@lru_cache(maxsize=1)
def get_engine() -> AuctionEngine:
    return build_engine_from_settings(load_settings())


__all__ = ["get_engine", "build_engine_from_settings"]

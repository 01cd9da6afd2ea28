"""
Sale lifecycle repository (persistence).

Durable counterpart of services.collaborators.InMemorySaleLifecycle, sharing a
Supabase client with SupabaseAuctionRepository so that sale windows and sale
ids survive a process restart together with the schedules.

Sale ids are allocated as max(sale_id) + 1 across all editions (0 for an empty
table). The table's primary key (edition, sale_id) rejects a colliding insert
from a concurrent process; that surfaces as a RuntimeError and nothing is kept.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Mapping

from domain.auction import BaseData, SaleKey, validate_base_data
from domain.errors import MintClosed, SaleNotFound

# Supabase table name for sale lifecycle records.
# Keep this aligned with your database schema.
_SALES_TABLE: str = "auction_sales"


def _row_to_base(row: Mapping[str, Any]) -> BaseData:
    """Convert a Supabase row into BaseData."""

    return BaseData(
        start_time=int(row["start_time"]),
        end_time=int(row["end_time"]),
        affiliate_fee_bps=int(row["affiliate_fee_bps"]),
        mint_paused=bool(row.get("mint_paused", False)),
    )


class SupabaseSaleLifecycle:
    """SaleLifecycle backed by the `auction_sales` Supabase table."""

    def __init__(self, client: Any, table: str = _SALES_TABLE):
        self._client = client
        self._table = table

    def _next_sale_id(self) -> int:
        response = (
            self._client.table(self._table)
            .select("sale_id")
            .order("sale_id", desc=True)
            .limit(1)
            .execute()
        )
        error = getattr(response, "error", None)
        if error:
            raise RuntimeError(f"Failed to allocate sale id: {error}")

        rows = getattr(response, "data", None) or []
        if not rows:
            return 0
        return int(rows[0]["sale_id"]) + 1

    def create_base(self, edition: str, start_time: int, end_time: int, affiliate_fee_bps: int) -> int:
        validate_base_data(start_time, end_time, affiliate_fee_bps)
        sale_id = self._next_sale_id()
        key = SaleKey(edition, sale_id)

        now = datetime.now(timezone.utc).isoformat()
        payload = {
            "edition": key.edition,
            "sale_id": key.sale_id,
            "start_time": start_time,
            "end_time": end_time,
            "affiliate_fee_bps": affiliate_fee_bps,
            "mint_paused": False,
            "created_at_utc": now,
            "updated_at_utc": now,
        }
        response = self._client.table(self._table).insert(payload).execute()
        error = getattr(response, "error", None)
        if error:
            raise RuntimeError(f"Failed to create sale: {error}")
        return sale_id

    def discard_base(self, key: SaleKey) -> None:
        response = (
            self._client.table(self._table)
            .delete()
            .eq("edition", key.edition)
            .eq("sale_id", key.sale_id)
            .execute()
        )
        error = getattr(response, "error", None)
        if error:
            raise RuntimeError(f"Failed to discard sale: {error}")

    def base_data(self, key: SaleKey) -> BaseData:
        response = (
            self._client.table(self._table)
            .select("*")
            .eq("edition", key.edition)
            .eq("sale_id", key.sale_id)
            .limit(1)
            .execute()
        )
        error = getattr(response, "error", None)
        if error:
            raise RuntimeError(f"Failed to fetch sale: {error}")

        rows = getattr(response, "data", None) or []
        if not rows:
            raise SaleNotFound(key)
        return _row_to_base(rows[0])

    def require_mint_open(self, key: SaleKey, now: int) -> None:
        reason = self.base_data(key).closed_reason(now)
        if reason is not None:
            raise MintClosed(key, reason, now)

    def set_time_range(self, key: SaleKey, start_time: int, end_time: int) -> BaseData:
        base = self.base_data(key)
        validate_base_data(start_time, end_time, base.affiliate_fee_bps)
        return self._write(key, replace(base, start_time=start_time, end_time=end_time))

    def set_paused(self, key: SaleKey, paused: bool) -> BaseData:
        return self._write(key, replace(self.base_data(key), mint_paused=bool(paused)))

    def set_affiliate_fee(self, key: SaleKey, affiliate_fee_bps: int) -> BaseData:
        base = self.base_data(key)
        validate_base_data(base.start_time, base.end_time, affiliate_fee_bps)
        return self._write(key, replace(base, affiliate_fee_bps=affiliate_fee_bps))

    def _write(self, key: SaleKey, base: BaseData) -> BaseData:
        payload = {
            "start_time": base.start_time,
            "end_time": base.end_time,
            "affiliate_fee_bps": base.affiliate_fee_bps,
            "mint_paused": base.mint_paused,
            "updated_at_utc": datetime.now(timezone.utc).isoformat(),
        }
        response = (
            self._client.table(self._table)
            .update(payload)
            .eq("edition", key.edition)
            .eq("sale_id", key.sale_id)
            .execute()
        )
        error = getattr(response, "error", None)
        if error:
            raise RuntimeError(f"Failed to update sale: {error}")

        rows = getattr(response, "data", None) or []
        if not rows:
            raise SaleNotFound(key)
        return base


__all__ = ["SupabaseSaleLifecycle"]

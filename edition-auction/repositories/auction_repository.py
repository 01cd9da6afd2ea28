"""
Auction schedule repository (persistence).

Defines the AuctionConfigStore contract and its durable Supabase implementation.
The store only persists and fetches records keyed by SaleKey; quota and
authorization rules live in the services layer.

Store contract:
- create(key, schedule): fails with DuplicateSale if the key already exists
- get(key): returns the schedule or raises SaleNotFound
- update(key, **fields): partial overwrite of mutable fields
- set_total_minted(key, value): overwrite the running total
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping, Protocol

from domain.auction import MUTABLE_FIELDS, AuctionSchedule, SaleKey
from domain.errors import DuplicateSale, SaleNotFound
from domain.uint import UINT32_BITS, require_uint

# Supabase table name for auction schedules.
# Keep this aligned with your database schema.
_SCHEDULES_TABLE: str = "auction_schedules"


class AuctionConfigStore(Protocol):
    """Keyed storage of AuctionSchedule records."""

    def create(self, key: SaleKey, schedule: AuctionSchedule) -> None: ...

    def get(self, key: SaleKey) -> AuctionSchedule: ...

    def exists(self, key: SaleKey) -> bool: ...

    def update(self, key: SaleKey, **fields: int) -> AuctionSchedule: ...

    def set_total_minted(self, key: SaleKey, value: int) -> AuctionSchedule: ...


def require_mutable_fields(fields: Mapping[str, Any]) -> None:
    """Reject partial updates that touch unknown or non-admin fields."""

    unknown = sorted(set(fields) - set(MUTABLE_FIELDS))
    if unknown:
        raise ValueError(f"Fields cannot be updated: {', '.join(unknown)}")


def _schedule_to_row(schedule: AuctionSchedule) -> dict[str, Any]:
    # 96-bit columns are stored as decimal strings (numeric(29,0) in Postgres).
    row: dict[str, Any] = {
        "start_price": str(schedule.start_price),
        "decrease_interval": schedule.decrease_interval,
        "decrease_size": str(schedule.decrease_size),
        "num_decreases": schedule.num_decreases,
        "max_mintable": schedule.max_mintable,
        "max_mintable_per_account": schedule.max_mintable_per_account,
        "total_minted": schedule.total_minted,
    }
    return row


def _row_to_schedule(row: Mapping[str, Any]) -> AuctionSchedule:
    """Convert a Supabase row into an AuctionSchedule."""

    return AuctionSchedule(
        start_price=int(str(row["start_price"])),
        decrease_interval=int(row["decrease_interval"]),
        decrease_size=int(str(row["decrease_size"])),
        num_decreases=int(row["num_decreases"]),
        max_mintable=int(row["max_mintable"]),
        max_mintable_per_account=int(row["max_mintable_per_account"]),
        total_minted=int(row["total_minted"]),
    )


class SupabaseAuctionRepository:
    """
    AuctionConfigStore backed by the `auction_schedules` Supabase table.

    The table has a composite primary key (edition, sale_id).
    """

    def __init__(self, client: Any, table: str = _SCHEDULES_TABLE):
        self._client = client
        self._table = table

    def _query(self, key: SaleKey):
        return (
            self._client.table(self._table)
            .select("*")
            .eq("edition", key.edition)
            .eq("sale_id", key.sale_id)
            .limit(1)
        )

    def _fetch_row(self, key: SaleKey) -> Mapping[str, Any] | None:
        response = self._query(key).execute()
        error = getattr(response, "error", None)
        if error:
            raise RuntimeError(f"Failed to fetch auction schedule: {error}")

        rows = getattr(response, "data", None) or []
        if not rows:
            return None
        return rows[0]

    def exists(self, key: SaleKey) -> bool:
        return self._fetch_row(key) is not None

    def create(self, key: SaleKey, schedule: AuctionSchedule) -> None:
        if self.exists(key):
            raise DuplicateSale(key)

        now = datetime.now(timezone.utc).isoformat()
        payload = {
            "edition": key.edition,
            "sale_id": key.sale_id,
            **_schedule_to_row(schedule),
            "created_at_utc": now,
            "updated_at_utc": now,
        }

        response = self._client.table(self._table).insert(payload).execute()
        error = getattr(response, "error", None)
        if error:
            raise RuntimeError(f"Failed to create auction schedule: {error}")

    def get(self, key: SaleKey) -> AuctionSchedule:
        row = self._fetch_row(key)
        if row is None:
            raise SaleNotFound(key)
        return _row_to_schedule(row)

    def _write(self, key: SaleKey, schedule: AuctionSchedule) -> AuctionSchedule:
        payload = {
            **_schedule_to_row(schedule),
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
            raise RuntimeError(f"Failed to update auction schedule: {error}")

        rows = getattr(response, "data", None) or []
        if not rows:
            raise SaleNotFound(key)
        return schedule

    def update(self, key: SaleKey, **fields: int) -> AuctionSchedule:
        require_mutable_fields(fields)
        # Validate the merged record before anything is written.
        updated = self.get(key).with_changes(**fields)
        return self._write(key, updated)

    def set_total_minted(self, key: SaleKey, value: int) -> AuctionSchedule:
        require_uint("total_minted", value, UINT32_BITS)
        updated = self.get(key).with_changes(total_minted=value)
        return self._write(key, updated)


__all__ = [
    "AuctionConfigStore",
    "SupabaseAuctionRepository",
    "require_mutable_fields",
]

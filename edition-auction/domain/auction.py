"""
Domain: Auction sale records.

Contract excerpts implemented here:
- A sale is addressed by SaleKey (edition, sale_id). Sale ids are allocated by
  the lifecycle collaborator; this module never generates them.
- An AuctionSchedule exists exactly once per SaleKey and is never deleted.
- decrease_interval and max_mintable_per_account are non-zero.
- start_price >= num_decreases * decrease_size, so the floor price is never negative.
- total_minted only grows. It may sit above max_mintable after an administrator
  lowers the cap; later purchases then fail instead of truncating history.

This module contains only pure value objects: no I/O, no database, no frameworks.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from .errors import (
    InvalidAffiliateFee,
    InvalidSchedule,
    InvalidTimeRange,
    ZeroDecreaseInterval,
    ZeroPerAccountCap,
)
from .uint import UINT32_BITS, UINT96_BITS, require_uint


@dataclass(frozen=True, slots=True, order=True)
class SaleKey:
    """Composite identifier of one auction instance."""

    edition: str
    sale_id: int

    def __post_init__(self) -> None:
        if not isinstance(self.edition, str) or not self.edition:
            raise ValueError("edition must be a non-empty string")
        require_uint("sale_id", self.sale_id, UINT32_BITS)

    def __str__(self) -> str:
        return f"{self.edition}/{self.sale_id}"


@dataclass(frozen=True, slots=True)
class AuctionSchedule:
    """
    Immutable snapshot of a sale's price schedule and quota counters.

    Stores hand out snapshots; every change produces a new instance.
    """

    start_price: int
    decrease_interval: int
    decrease_size: int
    num_decreases: int
    max_mintable: int
    max_mintable_per_account: int
    total_minted: int = 0

    def __post_init__(self) -> None:
        require_uint("start_price", self.start_price, UINT96_BITS)
        require_uint("decrease_interval", self.decrease_interval, UINT32_BITS)
        require_uint("decrease_size", self.decrease_size, UINT96_BITS)
        require_uint("num_decreases", self.num_decreases, UINT32_BITS)
        require_uint("max_mintable", self.max_mintable, UINT32_BITS)
        require_uint("max_mintable_per_account", self.max_mintable_per_account, UINT32_BITS)
        require_uint("total_minted", self.total_minted, UINT32_BITS)

        if self.max_mintable_per_account == 0:
            raise ZeroPerAccountCap()
        if self.decrease_interval == 0:
            raise ZeroDecreaseInterval()
        if self.num_decreases * self.decrease_size > self.start_price:
            raise InvalidSchedule(self.start_price, self.decrease_size, self.num_decreases)

    @property
    def remaining(self) -> int:
        """Units still sellable under the sale-wide cap (0 when capped below total)."""

        return max(self.max_mintable - self.total_minted, 0)

    def with_changes(self, **fields: int) -> "AuctionSchedule":
        """Return a validated copy with the given fields overwritten."""

        return replace(self, **fields)


@dataclass(frozen=True, slots=True)
class BaseData:
    """
    Sale lifecycle data owned by the lifecycle collaborator.

    Read-only from the auction engine's point of view.
    """

    start_time: int
    end_time: int
    affiliate_fee_bps: int
    mint_paused: bool = False

    def closed_reason(self, now: int) -> Optional[str]:
        """Why minting is closed at `now`, or None while it is open (window inclusive)."""

        if self.mint_paused:
            return "sale is paused"
        if now < self.start_time or now > self.end_time:
            return f"outside sale window [{self.start_time}, {self.end_time}]"
        return None


MAX_BPS = 10_000


def validate_base_data(start_time: int, end_time: int, affiliate_fee_bps: int) -> None:
    require_uint("start_time", start_time, UINT32_BITS)
    require_uint("end_time", end_time, UINT32_BITS)
    require_uint("affiliate_fee_bps", affiliate_fee_bps, UINT32_BITS)
    if start_time >= end_time:
        raise InvalidTimeRange(start_time, end_time)
    if affiliate_fee_bps > MAX_BPS:
        raise InvalidAffiliateFee(affiliate_fee_bps)


# Fields ConfigMutator may overwrite. total_minted is owned by MintAccountant.
SCHEDULE_FIELDS = ("start_price", "decrease_interval", "decrease_size", "num_decreases")
MUTABLE_FIELDS = SCHEDULE_FIELDS + ("max_mintable", "max_mintable_per_account")


__all__ = [
    "SaleKey",
    "AuctionSchedule",
    "BaseData",
    "MAX_BPS",
    "validate_base_data",
    "SCHEDULE_FIELDS",
    "MUTABLE_FIELDS",
]

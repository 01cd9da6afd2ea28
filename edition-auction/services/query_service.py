"""
Query service: read-only views of auction state.

Reads never take the per-sale lock and never mutate. Prices come straight from
the pricing formula; caps are not applied, so callers must check cap
satisfiability separately (see SaleInfo.remaining).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from domain.auction import SaleKey
from domain.pricing import floor_price, total_price, unit_price
from domain.time import from_unix_seconds
from domain.uint import UINT32_BITS, require_uint
from repositories.auction_repository import AuctionConfigStore
from services.collaborators import SaleLifecycle


@dataclass(frozen=True, slots=True)
class SaleInfo:
    """
    Display snapshot merging lifecycle data with the auction schedule.
    """
    edition: str
    sale_id: int

    # Lifecycle
    start_time: int
    end_time: int
    affiliate_fee_bps: int
    mint_paused: bool

    # Schedule
    start_price: int
    decrease_interval: int
    decrease_size: int
    num_decreases: int
    floor_price: int

    # Caps
    max_mintable: int
    max_mintable_per_account: int
    total_minted: int

    @property
    def remaining(self) -> int:
        return max(self.max_mintable - self.total_minted, 0)

    @property
    def starts_at(self) -> datetime:
        return from_unix_seconds(self.start_time)

    @property
    def ends_at(self) -> datetime:
        return from_unix_seconds(self.end_time)


class QueryService:
    def __init__(self, store: AuctionConfigStore, lifecycle: SaleLifecycle):
        self._store = store
        self._lifecycle = lifecycle

    def price_for(self, key: SaleKey, now: int, quantity: int) -> int:
        """Total price of `quantity` units at `now`, with no caps applied."""

        require_uint("quantity", quantity, UINT32_BITS)
        schedule = self._store.get(key)
        return total_price(schedule, self._lifecycle.base_data(key).start_time, now, quantity)

    def unit_price_for(self, key: SaleKey, now: int) -> int:
        schedule = self._store.get(key)
        return unit_price(schedule, self._lifecycle.base_data(key).start_time, now)

    def info_for(self, key: SaleKey) -> SaleInfo:
        schedule = self._store.get(key)
        base = self._lifecycle.base_data(key)
        return SaleInfo(
            edition=key.edition,
            sale_id=key.sale_id,
            start_time=base.start_time,
            end_time=base.end_time,
            affiliate_fee_bps=base.affiliate_fee_bps,
            mint_paused=base.mint_paused,
            start_price=schedule.start_price,
            decrease_interval=schedule.decrease_interval,
            decrease_size=schedule.decrease_size,
            num_decreases=schedule.num_decreases,
            floor_price=floor_price(schedule),
            max_mintable=schedule.max_mintable,
            max_mintable_per_account=schedule.max_mintable_per_account,
            total_minted=schedule.total_minted,
        )


__all__ = [
    "QueryService",
    "SaleInfo",
]

"""
Domain: Notifications published on committed state changes.

Each notification carries the full new field values for the affected sale so
consumers never need to read back the store.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict

from .auction import SaleKey


@dataclass(frozen=True, slots=True)
class AuctionEvent:
    key: SaleKey

    @property
    def name(self) -> str:
        return type(self).__name__

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["key"] = {"edition": self.key.edition, "sale_id": self.key.sale_id}
        payload["event"] = self.name
        return payload


@dataclass(frozen=True, slots=True)
class ScheduleCreated(AuctionEvent):
    start_price: int
    start_time: int
    decrease_interval: int
    decrease_size: int
    num_decreases: int
    end_time: int
    affiliate_fee_bps: int
    max_mintable: int
    max_mintable_per_account: int


@dataclass(frozen=True, slots=True)
class ScheduleUpdated(AuctionEvent):
    start_price: int
    decrease_interval: int
    decrease_size: int
    num_decreases: int


@dataclass(frozen=True, slots=True)
class MaxMintableUpdated(AuctionEvent):
    max_mintable: int


@dataclass(frozen=True, slots=True)
class MaxMintablePerAccountUpdated(AuctionEvent):
    max_mintable_per_account: int


@dataclass(frozen=True, slots=True)
class Minted(AuctionEvent):
    account: str
    quantity: int
    unit_price: int
    total_price: int
    total_minted: int


__all__ = [
    "AuctionEvent",
    "ScheduleCreated",
    "ScheduleUpdated",
    "MaxMintableUpdated",
    "MaxMintablePerAccountUpdated",
    "Minted",
]

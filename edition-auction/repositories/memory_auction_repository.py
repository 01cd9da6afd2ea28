"""
In-memory auction schedule repository.

Single composite-key mapping SaleKey -> AuctionSchedule. Records are immutable
snapshots, so callers can never observe a half-applied change.
"""

from __future__ import annotations

import threading
from typing import Dict, Iterator

from domain.auction import AuctionSchedule, SaleKey
from domain.errors import DuplicateSale, SaleNotFound
from domain.uint import UINT32_BITS, require_uint
from repositories.auction_repository import require_mutable_fields


class InMemoryAuctionRepository:
    """AuctionConfigStore kept in process memory."""

    def __init__(self) -> None:
        self._records: Dict[SaleKey, AuctionSchedule] = {}
        self._guard = threading.Lock()

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[SaleKey]:
        return iter(sorted(self._records))

    def exists(self, key: SaleKey) -> bool:
        return key in self._records

    def create(self, key: SaleKey, schedule: AuctionSchedule) -> None:
        with self._guard:
            if key in self._records:
                raise DuplicateSale(key)
            self._records[key] = schedule

    def get(self, key: SaleKey) -> AuctionSchedule:
        try:
            return self._records[key]
        except KeyError:
            raise SaleNotFound(key) from None

    def update(self, key: SaleKey, **fields: int) -> AuctionSchedule:
        require_mutable_fields(fields)
        with self._guard:
            updated = self.get(key).with_changes(**fields)
            self._records[key] = updated
            return updated

    def set_total_minted(self, key: SaleKey, value: int) -> AuctionSchedule:
        require_uint("total_minted", value, UINT32_BITS)
        with self._guard:
            updated = self.get(key).with_changes(total_minted=value)
            self._records[key] = updated
            return updated


__all__ = ["InMemoryAuctionRepository"]

"""
External collaborators of the auction engine.

The engine only depends on the Protocols below. The in-memory classes are
reference implementations used by the API's default wiring, the demo script
and the tests:

- SaleLifecycle: sale id allocation, time window, pause flag, affiliate fee
- HoldingsOracle / UnitIssuer: the token ledger (units held per account)
- Authorizer: edition owner / admin role resolution
- EventSink: transport for committed-change notifications

The durable lifecycle used with the Supabase store lives in
repositories/lifecycle_repository.py.

Notifications are published while the sale's lock is still held, so an
EventSink must not call back into the same sale.
"""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from dataclasses import replace
from typing import Dict, List, Optional, Protocol, Set, Tuple

from domain.auction import BaseData, SaleKey, validate_base_data
from domain.errors import MintClosed, SaleNotFound
from domain.events import AuctionEvent

logger = logging.getLogger(__name__)


# ============================================================================
# Interfaces
# ============================================================================

class SaleLifecycle(Protocol):
    def create_base(self, edition: str, start_time: int, end_time: int, affiliate_fee_bps: int) -> int: ...

    def discard_base(self, key: SaleKey) -> None: ...

    def base_data(self, key: SaleKey) -> BaseData: ...

    def require_mint_open(self, key: SaleKey, now: int) -> None: ...


class HoldingsOracle(Protocol):
    def units_held_by(self, edition: str, account: str) -> int: ...


class UnitIssuer(Protocol):
    def issue(self, edition: str, account: str, quantity: int) -> None: ...


class Authorizer(Protocol):
    def is_owner_or_admin(self, edition: str, caller: str) -> bool: ...


class EventSink(Protocol):
    def publish(self, event: AuctionEvent) -> None: ...


# ============================================================================
# Reference implementations
# ============================================================================

class InMemorySaleLifecycle:
    """
    Base sale lifecycle kept in memory.

    Sale ids come from one counter shared by all editions, starting at 0.
    Minting is open while not paused and start_time <= now <= end_time.
    """

    def __init__(self) -> None:
        self._next_sale_id = 0
        self._bases: Dict[SaleKey, BaseData] = {}
        self._guard = threading.Lock()

    def create_base(self, edition: str, start_time: int, end_time: int, affiliate_fee_bps: int) -> int:
        validate_base_data(start_time, end_time, affiliate_fee_bps)
        with self._guard:
            sale_id = self._next_sale_id
            self._bases[SaleKey(edition, sale_id)] = BaseData(
                start_time=start_time,
                end_time=end_time,
                affiliate_fee_bps=affiliate_fee_bps,
            )
            self._next_sale_id += 1
            return sale_id

    def discard_base(self, key: SaleKey) -> None:
        """Drop a base record whose sale could not be created. The id is reused if it was the last one."""

        with self._guard:
            self._bases.pop(key, None)
            if key.sale_id == self._next_sale_id - 1:
                self._next_sale_id -= 1

    def base_data(self, key: SaleKey) -> BaseData:
        try:
            return self._bases[key]
        except KeyError:
            raise SaleNotFound(key) from None

    def require_mint_open(self, key: SaleKey, now: int) -> None:
        reason = self.base_data(key).closed_reason(now)
        if reason is not None:
            raise MintClosed(key, reason, now)

    def set_time_range(self, key: SaleKey, start_time: int, end_time: int) -> BaseData:
        base = self.base_data(key)
        validate_base_data(start_time, end_time, base.affiliate_fee_bps)
        return self._replace(key, start_time=start_time, end_time=end_time)

    def set_paused(self, key: SaleKey, paused: bool) -> BaseData:
        self.base_data(key)
        return self._replace(key, mint_paused=bool(paused))

    def set_affiliate_fee(self, key: SaleKey, affiliate_fee_bps: int) -> BaseData:
        base = self.base_data(key)
        validate_base_data(base.start_time, base.end_time, affiliate_fee_bps)
        return self._replace(key, affiliate_fee_bps=affiliate_fee_bps)

    def _replace(self, key: SaleKey, **changes) -> BaseData:
        with self._guard:
            updated = replace(self._bases[key], **changes)
            self._bases[key] = updated
            return updated


class InMemoryEditionLedger:
    """Token ledger: counts units issued per (edition, account)."""

    def __init__(self) -> None:
        self._held: Dict[Tuple[str, str], int] = defaultdict(int)
        self._guard = threading.Lock()

    def units_held_by(self, edition: str, account: str) -> int:
        return self._held.get((edition, account), 0)

    def issue(self, edition: str, account: str, quantity: int) -> None:
        if quantity <= 0:
            raise ValueError(f"quantity must be positive, got {quantity}")
        with self._guard:
            self._held[(edition, account)] += quantity

    def total_issued(self, edition: str) -> int:
        return sum(count for (held_edition, _), count in self._held.items() if held_edition == edition)


class EditionRoles:
    """
    Owner per edition plus admins.

    Admins granted without an edition are admins of every edition.
    """

    def __init__(self, admins: Optional[Set[str]] = None) -> None:
        self._owners: Dict[str, str] = {}
        self._global_admins: Set[str] = set(admins or ())
        self._edition_admins: Dict[str, Set[str]] = defaultdict(set)

    def set_owner(self, edition: str, owner: str) -> None:
        self._owners[edition] = owner

    def owner_of(self, edition: str) -> Optional[str]:
        return self._owners.get(edition)

    def grant_admin(self, account: str, edition: Optional[str] = None) -> None:
        if edition is None:
            self._global_admins.add(account)
        else:
            self._edition_admins[edition].add(account)

    def revoke_admin(self, account: str, edition: Optional[str] = None) -> None:
        if edition is None:
            self._global_admins.discard(account)
        else:
            self._edition_admins[edition].discard(account)

    def is_owner_or_admin(self, edition: str, caller: str) -> bool:
        if not caller:
            return False
        if self._owners.get(edition) == caller:
            return True
        return caller in self._global_admins or caller in self._edition_admins.get(edition, ())


class LoggingEventSink:
    """Keeps published notifications in order and logs each one."""

    def __init__(self) -> None:
        self.events: List[AuctionEvent] = []
        self._guard = threading.Lock()

    def publish(self, event: AuctionEvent) -> None:
        with self._guard:
            self.events.append(event)
        logger.info(
            f"{event.name} for sale {event.key}",
            extra={"auction_event": event.to_dict()},
        )

    def of_type(self, event_type: type) -> List[AuctionEvent]:
        return [event for event in self.events if isinstance(event, event_type)]


__all__ = [
    "SaleLifecycle",
    "HoldingsOracle",
    "UnitIssuer",
    "Authorizer",
    "EventSink",
    "InMemorySaleLifecycle",
    "InMemoryEditionLedger",
    "EditionRoles",
    "LoggingEventSink",
]

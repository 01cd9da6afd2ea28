"""
Auction engine wiring.

Bundles the store, the collaborators and the three services so the API and the
scripts share one consistent object graph.

The schedule store and the sale lifecycle must share a backend: a durable
store paired with an in-memory lifecycle would lose every sale window (and
restart sale ids at 0) on the next process start.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from repositories.auction_repository import AuctionConfigStore
from repositories.memory_auction_repository import InMemoryAuctionRepository
from services.collaborators import (
    EditionRoles,
    InMemoryEditionLedger,
    InMemorySaleLifecycle,
    LoggingEventSink,
    SaleLifecycle,
)
from services.config_mutator import ConfigMutator
from services.locks import KeyedLocks
from services.mint_accountant import MintAccountant
from services.query_service import QueryService


@dataclass
class AuctionEngine:
    store: AuctionConfigStore
    lifecycle: SaleLifecycle
    ledger: InMemoryEditionLedger
    roles: EditionRoles
    events: LoggingEventSink
    locks: KeyedLocks = field(default_factory=KeyedLocks)

    def __post_init__(self) -> None:
        self.accountant = MintAccountant(
            store=self.store,
            lifecycle=self.lifecycle,
            holdings=self.ledger,
            locks=self.locks,
            events=self.events,
            issuer=self.ledger,
        )
        self.mutator = ConfigMutator(
            store=self.store,
            lifecycle=self.lifecycle,
            authorizer=self.roles,
            locks=self.locks,
            events=self.events,
        )
        self.queries = QueryService(store=self.store, lifecycle=self.lifecycle)


def build_engine(
    store: Optional[AuctionConfigStore] = None,
    lifecycle: Optional[SaleLifecycle] = None,
    admins: Iterable[str] = (),
) -> AuctionEngine:
    """
    Build an engine, defaulting to in-memory collaborators.

    Args:
        store: schedule store (defaults to InMemoryAuctionRepository)
        lifecycle: sale lifecycle; required whenever `store` is given
        admins: accounts that administer every edition

    Raises:
        ValueError: a store was given without a matching lifecycle
    """
    if store is not None and lifecycle is None:
        raise ValueError("A schedule store needs a lifecycle on the same backend")

    return AuctionEngine(
        store=store if store is not None else InMemoryAuctionRepository(),
        lifecycle=lifecycle if lifecycle is not None else InMemorySaleLifecycle(),
        ledger=InMemoryEditionLedger(),
        roles=EditionRoles(admins=set(admins)),
        events=LoggingEventSink(),
    )


__all__ = [
    "AuctionEngine",
    "build_engine",
]

"""
Pytest configuration for auction engine tests.

This file adds the parent directory to the Python path so that tests
can import from the domain, repositories, services and api modules.
It also provides shared fixtures: an engine with in-memory collaborators,
the reference auction sale, and a fake Supabase client.
"""

import sys
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Dict, List

import pytest

# Add the edition-auction directory to the Python path
# so tests can import domain, repositories, etc.
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from domain.auction import SaleKey  # noqa: E402
from services.auction_engine import AuctionEngine, build_engine  # noqa: E402

EDITION = "0xedition"
OWNER = "0xowner"
ADMIN = "0xadmin"
BUYER = "0xbuyer"
START = 1_767_225_600  # 2026-01-01T00:00:00Z
END = START + 86_400


@pytest.fixture
def engine() -> AuctionEngine:
    engine = build_engine(admins=[ADMIN])
    engine.roles.set_owner(EDITION, OWNER)
    return engine


def create_reference_sale(engine: AuctionEngine, **overrides: int) -> SaleKey:
    """startPrice=1000, interval=100s, size=50, 10 decreases, 500 total, 5 per account."""

    params = dict(
        start_price=1000,
        start_time=START,
        decrease_interval=100,
        decrease_size=50,
        num_decreases=10,
        end_time=END,
        affiliate_fee_bps=0,
        max_mintable=500,
        max_mintable_per_account=5,
    )
    params.update(overrides)
    sale_id = engine.mutator.create_sale(EDITION, OWNER, **params)
    return SaleKey(EDITION, sale_id)


@pytest.fixture
def sale(engine: AuctionEngine) -> SaleKey:
    return create_reference_sale(engine)


# ============================================================================
# Fake Supabase client
# ============================================================================

class FakeQuery:
    """Chained query builder mimicking supabase-py's table API."""

    def __init__(self, rows: List[Dict[str, Any]], fail_with: Any = None):
        self._rows = rows
        self._filters: List[tuple] = []
        self._limit = None
        self._order = None
        self._op = "select"
        self._payload: Dict[str, Any] = {}
        self._fail_with = fail_with

    def select(self, *_columns: str) -> "FakeQuery":
        self._op = "select"
        return self

    def insert(self, payload: Dict[str, Any]) -> "FakeQuery":
        self._op = "insert"
        self._payload = dict(payload)
        return self

    def update(self, payload: Dict[str, Any]) -> "FakeQuery":
        self._op = "update"
        self._payload = dict(payload)
        return self

    def delete(self) -> "FakeQuery":
        self._op = "delete"
        return self

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self._filters.append((column, value))
        return self

    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        self._order = (column, desc)
        return self

    def limit(self, count: int) -> "FakeQuery":
        self._limit = count
        return self

    def _matches(self, row: Dict[str, Any]) -> bool:
        return all(row.get(column) == value for column, value in self._filters)

    def execute(self) -> SimpleNamespace:
        if self._fail_with is not None:
            return SimpleNamespace(data=None, error=self._fail_with)

        if self._op == "insert":
            self._rows.append(dict(self._payload))
            return SimpleNamespace(data=[dict(self._payload)], error=None)

        matched = [row for row in self._rows if self._matches(row)]
        if self._op == "update":
            for row in matched:
                row.update(self._payload)
            return SimpleNamespace(data=[dict(row) for row in matched], error=None)

        if self._op == "delete":
            self._rows[:] = [row for row in self._rows if not self._matches(row)]
            return SimpleNamespace(data=[dict(row) for row in matched], error=None)

        if self._order is not None:
            column, desc = self._order
            matched.sort(key=lambda row: row[column], reverse=desc)
        if self._limit is not None:
            matched = matched[: self._limit]
        return SimpleNamespace(data=[dict(row) for row in matched], error=None)


class FakeSupabase:
    def __init__(self) -> None:
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.fail_with: Any = None

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self.tables.setdefault(name, []), fail_with=self.fail_with)


@pytest.fixture
def fake_supabase() -> FakeSupabase:
    return FakeSupabase()

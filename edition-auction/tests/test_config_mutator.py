"""
Tests for `services/config_mutator.py`.

Covers contract rules:
- Only the edition owner or an admin may create or amend sales.
- create_sale and set_max_mintable_per_account reject 0 with ValidationError
  and leave existing state unchanged.
- Zero decrease intervals and negative floor prices are rejected at configuration time.
- set_schedule overwrites the four schedule fields without re-checking caps.
- set_max_mintable accepts a cap below total_minted.
- Every committed change publishes a notification with the new values.
- A failed schedule write during create_sale discards the lifecycle record.
"""

from __future__ import annotations

import pytest

from conftest import ADMIN, BUYER, EDITION, END, OWNER, START, create_reference_sale
from domain.auction import AuctionSchedule, SaleKey
from domain.errors import (
    DuplicateSale,
    InvalidAffiliateFee,
    InvalidSchedule,
    InvalidTimeRange,
    SaleNotFound,
    Unauthorized,
    ValidationError,
    ZeroDecreaseInterval,
    ZeroPerAccountCap,
)
from domain.events import (
    MaxMintablePerAccountUpdated,
    MaxMintableUpdated,
    ScheduleCreated,
    ScheduleUpdated,
)
from services.config_mutator import ConfigMutator


def test_create_sale_initializes_schedule_and_base(engine) -> None:
    key = create_reference_sale(engine)

    schedule = engine.store.get(key)
    assert schedule.start_price == 1000
    assert schedule.decrease_interval == 100
    assert schedule.max_mintable_per_account == 5
    assert schedule.total_minted == 0

    base = engine.lifecycle.base_data(key)
    assert base.start_time == START
    assert base.end_time == END
    assert base.mint_paused is False


def test_create_sale_allocates_sequential_ids(engine) -> None:
    first = create_reference_sale(engine)
    second = create_reference_sale(engine)

    assert (first.sale_id, second.sale_id) == (0, 1)


def test_create_sale_publishes_full_notification(engine) -> None:
    key = create_reference_sale(engine, affiliate_fee_bps=250)

    (created,) = engine.events.of_type(ScheduleCreated)
    assert created.key == key
    assert created.start_price == 1000
    assert created.start_time == START
    assert created.end_time == END
    assert created.affiliate_fee_bps == 250
    assert created.max_mintable == 500
    assert created.max_mintable_per_account == 5


def test_admin_may_create_sale(engine) -> None:
    sale_id = engine.mutator.create_sale(
        EDITION,
        ADMIN,
        start_price=10,
        start_time=START,
        decrease_interval=1,
        decrease_size=1,
        num_decreases=10,
        end_time=END,
        affiliate_fee_bps=0,
        max_mintable=1,
        max_mintable_per_account=1,
    )

    assert engine.store.exists(SaleKey(EDITION, sale_id))


def test_stranger_cannot_create_sale(engine) -> None:
    with pytest.raises(Unauthorized):
        engine.mutator.create_sale(
            EDITION,
            BUYER,
            start_price=10,
            start_time=START,
            decrease_interval=1,
            decrease_size=1,
            num_decreases=1,
            end_time=END,
            affiliate_fee_bps=0,
            max_mintable=1,
            max_mintable_per_account=1,
        )

    assert len(engine.events.events) == 0


@pytest.mark.parametrize(
    "overrides,error_type",
    [
        ({"max_mintable_per_account": 0}, ZeroPerAccountCap),
        ({"decrease_interval": 0}, ZeroDecreaseInterval),
        ({"start_price": 100}, InvalidSchedule),
        ({"end_time": START}, InvalidTimeRange),
        ({"affiliate_fee_bps": 10_001}, InvalidAffiliateFee),
    ],
)
def test_create_sale_rejects_invalid_configuration(engine, overrides, error_type) -> None:
    """Verify rejected creations allocate nothing and publish nothing."""

    with pytest.raises(error_type):
        create_reference_sale(engine, **overrides)

    assert issubclass(error_type, ValidationError)
    assert engine.events.events == []
    # The next successful creation still receives the first id.
    assert create_reference_sale(engine).sale_id == 0


def test_set_schedule_overwrites_fields(engine, sale) -> None:
    engine.accountant.purchase(sale, 3, BUYER, START)

    updated = engine.mutator.set_schedule(
        sale, OWNER, start_price=2000, decrease_interval=60, decrease_size=100, num_decreases=5
    )

    assert (updated.start_price, updated.decrease_interval, updated.decrease_size, updated.num_decreases) == (
        2000, 60, 100, 5
    )
    assert updated.total_minted == 3
    assert updated.max_mintable == 500
    assert engine.queries.unit_price_for(sale, START + 130) == 1800

    (event,) = engine.events.of_type(ScheduleUpdated)
    assert event.start_price == 2000
    assert event.num_decreases == 5


def test_set_schedule_rejects_zero_interval_and_keeps_state(engine, sale) -> None:
    before = engine.store.get(sale)

    with pytest.raises(ZeroDecreaseInterval):
        engine.mutator.set_schedule(sale, OWNER, start_price=1000, decrease_interval=0, decrease_size=1, num_decreases=1)
    with pytest.raises(InvalidSchedule):
        engine.mutator.set_schedule(sale, OWNER, start_price=10, decrease_interval=1, decrease_size=5, num_decreases=3)

    assert engine.store.get(sale) == before
    assert engine.events.of_type(ScheduleUpdated) == []


def test_set_max_mintable_below_total_is_allowed(engine, sale) -> None:
    engine.accountant.purchase(sale, 4, BUYER, START)

    updated = engine.mutator.set_max_mintable(sale, OWNER, 2)

    assert updated.max_mintable == 2
    assert updated.total_minted == 4
    (event,) = engine.events.of_type(MaxMintableUpdated)
    assert event.max_mintable == 2


def test_set_max_mintable_per_account(engine, sale) -> None:
    updated = engine.mutator.set_max_mintable_per_account(sale, ADMIN, 9)

    assert updated.max_mintable_per_account == 9
    (event,) = engine.events.of_type(MaxMintablePerAccountUpdated)
    assert event.max_mintable_per_account == 9


def test_set_max_mintable_per_account_rejects_zero(engine, sale) -> None:
    with pytest.raises(ZeroPerAccountCap):
        engine.mutator.set_max_mintable_per_account(sale, OWNER, 0)

    assert engine.store.get(sale).max_mintable_per_account == 5
    assert engine.events.of_type(MaxMintablePerAccountUpdated) == []


def test_setters_require_authorization(engine, sale) -> None:
    with pytest.raises(Unauthorized):
        engine.mutator.set_max_mintable(sale, BUYER, 1)
    with pytest.raises(Unauthorized):
        engine.mutator.set_max_mintable_per_account(sale, BUYER, 1)
    with pytest.raises(Unauthorized):
        engine.mutator.set_schedule(sale, BUYER, start_price=1, decrease_interval=1, decrease_size=0, num_decreases=0)

    assert engine.store.get(sale).max_mintable == 500


def test_owner_of_one_edition_cannot_change_another(engine) -> None:
    engine.roles.set_owner("0xother", "0xother-owner")
    key = create_reference_sale(engine)

    with pytest.raises(Unauthorized):
        engine.mutator.set_max_mintable(key, "0xother-owner", 1)


def test_setters_on_unknown_sale_raise_not_found(engine) -> None:
    missing = SaleKey(EDITION, 77)

    with pytest.raises(SaleNotFound):
        engine.mutator.set_max_mintable(missing, OWNER, 1)
    with pytest.raises(SaleNotFound):
        engine.mutator.set_max_mintable_per_account(missing, OWNER, 1)


def test_duplicate_schedule_discards_lifecycle_record(engine) -> None:
    """Verify a failed schedule write leaves no orphaned sale window behind."""

    taken = SaleKey(EDITION, 0)
    engine.store.create(taken, AuctionSchedule(
        start_price=1, decrease_interval=1, decrease_size=0, num_decreases=0,
        max_mintable=1, max_mintable_per_account=1,
    ))

    with pytest.raises(DuplicateSale):
        create_reference_sale(engine)

    with pytest.raises(SaleNotFound):
        engine.lifecycle.base_data(taken)
    assert engine.events.of_type(ScheduleCreated) == []


class _UnavailableStore:
    def create(self, key: SaleKey, schedule: AuctionSchedule) -> None:
        raise RuntimeError("Failed to create auction schedule: connection reset")


def test_store_outage_during_create_leaves_no_sale(engine) -> None:
    mutator = ConfigMutator(
        store=_UnavailableStore(),
        lifecycle=engine.lifecycle,
        authorizer=engine.roles,
        locks=engine.locks,
        events=engine.events,
    )

    with pytest.raises(RuntimeError, match="connection reset"):
        mutator.create_sale(
            EDITION,
            OWNER,
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

    with pytest.raises(SaleNotFound):
        engine.lifecycle.base_data(SaleKey(EDITION, 0))
    assert not engine.locks.is_held(SaleKey(EDITION, 0))
    assert engine.events.events == []
    # The discarded id is handed out again.
    assert create_reference_sale(engine).sale_id == 0

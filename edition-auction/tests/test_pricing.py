"""
Tests for `domain/pricing.py`.

Covers contract rules:
- unit price = start_price - min(elapsed_intervals, num_decreases) * decrease_size
- unit price is non-increasing in time and flat after num_decreases intervals
- total price = quantity * unit price, checked against 128 bits
- misconfigured parameters raise PriceArithmeticError instead of wrapping
- quantity is an input checked as uint32 (ValueOutOfRange)
"""

from __future__ import annotations

import pytest

from domain.auction import AuctionSchedule
from domain.errors import PriceArithmeticError, ValidationError, ValueOutOfRange
from domain.pricing import (
    compute_unit_price,
    floor_price,
    price_at_step,
    price_curve,
    total_price,
    unit_price,
)
from domain.uint import UINT32_MAX, UINT96_MAX, UINT128_MAX

T = 1_000_000


def _schedule(**overrides: int) -> AuctionSchedule:
    params = dict(
        start_price=1000,
        decrease_interval=100,
        decrease_size=50,
        num_decreases=10,
        max_mintable=500,
        max_mintable_per_account=5,
    )
    params.update(overrides)
    return AuctionSchedule(**params)


def test_reference_schedule_prices() -> None:
    """Verify the reference scenario: 1000 at start, 900 after 250s, floor 500 after 1500s."""

    schedule = _schedule()

    assert unit_price(schedule, T, T) == 1000
    assert unit_price(schedule, T, T + 250) == 900
    assert unit_price(schedule, T, T + 1500) == 500


def test_price_steps_on_interval_boundaries() -> None:
    """Verify the price only changes when a full interval has elapsed."""

    schedule = _schedule()

    assert unit_price(schedule, T, T + 99) == 1000
    assert unit_price(schedule, T, T + 100) == 950
    assert unit_price(schedule, T, T + 199) == 950
    assert unit_price(schedule, T, T + 200) == 900


def test_price_is_non_increasing_and_flat_after_last_decrease() -> None:
    """Verify monotonicity over a sweep and constancy from start + num_decreases * interval."""

    schedule = _schedule()
    prices = [unit_price(schedule, T, T + offset) for offset in range(0, 2500, 7)]

    assert all(later <= earlier for earlier, later in zip(prices, prices[1:]))

    flat_from = T + schedule.num_decreases * schedule.decrease_interval
    assert {unit_price(schedule, T, flat_from + offset) for offset in (0, 1, 999, 10**6)} == {500}


def test_price_before_start_is_start_price() -> None:
    """Verify times before the start count as zero elapsed intervals."""

    assert unit_price(_schedule(), T, T - 5_000) == 1000


def test_total_price_multiplies_quantity() -> None:
    """Verify the total charge and that zero quantity costs nothing."""

    schedule = _schedule()

    assert total_price(schedule, T, T + 250, 3) == 2700
    assert total_price(schedule, T, T + 250, 0) == 0


def test_total_price_fits_128_bits_at_maximum_widths() -> None:
    """Verify a 32-bit quantity times a 96-bit price is computed exactly."""

    schedule = _schedule(start_price=UINT96_MAX, decrease_size=0, num_decreases=0)

    assert total_price(schedule, T, T, UINT32_MAX) == UINT32_MAX * UINT96_MAX
    assert UINT32_MAX * UINT96_MAX <= UINT128_MAX


def test_floor_price_and_steps() -> None:
    """Verify floor price and per-step prices clamp to the schedule."""

    schedule = _schedule()

    assert floor_price(schedule) == 500
    assert price_at_step(schedule, 0) == 1000
    assert price_at_step(schedule, 3) == 850
    assert price_at_step(schedule, 50) == 500
    assert price_at_step(schedule, -1) == 1000


def test_price_curve_lists_each_step() -> None:
    """Verify the curve yields the start point and every step boundary."""

    curve = list(price_curve(_schedule(num_decreases=3), T))

    assert curve == [(T, 1000), (T + 100, 950), (T + 200, 900), (T + 300, 850)]


def test_price_curve_for_flat_schedule_is_single_point() -> None:
    assert list(price_curve(_schedule(decrease_size=0), T)) == [(T, 1000)]


def test_zero_interval_raises_arithmetic_error() -> None:
    """Verify a zero interval cannot divide by zero if it ever reaches the pricing engine."""

    with pytest.raises(PriceArithmeticError):
        compute_unit_price(
            start_price=1000,
            decrease_interval=0,
            decrease_size=50,
            num_decreases=10,
            start_time=T,
            now=T + 100,
        )


def test_decreases_below_zero_raise_arithmetic_error() -> None:
    """Verify a schedule whose decreases exceed the start price underflows loudly."""

    assert compute_unit_price(
        start_price=100,
        decrease_interval=10,
        decrease_size=60,
        num_decreases=5,
        start_time=T,
        now=T + 10,
    ) == 40

    with pytest.raises(PriceArithmeticError):
        compute_unit_price(
            start_price=100,
            decrease_interval=10,
            decrease_size=60,
            num_decreases=5,
            start_time=T,
            now=T + 20,
        )


def test_quantity_must_be_uint32() -> None:
    """Verify a bad quantity is an input error, not an arithmetic one."""

    with pytest.raises(ValueOutOfRange):
        total_price(_schedule(), T, T, -1)
    with pytest.raises(ValueOutOfRange):
        total_price(_schedule(), T, T, UINT32_MAX + 1)
    assert issubclass(ValueOutOfRange, ValidationError)


def test_arithmetic_error_is_an_arithmetic_error() -> None:
    """Verify callers catching ArithmeticError also see pricing failures."""

    assert issubclass(PriceArithmeticError, ArithmeticError)

"""
Domain: Step-decreasing (Dutch) auction pricing (pure).

Contract implemented here:
    elapsed_intervals = floor((now - start_time) / decrease_interval)
    steps_applied     = min(elapsed_intervals, num_decreases)
    unit_price        = start_price - steps_applied * decrease_size
    total_price       = quantity * unit_price

Guarantees:
- unit_price is a non-increasing step function of time.
- unit_price is flat at the floor price once num_decreases intervals have elapsed.
- Arithmetic is checked: unit prices stay within 96 bits and total prices within
  128 bits, otherwise PriceArithmeticError is raised. Nothing wraps.

Times before start_time count as zero elapsed intervals (the start price).
"""

from __future__ import annotations

from typing import Iterator, Tuple

from .auction import AuctionSchedule
from .errors import PriceArithmeticError
from .uint import UINT32_BITS, UINT96_BITS, UINT128_BITS, checked_mul, checked_sub, require_uint


def elapsed_intervals(start_time: int, now: int, decrease_interval: int) -> int:
    if decrease_interval <= 0:
        raise PriceArithmeticError("decrease_interval must be positive to compute a price")
    if now <= start_time:
        return 0
    return (now - start_time) // decrease_interval


def compute_unit_price(
    *,
    start_price: int,
    decrease_interval: int,
    decrease_size: int,
    num_decreases: int,
    start_time: int,
    now: int,
) -> int:
    """
    Unit price at `now` for a raw set of schedule parameters.

    Raises:
        PriceArithmeticError: zero interval, or decreases that drive the price negative
    """
    steps = min(elapsed_intervals(start_time, now, decrease_interval), num_decreases)
    discount = checked_mul(steps, decrease_size, UINT128_BITS, what="price discount")
    return checked_sub(start_price, discount, UINT96_BITS, what="unit price")


def unit_price(schedule: AuctionSchedule, start_time: int, now: int) -> int:
    """Current unit price of a sale's schedule."""

    return compute_unit_price(
        start_price=schedule.start_price,
        decrease_interval=schedule.decrease_interval,
        decrease_size=schedule.decrease_size,
        num_decreases=schedule.num_decreases,
        start_time=start_time,
        now=now,
    )


def total_price(schedule: AuctionSchedule, start_time: int, now: int, quantity: int) -> int:
    """
    Charge for `quantity` units at `now`. No caps are applied here.

    Raises:
        ValueOutOfRange: quantity is not a uint32
        PriceArithmeticError: the schedule cannot produce a price

    Example:
        schedule = AuctionSchedule(start_price=1000, decrease_interval=100,
                                   decrease_size=50, num_decreases=10,
                                   max_mintable=500, max_mintable_per_account=5)
        total_price(schedule, start_time=0, now=250, quantity=2)
        # Returns 1800 (two intervals elapsed, unit price 900)
    """
    require_uint("quantity", quantity, UINT32_BITS)
    return checked_mul(quantity, unit_price(schedule, start_time, now), UINT128_BITS, what="total price")


def floor_price(schedule: AuctionSchedule) -> int:
    """Price once every scheduled decrease has applied."""

    return price_at_step(schedule, schedule.num_decreases)


def price_at_step(schedule: AuctionSchedule, step: int) -> int:
    steps = min(max(step, 0), schedule.num_decreases)
    discount = checked_mul(steps, schedule.decrease_size, UINT128_BITS, what="price discount")
    return checked_sub(schedule.start_price, discount, UINT96_BITS, what="unit price")


def price_curve(schedule: AuctionSchedule, start_time: int) -> Iterator[Tuple[int, int]]:
    """
    Yield (time, unit_price) at every step boundary, from start_time to the floor.

    A schedule with decrease_size 0 yields a single point.
    """
    yield start_time, schedule.start_price
    if schedule.decrease_size == 0:
        return
    for step in range(1, schedule.num_decreases + 1):
        yield start_time + step * schedule.decrease_interval, price_at_step(schedule, step)


__all__ = [
    "elapsed_intervals",
    "compute_unit_price",
    "unit_price",
    "total_price",
    "floor_price",
    "price_at_step",
    "price_curve",
]

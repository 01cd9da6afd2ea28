"""
Domain: Error taxonomy for auction pricing and quota accounting.

Every failure aborts the whole operation with no state change. Callers react
on the error kind:
- ValidationError: the request or configuration is malformed; fix the input.
- CapExceeded: a quota would be exceeded; retrying the same quantity fails again.
- NotFound: the SaleKey is unknown.
- Unauthorized: the caller is neither edition owner nor admin.
- PriceArithmeticError: the schedule cannot produce a price in range.
"""

from __future__ import annotations

from typing import Optional


class AuctionError(Exception):
    """Base class for every error raised by the auction engine."""


# ============================================================================
# Validation
# ============================================================================

class ValidationError(AuctionError):
    """Raised when configuration or request values are rejected."""


class ZeroPerAccountCap(ValidationError):
    def __init__(self) -> None:
        super().__init__("max_mintable_per_account must be greater than zero")


class ZeroDecreaseInterval(ValidationError):
    def __init__(self) -> None:
        super().__init__("decrease_interval must be greater than zero")


class ValueOutOfRange(ValidationError):
    """Raised when a value does not fit its declared unsigned width."""

    def __init__(self, name: str, value: int, bits: int):
        self.name = name
        self.value = value
        self.bits = bits
        super().__init__(f"{name} must be an unsigned {bits}-bit integer, got {value!r}")


class InvalidSchedule(ValidationError):
    """Raised when the price decreases would take the price below zero."""

    def __init__(self, start_price: int, decrease_size: int, num_decreases: int):
        self.start_price = start_price
        self.decrease_size = decrease_size
        self.num_decreases = num_decreases
        super().__init__(
            f"start_price ({start_price}) is below num_decreases * decrease_size "
            f"({num_decreases} * {decrease_size})"
        )


class InvalidTimeRange(ValidationError):
    def __init__(self, start_time: int, end_time: int):
        self.start_time = start_time
        self.end_time = end_time
        super().__init__(f"start_time ({start_time}) must be before end_time ({end_time})")


class InvalidAffiliateFee(ValidationError):
    def __init__(self, affiliate_fee_bps: int):
        self.affiliate_fee_bps = affiliate_fee_bps
        super().__init__(f"affiliate_fee_bps must be at most 10000, got {affiliate_fee_bps}")


# ============================================================================
# Quotas
# ============================================================================

class CapExceeded(AuctionError):
    """Raised when a purchase would exceed a quantity cap."""

    def __init__(self, message: str, requested: int, limit: int, current: int):
        self.requested = requested
        self.limit = limit
        self.current = current
        super().__init__(message)


class ExceedsPerAccountCap(CapExceeded):
    def __init__(self, requested: int, limit: int, current: int):
        super().__init__(
            f"Per-account cap exceeded. Requested: {requested}, "
            f"already held: {current}, cap: {limit}",
            requested=requested,
            limit=limit,
            current=current,
        )


class ExceedsSaleCap(CapExceeded):
    def __init__(self, requested: int, limit: int, current: int):
        super().__init__(
            f"Sale cap exceeded. Requested: {requested}, "
            f"already minted: {current}, cap: {limit}",
            requested=requested,
            limit=limit,
            current=current,
        )


# ============================================================================
# Lookup, authorization, lifecycle
# ============================================================================

class NotFound(AuctionError):
    """Raised when a record does not exist."""


class SaleNotFound(NotFound):
    def __init__(self, key: object):
        self.key = key
        super().__init__(f"Sale not found: {key}")


class DuplicateSale(AuctionError):
    def __init__(self, key: object):
        self.key = key
        super().__init__(f"Sale already exists: {key}")


class Unauthorized(AuctionError):
    def __init__(self, edition: str, caller: str):
        self.edition = edition
        self.caller = caller
        super().__init__(f"{caller} is not the owner or an admin of edition {edition}")


class MintClosed(AuctionError):
    """Raised by the lifecycle collaborator when a sale is paused or outside its window."""

    def __init__(self, key: object, reason: str, now: Optional[int] = None):
        self.key = key
        self.reason = reason
        self.now = now
        super().__init__(f"Minting closed for {key}: {reason}")


class ReentrantCall(AuctionError):
    """Raised when an operation re-enters a sale that is already being mutated."""

    def __init__(self, key: object):
        self.key = key
        super().__init__(f"Re-entrant operation on {key} rejected")


# ============================================================================
# Arithmetic
# ============================================================================

class PriceArithmeticError(AuctionError, ArithmeticError):
    """Raised instead of wrapping when a price computation leaves its range."""


__all__ = [
    "AuctionError",
    "ValidationError",
    "ZeroPerAccountCap",
    "ZeroDecreaseInterval",
    "ValueOutOfRange",
    "InvalidSchedule",
    "InvalidTimeRange",
    "InvalidAffiliateFee",
    "CapExceeded",
    "ExceedsPerAccountCap",
    "ExceedsSaleCap",
    "NotFound",
    "SaleNotFound",
    "DuplicateSale",
    "Unauthorized",
    "MintClosed",
    "ReentrantCall",
    "PriceArithmeticError",
]

"""
Mint accountant: purchase-time quota enforcement.

Handles:
- Per-account cap check against the ledger's count of units already held
- Sale-wide cap check against the recorded running total
- Charge computation with the auction pricing formula
- All-or-nothing commit of total_minted (restored if issuance fails)

The sale-wide cap is enforced here and nowhere else.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from domain.auction import SaleKey
from domain.errors import ExceedsPerAccountCap, ExceedsSaleCap, ValidationError
from domain.events import Minted
from domain.pricing import unit_price
from domain.uint import UINT32_BITS, UINT128_BITS, checked_mul, require_uint
from repositories.auction_repository import AuctionConfigStore
from services.collaborators import EventSink, HoldingsOracle, SaleLifecycle, UnitIssuer
from services.locks import KeyedLocks

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PurchaseReceipt:
    """
    Result of a committed purchase.

    total_price is what the payment collaborator must settle.
    """
    key: SaleKey
    account: str
    quantity: int
    unit_price: int
    total_price: int
    total_minted: int


class MintAccountant:
    def __init__(
        self,
        store: AuctionConfigStore,
        lifecycle: SaleLifecycle,
        holdings: HoldingsOracle,
        locks: KeyedLocks,
        events: EventSink,
        issuer: Optional[UnitIssuer] = None,
    ):
        self._store = store
        self._lifecycle = lifecycle
        self._holdings = holdings
        self._locks = locks
        self._events = events
        self._issuer = issuer

    def purchase(self, key: SaleKey, quantity: int, account: str, now: int) -> PurchaseReceipt:
        """
        Record a purchase of `quantity` units by `account` at time `now`.

        Process:
        1. Lifecycle confirms minting is open (not paused, inside the window)
        2. Read units already held by the account from the ledger
        3. Check the per-account cap
        4. Check the sale-wide cap
        5. Price the purchase (before any write)
        6. Commit total_minted
        7. Issue units; on failure restore total_minted and re-raise
        8. Publish Minted, still under the sale's lock

        Raises:
            ValidationError: quantity is zero or out of range
            SaleNotFound: unknown key
            MintClosed: sale paused or outside its window
            ExceedsPerAccountCap / ExceedsSaleCap: quota exceeded
            PriceArithmeticError: schedule cannot produce a price
            ReentrantCall: a collaborator called back into this sale

        Example:
            receipt = accountant.purchase(SaleKey("0xedition", 0), 2, "0xbuyer", now)
            print(f"Charge {receipt.total_price} for {receipt.quantity} units")
        """
        require_uint("quantity", quantity, UINT32_BITS)
        if quantity == 0:
            raise ValidationError("quantity must be greater than zero")

        with self._locks.hold(key):
            schedule = self._store.get(key)
            self._lifecycle.require_mint_open(key, now)
            start_time = self._lifecycle.base_data(key).start_time

            # Checks
            already_held = self._holdings.units_held_by(key.edition, account)
            if already_held + quantity > schedule.max_mintable_per_account:
                logger.warning(
                    f"Purchase rejected for sale {key}: per-account cap",
                    extra={
                        "account": account,
                        "requested": quantity,
                        "already_held": already_held,
                        "cap": schedule.max_mintable_per_account,
                    },
                )
                raise ExceedsPerAccountCap(quantity, schedule.max_mintable_per_account, already_held)

            new_total = schedule.total_minted + quantity
            if new_total > schedule.max_mintable:
                logger.warning(
                    f"Purchase rejected for sale {key}: sale cap",
                    extra={
                        "account": account,
                        "requested": quantity,
                        "total_minted": schedule.total_minted,
                        "cap": schedule.max_mintable,
                    },
                )
                raise ExceedsSaleCap(quantity, schedule.max_mintable, schedule.total_minted)

            price = unit_price(schedule, start_time, now)
            charge = checked_mul(quantity, price, UINT128_BITS, what="total price")

            # Effects
            self._store.set_total_minted(key, new_total)

            # Interactions
            if self._issuer is not None:
                try:
                    self._issuer.issue(key.edition, account, quantity)
                except Exception:
                    self._store.set_total_minted(key, schedule.total_minted)
                    logger.error(
                        f"Issuance failed for sale {key}; total_minted restored",
                        extra={"account": account, "quantity": quantity},
                    )
                    raise

            # Notifications follow commit order.
            self._events.publish(Minted(
                key=key,
                account=account,
                quantity=quantity,
                unit_price=price,
                total_price=charge,
                total_minted=new_total,
            ))

        return PurchaseReceipt(
            key=key,
            account=account,
            quantity=quantity,
            unit_price=price,
            total_price=charge,
            total_minted=new_total,
        )


__all__ = [
    "MintAccountant",
    "PurchaseReceipt",
]

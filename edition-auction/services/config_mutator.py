"""
Config mutator: administrator-only changes to auction schedules and caps.

Every operation is authorized through the injected Authorizer (edition owner
or admin). Values are validated before anything is written, so a rejected
call leaves both the store and the lifecycle untouched. If the schedule write
fails after the lifecycle allocated a sale id, the lifecycle record is
discarded before the error propagates.

Notifications are published inside the sale's lock, after the commit, so
their order matches the order of the writes.

set_max_mintable may lower the cap below total_minted. That stops future
sales; total_minted is never reduced.
"""

from __future__ import annotations

import logging

from domain.auction import AuctionSchedule, SaleKey
from domain.errors import Unauthorized, ZeroPerAccountCap
from domain.events import (
    MaxMintablePerAccountUpdated,
    MaxMintableUpdated,
    ScheduleCreated,
    ScheduleUpdated,
)
from domain.uint import UINT32_BITS, require_uint
from repositories.auction_repository import AuctionConfigStore
from services.collaborators import Authorizer, EventSink, SaleLifecycle
from services.locks import KeyedLocks

logger = logging.getLogger(__name__)


class ConfigMutator:
    def __init__(
        self,
        store: AuctionConfigStore,
        lifecycle: SaleLifecycle,
        authorizer: Authorizer,
        locks: KeyedLocks,
        events: EventSink,
    ):
        self._store = store
        self._lifecycle = lifecycle
        self._authorizer = authorizer
        self._locks = locks
        self._events = events

    def _authorize(self, edition: str, caller: str) -> None:
        if not self._authorizer.is_owner_or_admin(edition, caller):
            logger.warning(
                f"Unauthorized auction configuration attempt on edition {edition}",
                extra={"edition": edition, "caller": caller},
            )
            raise Unauthorized(edition, caller)

    def create_sale(
        self,
        edition: str,
        caller: str,
        *,
        start_price: int,
        start_time: int,
        decrease_interval: int,
        decrease_size: int,
        num_decreases: int,
        end_time: int,
        affiliate_fee_bps: int,
        max_mintable: int,
        max_mintable_per_account: int,
    ) -> int:
        """
        Create a Dutch auction sale for `edition` and return its sale id.

        Raises:
            Unauthorized: caller is neither owner nor admin of the edition
            ZeroPerAccountCap: max_mintable_per_account is 0
            ZeroDecreaseInterval: decrease_interval is 0
            ValidationError: out-of-range values, negative floor price,
                             empty time window, fee above 10000 bps
        """
        self._authorize(edition, caller)

        if max_mintable_per_account == 0:
            raise ZeroPerAccountCap()

        schedule = AuctionSchedule(
            start_price=start_price,
            decrease_interval=decrease_interval,
            decrease_size=decrease_size,
            num_decreases=num_decreases,
            max_mintable=max_mintable,
            max_mintable_per_account=max_mintable_per_account,
        )

        sale_id = self._lifecycle.create_base(edition, start_time, end_time, affiliate_fee_bps)
        key = SaleKey(edition, sale_id)

        with self._locks.hold(key):
            try:
                self._store.create(key, schedule)
            except Exception:
                self._lifecycle.discard_base(key)
                logger.warning(
                    f"Schedule write failed for sale {key}; lifecycle record discarded",
                    extra={"edition": edition, "sale_id": sale_id, "caller": caller},
                )
                raise

            logger.info(
                f"Created auction sale {key}",
                extra={"edition": edition, "sale_id": sale_id, "caller": caller},
            )
            self._events.publish(ScheduleCreated(
                key=key,
                start_price=start_price,
                start_time=start_time,
                decrease_interval=decrease_interval,
                decrease_size=decrease_size,
                num_decreases=num_decreases,
                end_time=end_time,
                affiliate_fee_bps=affiliate_fee_bps,
                max_mintable=max_mintable,
                max_mintable_per_account=max_mintable_per_account,
            ))
        return sale_id

    def set_schedule(
        self,
        key: SaleKey,
        caller: str,
        *,
        start_price: int,
        decrease_interval: int,
        decrease_size: int,
        num_decreases: int,
    ) -> AuctionSchedule:
        """Overwrite the four price-schedule fields. Caps are not re-checked."""

        self._authorize(key.edition, caller)

        with self._locks.hold(key):
            updated = self._store.update(
                key,
                start_price=start_price,
                decrease_interval=decrease_interval,
                decrease_size=decrease_size,
                num_decreases=num_decreases,
            )

            logger.info(f"Updated price schedule for sale {key}", extra={"caller": caller})
            self._events.publish(ScheduleUpdated(
                key=key,
                start_price=updated.start_price,
                decrease_interval=updated.decrease_interval,
                decrease_size=updated.decrease_size,
                num_decreases=updated.num_decreases,
            ))
        return updated

    def set_max_mintable(self, key: SaleKey, caller: str, value: int) -> AuctionSchedule:
        """
        Overwrite the sale-wide cap.

        A value below total_minted is accepted; every later purchase then fails
        the sale cap check.
        """
        self._authorize(key.edition, caller)
        require_uint("max_mintable", value, UINT32_BITS)

        with self._locks.hold(key):
            updated = self._store.update(key, max_mintable=value)

            if updated.max_mintable < updated.total_minted:
                logger.warning(
                    f"Sale cap for {key} set below units already minted; further sales are stopped",
                    extra={"max_mintable": value, "total_minted": updated.total_minted},
                )
            self._events.publish(MaxMintableUpdated(key=key, max_mintable=updated.max_mintable))
        return updated

    def set_max_mintable_per_account(self, key: SaleKey, caller: str, value: int) -> AuctionSchedule:
        self._authorize(key.edition, caller)
        if value == 0:
            raise ZeroPerAccountCap()

        with self._locks.hold(key):
            updated = self._store.update(key, max_mintable_per_account=value)

            self._events.publish(MaxMintablePerAccountUpdated(
                key=key,
                max_mintable_per_account=updated.max_mintable_per_account,
            ))
        return updated


__all__ = ["ConfigMutator"]

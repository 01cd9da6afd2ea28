"""
Create a demo auction sale for testing and demos.

This script creates the demo edition sale used in the frontend:
- Edition: 0xdemo-edition
- Owner: 0xdemo-owner
- Start price 1000, dropping 50 every 100 seconds, 10 times (floor 500)
- 500 units, at most 5 per account

The sale is written to the store selected by AUCTION_STORE_BACKEND, then the
price curve is printed.
"""

import sys
from pathlib import Path

# Add parent directory to path so we can import from api, services, etc.
sys.path.insert(0, str(Path(__file__).parent.parent))

from api.dependencies import build_engine_from_settings
from api.settings import load_settings
from domain.auction import SaleKey
from domain.pricing import price_curve
from domain.time import from_unix_seconds, now_unix_seconds


DEMO_EDITION = "0xdemo-edition"
DEMO_OWNER = "0xdemo-owner"


def create_demo_sale() -> SaleKey:
    """Create the demo sale and print its schedule."""

    engine = build_engine_from_settings(load_settings())
    engine.roles.set_owner(DEMO_EDITION, DEMO_OWNER)

    start_time = now_unix_seconds()
    sale_id = engine.mutator.create_sale(
        DEMO_EDITION,
        DEMO_OWNER,
        start_price=1000,
        start_time=start_time,
        decrease_interval=100,
        decrease_size=50,
        num_decreases=10,
        end_time=start_time + 86_400,
        affiliate_fee_bps=0,
        max_mintable=500,
        max_mintable_per_account=5,
    )
    key = SaleKey(DEMO_EDITION, sale_id)
    info = engine.queries.info_for(key)

    print(f"[SUCCESS] Demo sale created successfully!")
    print(f"  Sale: {key}")
    print(f"  Window: {info.starts_at.isoformat()} -> {info.ends_at.isoformat()}")
    print(f"  Caps: {info.max_mintable} total, {info.max_mintable_per_account} per account")
    print(f"  Price curve:")

    schedule = engine.store.get(key)
    for at, price in price_curve(schedule, info.start_time):
        print(f"    {from_unix_seconds(at).isoformat()}  {price}")

    return key


if __name__ == "__main__":
    create_demo_sale()

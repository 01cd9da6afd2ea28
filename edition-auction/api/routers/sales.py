"""
Sales API Endpoints.

Endpoints for creating and configuring Dutch auction sales and reading their
state and current price.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from api.dependencies import get_engine
from api.errors import to_http_exception
from api.models import (
    CapUpdateRequest,
    CreateSaleRequest,
    CreateSaleResponse,
    ErrorResponse,
    PriceResponse,
    SaleInfoResponse,
    ScheduleResponse,
    ScheduleUpdateRequest,
)
from domain.auction import AuctionSchedule, SaleKey
from domain.errors import AuctionError
from domain.time import now_unix_seconds
from domain.uint import UINT32_MAX
from services.auction_engine import AuctionEngine

router = APIRouter()

_ERRORS = {
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
}

SaleId = Annotated[int, Path(ge=0, le=UINT32_MAX, description="Sale identifier within the edition")]


def _schedule_response(key: SaleKey, schedule: AuctionSchedule) -> ScheduleResponse:
    return ScheduleResponse(
        edition=key.edition,
        sale_id=key.sale_id,
        start_price=schedule.start_price,
        decrease_interval=schedule.decrease_interval,
        decrease_size=schedule.decrease_size,
        num_decreases=schedule.num_decreases,
        max_mintable=schedule.max_mintable,
        max_mintable_per_account=schedule.max_mintable_per_account,
        total_minted=schedule.total_minted,
    )


@router.post(
    "/editions/{edition}/sales",
    response_model=CreateSaleResponse,
    status_code=201,
    responses=_ERRORS,
    summary="Create Auction Sale",
    description="Create a step-decreasing auction sale for an edition. Owner or admin only."
)
def create_sale(edition: str, request: CreateSaleRequest, engine: AuctionEngine = Depends(get_engine)):
    """
    Create a Dutch auction sale.

    **Validation:**
    - `max_mintable_per_account` and `decrease_interval` must be non-zero
    - `start_price` must cover every scheduled decrease (floor price >= 0)
    - `start_time` must be before `end_time`
    """
    try:
        sale_id = engine.mutator.create_sale(
            edition,
            request.caller,
            start_price=request.start_price,
            start_time=request.start_time,
            decrease_interval=request.decrease_interval,
            decrease_size=request.decrease_size,
            num_decreases=request.num_decreases,
            end_time=request.end_time,
            affiliate_fee_bps=request.affiliate_fee_bps,
            max_mintable=request.max_mintable,
            max_mintable_per_account=request.max_mintable_per_account,
        )
        return CreateSaleResponse(edition=edition, sale_id=sale_id)

    except AuctionError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to create sale: {str(e)}"
        )


@router.get(
    "/editions/{edition}/sales/{sale_id}",
    response_model=SaleInfoResponse,
    responses=_ERRORS,
    summary="Get Sale Info",
    description="Lifecycle data and auction schedule of a sale, including units minted so far."
)
def get_sale_info(edition: str, sale_id: SaleId, engine: AuctionEngine = Depends(get_engine)):
    try:
        info = engine.queries.info_for(SaleKey(edition, sale_id))
        return SaleInfoResponse(
            edition=info.edition,
            sale_id=info.sale_id,
            start_time=info.start_time,
            end_time=info.end_time,
            starts_at=info.starts_at,
            ends_at=info.ends_at,
            affiliate_fee_bps=info.affiliate_fee_bps,
            mint_paused=info.mint_paused,
            start_price=info.start_price,
            decrease_interval=info.decrease_interval,
            decrease_size=info.decrease_size,
            num_decreases=info.num_decreases,
            floor_price=info.floor_price,
            max_mintable=info.max_mintable,
            max_mintable_per_account=info.max_mintable_per_account,
            total_minted=info.total_minted,
            remaining=info.remaining,
        )

    except AuctionError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to get sale info: {str(e)}"
        )


@router.get(
    "/editions/{edition}/sales/{sale_id}/price",
    response_model=PriceResponse,
    responses=_ERRORS,
    summary="Get Price",
    description="Total price for a quantity at a point in time. Caps are not applied."
)
def get_price(
    edition: str,
    sale_id: SaleId,
    quantity: int = Query(1, ge=0, le=UINT32_MAX, description="Units to price"),
    now: Optional[int] = Query(None, ge=0, description="Unix seconds; defaults to the server clock"),
    engine: AuctionEngine = Depends(get_engine),
):
    """
    Price a quantity of units.

    **Example usage:**
    - Current price of one unit: `GET /api/v1/editions/0xed/sales/0/price`
    - Price of 3 units at a given time: `GET /api/v1/editions/0xed/sales/0/price?quantity=3&now=1767225850`
    """
    try:
        key = SaleKey(edition, sale_id)
        at = now if now is not None else now_unix_seconds()
        return PriceResponse(
            edition=edition,
            sale_id=sale_id,
            quantity=quantity,
            now=at,
            unit_price=engine.queries.unit_price_for(key, at),
            total_price=engine.queries.price_for(key, at, quantity),
        )

    except AuctionError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to calculate price: {str(e)}"
        )


@router.put(
    "/editions/{edition}/sales/{sale_id}/schedule",
    response_model=ScheduleResponse,
    responses=_ERRORS,
    summary="Set Price Schedule",
    description="Overwrite start price, decrease interval, decrease size and number of decreases."
)
def set_schedule(
    edition: str,
    sale_id: SaleId,
    request: ScheduleUpdateRequest,
    engine: AuctionEngine = Depends(get_engine),
):
    try:
        key = SaleKey(edition, sale_id)
        schedule = engine.mutator.set_schedule(
            key,
            request.caller,
            start_price=request.start_price,
            decrease_interval=request.decrease_interval,
            decrease_size=request.decrease_size,
            num_decreases=request.num_decreases,
        )
        return _schedule_response(key, schedule)

    except AuctionError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to set schedule: {str(e)}"
        )


@router.put(
    "/editions/{edition}/sales/{sale_id}/max-mintable",
    response_model=ScheduleResponse,
    responses=_ERRORS,
    summary="Set Sale Cap",
    description="Overwrite the sale-wide cap. A cap below units already minted stops further sales."
)
def set_max_mintable(
    edition: str,
    sale_id: SaleId,
    request: CapUpdateRequest,
    engine: AuctionEngine = Depends(get_engine),
):
    try:
        key = SaleKey(edition, sale_id)
        schedule = engine.mutator.set_max_mintable(key, request.caller, request.value)
        return _schedule_response(key, schedule)

    except AuctionError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to set sale cap: {str(e)}"
        )


@router.put(
    "/editions/{edition}/sales/{sale_id}/max-mintable-per-account",
    response_model=ScheduleResponse,
    responses=_ERRORS,
    summary="Set Per-Account Cap",
    description="Overwrite the per-account cap. Zero is rejected."
)
def set_max_mintable_per_account(
    edition: str,
    sale_id: SaleId,
    request: CapUpdateRequest,
    engine: AuctionEngine = Depends(get_engine),
):
    try:
        key = SaleKey(edition, sale_id)
        schedule = engine.mutator.set_max_mintable_per_account(key, request.caller, request.value)
        return _schedule_response(key, schedule)

    except AuctionError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to set per-account cap: {str(e)}"
        )

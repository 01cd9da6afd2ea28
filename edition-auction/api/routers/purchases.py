"""
Purchases API Endpoints.

Endpoint for purchasing units from a Dutch auction sale.
"""

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_engine
from api.errors import to_http_exception
from api.models import ErrorResponse, PurchaseRequest, PurchaseResponse
from api.routers.sales import SaleId
from domain.auction import SaleKey
from domain.errors import AuctionError
from domain.time import now_unix_seconds
from services.auction_engine import AuctionEngine

router = APIRouter()


@router.post(
    "/editions/{edition}/sales/{sale_id}/purchases",
    response_model=PurchaseResponse,
    status_code=201,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
    summary="Purchase Units",
    description="Purchase units at the current auction price, subject to the per-account and sale-wide caps."
)
def purchase_units(
    edition: str,
    sale_id: SaleId,
    request: PurchaseRequest,
    engine: AuctionEngine = Depends(get_engine),
):
    """
    Purchase units from a sale.

    **Process:**
    1. Confirms the sale is open (not paused, inside its time window)
    2. Checks the account's existing units against the per-account cap
    3. Checks the sale-wide cap
    4. Records the units and returns the price to settle

    **All-or-Nothing:**
    A purchase that would exceed either cap is rejected with 409 and nothing
    is recorded. Retrying the same quantity will fail again.

    **Example request:**
    ```json
    {
      "account": "0xbuyer",
      "quantity": 2
    }
    ```
    """
    try:
        key = SaleKey(edition, sale_id)
        at = request.now if request.now is not None else now_unix_seconds()
        receipt = engine.accountant.purchase(key, request.quantity, request.account, at)

        return PurchaseResponse(
            edition=edition,
            sale_id=sale_id,
            account=receipt.account,
            quantity=receipt.quantity,
            unit_price=receipt.unit_price,
            total_price=receipt.total_price,
            total_minted=receipt.total_minted,
        )

    except AuctionError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to execute purchase: {str(e)}"
        )

"""
API Request and Response Models.

Pydantic models for validating API requests and serializing responses.
Amounts are integers in the ledger's native value unit.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


# ============================================================================
# Sale Configuration Models
# ============================================================================

class CreateSaleRequest(BaseModel):
    """Request to create a Dutch auction sale for an edition."""
    caller: str = Field(..., min_length=1, description="Account performing the change (owner or admin)")
    start_price: int = Field(..., ge=0, description="Unit price at auction start")
    start_time: int = Field(..., ge=0, description="Sale start (unix seconds)")
    decrease_interval: int = Field(..., ge=0, description="Seconds between price steps (non-zero)")
    decrease_size: int = Field(..., ge=0, description="Price drop per elapsed interval")
    num_decreases: int = Field(..., ge=0, description="Maximum number of price steps")
    end_time: int = Field(..., ge=0, description="Sale end (unix seconds)")
    affiliate_fee_bps: int = Field(0, ge=0, description="Affiliate fee in basis points")
    max_mintable: int = Field(..., ge=0, description="Sale-wide unit cap")
    max_mintable_per_account: int = Field(..., ge=0, description="Per-account unit cap (non-zero)")

    class Config:
        json_schema_extra = {
            "example": {
                "caller": "0xowner",
                "start_price": 1000,
                "start_time": 1767225600,
                "decrease_interval": 100,
                "decrease_size": 50,
                "num_decreases": 10,
                "end_time": 1767312000,
                "affiliate_fee_bps": 0,
                "max_mintable": 500,
                "max_mintable_per_account": 5
            }
        }


class CreateSaleResponse(BaseModel):
    """Identifier of the newly created sale."""
    edition: str
    sale_id: int


class ScheduleUpdateRequest(BaseModel):
    """Request to overwrite the price schedule of a sale."""
    caller: str = Field(..., min_length=1)
    start_price: int = Field(..., ge=0)
    decrease_interval: int = Field(..., ge=0)
    decrease_size: int = Field(..., ge=0)
    num_decreases: int = Field(..., ge=0)


class CapUpdateRequest(BaseModel):
    """Request to overwrite a quantity cap."""
    caller: str = Field(..., min_length=1)
    value: int = Field(..., ge=0)

    class Config:
        json_schema_extra = {
            "example": {
                "caller": "0xowner",
                "value": 5
            }
        }


class ScheduleResponse(BaseModel):
    """Schedule and caps of a sale after a change."""
    edition: str
    sale_id: int
    start_price: int
    decrease_interval: int
    decrease_size: int
    num_decreases: int
    max_mintable: int
    max_mintable_per_account: int
    total_minted: int


# ============================================================================
# Purchase Models
# ============================================================================

class PurchaseRequest(BaseModel):
    """Request to purchase units from a sale."""
    account: str = Field(..., min_length=1, description="Purchasing account")
    quantity: int = Field(..., ge=0, description="Units to purchase")
    now: Optional[int] = Field(
        None,
        ge=0,
        description="Purchase time (unix seconds); defaults to the server clock"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "account": "0xbuyer",
                "quantity": 2
            }
        }


class PurchaseResponse(BaseModel):
    """Committed purchase; total_price is the amount to settle."""
    edition: str
    sale_id: int
    account: str
    quantity: int
    unit_price: int
    total_price: int
    total_minted: int

    class Config:
        json_schema_extra = {
            "example": {
                "edition": "0xedition",
                "sale_id": 0,
                "account": "0xbuyer",
                "quantity": 2,
                "unit_price": 900,
                "total_price": 1800,
                "total_minted": 12
            }
        }


# ============================================================================
# Query Models
# ============================================================================

class PriceResponse(BaseModel):
    """Price quote at a point in time. Caps are not applied."""
    edition: str
    sale_id: int
    quantity: int
    now: int
    unit_price: int
    total_price: int


class SaleInfoResponse(BaseModel):
    """Merged lifecycle and schedule snapshot of a sale."""
    edition: str
    sale_id: int
    start_time: int
    end_time: int
    starts_at: datetime
    ends_at: datetime
    affiliate_fee_bps: int
    mint_paused: bool
    start_price: int
    decrease_interval: int
    decrease_size: int
    num_decreases: int
    floor_price: int
    max_mintable: int
    max_mintable_per_account: int
    total_minted: int
    remaining: int


# ============================================================================
# Error Models
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    detail: Optional[str] = None
    status_code: int

    class Config:
        json_schema_extra = {
            "example": {
                "error": "ExceedsSaleCap",
                "detail": "Sale cap exceeded. Requested: 3, already minted: 8, cap: 10",
                "status_code": 409
            }
        }

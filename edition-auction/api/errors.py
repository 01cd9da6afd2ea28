"""
Mapping from auction error kinds to HTTP responses.
"""

from __future__ import annotations

from typing import Tuple, Type

from fastapi import HTTPException

from api.models import ErrorResponse
from domain.errors import (
    AuctionError,
    CapExceeded,
    DuplicateSale,
    MintClosed,
    NotFound,
    PriceArithmeticError,
    ReentrantCall,
    Unauthorized,
    ValidationError,
)

# First match wins; subclasses are listed through their base kinds.
_STATUS_BY_KIND: Tuple[Tuple[Type[AuctionError], int], ...] = (
    (ValidationError, 422),
    (PriceArithmeticError, 422),
    (NotFound, 404),
    (Unauthorized, 403),
    (CapExceeded, 409),
    (MintClosed, 409),
    (DuplicateSale, 409),
    (ReentrantCall, 409),
)


def status_for(error: AuctionError) -> int:
    for kind, status_code in _STATUS_BY_KIND:
        if isinstance(error, kind):
            return status_code
    return 500


def to_http_exception(error: AuctionError) -> HTTPException:
    status_code = status_for(error)
    body = ErrorResponse(
        error=type(error).__name__,
        detail=str(error),
        status_code=status_code,
    )
    return HTTPException(status_code=status_code, detail=body.model_dump())


__all__ = ["status_for", "to_http_exception"]

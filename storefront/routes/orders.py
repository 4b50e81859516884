# storefront/routes/orders.py
from __future__ import annotations
from typing import Optional

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from ..schemas.orders import OrderIn, OrderPlacedOut
from ..services.orders import (
    InsufficientStock,
    InvalidRequest,
    StoreFailure,
    place_order,
)


router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("", status_code=201, response_model=OrderPlacedOut)
def place_order_endpoint(body: Optional[OrderIn] = None):
    try:
        return place_order(body.model_dump() if body is not None else {})
    except InvalidRequest as e:
        return JSONResponse(status_code=e.status_code, content={"message": e.message})
    except InsufficientStock as e:
        return JSONResponse(
            status_code=e.status_code,
            content={"message": e.message, "productId": e.product_id},
        )
    except StoreFailure as e:
        return JSONResponse(
            status_code=e.status_code,
            content={"message": "Server error", "error": e.message},
        )

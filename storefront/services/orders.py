# storefront/services/orders.py
"""
Order placement.

Checkout is three independent writes against three collections:

    1. insert the order
    2. decrement stock for every line item
    3. delete the buyer's cart entries

They are not wrapped in a transaction. The first failing step aborts the rest
and whatever already happened stays in place, so a failed stock update leaves
a saved order behind and an uncleared cart.

With ``ENFORCE_STOCK_FLOOR`` on, step 2 refuses to take stock that is not
there. A short order is then undone (stock handed back, order deleted) and
reported as ``InsufficientStock``; store errors still follow the rule above.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from ..settings import settings
from .store import collection

log = logging.getLogger(__name__)

STOCK_FIELD = "stock"
CART_OWNER_FIELD = "email"
# where a line item may keep its product key, in lookup order
PRODUCT_REF_KEYS = ("_id", "productId", "id")


class OrderError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequest(OrderError):
    status_code = 400

    def __init__(self, message: str = "Invalid order data"):
        super().__init__(message)


class InsufficientStock(OrderError):
    status_code = 409

    def __init__(self, product_id: str):
        super().__init__("Insufficient stock")
        self.product_id = product_id


class StoreFailure(OrderError):
    status_code = 500


def _now():
    return datetime.now(timezone.utc)


def _product_ref(item: Any) -> Optional[str]:
    if not isinstance(item, dict):
        return None
    for key in PRODUCT_REF_KEYS:
        ref = item.get(key)
        if ref:
            return str(ref)
    return None


def _quantity(item: Dict[str, Any]):
    # missing, 0, "" and None all count as one unit
    qty = item.get("quantity") or 1
    if isinstance(qty, str):
        qty = float(qty)
        if qty.is_integer():
            qty = int(qty)
    return qty


def _build_order(payload: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "userEmail": payload["userEmail"],
        "cart": payload["cart"],
        "subtotal": payload.get("subtotal"),
        "shippingCost": payload.get("shippingCost"),
        "total": payload.get("total"),
        "billingInfo": payload.get("billingInfo"),
        "shippingInfo": payload.get("shippingInfo"),
        "paymentInfo": payload.get("paymentInfo"),
        "createdAt": _now(),
    }


def _validate(payload: Dict[str, Any]) -> None:
    cart = payload.get("cart")
    if not payload.get("userEmail") or not cart or not isinstance(cart, list):
        raise InvalidRequest()


def _compensate(orders, products, order_id: str, taken: List[Tuple[str, Any]]) -> None:
    for product_id, qty in reversed(taken):
        products.increment(product_id, STOCK_FIELD, qty)
    orders.delete_one(order_id)


def place_order(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Persist an order, pull its items out of stock and empty the buyer's cart.

    Totals and the billing/shipping/payment blobs are stored exactly as the
    client sent them. Raises ``InvalidRequest`` before touching any store,
    ``InsufficientStock`` (floor mode only) or ``StoreFailure``.
    """
    _validate(payload)

    orders = collection(settings.orders_collection)
    products = collection(settings.products_collection)
    carts = collection(settings.carts_collection)

    user_email = payload["userEmail"]
    guarded = settings.enforce_stock_floor
    order_id: Optional[str] = None
    taken: List[Tuple[str, Any]] = []

    try:
        # 1) save order
        order_id = orders.insert_one(_build_order(payload))

        # 2) update stock for each product
        for item in payload["cart"]:
            product_id = _product_ref(item)
            if product_id is None:
                log.warning("order %s: line item without product reference skipped", order_id)
                continue
            qty = _quantity(item)
            if guarded:
                if not products.take(product_id, STOCK_FIELD, qty):
                    raise InsufficientStock(product_id)
                taken.append((product_id, qty))
            elif not products.increment(product_id, STOCK_FIELD, -qty):
                log.warning("order %s: product %s not found, stock untouched", order_id, product_id)

        # 3) empty the buyer's cart
        removed = carts.delete_many(**{CART_OWNER_FIELD: user_email})

    except InsufficientStock as e:
        log.info("order %s rejected: insufficient stock for %s", order_id, e.product_id)
        try:
            _compensate(orders, products, order_id, taken)
        except Exception as comp_err:
            log.exception("order %s: compensation failed", order_id)
            raise StoreFailure(str(comp_err)) from comp_err
        raise
    except Exception as e:
        log.exception("Error creating order (order_id=%s)", order_id)
        raise StoreFailure(str(e)) from e

    log.info(
        "order %s placed for %s (%d line items, %d cart entries cleared)",
        order_id, user_email, len(payload["cart"]), removed,
    )
    return {"message": "Order placed successfully", "orderId": order_id}

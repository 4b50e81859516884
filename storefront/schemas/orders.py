# storefront/schemas/orders.py
from typing import Any
from pydantic import BaseModel

# camelCase on purpose: these mirror the storefront's JSON exactly


class OrderIn(BaseModel):
    # untyped on purpose: the workflow validates buyer and cart itself (400, not
    # the framework's 422) and stores totals and info blobs exactly as sent
    userEmail: Any = None
    # cart lines are snapshots ({_id, name, price, quantity, ...}) kept as sent
    cart: Any = None
    subtotal: Any = None
    shippingCost: Any = None
    total: Any = None
    billingInfo: Any = None
    shippingInfo: Any = None
    paymentInfo: Any = None


class OrderPlacedOut(BaseModel):
    message: str
    orderId: str

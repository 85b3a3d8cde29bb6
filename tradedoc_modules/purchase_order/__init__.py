"""
Purchase Order (``tradedoc_modules.purchase_order``).

Issued by a buyer, from a contract or a quotation or standalone.  The
seller accepts or rejects it.  Sales orders, delivery notes, packing lists
and invoices all hang off a purchase order.
"""

from tradedoc_modules.purchase_order.definition import PURCHASE_ORDER_DEFINITION
from tradedoc_modules.purchase_order.orm import PurchaseOrder
from tradedoc_modules.purchase_order.workflows import (
    PURCHASE_ORDER_WORKFLOW,
    PurchaseOrderAction,
    PurchaseOrderStatus,
)

__all__ = [
    "PURCHASE_ORDER_DEFINITION",
    "PURCHASE_ORDER_WORKFLOW",
    "PurchaseOrder",
    "PurchaseOrderAction",
    "PurchaseOrderStatus",
]

"""
Sales Order (``tradedoc_modules.sales_order``).

Issued by a seller against a buyer's purchase order.  Unlike the other
documents, the seller drives it through processing, shipping and
delivery.
"""

from tradedoc_modules.sales_order.definition import SALES_ORDER_DEFINITION
from tradedoc_modules.sales_order.orm import SalesOrder
from tradedoc_modules.sales_order.workflows import (
    SALES_ORDER_WORKFLOW,
    SalesOrderAction,
    SalesOrderStatus,
)

__all__ = [
    "SALES_ORDER_DEFINITION",
    "SALES_ORDER_WORKFLOW",
    "SalesOrder",
    "SalesOrderAction",
    "SalesOrderStatus",
]

"""
Purchase order workflow (``tradedoc_modules.purchase_order.workflows``).

    DRAFT/PENDING --accept--> APPROVED   (seller)
    DRAFT/PENDING --reject--> REJECTED   (seller)

COMPLETED is a recognized status with no action leading to it.
"""

from enum import Enum

from tradedoc_kernel.domain.workflow import Workflow, from_each
from tradedoc_kernel.logging_config import get_logger

logger = get_logger("modules.purchase_order.workflows")


class PurchaseOrderStatus(str, Enum):
    DRAFT = "DRAFT"
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    COMPLETED = "COMPLETED"


class PurchaseOrderAction(str, Enum):
    ACCEPT = "accept"
    REJECT = "reject"


_OPEN = (PurchaseOrderStatus.DRAFT.value, PurchaseOrderStatus.PENDING.value)

PURCHASE_ORDER_WORKFLOW = Workflow(
    name="purchase_order",
    description="Buyer order confirmed by the seller",
    initial_state=PurchaseOrderStatus.DRAFT.value,
    states=tuple(s.value for s in PurchaseOrderStatus),
    transitions=(
        *from_each(_OPEN, PurchaseOrderStatus.APPROVED.value, PurchaseOrderAction.ACCEPT.value, "COUNTER"),
        *from_each(_OPEN, PurchaseOrderStatus.REJECTED.value, PurchaseOrderAction.REJECT.value, "COUNTER"),
    ),
    terminal_states=(
        PurchaseOrderStatus.APPROVED.value,
        PurchaseOrderStatus.REJECTED.value,
        PurchaseOrderStatus.COMPLETED.value,
    ),
)

logger.info(
    "purchase_order_workflow_defined",
    extra={
        "workflow": PURCHASE_ORDER_WORKFLOW.name,
        "states": len(PURCHASE_ORDER_WORKFLOW.states),
        "transitions": len(PURCHASE_ORDER_WORKFLOW.transitions),
    },
)

"""
Sales order workflow (``tradedoc_modules.sales_order.workflows``).

    DRAFT/PENDING --process--> PROCESSING   (seller)
    PROCESSING    --ship-----> SHIPPED      (seller)
    SHIPPED       --deliver--> DELIVERED    (seller)
    any open      --cancel---> CANCELLED    (seller)
"""

from enum import Enum

from tradedoc_kernel.domain.workflow import Transition, Workflow, from_each
from tradedoc_kernel.logging_config import get_logger

logger = get_logger("modules.sales_order.workflows")


class SalesOrderStatus(str, Enum):
    DRAFT = "DRAFT"
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class SalesOrderAction(str, Enum):
    PROCESS = "process"
    SHIP = "ship"
    DELIVER = "deliver"
    CANCEL = "cancel"


SALES_ORDER_WORKFLOW = Workflow(
    name="sales_order",
    description="Seller fulfilment of a purchase order",
    initial_state=SalesOrderStatus.DRAFT.value,
    states=tuple(s.value for s in SalesOrderStatus),
    transitions=(
        *from_each(
            (SalesOrderStatus.DRAFT.value, SalesOrderStatus.PENDING.value),
            SalesOrderStatus.PROCESSING.value,
            SalesOrderAction.PROCESS.value,
            "ISSUER",
        ),
        Transition(
            from_state=SalesOrderStatus.PROCESSING.value,
            to_state=SalesOrderStatus.SHIPPED.value,
            action=SalesOrderAction.SHIP.value,
            actor_role="ISSUER",
        ),
        Transition(
            from_state=SalesOrderStatus.SHIPPED.value,
            to_state=SalesOrderStatus.DELIVERED.value,
            action=SalesOrderAction.DELIVER.value,
            actor_role="ISSUER",
        ),
        *from_each(
            (
                SalesOrderStatus.DRAFT.value,
                SalesOrderStatus.PENDING.value,
                SalesOrderStatus.PROCESSING.value,
                SalesOrderStatus.SHIPPED.value,
            ),
            SalesOrderStatus.CANCELLED.value,
            SalesOrderAction.CANCEL.value,
            "ISSUER",
        ),
    ),
    terminal_states=(SalesOrderStatus.DELIVERED.value, SalesOrderStatus.CANCELLED.value),
)

logger.info(
    "sales_order_workflow_defined",
    extra={
        "workflow": SALES_ORDER_WORKFLOW.name,
        "states": len(SALES_ORDER_WORKFLOW.states),
        "transitions": len(SALES_ORDER_WORKFLOW.transitions),
    },
)

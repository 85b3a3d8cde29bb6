"""
Quotation workflow (``tradedoc_modules.quotation.workflows``).

A quotation replying to an RFQ starts SENT; a standalone one starts DRAFT.

    DRAFT/SENT/PENDING --accept--> ACCEPTED   (buyer)
    DRAFT/SENT/PENDING --reject--> REJECTED   (buyer)
"""

from enum import Enum

from tradedoc_kernel.domain.workflow import Workflow, from_each
from tradedoc_kernel.logging_config import get_logger

logger = get_logger("modules.quotation.workflows")


class QuotationStatus(str, Enum):
    DRAFT = "DRAFT"
    SENT = "SENT"
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class QuotationAction(str, Enum):
    ACCEPT = "accept"
    REJECT = "reject"


_OPEN = (
    QuotationStatus.DRAFT.value,
    QuotationStatus.SENT.value,
    QuotationStatus.PENDING.value,
)

QUOTATION_WORKFLOW = Workflow(
    name="quotation",
    description="Seller offer answered by the buyer",
    initial_state=QuotationStatus.DRAFT.value,
    states=tuple(s.value for s in QuotationStatus),
    transitions=(
        *from_each(_OPEN, QuotationStatus.ACCEPTED.value, QuotationAction.ACCEPT.value, "COUNTER"),
        *from_each(_OPEN, QuotationStatus.REJECTED.value, QuotationAction.REJECT.value, "COUNTER"),
    ),
    terminal_states=(QuotationStatus.ACCEPTED.value, QuotationStatus.REJECTED.value),
)

logger.info(
    "quotation_workflow_defined",
    extra={
        "workflow": QUOTATION_WORKFLOW.name,
        "states": len(QUOTATION_WORKFLOW.states),
        "transitions": len(QUOTATION_WORKFLOW.transitions),
    },
)

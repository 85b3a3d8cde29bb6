"""
RFQ workflow (``tradedoc_modules.rfq.workflows``).

    DRAFT/PENDING --approve--> APPROVED   (seller)
    DRAFT/PENDING --decline--> REJECTED   (seller)
"""

from enum import Enum

from tradedoc_kernel.domain.workflow import Workflow, from_each
from tradedoc_kernel.logging_config import get_logger

logger = get_logger("modules.rfq.workflows")


class RFQStatus(str, Enum):
    DRAFT = "DRAFT"
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class RFQAction(str, Enum):
    APPROVE = "approve"
    DECLINE = "decline"


_OPEN = (RFQStatus.DRAFT.value, RFQStatus.PENDING.value)

RFQ_WORKFLOW = Workflow(
    name="rfq",
    description="Buyer request answered by the seller",
    initial_state=RFQStatus.DRAFT.value,
    states=tuple(s.value for s in RFQStatus),
    transitions=(
        *from_each(_OPEN, RFQStatus.APPROVED.value, RFQAction.APPROVE.value, "COUNTER"),
        *from_each(_OPEN, RFQStatus.REJECTED.value, RFQAction.DECLINE.value, "COUNTER"),
    ),
    terminal_states=(RFQStatus.APPROVED.value, RFQStatus.REJECTED.value),
)

logger.info(
    "rfq_workflow_defined",
    extra={
        "workflow": RFQ_WORKFLOW.name,
        "states": len(RFQ_WORKFLOW.states),
        "transitions": len(RFQ_WORKFLOW.transitions),
    },
)

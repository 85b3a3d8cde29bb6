"""
Contract workflow (``tradedoc_modules.contract.workflows``).

All buyer actions are legal from any non-terminal status, including
PENDING_CHANGES, so a buyer may suggest changes more than once.

    * --accept----------> APPROVED          (buyer)
    * --reject----------> REJECTED          (buyer)
    * --suggest_changes-> PENDING_CHANGES   (buyer, records suggestions)
"""

from enum import Enum

from tradedoc_kernel.domain.workflow import Workflow, from_each
from tradedoc_kernel.logging_config import get_logger

logger = get_logger("modules.contract.workflows")


class ContractStatus(str, Enum):
    DRAFT = "DRAFT"
    SENT = "SENT"
    PENDING = "PENDING"
    PENDING_CHANGES = "PENDING_CHANGES"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ContractAction(str, Enum):
    ACCEPT = "accept"
    REJECT = "reject"
    SUGGEST_CHANGES = "suggest_changes"


_OPEN = (
    ContractStatus.DRAFT.value,
    ContractStatus.SENT.value,
    ContractStatus.PENDING.value,
    ContractStatus.PENDING_CHANGES.value,
)

_RESPONSE = ("counter_response_date",)

CONTRACT_WORKFLOW = Workflow(
    name="contract",
    description="Seller contract negotiated with the buyer",
    initial_state=ContractStatus.DRAFT.value,
    states=tuple(s.value for s in ContractStatus),
    transitions=(
        *from_each(_OPEN, ContractStatus.APPROVED.value, ContractAction.ACCEPT.value, "COUNTER",
                   records=_RESPONSE),
        *from_each(_OPEN, ContractStatus.REJECTED.value, ContractAction.REJECT.value, "COUNTER",
                   records=_RESPONSE),
        *from_each(_OPEN, ContractStatus.PENDING_CHANGES.value, ContractAction.SUGGEST_CHANGES.value,
                   "COUNTER", records=_RESPONSE + ("counter_suggestions",)),
    ),
    terminal_states=(ContractStatus.APPROVED.value, ContractStatus.REJECTED.value),
)

logger.info(
    "contract_workflow_defined",
    extra={
        "workflow": CONTRACT_WORKFLOW.name,
        "states": len(CONTRACT_WORKFLOW.states),
        "transitions": len(CONTRACT_WORKFLOW.transitions),
    },
)

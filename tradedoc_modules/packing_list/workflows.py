"""
Packing list workflow (``tradedoc_modules.packing_list.workflows``).

    PENDING --acknowledge--> ACKNOWLEDGED   (buyer)
    PENDING --reject-------> REJECTED       (buyer)
"""

from enum import Enum

from tradedoc_kernel.domain.workflow import Transition, Workflow
from tradedoc_kernel.logging_config import get_logger

logger = get_logger("modules.packing_list.workflows")


class PackingListStatus(str, Enum):
    PENDING = "PENDING"
    ACKNOWLEDGED = "ACKNOWLEDGED"
    REJECTED = "REJECTED"


class PackingListAction(str, Enum):
    ACKNOWLEDGE = "acknowledge"
    REJECT = "reject"


PACKING_LIST_WORKFLOW = Workflow(
    name="packing_list",
    description="Seller packing list acknowledged or rejected by the buyer",
    initial_state=PackingListStatus.PENDING.value,
    states=tuple(s.value for s in PackingListStatus),
    transitions=(
        Transition(
            from_state=PackingListStatus.PENDING.value,
            to_state=PackingListStatus.ACKNOWLEDGED.value,
            action=PackingListAction.ACKNOWLEDGE.value,
            actor_role="COUNTER",
        ),
        Transition(
            from_state=PackingListStatus.PENDING.value,
            to_state=PackingListStatus.REJECTED.value,
            action=PackingListAction.REJECT.value,
            actor_role="COUNTER",
        ),
    ),
    terminal_states=(PackingListStatus.ACKNOWLEDGED.value, PackingListStatus.REJECTED.value),
)

logger.info(
    "packing_list_workflow_defined",
    extra={
        "workflow": PACKING_LIST_WORKFLOW.name,
        "states": len(PACKING_LIST_WORKFLOW.states),
        "transitions": len(PACKING_LIST_WORKFLOW.transitions),
    },
)

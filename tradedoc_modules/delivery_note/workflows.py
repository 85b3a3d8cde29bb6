"""
Delivery note workflow (``tradedoc_modules.delivery_note.workflows``).

    PENDING --acknowledge--> ACKNOWLEDGED   (buyer)
    PENDING --dispute------> DISPUTED       (buyer)
"""

from enum import Enum

from tradedoc_kernel.domain.workflow import Transition, Workflow
from tradedoc_kernel.logging_config import get_logger

logger = get_logger("modules.delivery_note.workflows")


class DeliveryNoteStatus(str, Enum):
    PENDING = "PENDING"
    ACKNOWLEDGED = "ACKNOWLEDGED"
    DISPUTED = "DISPUTED"


class DeliveryNoteAction(str, Enum):
    ACKNOWLEDGE = "acknowledge"
    DISPUTE = "dispute"


DELIVERY_NOTE_WORKFLOW = Workflow(
    name="delivery_note",
    description="Seller delivery acknowledged or disputed by the buyer",
    initial_state=DeliveryNoteStatus.PENDING.value,
    states=tuple(s.value for s in DeliveryNoteStatus),
    transitions=(
        Transition(
            from_state=DeliveryNoteStatus.PENDING.value,
            to_state=DeliveryNoteStatus.ACKNOWLEDGED.value,
            action=DeliveryNoteAction.ACKNOWLEDGE.value,
            actor_role="COUNTER",
        ),
        Transition(
            from_state=DeliveryNoteStatus.PENDING.value,
            to_state=DeliveryNoteStatus.DISPUTED.value,
            action=DeliveryNoteAction.DISPUTE.value,
            actor_role="COUNTER",
        ),
    ),
    terminal_states=(DeliveryNoteStatus.ACKNOWLEDGED.value, DeliveryNoteStatus.DISPUTED.value),
)

logger.info(
    "delivery_note_workflow_defined",
    extra={
        "workflow": DELIVERY_NOTE_WORKFLOW.name,
        "states": len(DELIVERY_NOTE_WORKFLOW.states),
        "transitions": len(DELIVERY_NOTE_WORKFLOW.transitions),
    },
)

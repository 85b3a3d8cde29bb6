"""
Invoice workflow (``tradedoc_modules.invoice.workflows``).

    DRAFT          --accept-------> PENDING            (buyer)
    DRAFT/PENDING  --reject-------> DRAFT              (buyer, optional reason)
    PENDING/OVERDUE --pay---------> PAID               (buyer)
    PENDING/OVERDUE --partial_pay-> same status, or PAID once settled (buyer)
    PENDING        --mark_overdue-> OVERDUE            (seller, past due date)

PAID is terminal.
"""

from enum import Enum

from tradedoc_kernel.domain.workflow import Guard, Transition, Workflow, from_each
from tradedoc_kernel.logging_config import get_logger

logger = get_logger("modules.invoice.workflows")


class InvoiceStatus(str, Enum):
    DRAFT = "DRAFT"
    PENDING = "PENDING"
    OVERDUE = "OVERDUE"
    PAID = "PAID"


class InvoiceAction(str, Enum):
    ACCEPT = "accept"
    REJECT = "reject"
    PAY = "pay"
    PARTIAL_PAY = "partial_pay"
    MARK_OVERDUE = "mark_overdue"


# -----------------------------------------------------------------------------
# Guards
# -----------------------------------------------------------------------------

PAST_DUE_DATE = Guard(
    name="past_due_date",
    description="Invoice has a due date and it is before today",
)

_PAYABLE = (InvoiceStatus.PENDING.value, InvoiceStatus.OVERDUE.value)
_PAYMENT_FIELDS = ("paid_amount", "remaining_amount", "payment_receipt_ref")

INVOICE_WORKFLOW = Workflow(
    name="invoice",
    description="Seller invoice accepted and paid by the buyer",
    initial_state=InvoiceStatus.DRAFT.value,
    states=tuple(s.value for s in InvoiceStatus),
    transitions=(
        Transition(
            from_state=InvoiceStatus.DRAFT.value,
            to_state=InvoiceStatus.PENDING.value,
            action=InvoiceAction.ACCEPT.value,
            actor_role="COUNTER",
        ),
        *from_each(
            (InvoiceStatus.DRAFT.value, InvoiceStatus.PENDING.value),
            InvoiceStatus.DRAFT.value,
            InvoiceAction.REJECT.value,
            "COUNTER",
        ),
        *from_each(_PAYABLE, InvoiceStatus.PAID.value, InvoiceAction.PAY.value, "COUNTER",
                   records=_PAYMENT_FIELDS),
        *from_each(_PAYABLE, InvoiceStatus.PAID.value, InvoiceAction.PARTIAL_PAY.value, "COUNTER",
                   records=_PAYMENT_FIELDS),
        Transition(
            from_state=InvoiceStatus.PENDING.value,
            to_state=InvoiceStatus.PENDING.value,
            action=InvoiceAction.PARTIAL_PAY.value,
            actor_role="COUNTER",
            records=_PAYMENT_FIELDS,
        ),
        Transition(
            from_state=InvoiceStatus.OVERDUE.value,
            to_state=InvoiceStatus.OVERDUE.value,
            action=InvoiceAction.PARTIAL_PAY.value,
            actor_role="COUNTER",
            records=_PAYMENT_FIELDS,
        ),
        Transition(
            from_state=InvoiceStatus.PENDING.value,
            to_state=InvoiceStatus.OVERDUE.value,
            action=InvoiceAction.MARK_OVERDUE.value,
            actor_role="ISSUER",
            guard=PAST_DUE_DATE,
        ),
    ),
    terminal_states=(InvoiceStatus.PAID.value,),
)

logger.info(
    "invoice_workflow_defined",
    extra={
        "workflow": INVOICE_WORKFLOW.name,
        "states": len(INVOICE_WORKFLOW.states),
        "transitions": len(INVOICE_WORKFLOW.transitions),
        "guards": [PAST_DUE_DATE.name],
    },
)

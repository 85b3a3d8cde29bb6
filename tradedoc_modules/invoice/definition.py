"""Invoice creation rules and the payment action handler."""

from decimal import Decimal

from tradedoc_kernel.domain.documents import DocumentType, Role
from tradedoc_kernel.exceptions import ReceiptRequiredError
from tradedoc_modules.invoice.ledger import (
    LedgerState,
    apply_payment_action,
    validate_payment_amount,
)
from tradedoc_modules.invoice.orm import Invoice
from tradedoc_modules.invoice.workflows import (
    INVOICE_WORKFLOW,
    InvoiceAction,
    InvoiceStatus,
)
from tradedoc_modules.registry import (
    ActionEffect,
    ActionRequest,
    DateRule,
    DocumentTypeDefinition,
    FieldKind,
    ParentLink,
    PartySide,
    register,
)

# Only these write the ledger columns; the rest change status alone
_MONEY_ACTIONS = frozenset({InvoiceAction.PAY, InvoiceAction.PARTIAL_PAY})


def handle_invoice_action(document: Invoice, request: ActionRequest) -> ActionEffect:
    action = InvoiceAction(request.action)

    if action is InvoiceAction.MARK_OVERDUE:
        return ActionEffect(to_state=InvoiceStatus.OVERDUE.value, reason=request.reason)

    receipt_ref = None
    if action is InvoiceAction.PARTIAL_PAY:
        # Amount first: nothing is stored for a payment that cannot apply
        validate_payment_amount(request.amount)
        receipt_ref = request.store_receipt() if request.store_receipt else None
        if receipt_ref is None:
            raise ReceiptRequiredError()
    elif action is InvoiceAction.PAY and request.store_receipt is not None:
        receipt_ref = request.store_receipt()

    outcome = apply_payment_action(
        LedgerState(
            status=document.status,
            total_amount=document.total_amount,
            paid_amount=document.paid_amount or Decimal("0"),
        ),
        action,
        amount=request.amount,
        receipt_ref=receipt_ref,
    )

    if action not in _MONEY_ACTIONS:
        return ActionEffect(to_state=outcome.status, reason=request.reason)

    updates = {
        "paid_amount": outcome.paid_amount,
        "remaining_amount": outcome.remaining_amount,
    }
    if receipt_ref is not None:
        updates["payment_receipt_ref"] = receipt_ref

    return ActionEffect(
        to_state=outcome.status,
        updates=updates,
        reason=request.reason,
        amount=outcome.amount_applied if outcome.amount_applied else None,
    )


INVOICE_DEFINITION = register(
    DocumentTypeDefinition(
        document_type=DocumentType.INVOICE,
        model=Invoice,
        workflow=INVOICE_WORKFLOW,
        status_enum=InvoiceStatus,
        action_enum=InvoiceAction,
        parents=(
            ParentLink(
                field="purchase_order_id",
                parent_type=DocumentType.PURCHASE_ORDER,
                acting_role=Role.COUNTER,
                counter_source=PartySide.ISSUER,
                required=True,
            ),
        ),
        extra_fields={"due_date": FieldKind.DATE},
        required_fields=("issue_date",),
        date_rules=(DateRule("due_date", "issue_date", strict=False),),
        tracks_payments=True,
        action_handler=handle_invoice_action,
    )
)

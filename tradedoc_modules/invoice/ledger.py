"""
Invoice payment ledger (``tradedoc_modules.invoice.ledger``).

Pure state update for the buyer's invoice actions.  No I/O: the caller
locks the invoice row, stores any receipt, and writes the outcome back.

Invariants enforced
-------------------
* ``paid_amount + remaining_amount == total_amount`` after every action.
* ``paid_amount`` never decreases.
* PAID is terminal; ``pay`` on a PAID invoice is an invalid transition.
* Money is rounded half-up to 2 places once per update.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from tradedoc_kernel.db.types import round_money
from tradedoc_kernel.exceptions import (
    ActionNotAllowedError,
    InvalidFieldValueError,
    MissingFieldError,
    ReceiptRequiredError,
    TerminalStatusError,
)
from tradedoc_kernel.logging_config import get_logger
from tradedoc_modules.invoice.workflows import InvoiceAction, InvoiceStatus

logger = get_logger("modules.invoice.ledger")

ZERO = Decimal("0")

_PAYABLE = frozenset({InvoiceStatus.PENDING.value, InvoiceStatus.OVERDUE.value})


@dataclass(frozen=True)
class LedgerState:
    status: str
    total_amount: Decimal
    paid_amount: Decimal = ZERO

    @property
    def remaining_amount(self) -> Decimal:
        return round_money(self.total_amount - self.paid_amount)


@dataclass(frozen=True)
class LedgerOutcome:
    status: str
    paid_amount: Decimal
    remaining_amount: Decimal
    # Money actually credited by this action (0 for accept/reject)
    amount_applied: Decimal = ZERO

    @property
    def settled(self) -> bool:
        return self.status == InvoiceStatus.PAID.value


def validate_payment_amount(amount: Decimal | None) -> Decimal:
    """Rounded partial payment amount; must be present and positive."""
    if amount is None:
        raise MissingFieldError("amount")
    rounded = round_money(amount)
    if rounded <= ZERO:
        raise InvalidFieldValueError("amount", "must be greater than 0")
    return rounded


def _settle(state: LedgerState) -> LedgerOutcome:
    total = round_money(state.total_amount)
    return LedgerOutcome(
        status=InvoiceStatus.PAID.value,
        paid_amount=total,
        remaining_amount=ZERO,
        amount_applied=round_money(total - state.paid_amount),
    )


def _not_allowed(state: LedgerState, action: InvoiceAction) -> ActionNotAllowedError:
    return ActionNotAllowedError("invoice", state.status, action.value)


def apply_payment_action(
    state: LedgerState,
    action: InvoiceAction,
    amount: Decimal | None = None,
    receipt_ref: str | None = None,
) -> LedgerOutcome:
    """
    Apply a buyer action to the invoice ledger.

    Args:
        state: Current status, total and paid amount.
        action: accept, reject, pay or partial_pay.
        amount: Instalment for ``partial_pay``.
        receipt_ref: Stored receipt; required for ``partial_pay``.

    Raises:
        TerminalStatusError: invoice already PAID.
        ActionNotAllowedError: action not legal from the current status.
        MissingFieldError / InvalidFieldValueError: bad ``amount``.
        ReceiptRequiredError: ``partial_pay`` without a receipt.
    """
    if state.status == InvoiceStatus.PAID.value:
        raise TerminalStatusError("invoice", state.status, action.value)

    paid = round_money(state.paid_amount)

    if action is InvoiceAction.ACCEPT:
        if state.status != InvoiceStatus.DRAFT.value:
            raise _not_allowed(state, action)
        return LedgerOutcome(InvoiceStatus.PENDING.value, paid, state.remaining_amount)

    if action is InvoiceAction.REJECT:
        if state.status not in (InvoiceStatus.DRAFT.value, InvoiceStatus.PENDING.value):
            raise _not_allowed(state, action)
        return LedgerOutcome(InvoiceStatus.DRAFT.value, paid, state.remaining_amount)

    if action is InvoiceAction.PAY:
        if state.status not in _PAYABLE:
            raise _not_allowed(state, action)
        return _settle(state)

    if action is InvoiceAction.PARTIAL_PAY:
        if state.status not in _PAYABLE:
            raise _not_allowed(state, action)
        instalment = validate_payment_amount(amount)
        if not receipt_ref:
            raise ReceiptRequiredError()

        if instalment >= state.remaining_amount:
            logger.debug(
                "partial_payment_settles_invoice",
                extra={"amount": str(instalment), "remaining": str(state.remaining_amount)},
            )
            return _settle(state)

        new_paid = round_money(paid + instalment)
        return LedgerOutcome(
            status=state.status,
            paid_amount=new_paid,
            remaining_amount=round_money(state.total_amount - new_paid),
            amount_applied=instalment,
        )

    raise _not_allowed(state, action)

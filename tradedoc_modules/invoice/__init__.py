"""
Invoice (``tradedoc_modules.invoice``).

Issued by a seller against a purchase order.  The buyer accepts, rejects
and pays it, in full or in instalments; each instalment carries a
receipt.  The payment ledger keeps ``paid_amount + remaining_amount``
equal to ``total_amount``.
"""

from tradedoc_modules.invoice.definition import INVOICE_DEFINITION
from tradedoc_modules.invoice.ledger import LedgerOutcome, LedgerState, apply_payment_action
from tradedoc_modules.invoice.orm import Invoice
from tradedoc_modules.invoice.workflows import (
    INVOICE_WORKFLOW,
    InvoiceAction,
    InvoiceStatus,
)

__all__ = [
    "INVOICE_DEFINITION",
    "INVOICE_WORKFLOW",
    "Invoice",
    "InvoiceAction",
    "InvoiceStatus",
    "LedgerOutcome",
    "LedgerState",
    "apply_payment_action",
]

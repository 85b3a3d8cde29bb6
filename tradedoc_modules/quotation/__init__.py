"""
Quotation (``tradedoc_modules.quotation``).

Issued by a seller, usually in reply to an RFQ.  The buyer accepts or
rejects it.
"""

from tradedoc_modules.quotation.definition import QUOTATION_DEFINITION
from tradedoc_modules.quotation.orm import Quotation
from tradedoc_modules.quotation.workflows import (
    QUOTATION_WORKFLOW,
    QuotationAction,
    QuotationStatus,
)

__all__ = [
    "QUOTATION_DEFINITION",
    "QUOTATION_WORKFLOW",
    "Quotation",
    "QuotationAction",
    "QuotationStatus",
]

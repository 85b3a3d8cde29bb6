"""
Request for Quotation (``tradedoc_modules.rfq``).

Issued by a buyer to a seller.  The seller approves or declines it; an
approved RFQ is usually answered with a quotation.
"""

from tradedoc_modules.rfq.definition import RFQ_DEFINITION
from tradedoc_modules.rfq.orm import RFQ
from tradedoc_modules.rfq.workflows import RFQ_WORKFLOW, RFQAction, RFQStatus

__all__ = ["RFQ", "RFQ_DEFINITION", "RFQ_WORKFLOW", "RFQAction", "RFQStatus"]

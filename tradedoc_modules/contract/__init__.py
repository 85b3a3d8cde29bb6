"""
Contract (``tradedoc_modules.contract``).

Issued by a seller from a quotation or an RFQ.  The buyer accepts,
rejects or sends back suggested changes.
"""

from tradedoc_modules.contract.definition import CONTRACT_DEFINITION
from tradedoc_modules.contract.orm import Contract
from tradedoc_modules.contract.workflows import (
    CONTRACT_WORKFLOW,
    ContractAction,
    ContractStatus,
)

__all__ = [
    "CONTRACT_DEFINITION",
    "CONTRACT_WORKFLOW",
    "Contract",
    "ContractAction",
    "ContractStatus",
]

"""
Packing List (``tradedoc_modules.packing_list``).

Issued by a seller against a purchase order, optionally tied to a delivery
note and a sales order of the same purchase order.  Carries per-line
weights and package counts.
"""

from tradedoc_modules.packing_list.definition import PACKING_LIST_DEFINITION
from tradedoc_modules.packing_list.orm import PackingList
from tradedoc_modules.packing_list.workflows import (
    PACKING_LIST_WORKFLOW,
    PackingListAction,
    PackingListStatus,
)

__all__ = [
    "PACKING_LIST_DEFINITION",
    "PACKING_LIST_WORKFLOW",
    "PackingList",
    "PackingListAction",
    "PackingListStatus",
]

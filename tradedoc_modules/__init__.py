"""
Document type modules (``tradedoc_modules``).

One package per document of the chain.  Each declares its status and
action enums and its workflow (``workflows.py``), its columns on the shared
documents table (``orm.py``) and its creation rules (``definition.py``),
and registers itself with ``tradedoc_modules.registry`` on import.
"""

from tradedoc_modules import (  # noqa: F401
    contract,
    delivery_note,
    invoice,
    packing_list,
    purchase_order,
    quotation,
    rfq,
    sales_order,
)
from tradedoc_modules.registry import all_definitions, get_definition

__all__ = ["all_definitions", "get_definition"]

"""
Delivery Note (``tradedoc_modules.delivery_note``).

Issued by a seller against a purchase order (optionally a sales order).
The buyer acknowledges receipt or disputes it.
"""

from tradedoc_modules.delivery_note.definition import DELIVERY_NOTE_DEFINITION
from tradedoc_modules.delivery_note.orm import DeliveryNote
from tradedoc_modules.delivery_note.workflows import (
    DELIVERY_NOTE_WORKFLOW,
    DeliveryNoteAction,
    DeliveryNoteStatus,
)

__all__ = [
    "DELIVERY_NOTE_DEFINITION",
    "DELIVERY_NOTE_WORKFLOW",
    "DeliveryNote",
    "DeliveryNoteAction",
    "DeliveryNoteStatus",
]

"""Kernel ORM models.  Per-type document subclasses live in ``tradedoc_modules``."""

from tradedoc_kernel.models.action_log import DocumentActionLog
from tradedoc_kernel.models.company import Company
from tradedoc_kernel.models.document import Document
from tradedoc_kernel.models.line_item import LineItem
from tradedoc_kernel.models.party import Address, Party
from tradedoc_kernel.services.sequence_service import SequenceCounter

__all__ = [
    "Address",
    "Company",
    "Document",
    "DocumentActionLog",
    "LineItem",
    "Party",
    "SequenceCounter",
]

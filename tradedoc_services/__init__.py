"""
tradedoc_services -- Package init and public API.

Responsibility:
    The operation boundary.  The only layer that owns transactions, reads
    the clock, and touches file storage; it composes the pure engines, the
    kernel persistence layer and the per-type definitions in
    ``tradedoc_modules``.

Architecture position:
    Services -- stateful orchestration over engines, modules and kernel.

        tradedoc_services/ -> tradedoc_modules/, tradedoc_engines/, tradedoc_kernel/
        tradedoc_kernel/   -> tradedoc_services/  (FORBIDDEN)
        tradedoc_engines/  -> tradedoc_services/  (FORBIDDEN)
"""

from tradedoc_services.company_service import CompanyService
from tradedoc_services.document_service import DocumentService
from tradedoc_services.file_storage import (
    FileStorage,
    LocalFileStorage,
    StoredFile,
    UploadedFile,
)
from tradedoc_services.party_service import PartyService
from tradedoc_services.results import OperationResult, OperationStatus

__all__ = [
    "CompanyService",
    "DocumentService",
    "FileStorage",
    "LocalFileStorage",
    "OperationResult",
    "OperationStatus",
    "PartyService",
    "StoredFile",
    "UploadedFile",
]

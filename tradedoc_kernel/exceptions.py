"""
Typed exception hierarchy for the trade document kernel.

Every error carries a machine-readable ``code`` and the structured data
needed to report it (document type, id, field, status).  Callers catch by
type, never by message.

    TradeDocError (base)
    |
    +-- UnauthenticatedError
    |
    +-- ForbiddenError
    |   +-- CompanyKindMismatchError
    |   +-- NotDocumentIssuerError
    |
    +-- NotFoundError
    |   +-- DocumentNotFoundError
    |   +-- CompanyNotFoundError
    |   +-- PartyNotFoundError
    |   +-- AddressNotFoundError
    |
    +-- InvalidTransitionError
    |   +-- TerminalStatusError
    |   +-- ActionNotAllowedError
    |   +-- DocumentLockedError
    |
    +-- DocumentValidationError
    |   +-- MissingFieldError
    |   +-- InvalidFieldValueError
    |   +-- DateOrderError
    |   +-- UnknownActionError
    |   +-- UnknownFieldError
    |   +-- ReceiptRequiredError
    |   +-- FileRejectedError
    |
    +-- ConflictError
        +-- HumanCodeConflictError
        +-- DocumentReferencedError

The operation boundary (``tradedoc_services.document_service``) maps each
category to an ``OperationStatus``.
"""


class TradeDocError(Exception):
    """Base exception for all trade document errors."""

    code: str = "TRADEDOC_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


# =============================================================================
# Authentication / authorization
# =============================================================================


class UnauthenticatedError(TradeDocError):
    """No acting company, or the acting company is not registered."""

    code: str = "UNAUTHENTICATED"

    def __init__(self, message: str = "No authenticated company context"):
        super().__init__(message)


class ForbiddenError(TradeDocError):
    """Base for operations the acting company may never perform."""

    code: str = "FORBIDDEN"


class CompanyKindMismatchError(ForbiddenError):
    """Acting company kind does not match the kind the operation requires."""

    code: str = "COMPANY_KIND_MISMATCH"

    def __init__(self, document_type: str, required_kind: str, actual_kind: str):
        self.document_type = document_type
        self.required_kind = required_kind
        self.actual_kind = actual_kind
        super().__init__(
            f"Only {required_kind} companies may do this on {document_type} "
            f"documents (acting company is {actual_kind})"
        )


class NotDocumentIssuerError(ForbiddenError):
    """The action is reserved to the other side of the document."""

    code: str = "NOT_DOCUMENT_ISSUER"

    def __init__(self, document_type: str, action: str, required_role: str):
        self.document_type = document_type
        self.action = action
        self.required_role = required_role
        super().__init__(
            f"Action '{action}' on {document_type} is reserved to the "
            f"{required_role.lower()} side"
        )


# =============================================================================
# Not found
# =============================================================================


class NotFoundError(TradeDocError):
    """Base for missing (or undisclosed) records."""

    code: str = "NOT_FOUND"


class DocumentNotFoundError(NotFoundError):
    """Document does not exist, or the acting company may not see it."""

    code: str = "DOCUMENT_NOT_FOUND"

    def __init__(self, document_type: str, document_id: str, field: str | None = None):
        self.document_type = document_type
        self.document_id = document_id
        self.field = field
        super().__init__(f"{document_type} {document_id} not found")


class CompanyNotFoundError(NotFoundError):
    """Company row does not exist."""

    code: str = "COMPANY_NOT_FOUND"

    def __init__(self, company_id: str):
        self.company_id = company_id
        super().__init__(f"Company {company_id} not found")


class PartyNotFoundError(NotFoundError):
    """Directory entry does not exist, or belongs to another company."""

    code: str = "PARTY_NOT_FOUND"

    def __init__(self, party_id: str, field: str | None = None):
        self.party_id = party_id
        self.field = field
        super().__init__(f"Party {party_id} not found")


class AddressNotFoundError(NotFoundError):
    """Address does not exist, or belongs to another company."""

    code: str = "ADDRESS_NOT_FOUND"

    def __init__(self, address_id: str):
        self.address_id = address_id
        super().__init__(f"Address {address_id} not found")


# =============================================================================
# Status transitions
# =============================================================================


class InvalidTransitionError(TradeDocError):
    """Base for actions the document's current status does not allow."""

    code: str = "INVALID_TRANSITION"

    def __init__(self, document_type: str, status: str, action: str, message: str | None = None):
        self.document_type = document_type
        self.status = status
        self.action = action
        super().__init__(
            message
            or f"Action '{action}' is not allowed on {document_type} in status {status}"
        )


class TerminalStatusError(InvalidTransitionError):
    """Document is in a terminal status; nothing may change."""

    code: str = "TERMINAL_STATUS"

    def __init__(self, document_type: str, status: str, action: str):
        super().__init__(
            document_type,
            status,
            action,
            f"{document_type} is {status} (terminal); '{action}' is not allowed",
        )


class ActionNotAllowedError(InvalidTransitionError):
    """No transition for this action starts at the current status."""

    code: str = "ACTION_NOT_ALLOWED"


class DocumentLockedError(InvalidTransitionError):
    """Edit or delete attempted outside the statuses that allow it."""

    code: str = "DOCUMENT_LOCKED"


# =============================================================================
# Validation
# =============================================================================


class DocumentValidationError(TradeDocError):
    """Payload failed validation; ``field`` names the offending input."""

    code: str = "VALIDATION_ERROR"

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field}: {message}")


class MissingFieldError(DocumentValidationError):
    """Required field is absent or empty."""

    code: str = "MISSING_FIELD"

    def __init__(self, field: str):
        super().__init__(field, "is required")


class InvalidFieldValueError(DocumentValidationError):
    """Field value has the wrong type or is out of range."""

    code: str = "INVALID_FIELD_VALUE"


class DateOrderError(DocumentValidationError):
    """Two dates are in the wrong order."""

    code: str = "DATE_ORDER"

    def __init__(self, field: str, other_field: str, strict: bool):
        self.other_field = other_field
        relation = "after" if strict else "on or after"
        super().__init__(field, f"must be {relation} {other_field}")


class UnknownActionError(DocumentValidationError):
    """Action name is not defined for the document type."""

    code: str = "UNKNOWN_ACTION"

    def __init__(self, document_type: str, action: str):
        self.document_type = document_type
        self.action = action
        super().__init__("action", f"'{action}' is not an action on {document_type}")


class UnknownFieldError(DocumentValidationError):
    """Payload names a field that cannot be written here."""

    code: str = "UNKNOWN_FIELD"

    def __init__(self, field: str, message: str = "cannot be written by this operation"):
        super().__init__(field, message)


class ReceiptRequiredError(DocumentValidationError):
    """Payment action needs a receipt file."""

    code: str = "RECEIPT_REQUIRED"

    def __init__(self, field: str = "receipt"):
        super().__init__(field, "a payment receipt is required")


class FileRejectedError(DocumentValidationError):
    """Uploaded file has a disallowed type or exceeds the size cap."""

    code: str = "FILE_REJECTED"

    def __init__(self, field: str, reason: str, content_type: str | None = None, size: int | None = None):
        self.reason = reason
        self.content_type = content_type
        self.size = size
        super().__init__(field, reason)


# =============================================================================
# Conflicts
# =============================================================================


class ConflictError(TradeDocError):
    """Base for uniqueness and referential conflicts."""

    code: str = "CONFLICT"


class HumanCodeConflictError(ConflictError):
    """Generated human code collides with an existing document."""

    code: str = "HUMAN_CODE_CONFLICT"

    def __init__(self, document_type: str, human_code: str):
        self.document_type = document_type
        self.human_code = human_code
        super().__init__(f"{document_type} code {human_code} already exists")


class DocumentReferencedError(ConflictError):
    """Document cannot be deleted while other documents point at it."""

    code: str = "DOCUMENT_REFERENCED"

    def __init__(self, document_type: str, document_id: str, referencing_count: int):
        self.document_type = document_type
        self.document_id = document_id
        self.referencing_count = referencing_count
        super().__init__(
            f"{document_type} {document_id} is referenced by "
            f"{referencing_count} other document(s)"
        )

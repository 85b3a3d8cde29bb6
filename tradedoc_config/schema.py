"""
Trade document configuration schema.

The YAML set under ``tradedoc_config/sets/`` is parsed into these frozen
dataclasses by ``loader.py``.  Validation that needs nothing outside this
module happens in ``__post_init__``; checks against the registered
document workflows (status names) happen in the document service.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class DocumentTypePolicy:
    """Per-document-type settings."""

    document_type: str
    code_prefix: str
    code_width: int
    deletable_statuses: tuple[str, ...] = ()
    editable_in_terminal: bool = False
    # Resolve the counter-party id from a registered company with a matching name
    counter_lookup_by_name: bool = False

    def __post_init__(self) -> None:
        if not self.code_prefix:
            raise ValueError(f"{self.document_type}: code_prefix must be non-empty")
        if self.code_width < 1:
            raise ValueError(f"{self.document_type}: code_width must be >= 1, got {self.code_width}")


@dataclass(frozen=True)
class FileRule:
    """Allowed content types and size cap for one upload category."""

    allowed_content_types: tuple[str, ...]
    max_size_bytes: int

    def __post_init__(self) -> None:
        if not self.allowed_content_types:
            raise ValueError("allowed_content_types must be non-empty")
        if self.max_size_bytes <= 0:
            raise ValueError(f"max_size_bytes must be positive, got {self.max_size_bytes}")


@dataclass(frozen=True)
class StoragePolicy:
    root_dir: str
    receipts: FileRule
    images: FileRule


@dataclass(frozen=True)
class TradeDocConfig:
    """The complete runtime configuration."""

    name: str
    version: int
    default_currency: str
    storage: StoragePolicy
    document_types: dict[str, DocumentTypePolicy] = field(default_factory=dict)
    checksum: str = ""

    def __post_init__(self) -> None:
        if len(self.default_currency) != 3 or not self.default_currency.isalpha():
            raise ValueError(f"default_currency must be a 3-letter code, got {self.default_currency!r}")

    def policy_for(self, document_type: str) -> DocumentTypePolicy:
        try:
            return self.document_types[document_type]
        except KeyError:
            raise KeyError(f"No configuration for document type {document_type!r}") from None

"""
Human-readable document codes.

A code is ``initials + prefix + zero-padded sequence``, e.g. the third
purchase order of "Acme Building Co" is ``ABCPO-003``.  The sequence
itself comes from ``SequenceService``; this module is pure formatting.
"""

from __future__ import annotations

from dataclasses import dataclass

MAX_INITIALS = 3


@dataclass(frozen=True)
class CodeFormat:
    prefix: str
    width: int

    def __post_init__(self) -> None:
        if not self.prefix:
            raise ValueError("Code prefix must be non-empty")
        if self.width < 1:
            raise ValueError(f"Code width must be positive, got {self.width}")


def company_initials(name: str) -> str:
    """First letter of each whitespace-separated word, uppercased, at most three."""
    return "".join(word[0] for word in name.split()).upper()[:MAX_INITIALS]


def format_human_code(company_name: str, code_format: CodeFormat, sequence: int) -> str:
    if sequence < 1:
        raise ValueError(f"Sequence must be positive, got {sequence}")
    return f"{company_initials(company_name)}{code_format.prefix}{sequence:0{code_format.width}d}"


def sequence_name(company_id: object, document_type: str) -> str:
    """Counter key scoping the sequence to (issuing company, document type)."""
    return f"human_code:{company_id}:{document_type}"

"""
Ownership resolver -- who may see and act on a document.

Pure function over the document's issuer id and counter-party union.  The
same resolver backs reads, status actions, edits and deletes; the listing
selector narrows candidates in SQL and then applies it row by row.

Rule for the counter side: the document belongs to company X iff its
counter-party is ``CounterById(X.id)``, or it is ``CounterByName(n)`` and
``n`` equals X's *current* name case-insensitively.  The issuer side has
no name fallback.
"""

from __future__ import annotations

from enum import Enum
from typing import Protocol
from uuid import UUID

from tradedoc_kernel.domain.documents import (
    CompanyIdentity,
    CounterById,
    CounterByName,
    CounterParty,
    Role,
    counter_party_of,
)


class OwnershipDecision(str, Enum):
    AUTHORIZED = "AUTHORIZED"
    FORBIDDEN = "FORBIDDEN"


class OwnedDocument(Protocol):
    issuing_company_id: UUID
    counter_company_id: UUID | None
    counter_company_name: str | None


def normalize_name(name: str | None) -> str | None:
    """Comparison key for a company name: casefolded, whitespace runs collapsed."""
    if name is None:
        return None
    key = " ".join(name.split()).casefold()
    return key or None


def names_match(left: str | None, right: str | None) -> bool:
    """Case-insensitive comparison of company names, ignoring spacing differences."""
    left_key, right_key = normalize_name(left), normalize_name(right)
    if left_key is None or right_key is None:
        return False
    return left_key == right_key


def counter_party_matches(counter: CounterParty, company: CompanyIdentity) -> bool:
    if isinstance(counter, CounterById):
        return counter.company_id == company.company_id
    if isinstance(counter, CounterByName):
        return names_match(counter.name, company.name)
    raise TypeError(f"Unknown counter-party variant: {counter!r}")


def resolve(
    document: OwnedDocument | None,
    company: CompanyIdentity,
    role: Role,
) -> OwnershipDecision:
    """Decide whether ``company`` holds ``role`` on ``document``."""
    if document is None:
        return OwnershipDecision.FORBIDDEN

    if role is Role.ISSUER:
        allowed = document.issuing_company_id == company.company_id
    else:
        counter = counter_party_of(
            document.counter_company_id, document.counter_company_name
        )
        allowed = counter_party_matches(counter, company)

    return OwnershipDecision.AUTHORIZED if allowed else OwnershipDecision.FORBIDDEN


def roles_held(document: OwnedDocument | None, company: CompanyIdentity) -> frozenset[Role]:
    """Every role ``company`` holds on ``document`` (empty if none)."""
    return frozenset(
        role for role in Role
        if resolve(document, company, role) is OwnershipDecision.AUTHORIZED
    )

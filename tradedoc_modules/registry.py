"""
Document type registry (``tradedoc_modules.registry``).

Responsibility
--------------
Each document-type package declares one frozen ``DocumentTypeDefinition``
(workflow, ORM class, parent links, writable fields, date rules) and
registers it here at import time.  Services look definitions up by
``DocumentType``; they never branch on the type themselves.

Invariants enforced
-------------------
* One definition per document type; re-registering a type is an error.
* A definition's workflow states equal its status enum's values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable

from tradedoc_kernel.domain.documents import DocumentType, Role
from tradedoc_kernel.domain.workflow import Transition, Workflow
from tradedoc_kernel.exceptions import UnknownActionError
from tradedoc_kernel.logging_config import get_logger
from tradedoc_kernel.models.document import PARENT_REF_COLUMNS

if TYPE_CHECKING:
    from tradedoc_kernel.models.document import Document

logger = get_logger("modules.registry")


class FieldKind(str, Enum):
    """How a payload value is parsed."""

    TEXT = "text"
    DATE = "date"
    MONEY = "money"
    DECIMAL = "decimal"


class PartySide(str, Enum):
    """Which party of a parent document a child's counter-party comes from."""

    ISSUER = "issuer"
    COUNTER = "counter"


@dataclass(frozen=True)
class ParentLink:
    """
    A permitted parent of a document type.

    Attributes:
        field: Payload key carrying the parent's id, e.g. ``purchase_order_id``.
        parent_type: Type the referenced document must have.
        acting_role: Role the creating company must hold on the parent.
        counter_source: Which party of the parent becomes the child's
            counter-party.
        required: Creation fails without it.
    """

    field: str
    parent_type: DocumentType
    acting_role: Role
    counter_source: PartySide
    required: bool = False

    @property
    def ref_column(self) -> str:
        return PARENT_REF_COLUMNS[self.parent_type]


@dataclass(frozen=True)
class DateRule:
    """``field`` must come after ``earlier`` (or on/after when not strict)."""

    field: str
    earlier: str
    strict: bool = True

    def holds(self, later_value: date, earlier_value: date) -> bool:
        if self.strict:
            return later_value > earlier_value
        return later_value >= earlier_value


@dataclass(frozen=True)
class ActionRequest:
    """What an action handler gets besides the locked document."""

    action: str
    candidates: tuple[Transition, ...]
    today: date
    reason: str | None = None
    amount: Decimal | None = None
    payload: dict[str, Any] = field(default_factory=dict)
    store_receipt: Callable[[], str | None] | None = None


@dataclass(frozen=True)
class ActionEffect:
    """Outcome chosen by an action handler; the engine applies it."""

    to_state: str
    updates: dict[str, Any] = field(default_factory=dict)
    reason: str | None = None
    amount: Decimal | None = None


ActionHandler = Callable[["Document", ActionRequest], ActionEffect]


@dataclass(frozen=True)
class DocumentTypeDefinition:
    """Everything services need to know about one document type."""

    document_type: DocumentType
    model: type
    workflow: Workflow
    status_enum: type[Enum]
    action_enum: type[Enum]
    parents: tuple[ParentLink, ...] = ()
    extra_fields: dict[str, FieldKind] = field(default_factory=dict)
    required_fields: tuple[str, ...] = ()
    date_rules: tuple[DateRule, ...] = ()
    issue_date_defaults_today: bool = False
    issue_date_not_in_future: bool = False
    initial_status_by_parent: dict[DocumentType, str] = field(default_factory=dict)
    weighed_items: bool = False
    # paid/remaining kept by a ledger; money fields freeze once paid > 0
    tracks_payments: bool = False
    action_handler: ActionHandler | None = None

    def __post_init__(self) -> None:
        statuses = {s.value for s in self.status_enum}
        if statuses != set(self.workflow.states):
            raise ValueError(
                f"{self.document_type.value}: workflow states {sorted(self.workflow.states)} "
                f"do not match status enum {sorted(statuses)}"
            )
        actions = {a.value for a in self.action_enum}
        if not self.workflow.actions <= actions:
            raise ValueError(
                f"{self.document_type.value}: workflow uses undeclared actions "
                f"{sorted(self.workflow.actions - actions)}"
            )

    def parse_action(self, action: str) -> Enum:
        try:
            return self.action_enum(action)
        except ValueError:
            raise UnknownActionError(self.document_type.value, str(action)) from None

    def has_status(self, status: str) -> bool:
        return status in self.workflow.states

    def parent_link(self, parent_type: DocumentType) -> ParentLink | None:
        for link in self.parents:
            if link.parent_type is parent_type:
                return link
        return None

    def initial_status(self, parent_types: set[DocumentType]) -> str:
        for link in self.parents:
            if link.parent_type in parent_types and link.parent_type in self.initial_status_by_parent:
                return self.initial_status_by_parent[link.parent_type]
        return self.workflow.initial_state

    def roles_for(self, action: str) -> frozenset[Role]:
        return frozenset(
            Role(t.actor_role) for t in self.workflow.transitions if t.action == action
        )


_REGISTRY: dict[DocumentType, DocumentTypeDefinition] = {}


def register(definition: DocumentTypeDefinition) -> DocumentTypeDefinition:
    if definition.document_type in _REGISTRY:
        raise ValueError(f"Document type {definition.document_type.value} already registered")
    _REGISTRY[definition.document_type] = definition
    logger.info(
        "document_type_registered",
        extra={
            "document_type": definition.document_type.value,
            "workflow": definition.workflow.name,
            "state_count": len(definition.workflow.states),
            "transition_count": len(definition.workflow.transitions),
            "parent_types": [p.parent_type.value for p in definition.parents],
        },
    )
    return definition


def get_definition(document_type: DocumentType) -> DocumentTypeDefinition:
    return _REGISTRY[document_type]


def all_definitions() -> tuple[DocumentTypeDefinition, ...]:
    return tuple(_REGISTRY[t] for t in DocumentType if t in _REGISTRY)

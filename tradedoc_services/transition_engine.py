"""
TransitionEngine -- fires workflow actions on a locked document.

Responsibility:
    Given a document row the caller has already locked and the roles the
    acting company holds on it, decide whether an action may fire, run the
    document type's action handler, and write the new status plus the
    handler's side-effect fields onto the row.

Architecture position:
    Services.  Reads ``Workflow`` definitions from ``tradedoc_modules``;
    never commits (the document service owns the transaction).

Invariants enforced:
    - A terminal status never changes.
    - Only a transition declared for (action, current status) can fire, and
      only by the side it names.
    - A guarded transition fires only when its guard holds.
    - Handlers may only write the fields their transitions declare.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Mapping
from uuid import UUID

from tradedoc_kernel.domain.clock import Clock
from tradedoc_kernel.domain.documents import Role
from tradedoc_kernel.domain.workflow import Transition
from tradedoc_kernel.exceptions import (
    ActionNotAllowedError,
    NotDocumentIssuerError,
    TerminalStatusError,
)
from tradedoc_kernel.logging_config import get_logger
from tradedoc_kernel.models.document import Document
from tradedoc_modules.registry import ActionEffect, ActionRequest, DocumentTypeDefinition
from tradedoc_services.payload import check_action_fields, parse_decimal, parse_text

logger = get_logger("services.transition_engine")


def _past_due_date(document: Document, today: date) -> bool:
    return document.due_date is not None and document.due_date < today


GUARD_EVALUATORS: dict[str, Callable[[Document, date], bool]] = {
    "past_due_date": _past_due_date,
}


@dataclass(frozen=True)
class TransitionOutcome:
    action: str
    from_status: str
    to_status: str
    reason: str | None = None
    amount: Decimal | None = None


def default_action_handler(document: Document, request: ActionRequest) -> ActionEffect:
    """Move to the single declared target; no side effects."""
    return ActionEffect(to_state=request.candidates[0].to_state, reason=request.reason)


class TransitionEngine:
    """
    Applies one action to one locked document.

    ``store_receipt`` is called (at most once, and only by handlers that
    need a receipt) to persist the upload carried in the payload.
    """

    def __init__(self, clock: Clock):
        self._clock = clock

    def _guard_holds(self, transition: Transition, document: Document, today: date) -> bool:
        if transition.guard is None:
            return True
        evaluator = GUARD_EVALUATORS.get(transition.guard.name)
        if evaluator is None:
            raise ValueError(f"No evaluator for guard {transition.guard.name!r}")
        return evaluator(document, today)

    def apply(
        self,
        definition: DocumentTypeDefinition,
        document: Document,
        roles: frozenset[Role],
        acting_company_id: UUID,
        action: str,
        payload: Mapping[str, Any] | None = None,
        store_receipt: Callable[[], str | None] | None = None,
    ) -> TransitionOutcome:
        """
        Fire ``action`` on ``document``.

        Raises:
            UnknownActionError: action not defined for the type.
            NotDocumentIssuerError: the action belongs to the other side.
            TerminalStatusError / ActionNotAllowedError: status forbids it.
            DocumentValidationError: from the payload or the handler.
        """
        doc_type = definition.document_type.value
        action_name = definition.parse_action(action).value
        payload = dict(payload or {})
        check_action_fields(payload)

        allowed_roles = definition.roles_for(action_name)
        if not allowed_roles & roles:
            required = sorted(r.value for r in allowed_roles)[0]
            raise NotDocumentIssuerError(doc_type, action_name, required)

        workflow = definition.workflow
        from_status = document.status
        if workflow.is_terminal(from_status):
            raise TerminalStatusError(doc_type, from_status, action_name)

        candidates = tuple(
            t for t in workflow.transitions_for(action_name, from_status)
            if Role(t.actor_role) in roles
        )
        if not candidates:
            raise ActionNotAllowedError(doc_type, from_status, action_name)

        today = self._clock.today()
        passing = tuple(t for t in candidates if self._guard_holds(t, document, today))
        if not passing:
            guard_names = sorted({t.guard.name for t in candidates if t.guard})
            raise ActionNotAllowedError(
                doc_type,
                from_status,
                action_name,
                f"Action '{action_name}' on {doc_type} requires: {', '.join(guard_names)}",
            )

        request = ActionRequest(
            action=action_name,
            candidates=passing,
            today=today,
            reason=parse_text("reason", payload.get("reason")),
            amount=parse_decimal("amount", payload.get("amount")),
            payload=payload,
            store_receipt=store_receipt,
        )
        handler = definition.action_handler or default_action_handler
        effect = handler(document, request)

        targets = {t.to_state for t in passing}
        if effect.to_state not in targets:
            raise ValueError(
                f"{doc_type} handler chose {effect.to_state} for '{action_name}' "
                f"from {from_status}; declared targets are {sorted(targets)}"
            )
        declared = {name for t in passing for name in t.records}
        undeclared = set(effect.updates) - declared
        if undeclared:
            raise ValueError(
                f"{doc_type} handler wrote undeclared fields {sorted(undeclared)} "
                f"on '{action_name}'"
            )

        for name, value in effect.updates.items():
            setattr(document, name, value)
        document.status = effect.to_state
        document.updated_by_id = acting_company_id

        logger.info(
            "transition_applied",
            extra={
                "document_type": doc_type,
                "document_id": str(document.id),
                "action": action_name,
                "from_status": from_status,
                "to_status": effect.to_state,
                "updated_fields": sorted(effect.updates),
            },
        )
        return TransitionOutcome(
            action=action_name,
            from_status=from_status,
            to_status=effect.to_state,
            reason=effect.reason,
            amount=effect.amount,
        )

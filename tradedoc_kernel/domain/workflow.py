"""
Canonical workflow types (``tradedoc_kernel.domain.workflow``).

Responsibility
--------------
Pure value objects for document state machines.  Every document type
declares one frozen ``Workflow`` in its module's ``workflows.py``; the
transition engine in ``tradedoc_services`` is the only code that reads
them to decide whether an action may fire.

Invariants enforced
-------------------
* Transitions reference only states in ``Workflow.states``.
* ``initial_state`` is a member of ``states``.
* Terminal states have no outgoing transitions.
* Each transition names the side (issuer or counter-party) allowed to
  fire it.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Guard:
    """A condition that must hold before a transition fires.

    Descriptive only; the transition engine evaluates it by name.
    """

    name: str
    description: str


@dataclass(frozen=True)
class Transition:
    """A legal status change.

    ``actor_role`` is ``"ISSUER"`` or ``"COUNTER"``.  ``records`` names the
    side-effect fields the action writes besides ``status``.
    """

    from_state: str
    to_state: str
    action: str
    actor_role: str
    guard: Guard | None = None
    records: tuple[str, ...] = ()


@dataclass(frozen=True)
class Workflow:
    """A state machine definition for one document type."""

    name: str
    description: str
    initial_state: str
    states: tuple[str, ...]
    transitions: tuple[Transition, ...]
    terminal_states: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.initial_state not in self.states:
            raise ValueError(
                f"Workflow {self.name}: initial state {self.initial_state} "
                f"is not a declared state"
            )
        for t in self.transitions:
            if t.from_state not in self.states or t.to_state not in self.states:
                raise ValueError(
                    f"Workflow {self.name}: transition {t.action} "
                    f"{t.from_state}->{t.to_state} uses an undeclared state"
                )
            if t.from_state in self.terminal_states:
                raise ValueError(
                    f"Workflow {self.name}: terminal state {t.from_state} "
                    f"has outgoing transition {t.action}"
                )

    @property
    def actions(self) -> frozenset[str]:
        return frozenset(t.action for t in self.transitions)

    def is_terminal(self, state: str) -> bool:
        return state in self.terminal_states

    def transitions_for(self, action: str, from_state: str) -> tuple[Transition, ...]:
        """Transitions for ``action`` that start at ``from_state``."""
        return tuple(
            t for t in self.transitions
            if t.action == action and t.from_state == from_state
        )


def from_each(
    states: tuple[str, ...],
    to_state: str,
    action: str,
    actor_role: str,
    guard: Guard | None = None,
    records: tuple[str, ...] = (),
) -> tuple[Transition, ...]:
    """Same action from several source states."""
    return tuple(
        Transition(
            from_state=s,
            to_state=to_state,
            action=action,
            actor_role=actor_role,
            guard=guard,
            records=records,
        )
        for s in states
    )

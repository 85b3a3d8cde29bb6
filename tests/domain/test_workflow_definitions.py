"""
Tests for workflow value objects and the eight declared document workflows.
"""

import pytest

from tradedoc_kernel.domain.workflow import Guard, Transition, Workflow, from_each
from tradedoc_modules import all_definitions
from tradedoc_modules.contract.workflows import CONTRACT_WORKFLOW, ContractStatus
from tradedoc_modules.invoice.workflows import INVOICE_WORKFLOW, InvoiceStatus
from tradedoc_modules.rfq.workflows import RFQ_WORKFLOW
from tradedoc_modules.sales_order.workflows import SALES_ORDER_WORKFLOW


class TestWorkflowConstruction:

    def test_initial_state_must_be_declared(self):
        with pytest.raises(ValueError, match="initial state"):
            Workflow(
                name="w",
                description="",
                initial_state="MISSING",
                states=("A",),
                transitions=(),
            )

    def test_transition_states_must_be_declared(self):
        with pytest.raises(ValueError, match="undeclared state"):
            Workflow(
                name="w",
                description="",
                initial_state="A",
                states=("A",),
                transitions=(Transition("A", "B", "go", "ISSUER"),),
            )

    def test_terminal_state_cannot_have_outgoing_transition(self):
        with pytest.raises(ValueError, match="terminal state"):
            Workflow(
                name="w",
                description="",
                initial_state="A",
                states=("A", "B"),
                transitions=(Transition("B", "A", "back", "ISSUER"),),
                terminal_states=("B",),
            )

    def test_from_each_expands_sources(self):
        guard = Guard("g", "a guard")
        transitions = from_each(("A", "B"), "C", "go", "COUNTER", guard=guard, records=("x",))

        assert [t.from_state for t in transitions] == ["A", "B"]
        assert all(t.to_state == "C" and t.guard is guard and t.records == ("x",) for t in transitions)


class TestDeclaredWorkflows:

    def test_every_type_registered(self):
        assert len(all_definitions()) == 8

    @pytest.mark.parametrize(
        "definition", all_definitions(), ids=lambda d: d.document_type.value
    )
    def test_terminal_states_have_no_exits(self, definition):
        workflow = definition.workflow
        for state in workflow.terminal_states:
            assert not [t for t in workflow.transitions if t.from_state == state]

    @pytest.mark.parametrize(
        "definition", all_definitions(), ids=lambda d: d.document_type.value
    )
    def test_actor_roles_are_sides(self, definition):
        assert {t.actor_role for t in definition.workflow.transitions} <= {"ISSUER", "COUNTER"}

    def test_rfq_answered_by_seller_only(self):
        assert {t.actor_role for t in RFQ_WORKFLOW.transitions} == {"COUNTER"}
        assert RFQ_WORKFLOW.transitions_for("approve", "PENDING")

    def test_contract_suggest_changes_repeatable(self):
        transitions = CONTRACT_WORKFLOW.transitions_for(
            "suggest_changes", ContractStatus.PENDING_CHANGES.value
        )

        assert len(transitions) == 1
        assert transitions[0].to_state == ContractStatus.PENDING_CHANGES.value
        assert "counter_suggestions" in transitions[0].records

    def test_sales_order_fulfilment_is_sequential(self):
        assert SALES_ORDER_WORKFLOW.transitions_for("ship", "PROCESSING")
        assert not SALES_ORDER_WORKFLOW.transitions_for("ship", "DRAFT")
        assert not SALES_ORDER_WORKFLOW.transitions_for("deliver", "PROCESSING")

    def test_invoice_paid_is_terminal(self):
        assert INVOICE_WORKFLOW.is_terminal(InvoiceStatus.PAID.value)
        assert not INVOICE_WORKFLOW.is_terminal(InvoiceStatus.OVERDUE.value)

    def test_mark_overdue_is_guarded(self):
        (transition,) = INVOICE_WORKFLOW.transitions_for("mark_overdue", "PENDING")

        assert transition.guard is not None
        assert transition.guard.name == "past_due_date"
        assert transition.actor_role == "ISSUER"

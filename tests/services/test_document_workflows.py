"""
Tests for workflow actions through DocumentService.apply_action.

Covers the counter-party responses (RFQ, quotation, contract, PO, DN, PL),
the seller's sales-order progression and the invoice payment flow with
receipts, guards and terminal states.
"""

from datetime import timedelta
from decimal import Decimal

import pytest

from tests.builders import TODAY, line, png_image, receipt
from tradedoc_kernel.domain.documents import DocumentType
from tradedoc_services import OperationStatus, UploadedFile


class TestRequestForQuotationActions:

    def test_seller_approves(self, rfq, seller, act_ok):
        doc = act_ok(rfq, seller, "approve")

        assert doc.status == "APPROVED"

    def test_approved_is_terminal(self, rfq, seller, act_ok, document_service):
        act_ok(rfq, seller, "approve")

        result = document_service.apply_action(DocumentType.RFQ, rfq.id, seller, "approve")

        assert result.status is OperationStatus.INVALID_TRANSITION
        assert result.error_code == "TERMINAL_STATUS"
        assert result.details["status"] == "APPROVED"

    def test_decline_with_reason(self, rfq, seller, act_ok, document_service, buyer):
        act_ok(rfq, seller, "decline", {"reason": "  out of stock "})

        history = document_service.document_history(DocumentType.RFQ, rfq.id, buyer).history

        assert [(h.action, h.to_status, h.reason) for h in history] == [
            ("create", "DRAFT", None),
            ("decline", "REJECTED", "out of stock"),
        ]

    def test_issuer_cannot_answer_own_request(self, rfq, buyer, document_service):
        result = document_service.apply_action(DocumentType.RFQ, rfq.id, buyer, "approve")

        assert result.status is OperationStatus.FORBIDDEN
        assert result.error_code == "NOT_DOCUMENT_ISSUER"

    def test_unrelated_seller_sees_nothing(self, rfq, other_seller, document_service):
        result = document_service.apply_action(DocumentType.RFQ, rfq.id, other_seller, "approve")

        assert result.status is OperationStatus.NOT_FOUND

    def test_unknown_action(self, rfq, seller, document_service):
        result = document_service.apply_action(DocumentType.RFQ, rfq.id, seller, "ship")

        assert result.status is OperationStatus.VALIDATION_ERROR
        assert result.error_code == "UNKNOWN_ACTION"

    def test_unknown_action_parameter(self, rfq, seller, document_service):
        result = document_service.apply_action(
            DocumentType.RFQ, rfq.id, seller, "approve", {"status": "APPROVED"}
        )

        assert result.error_code == "UNKNOWN_FIELD"
        assert result.field == "status"

    def test_seller_addressed_by_name_can_respond(self, create_ok, buyer, seller, act_ok):
        doc = create_ok(
            DocumentType.RFQ,
            buyer,
            {"counter_company_name": "ACME CORP", "due_date": TODAY + timedelta(days=3), "items": [line()]},
        )

        assert act_ok(doc, seller, "decline").status == "REJECTED"


class TestQuotationAndOrderActions:

    def test_buyer_accepts_quotation(self, quotation, buyer, act_ok):
        assert act_ok(quotation, buyer, "accept").status == "ACCEPTED"

    def test_seller_cannot_accept_own_quotation(self, quotation, seller, document_service):
        result = document_service.apply_action(DocumentType.QUOTATION, quotation.id, seller, "accept")

        assert result.status is OperationStatus.FORBIDDEN

    def test_seller_accepts_purchase_order(self, purchase_order, seller, act_ok):
        assert act_ok(purchase_order, seller, "accept").status == "APPROVED"

    def test_name_addressed_purchase_order_accepted(self, create_ok, buyer, seller, act_ok):
        po = create_ok(
            DocumentType.PURCHASE_ORDER,
            buyer,
            {
                "counter_company_name": "Acme Corp",
                "issue_date": TODAY,
                "expected_delivery_date": TODAY + timedelta(days=3),
                "items": [line()],
            },
        )

        assert act_ok(po, seller, "reject").status == "REJECTED"


class TestContractActions:

    @pytest.fixture
    def contract(self, create_ok, seller, quotation):
        return create_ok(
            DocumentType.CONTRACT,
            seller,
            {"quotation_id": quotation.id, "issue_date": TODAY, "end_date": TODAY + timedelta(days=365)},
        )

    def test_counter_party_taken_from_quotation(self, contract, buyer, rfq):
        assert contract.counter_company_id == buyer.company_id
        assert contract.human_code == "ACCON-001"
        assert contract.get("rfq_ref_id") == rfq.id

    def test_suggest_changes_twice_then_accept(self, contract, buyer, act_ok, deterministic_clock):
        first = act_ok(contract, buyer, "suggest_changes", {"suggestions": "Extend to 18 months"})
        deterministic_clock.advance_days(2)
        second = act_ok(contract, buyer, "suggest_changes", {"suggestions": "Add a penalty clause"})
        accepted = act_ok(contract, buyer, "accept")

        assert first.status == "PENDING_CHANGES"
        assert second.get("counter_suggestions") == "Add a penalty clause"
        assert second.get("counter_response_date") == TODAY + timedelta(days=2)
        assert accepted.status == "APPROVED"

    @pytest.mark.parametrize("payload", [None, {"suggestions": "   "}])
    def test_suggestions_required(self, contract, buyer, document_service, payload):
        result = document_service.apply_action(
            DocumentType.CONTRACT, contract.id, buyer, "suggest_changes", payload
        )

        assert result.error_code == "MISSING_FIELD"
        assert result.field == "suggestions"

    def test_end_date_after_issue(self, document_service, seller, quotation):
        result = document_service.create_document(
            DocumentType.CONTRACT,
            seller,
            {"quotation_id": quotation.id, "issue_date": TODAY, "end_date": TODAY},
        )

        assert result.error_code == "DATE_ORDER"


class TestFulfilmentActions:

    @pytest.fixture
    def sales_order(self, create_ok, seller, purchase_order):
        return create_ok(
            DocumentType.SALES_ORDER,
            seller,
            {"purchase_order_id": purchase_order.id, "issue_date": TODAY, "planned_ship_date": TODAY},
        )

    def test_sales_order_progression(self, sales_order, seller, act_ok):
        statuses = [act_ok(sales_order, seller, action).status for action in ("process", "ship", "deliver")]

        assert statuses == ["PROCESSING", "SHIPPED", "DELIVERED"]

    def test_sales_order_cannot_skip_shipping(self, sales_order, seller, act_ok, document_service):
        act_ok(sales_order, seller, "process")

        result = document_service.apply_action(DocumentType.SALES_ORDER, sales_order.id, seller, "deliver")

        assert result.error_code == "ACTION_NOT_ALLOWED"
        assert result.details["status"] == "PROCESSING"

    def test_sales_order_cancelled(self, sales_order, seller, act_ok):
        assert act_ok(sales_order, seller, "cancel").status == "CANCELLED"

    def test_buyer_cannot_move_sales_order(self, sales_order, buyer, document_service):
        result = document_service.apply_action(DocumentType.SALES_ORDER, sales_order.id, buyer, "process")

        assert result.status is OperationStatus.FORBIDDEN

    def test_delivery_note_disputed(self, create_ok, seller, buyer, purchase_order, act_ok):
        dn = create_ok(
            DocumentType.DELIVERY_NOTE, seller, {"purchase_order_id": purchase_order.id, "issue_date": TODAY}
        )

        assert act_ok(dn, buyer, "dispute", {"reason": "two panels damaged"}).status == "DISPUTED"

    def test_packing_list_rejected(self, create_ok, seller, buyer, purchase_order, act_ok):
        pl = create_ok(
            DocumentType.PACKING_LIST, seller, {"purchase_order_id": purchase_order.id, "issue_date": TODAY}
        )

        assert act_ok(pl, buyer, "reject").status == "REJECTED"


class TestInvoicePayments:

    @pytest.fixture
    def invoice(self, invoice_for, purchase_order, buyer, act_ok):
        return act_ok(invoice_for(purchase_order, "100.00"), buyer, "accept")

    def test_accept_moves_to_pending(self, invoice):
        assert invoice.status == "PENDING"
        assert invoice.get("remaining_amount") == Decimal("100.00")

    def test_partial_payments_then_settled(self, invoice, buyer, act_ok, document_service):
        first = act_ok(invoice, buyer, "partial_pay", {"amount": "40", "receipt": receipt()})
        second = act_ok(invoice, buyer, "partial_pay", {"amount": "60.00", "receipt": png_image()})

        assert first.status == "PENDING"
        assert first.get("paid_amount") == Decimal("40.00")
        assert first.get("remaining_amount") == Decimal("60.00")
        assert first.get("payment_receipt_ref").startswith("receipts/")
        assert second.status == "PAID"
        assert second.get("remaining_amount") == Decimal("0")

        history = document_service.document_history(DocumentType.INVOICE, invoice.id, buyer).history
        assert [h.amount for h in history if h.action == "partial_pay"] == [
            Decimal("40.00"),
            Decimal("60.00"),
        ]

    def test_paid_is_terminal(self, invoice, buyer, act_ok, document_service):
        act_ok(invoice, buyer, "pay")

        result = document_service.apply_action(DocumentType.INVOICE, invoice.id, buyer, "pay")

        assert result.status is OperationStatus.INVALID_TRANSITION
        assert result.error_code == "TERMINAL_STATUS"

    def test_overpayment_settles_at_total(self, invoice, buyer, act_ok):
        doc = act_ok(invoice, buyer, "partial_pay", {"amount": "250", "receipt": receipt()})

        assert doc.status == "PAID"
        assert doc.get("paid_amount") == Decimal("100.00")

    def test_partial_payment_needs_receipt(self, invoice, buyer, document_service):
        result = document_service.apply_action(
            DocumentType.INVOICE, invoice.id, buyer, "partial_pay", {"amount": "10"}
        )

        assert result.error_code == "RECEIPT_REQUIRED"
        assert result.field == "receipt"

    def test_receipt_type_checked(self, invoice, buyer, document_service, tmp_path):
        gif = UploadedFile(b"GIF89a" + b"\x00" * 16, "image/gif", "receipt.gif")

        result = document_service.apply_action(
            DocumentType.INVOICE, invoice.id, buyer, "partial_pay", {"amount": "10", "receipt": gif}
        )

        assert result.error_code == "FILE_REJECTED"
        assert not (tmp_path / "files" / "receipts").exists()

    @pytest.mark.parametrize("amount", ["0", "-5", "0.004"])
    def test_partial_amount_must_be_positive(self, invoice, buyer, document_service, amount):
        result = document_service.apply_action(
            DocumentType.INVOICE, invoice.id, buyer, "partial_pay", {"amount": amount, "receipt": receipt()}
        )

        assert result.error_code == "INVALID_FIELD_VALUE"
        assert result.field == "amount"

    def test_draft_invoice_cannot_be_paid(self, invoice_for, purchase_order, buyer, document_service):
        draft = invoice_for(purchase_order)

        result = document_service.apply_action(DocumentType.INVOICE, draft.id, buyer, "pay")

        assert result.error_code == "ACTION_NOT_ALLOWED"

    def test_reject_returns_to_draft(self, invoice, buyer, act_ok):
        doc = act_ok(invoice, buyer, "reject", {"reason": "wrong PO reference"})

        assert doc.status == "DRAFT"
        assert doc.get("paid_amount") == Decimal("0")
        assert doc.get("remaining_amount") == Decimal("100.00")

    def test_accept_and_reject_are_logged(self, invoice, buyer, act_ok, document_service):
        act_ok(invoice, buyer, "reject", {"reason": "wrong PO reference"})

        history = document_service.document_history(DocumentType.INVOICE, invoice.id, buyer).history

        assert [(h.action, h.from_status, h.to_status) for h in history] == [
            ("create", None, "DRAFT"),
            ("accept", "DRAFT", "PENDING"),
            ("reject", "PENDING", "DRAFT"),
        ]
        assert history[-1].reason == "wrong PO reference"
        assert history[-1].amount is None

    def test_seller_cannot_pay(self, invoice, seller, document_service):
        result = document_service.apply_action(DocumentType.INVOICE, invoice.id, seller, "pay")

        assert result.status is OperationStatus.FORBIDDEN

    def test_mark_overdue_requires_past_due_date(self, invoice, seller, document_service):
        result = document_service.apply_action(DocumentType.INVOICE, invoice.id, seller, "mark_overdue")

        assert result.error_code == "ACTION_NOT_ALLOWED"
        assert "past_due_date" in result.message

    def test_overdue_invoice_still_payable(self, invoice, seller, buyer, act_ok, deterministic_clock):
        deterministic_clock.advance_days(31)

        overdue = act_ok(invoice, seller, "mark_overdue")
        partial = act_ok(invoice, buyer, "partial_pay", {"amount": "25", "receipt": receipt()})
        paid = act_ok(invoice, buyer, "pay")

        assert overdue.status == "OVERDUE"
        assert partial.status == "OVERDUE"
        assert paid.status == "PAID"
        assert paid.get("paid_amount") == Decimal("100.00")

    def test_full_payment_keeps_receipt(self, invoice, buyer, act_ok, file_storage):
        doc = act_ok(invoice, buyer, "pay", {"receipt": receipt()})

        assert file_storage.read_file(doc.get("payment_receipt_ref")).startswith(b"%PDF")

"""
Visibility and authentication at the document boundary.

A document is visible only to its issuer and its counter-party; everyone
else gets NOT_FOUND whether or not it exists.
"""

from datetime import timedelta
from uuid import uuid4

import pytest
from sqlalchemy import event

from tests.builders import TODAY, line
from tradedoc_kernel.domain.documents import (
    ActingCompany,
    CompanyKind,
    CounterById,
    CounterByName,
    DocumentType,
)
from tradedoc_kernel.models.company import Company
from tradedoc_kernel.models.document import Document
from tradedoc_kernel.selectors.document_selector import DocumentSelector
from tradedoc_services import OperationStatus


class TestAuthentication:

    def test_no_acting_company(self, document_service, rfq):
        result = document_service.fetch_document(DocumentType.RFQ, rfq.id, None)

        assert result.status is OperationStatus.UNAUTHENTICATED

    def test_unregistered_company(self, document_service):
        stranger = ActingCompany(company_id=uuid4(), kind=CompanyKind.BUYER)

        result = document_service.list_documents(DocumentType.RFQ, stranger)

        assert result.status is OperationStatus.UNAUTHENTICATED

    def test_kind_must_match_registration(self, document_service, buyer):
        posing = ActingCompany(company_id=buyer.company_id, kind=CompanyKind.SELLER)

        result = document_service.list_documents(DocumentType.RFQ, posing)

        assert result.status is OperationStatus.UNAUTHENTICATED


class TestFetch:

    def test_both_parties_can_read(self, document_service, rfq, buyer, seller):
        for acting in (buyer, seller):
            result = document_service.fetch_document(DocumentType.RFQ, rfq.id, acting)
            assert result.is_success
            assert result.document.human_code == "BHFRFQ-0001"

    def test_outsiders_get_not_found(self, document_service, rfq, other_buyer, other_seller):
        for acting in (other_buyer, other_seller):
            result = document_service.fetch_document(DocumentType.RFQ, rfq.id, acting)
            assert result.status is OperationStatus.NOT_FOUND

    @pytest.mark.parametrize("document_id", ["not-a-uuid", str(uuid4())])
    def test_unknown_ids(self, document_service, buyer, document_id):
        result = document_service.fetch_document(DocumentType.RFQ, document_id, buyer)

        assert result.status is OperationStatus.NOT_FOUND

    def test_wrong_type_is_not_found(self, document_service, rfq, buyer):
        result = document_service.fetch_document(DocumentType.PURCHASE_ORDER, rfq.id, buyer)

        assert result.status is OperationStatus.NOT_FOUND

    def test_type_given_as_string(self, document_service, rfq, seller):
        assert document_service.fetch_document(" RFQ ", str(rfq.id), seller).is_success

    def test_unknown_type(self, document_service, buyer):
        result = document_service.list_documents("bill_of_lading", buyer)

        assert result.status is OperationStatus.VALIDATION_ERROR
        assert result.field == "document_type"


class TestListing:

    @pytest.fixture
    def rfqs(self, create_ok, buyer, other_buyer, seller, act_ok):
        def make(acting, counter, project):
            return create_ok(
                DocumentType.RFQ,
                acting,
                {
                    **counter,
                    "due_date": TODAY + timedelta(days=10),
                    "project_name": project,
                    "items": [line()],
                },
            )

        first = make(buyer, {"counter_company_id": seller.company_id}, "Dock")
        second = make(buyer, {"counter_company_name": "Initech"}, "Yard")
        third = make(other_buyer, {"counter_company_name": "acme corp"}, "Depot")
        act_ok(first, seller, "approve")
        return first, second, third

    def test_issuer_sees_own_documents_newest_first(self, document_service, rfqs, buyer):
        result = document_service.list_documents(DocumentType.RFQ, buyer)

        assert [d.human_code for d in result.documents] == ["BHFRFQ-0002", "BHFRFQ-0001"]

    def test_counter_party_by_id_and_by_name(self, document_service, rfqs, seller):
        result = document_service.list_documents(DocumentType.RFQ, seller)

        assert {d.human_code for d in result.documents} == {"BHFRFQ-0001", "NTRFQ-0001"}

    def test_unrelated_seller_sees_nothing(self, document_service, rfqs, other_seller):
        assert document_service.list_documents(DocumentType.RFQ, other_seller).documents == ()

    @pytest.mark.parametrize(
        "search,expected",
        [
            ("0002", ["BHFRFQ-0002"]),
            ("initech", ["BHFRFQ-0002"]),
            ("blue harbor", ["BHFRFQ-0002", "BHFRFQ-0001"]),
            ("   ", ["BHFRFQ-0002", "BHFRFQ-0001"]),
            ("globex", []),
        ],
    )
    def test_search(self, document_service, rfqs, buyer, search, expected):
        result = document_service.list_documents(DocumentType.RFQ, buyer, search=search)

        assert [d.human_code for d in result.documents] == expected

    @pytest.mark.parametrize(
        "status,expected",
        [
            ("approved", ["BHFRFQ-0001"]),
            ("DRAFT", ["BHFRFQ-0002"]),
            ("ALL", ["BHFRFQ-0002", "BHFRFQ-0001"]),
            ("", ["BHFRFQ-0002", "BHFRFQ-0001"]),
        ],
    )
    def test_status_filter(self, document_service, rfqs, buyer, status, expected):
        result = document_service.list_documents(DocumentType.RFQ, buyer, status=status)

        assert [d.human_code for d in result.documents] == expected

    def test_status_must_exist_for_type(self, document_service, rfqs, buyer):
        result = document_service.list_documents(DocumentType.RFQ, buyer, status="SHIPPED")

        assert result.status is OperationStatus.VALIDATION_ERROR
        assert result.field == "status"


class TestNameAddressedVisibility:

    @pytest.fixture
    def addressed_by_name(self, create_ok, buyer):
        return create_ok(
            DocumentType.RFQ,
            buyer,
            {"counter_company_name": "  ACME corp", "due_date": TODAY + timedelta(days=5), "items": [line()]},
        )

    def test_matching_name_is_visible(self, document_service, addressed_by_name, seller):
        result = document_service.fetch_document(DocumentType.RFQ, addressed_by_name.id, seller)

        assert result.is_success
        assert result.document.counter_company_id is None
        assert result.document.counter_party == CounterByName("ACME corp")

    def test_rename_removes_visibility(self, document_service, company_service, addressed_by_name, seller):
        company_service.update_profile(seller, {"name": "Acme Holdings"})

        result = document_service.fetch_document(DocumentType.RFQ, addressed_by_name.id, seller)

        assert result.status is OperationStatus.NOT_FOUND

    def test_rename_keeps_id_addressed_documents(self, document_service, company_service, rfq, seller):
        company_service.update_profile(seller, {"name": "Acme Holdings"})

        result = document_service.fetch_document(DocumentType.RFQ, rfq.id, seller)

        assert result.is_success
        assert result.document.counter_company_name == "Acme Corp"
        assert result.document.counter_party == CounterById(seller.company_id)

    def test_spacing_differences_still_match(self, document_service, create_ok, buyer, seller):
        doc = create_ok(
            DocumentType.RFQ,
            buyer,
            {"counter_company_name": "Acme \t CORP", "due_date": TODAY + timedelta(days=5), "items": [line()]},
        )

        listed = document_service.list_documents(DocumentType.RFQ, seller).documents

        assert [d.id for d in listed] == [doc.id]
        assert document_service.fetch_document(DocumentType.RFQ, doc.id, seller).is_success

    def test_rename_moves_listing_to_new_name(self, document_service, company_service, create_ok, buyer, seller):
        create_ok(
            DocumentType.RFQ,
            buyer,
            {"counter_company_name": "Acme Holdings", "due_date": TODAY + timedelta(days=5), "items": [line()]},
        )
        assert document_service.list_documents(DocumentType.RFQ, seller).documents == ()

        company_service.update_profile(seller, {"name": "ACME  holdings"})

        assert len(document_service.list_documents(DocumentType.RFQ, seller).documents) == 1


class TestNameLookupQueries:
    """Name matches are narrowed in SQL on the stored name keys."""

    @pytest.fixture
    def statements(self, db_engine):
        captured = []

        def capture(conn, cursor, statement, parameters, context, executemany):
            captured.append(statement)

        event.listen(db_engine, "before_cursor_execute", capture)
        yield captured
        event.remove(db_engine, "before_cursor_execute", capture)

    def test_keys_stored(self, session, create_ok, buyer, seller):
        doc = create_ok(
            DocumentType.RFQ,
            buyer,
            {"counter_company_name": " Initech  Ltd ", "due_date": TODAY + timedelta(days=5), "items": [line()]},
        )

        assert session.get(Document, doc.id).counter_name_key == "initech ltd"
        assert session.get(Company, seller.company_id).name_key == "acme corp"

    def test_counter_listing_filters_on_key(self, document_service, rfq, seller, statements):
        document_service.list_documents(DocumentType.RFQ, seller)

        listing = [s for s in statements if "FROM trade_documents" in s and "counter_name_key" in s]
        assert listing

    def test_company_lookup_filters_on_key(self, session, seller, other_seller, statements):
        matches = DocumentSelector(session).find_companies_by_name("acme   CORP", CompanyKind.SELLER)

        assert [m.id for m in matches] == [seller.company_id]
        assert any("FROM companies" in s and "name_key" in s for s in statements)

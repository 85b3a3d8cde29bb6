"""Quotation creation and edit rules."""

from tradedoc_kernel.domain.documents import DocumentType, Role
from tradedoc_modules.quotation.orm import Quotation
from tradedoc_modules.quotation.workflows import (
    QUOTATION_WORKFLOW,
    QuotationAction,
    QuotationStatus,
)
from tradedoc_modules.registry import (
    DateRule,
    DocumentTypeDefinition,
    FieldKind,
    ParentLink,
    PartySide,
    register,
)

QUOTATION_DEFINITION = register(
    DocumentTypeDefinition(
        document_type=DocumentType.QUOTATION,
        model=Quotation,
        workflow=QUOTATION_WORKFLOW,
        status_enum=QuotationStatus,
        action_enum=QuotationAction,
        parents=(
            ParentLink(
                field="rfq_id",
                parent_type=DocumentType.RFQ,
                acting_role=Role.COUNTER,
                counter_source=PartySide.ISSUER,
            ),
        ),
        extra_fields={"validity_date": FieldKind.DATE},
        required_fields=("validity_date",),
        date_rules=(DateRule("validity_date", "issue_date"),),
        issue_date_defaults_today=True,
        initial_status_by_parent={DocumentType.RFQ: QuotationStatus.SENT.value},
    )
)

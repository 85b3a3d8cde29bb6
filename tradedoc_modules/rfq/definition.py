"""RFQ creation and edit rules."""

from tradedoc_kernel.domain.documents import DocumentType
from tradedoc_modules.registry import DateRule, DocumentTypeDefinition, FieldKind, register
from tradedoc_modules.rfq.orm import RFQ
from tradedoc_modules.rfq.workflows import RFQ_WORKFLOW, RFQAction, RFQStatus

RFQ_DEFINITION = register(
    DocumentTypeDefinition(
        document_type=DocumentType.RFQ,
        model=RFQ,
        workflow=RFQ_WORKFLOW,
        status_enum=RFQStatus,
        action_enum=RFQAction,
        extra_fields={
            "due_date": FieldKind.DATE,
            "project_name": FieldKind.TEXT,
            "project_description": FieldKind.TEXT,
        },
        required_fields=("due_date",),
        date_rules=(DateRule("due_date", "issue_date"),),
        issue_date_defaults_today=True,
        issue_date_not_in_future=True,
    )
)

"""Delivery note creation rules."""

from tradedoc_kernel.domain.documents import DocumentType, Role
from tradedoc_modules.delivery_note.orm import DeliveryNote
from tradedoc_modules.delivery_note.workflows import (
    DELIVERY_NOTE_WORKFLOW,
    DeliveryNoteAction,
    DeliveryNoteStatus,
)
from tradedoc_modules.registry import (
    DocumentTypeDefinition,
    FieldKind,
    ParentLink,
    PartySide,
    register,
)

DELIVERY_NOTE_DEFINITION = register(
    DocumentTypeDefinition(
        document_type=DocumentType.DELIVERY_NOTE,
        model=DeliveryNote,
        workflow=DELIVERY_NOTE_WORKFLOW,
        status_enum=DeliveryNoteStatus,
        action_enum=DeliveryNoteAction,
        parents=(
            ParentLink(
                field="purchase_order_id",
                parent_type=DocumentType.PURCHASE_ORDER,
                acting_role=Role.COUNTER,
                counter_source=PartySide.ISSUER,
                required=True,
            ),
            ParentLink(
                field="sales_order_id",
                parent_type=DocumentType.SALES_ORDER,
                acting_role=Role.ISSUER,
                counter_source=PartySide.COUNTER,
            ),
        ),
        extra_fields={"shipping_date": FieldKind.DATE},
        required_fields=("issue_date",),
    )
)

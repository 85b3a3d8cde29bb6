"""
Packing list creation rules.

A delivery note or sales order given alongside the purchase order must
belong to that same purchase order; the chain linker enforces it through
each parent's own ``purchase_order_ref_id``.
"""

from tradedoc_kernel.domain.documents import DocumentType, Role
from tradedoc_modules.packing_list.orm import PackingList
from tradedoc_modules.packing_list.workflows import (
    PACKING_LIST_WORKFLOW,
    PackingListAction,
    PackingListStatus,
)
from tradedoc_modules.registry import (
    DocumentTypeDefinition,
    FieldKind,
    ParentLink,
    PartySide,
    register,
)

PACKING_LIST_DEFINITION = register(
    DocumentTypeDefinition(
        document_type=DocumentType.PACKING_LIST,
        model=PackingList,
        workflow=PACKING_LIST_WORKFLOW,
        status_enum=PackingListStatus,
        action_enum=PackingListAction,
        parents=(
            ParentLink(
                field="purchase_order_id",
                parent_type=DocumentType.PURCHASE_ORDER,
                acting_role=Role.COUNTER,
                counter_source=PartySide.ISSUER,
                required=True,
            ),
            ParentLink(
                field="delivery_note_id",
                parent_type=DocumentType.DELIVERY_NOTE,
                acting_role=Role.ISSUER,
                counter_source=PartySide.COUNTER,
            ),
            ParentLink(
                field="sales_order_id",
                parent_type=DocumentType.SALES_ORDER,
                acting_role=Role.ISSUER,
                counter_source=PartySide.COUNTER,
            ),
        ),
        extra_fields={"shipment_tracking_id": FieldKind.TEXT},
        required_fields=("issue_date",),
        weighed_items=True,
    )
)

"""
Purchase order creation rules.

The seller id comes from the contract when one is given, then from the
quotation: both were issued by the seller.
"""

from tradedoc_kernel.domain.documents import DocumentType, Role
from tradedoc_modules.purchase_order.orm import PurchaseOrder
from tradedoc_modules.purchase_order.workflows import (
    PURCHASE_ORDER_WORKFLOW,
    PurchaseOrderAction,
    PurchaseOrderStatus,
)
from tradedoc_modules.registry import (
    DateRule,
    DocumentTypeDefinition,
    FieldKind,
    ParentLink,
    PartySide,
    register,
)

PURCHASE_ORDER_DEFINITION = register(
    DocumentTypeDefinition(
        document_type=DocumentType.PURCHASE_ORDER,
        model=PurchaseOrder,
        workflow=PURCHASE_ORDER_WORKFLOW,
        status_enum=PurchaseOrderStatus,
        action_enum=PurchaseOrderAction,
        parents=(
            ParentLink(
                field="contract_id",
                parent_type=DocumentType.CONTRACT,
                acting_role=Role.COUNTER,
                counter_source=PartySide.ISSUER,
            ),
            ParentLink(
                field="quotation_id",
                parent_type=DocumentType.QUOTATION,
                acting_role=Role.COUNTER,
                counter_source=PartySide.ISSUER,
            ),
        ),
        extra_fields={
            "expected_delivery_date": FieldKind.DATE,
            "delivery_address": FieldKind.TEXT,
        },
        required_fields=("issue_date", "expected_delivery_date"),
        date_rules=(DateRule("expected_delivery_date", "issue_date"),),
    )
)

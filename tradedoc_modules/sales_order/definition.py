"""Sales order creation rules.  The buyer id comes from the purchase order's issuer."""

from tradedoc_kernel.domain.documents import DocumentType, Role
from tradedoc_modules.registry import (
    DateRule,
    DocumentTypeDefinition,
    FieldKind,
    ParentLink,
    PartySide,
    register,
)
from tradedoc_modules.sales_order.orm import SalesOrder
from tradedoc_modules.sales_order.workflows import (
    SALES_ORDER_WORKFLOW,
    SalesOrderAction,
    SalesOrderStatus,
)

SALES_ORDER_DEFINITION = register(
    DocumentTypeDefinition(
        document_type=DocumentType.SALES_ORDER,
        model=SalesOrder,
        workflow=SALES_ORDER_WORKFLOW,
        status_enum=SalesOrderStatus,
        action_enum=SalesOrderAction,
        parents=(
            ParentLink(
                field="purchase_order_id",
                parent_type=DocumentType.PURCHASE_ORDER,
                acting_role=Role.COUNTER,
                counter_source=PartySide.ISSUER,
            ),
        ),
        extra_fields={"planned_ship_date": FieldKind.DATE},
        required_fields=("issue_date", "planned_ship_date"),
        date_rules=(DateRule("planned_ship_date", "issue_date", strict=False),),
    )
)

"""Contract creation rules and the buyer-response handler."""

from tradedoc_kernel.domain.documents import DocumentType, Role
from tradedoc_kernel.exceptions import MissingFieldError
from tradedoc_modules.contract.orm import Contract
from tradedoc_modules.contract.workflows import (
    CONTRACT_WORKFLOW,
    ContractAction,
    ContractStatus,
)
from tradedoc_modules.registry import (
    ActionEffect,
    ActionRequest,
    DateRule,
    DocumentTypeDefinition,
    FieldKind,
    ParentLink,
    PartySide,
    register,
)


def handle_contract_action(document: Contract, request: ActionRequest) -> ActionEffect:
    """Every buyer response stamps the response date; suggestions need text."""
    updates = {"counter_response_date": request.today}
    if request.action == ContractAction.SUGGEST_CHANGES.value:
        suggestions = request.payload.get("suggestions")
        if not isinstance(suggestions, str) or not suggestions.strip():
            raise MissingFieldError("suggestions")
        updates["counter_suggestions"] = suggestions.strip()
    return ActionEffect(
        to_state=request.candidates[0].to_state,
        updates=updates,
        reason=request.reason,
    )


CONTRACT_DEFINITION = register(
    DocumentTypeDefinition(
        document_type=DocumentType.CONTRACT,
        model=Contract,
        workflow=CONTRACT_WORKFLOW,
        status_enum=ContractStatus,
        action_enum=ContractAction,
        parents=(
            ParentLink(
                field="quotation_id",
                parent_type=DocumentType.QUOTATION,
                acting_role=Role.ISSUER,
                counter_source=PartySide.COUNTER,
            ),
            ParentLink(
                field="rfq_id",
                parent_type=DocumentType.RFQ,
                acting_role=Role.COUNTER,
                counter_source=PartySide.ISSUER,
            ),
        ),
        extra_fields={
            "end_date": FieldKind.DATE,
            "agreed_total_value": FieldKind.MONEY,
        },
        required_fields=("issue_date", "end_date"),
        date_rules=(DateRule("end_date", "issue_date"),),
        action_handler=handle_contract_action,
    )
)

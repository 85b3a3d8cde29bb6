"""
Module ORM registry (``tradedoc_modules._orm_registry``).

Imports the kernel models and every ``tradedoc_modules.*.orm`` subclass so
``Base.metadata`` and the polymorphic map are complete before tables are
created or documents are loaded.  Idempotent.
"""


def import_all_orm_models() -> None:
    import tradedoc_kernel.models  # noqa: F401
    # fmt: off
    import tradedoc_modules.contract.orm  # noqa: F401
    import tradedoc_modules.delivery_note.orm  # noqa: F401
    import tradedoc_modules.invoice.orm  # noqa: F401
    import tradedoc_modules.packing_list.orm  # noqa: F401
    import tradedoc_modules.purchase_order.orm  # noqa: F401
    import tradedoc_modules.quotation.orm  # noqa: F401
    import tradedoc_modules.rfq.orm  # noqa: F401
    import tradedoc_modules.sales_order.orm  # noqa: F401
    # fmt: on

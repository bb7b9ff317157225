"""
Entity type enumeration.

Names the four record families the records service manages.
"""

import enum


class EntityType(str, enum.Enum):
    """
    Record families.

    Types:
        CLIENT: Customer of a business user (owned)
        INVOICE: Invoice issued by a business user (owned, may reference a client)
        INVOICE_ITEM: Line of an invoice (owned through its invoice)
        RECEIPT: Payment receipt (owned, may reference an invoice)
    """
    CLIENT = "client"
    INVOICE = "invoice"
    INVOICE_ITEM = "invoice_item"
    RECEIPT = "receipt"


class InvoiceDeletePolicy(str, enum.Enum):
    """What deleting an invoice does to its items and receipts."""
    ORPHAN = "orphan"
    CASCADE = "cascade"
    RESTRICT = "restrict"

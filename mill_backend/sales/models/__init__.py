# sales/models/__init__.py

from .invoice import Invoice, InvoiceItem, InvoicePayment
from .sales_order import SalesOrder, SalesOrderItem

__all__ = [
    "Invoice",
    "InvoiceItem",
    "InvoicePayment",
    "SalesOrder",
    "SalesOrderItem",
]

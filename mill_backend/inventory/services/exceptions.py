# inventory/services/exceptions.py

"""
INVENTORY SERVICE ERRORS
"""


class InventoryError(Exception):
    """Base exception for stock and ledger failures."""


class LedgerError(InventoryError):
    """Raised when a ledger movement cannot be recorded."""


class LotNotFoundError(InventoryError):
    """Raised when no raw-material or finished-goods lot matches a SKU / id."""


class InsufficientStockError(InventoryError):
    """Raised when a lot cannot cover a requested quantity."""


class StockAdjustmentError(InventoryError):
    """Raised when a manual adjustment or transfer is invalid."""

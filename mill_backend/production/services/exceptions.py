# production/services/exceptions.py

"""
PRODUCTION SERVICE ERRORS
"""


class ProductionError(Exception):
    """Base exception for batch failures (bad input or broken precondition)."""


class RawMaterialNotFoundError(ProductionError):
    pass


class InsufficientRawMaterialError(ProductionError):
    pass


class BatchNotFoundError(ProductionError):
    pass


class BatchAlreadyCompletedError(ProductionError):
    pass


class InvalidBatchTransitionError(ProductionError):
    pass


class MassBalanceError(ProductionError):
    """Recorded output exceeds input beyond the allowed tolerance."""


class ByProductSaleError(ProductionError):
    pass

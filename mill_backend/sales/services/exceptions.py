# sales/services/exceptions.py


class SalesError(ValueError):
    pass


class OrderNotFoundError(SalesError):
    pass


class OrderAlreadyInvoicedError(SalesError):
    pass


class OrderNotConfirmedError(SalesError):
    pass


class InvalidOrderTransitionError(SalesError):
    pass


class ProductNotFoundError(SalesError):
    pass


class InsufficientFinishedGoodsError(SalesError):
    pass


class InvoiceNotFoundError(SalesError):
    pass


class InvoiceLockedError(SalesError):
    pass


class InvoicePaymentError(SalesError):
    pass


NOT_FOUND_ERRORS = (OrderNotFoundError, ProductNotFoundError, InvoiceNotFoundError)

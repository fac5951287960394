# Domain exceptions for deterministic error handling


class NotFoundError(Exception):
    pass


class ProductNotFoundError(NotFoundError):
    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__(f"Product {product_id} not found")


class OrderNotFoundError(NotFoundError):
    def __init__(self, order_id):
        self.order_id = order_id
        super().__init__(f"Order {order_id} not found")


class InsufficientStockError(Exception):
    def __init__(self, product_id, product_name, available):
        self.product_id = product_id
        self.product_name = product_name
        self.available = available
        super().__init__(f"Product {product_id} ({product_name}) only has {available} left in stock")


class InvalidTransitionError(ValueError):
    def __init__(self, current, requested):
        self.current = current
        self.requested = requested
        super().__init__(f"Invalid transition from {current.value} to {requested.value}")


class TransactionFailureError(Exception):
    """Database conflict or timeout inside an atomic block. Safe to retry."""


class DuplicateError(Exception):
    pass


class InvalidReferenceError(ValueError):
    """A product points at a category or series that does not exist."""

    def __init__(self, field, value):
        self.field = field
        self.value = value
        super().__init__(f"{field} {value} does not exist")

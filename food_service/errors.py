class OrderServiceError(Exception):
    """Base class for failures reported to the caller as {"success": false, "message": ...}."""
    status_code = 400

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class InvalidIdentifier(OrderServiceError):
    pass


class EmptyCart(OrderServiceError):
    pass


class BelowMinimumAmount(OrderServiceError):
    pass


class UserAlreadyExists(OrderServiceError):
    pass


class OrderNotFound(OrderServiceError):
    status_code = 404


class FoodNotFound(OrderServiceError):
    status_code = 404


class UserNotFound(OrderServiceError):
    status_code = 404


class PaymentGatewayError(OrderServiceError):
    """The hosted checkout provider was unreachable or rejected the session request."""
    status_code = 502

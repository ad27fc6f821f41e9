"""Custom exceptions for laman."""


class LamanError(Exception):
    """Base exception for all laman errors."""

    pass


class ConfigError(LamanError):
    """Raised when an environment setting cannot be parsed."""

    def __init__(self, name: str, value: str, reason: str):
        self.name = name
        self.value = value
        super().__init__(f"Invalid setting {name}={value!r}: {reason}")


class ValidationError(LamanError):
    """Raised when a local precondition fails before any network call."""

    def __init__(self, message: str, fields: list[str] | None = None):
        self.fields = fields or []
        super().__init__(message)


class ConflictError(LamanError):
    """Raised when a cart change would mix products from two stores.

    The cart is left exactly as it was before the rejected call.
    """

    def __init__(self, active_store_id: str, product_store_id: str | None, product_id: str):
        self.active_store_id = active_store_id
        self.product_store_id = product_store_id
        self.product_id = product_id
        super().__init__(
            f"Product {product_id} belongs to store {product_store_id}, "
            f"but the cart holds products from store {active_store_id}"
        )


class ServiceError(LamanError):
    """Base exception for failures reported by the remote catalog/order service."""

    pass


class NetworkError(ServiceError):
    """Raised when the service cannot be reached or the request times out."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Request to {url} failed: {reason}")


class ServerError(ServiceError):
    """Raised when the service answers with a non-2xx status."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        msg = body.strip() or f"HTTP {status_code}"
        super().__init__(msg)


class DecodeError(ServiceError):
    """Raised when a response payload cannot be decoded."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Malformed response from {url}: {reason}")

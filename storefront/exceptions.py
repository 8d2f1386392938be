"""Domain errors raised by the services.

Each error carries the HTTP status it is reported with; the app turns
every one of them into a ``{"error": message}`` response.
"""


class StorefrontError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(StorefrontError):
    """Missing or malformed input"""

    status_code = 400


class EmptyCartError(StorefrontError):
    """Checkout attempted on a session without cart items"""

    status_code = 400


class NotFoundError(StorefrontError):
    status_code = 404


class StoreError(StorefrontError):
    """The database failed to complete a query"""

    status_code = 500

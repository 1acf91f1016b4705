# storefront/domain/errors.py
"""
Error taxonomy raised by the service layer.

Services never build HTTP responses. The API layer maps each error type
to a status code (or a redirect) in ``storefront.api.errors``.
"""


class StorefrontError(Exception):
    default_message = "An error occurred"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(StorefrontError):
    default_message = "Authentication required"


class Forbidden(StorefrontError):
    default_message = "Admin access required"


class NotFound(StorefrontError):
    default_message = "Not found"


class ValidationFailed(StorefrontError):
    default_message = "Invalid input"


class Conflict(StorefrontError):
    default_message = "Concurrent modification, please retry"


class UpstreamFailure(StorefrontError):
    default_message = "Upstream service failure"

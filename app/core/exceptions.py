from typing import Optional


class StorefrontError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = 400

    def __init__(self, message: str, errors: Optional[dict[str, str]] = None):
        self.message = message
        self.errors = errors or {}
        super().__init__(message)


class NotFoundError(StorefrontError):
    status_code = 404


class ConflictError(StorefrontError):
    """Duplicate identity or a delete blocked by existing references."""

    status_code = 409


class InvalidReferenceError(StorefrontError):
    """A service points at a category node that does not exist or does not nest."""

    status_code = 400


class OrderFormError(StorefrontError):
    """Customer order form failed validation; ``errors`` maps field to message."""

    status_code = 422

    def __init__(self, errors: dict[str, str]):
        super().__init__("Order form validation failed", errors)


class AuthenticationError(StorefrontError):
    status_code = 401


class PermissionDeniedError(StorefrontError):
    status_code = 403

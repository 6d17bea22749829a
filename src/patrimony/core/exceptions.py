"""Application-level exceptions."""


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, code: str = "APP_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(AppError):
    """Raised when input validation fails."""

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class NotFoundError(AppError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}", code="NOT_FOUND")


class ConflictError(AppError):
    """Raised when a write would break an ownership invariant."""

    def __init__(self, message: str):
        super().__init__(message, code="CONFLICT")


class PriceSourceError(AppError):
    """
    Base class for reference price lookup failures.

    Raised by providers and the price parser only; the price resolver
    absorbs every subclass into its fallback chain.
    """

    def __init__(self, message: str, code: str = "PRICE_SOURCE_ERROR"):
        super().__init__(message, code=code)


class ExternalUnavailableError(PriceSourceError):
    """Raised when the price source cannot be reached or answers with an error."""

    def __init__(self, message: str):
        super().__init__(message, code="EXTERNAL_UNAVAILABLE")


class MalformedPriceDataError(PriceSourceError):
    """Raised when the price source answers with data that cannot be parsed."""

    def __init__(self, message: str):
        super().__init__(message, code="MALFORMED_PRICE_DATA")

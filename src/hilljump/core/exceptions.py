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
        super().__init__(f"{resource} not found: {identifier}", code="NOT_FOUND")


class InsufficientDataError(AppError):
    """Raised when a ticker has no usable history to calculate from."""

    def __init__(self, ticker: str, detail: str = "no price history"):
        super().__init__(
            f"Insufficient data for {ticker}: {detail}",
            code="INSUFFICIENT_DATA",
        )


class ProviderError(AppError):
    """Raised when an upstream market data provider fails."""

    def __init__(self, provider: str, message: str):
        super().__init__(f"{provider}: {message}", code="PROVIDER_ERROR")

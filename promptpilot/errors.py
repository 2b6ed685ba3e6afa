"""Application error taxonomy.

Every failure that reaches the request boundary is an ``AppError`` subclass
carrying the HTTP status it maps to. Handlers in ``promptpilot.main`` log them
and render ``{"error": message, "details": ...}``.
"""

from typing import Any


class AppError(Exception):
    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(
        self,
        message: str | None = None,
        *,
        details: Any = None,
        status_code: int | None = None,
    ):
        self.message = message or self.default_message
        self.details = details
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class Unauthorized(AppError):
    status_code = 401
    default_message = "Unauthorized"


class ValidationError(AppError):
    """Schema violation. ``details`` lists ``{field, message}`` entries."""

    status_code = 400
    default_message = "Invalid request"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class WebhookVerificationError(AppError):
    status_code = 400
    default_message = "Error verifying webhook"


class PersistenceError(AppError):
    status_code = 500
    default_message = "Database operation failed"


class ConfigurationError(AppError):
    status_code = 500
    default_message = "Server is misconfigured"


class UpstreamProviderError(AppError):
    """LLM vendor call failed.

    Surfaces as 401 (rejected credentials), 429 (rate limited) or 500.
    """

    status_code = 500
    default_message = "Upstream provider request failed"

    @classmethod
    def from_status(cls, upstream_status: int, message: str, details: Any = None):
        if upstream_status == 401:  # noqa: PLR2004
            return cls(message, details=details, status_code=401)
        if upstream_status == 429:  # noqa: PLR2004
            return cls(message, details=details, status_code=429)
        return cls(message, details=details, status_code=500)


class ConfirmationEmailError(UpstreamProviderError):
    default_message = "Failed to resend confirmation email"

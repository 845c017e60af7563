"""Custom exception classes for the application."""

from typing import Any


class SEOEngineError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


# External API Errors
class ExternalAPIError(SEOEngineError):
    """Error calling external API."""

    def __init__(self, api_name: str, message: str) -> None:
        self.api_name = api_name
        super().__init__(f"{api_name} API error: {message}", {"api": api_name})


class RateLimitExceededError(ExternalAPIError):
    """Rate limit exceeded for external API."""

    def __init__(self, api_name: str) -> None:
        super().__init__(api_name, "Rate limit exceeded")


class APIKeyMissingError(ExternalAPIError):
    """API credentials not configured."""

    def __init__(self, api_name: str, missing: list[str] | None = None) -> None:
        message = "API credentials not configured"
        if missing:
            message = f"{message}: {', '.join(missing)}"
        super().__init__(api_name, message)


# Data Errors
class OpportunityNotFoundError(SEOEngineError):
    """Opportunity not found."""

    def __init__(self, opportunity_id: int) -> None:
        super().__init__(f"Opportunity not found: {opportunity_id}")


# Validation Errors
class ValidationError(SEOEngineError):
    """Data validation failed."""

    pass

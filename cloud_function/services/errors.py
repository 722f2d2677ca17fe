"""
Error taxonomy for the summary pipeline.

Every failure the pipeline can surface carries a machine-readable
classification and the HTTP status the entry point should answer with.
Services raise these; only main.py turns them into responses.
"""
from typing import Optional


class SummaryError(Exception):
    """Base class for classified pipeline failures."""

    classification = "unknown"
    http_status = 500

    def __init__(self, message: str, suggestion: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.suggestion = suggestion

    def to_dict(self) -> dict:
        body = {
            "success": False,
            "error": self.message,
            "classification": self.classification,
        }
        if self.suggestion:
            body["suggestion"] = self.suggestion
        return body


class InvalidRequestError(SummaryError):
    classification = "invalid_request"
    http_status = 400


class RateLimitedError(SummaryError):
    """The calling client exhausted its hourly allowance."""
    classification = "rate_limited"
    http_status = 429


class UpstreamRateLimitedError(SummaryError):
    """The AI service answered with a rate-limit signal. Retried internally."""
    classification = "rate_limited"
    http_status = 429


class QuotaExceededError(SummaryError):
    classification = "quota_exceeded"
    http_status = 429


class AuthFailedError(SummaryError):
    classification = "auth_failed"
    http_status = 401


class MalformedResponseError(SummaryError):
    classification = "malformed_response"
    http_status = 500


class GlobalCapReachedError(SummaryError):
    classification = "global_cap_reached"
    http_status = 503


class ServiceNotConfiguredError(SummaryError):
    classification = "service_not_configured"
    http_status = 500


class FallbackUnavailableError(SummaryError):
    classification = "fallback_unavailable"
    http_status = 500


class BookNotFoundError(SummaryError):
    classification = "book_not_found"
    http_status = 404


class UpstreamError(SummaryError):
    """Any other failure of an external service."""
    classification = "upstream_error"
    http_status = 500

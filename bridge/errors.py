"""Errors surfaced to callers of the bridge."""


class BridgeError(Exception):
    """Base exception rendered as ``{"error": {"type", "message"}}``."""

    status_code = 500
    error_type = "api_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequestError(BridgeError):
    """Raised when the inbound body cannot be parsed. Never reaches upstream."""

    status_code = 400
    error_type = "invalid_request_error"


class UpstreamError(BridgeError):
    """Raised when the upstream is unreachable or returns an unparseable body."""

    status_code = 500
    error_type = "api_error"

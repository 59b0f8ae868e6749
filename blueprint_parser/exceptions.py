"""
Custom exceptions for the blueprint parser.

Error philosophy:
  - FetchError          → FAIL HARD: the page could not be downloaded, the
                          caller gets the error (the HTTP API answers 500).
  - InvalidRequestError → REJECTED: the caller's parameters cannot form a
                          request (the HTTP API answers 400).
  - Structural absence  → NOT AN EXCEPTION: a missing marker or an unclosed
                          region degrades to an empty field and a log line.

Extraction itself never raises: a page whose layout drifted still yields
records, just with empty fields.
"""

from typing import Optional


class BlueprintParserError(Exception):
    """Base exception for all blueprint parser errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


# --- FAIL HARD: the document source is unavailable ---

class FetchError(BlueprintParserError):
    """
    Raised when the remote site answers with a non-success status or the
    request fails at the transport level.

    Never retried inside the package.
    """

    def __init__(
        self,
        message: str,
        url: str,
        status_code: Optional[int] = None,
        details: Optional[dict] = None
    ):
        super().__init__(message, details)
        self.url = url
        self.status_code = status_code  # None for connection errors / timeouts

    def to_response(self) -> dict:
        """Convert to a loggable dict."""
        return {
            "error": "FetchError",
            "message": self.message,
            "url": self.url,
            "status_code": self.status_code,
            "details": self.details
        }


# --- REJECTED: bad caller input ---

class InvalidRequestError(BlueprintParserError):
    """Raised when search or detail parameters cannot form a request."""

    def __init__(self, message: str, parameter: str, details: Optional[dict] = None):
        super().__init__(message, details)
        self.parameter = parameter  # query parameter name, e.g. "search" or "path"

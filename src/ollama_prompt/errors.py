"""Error taxonomy for a submission cycle.

Every failure a user can see is one of these. They are raised by the
validator and the client, and converted to a ``Failure`` outcome in
:func:`ollama_prompt.submission.submit`.
"""

from __future__ import annotations

from typing import Optional


class SubmissionError(Exception):
    """Base class carrying a human-readable message."""

    kind: str = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ValidationError(SubmissionError):
    """Model or prompt missing; no network call is attempted."""

    kind = "validation"


class TransportError(SubmissionError):
    """Non-2xx status or a network-level failure."""

    kind = "transport"

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ParseError(SubmissionError):
    """Response body is not JSON or does not have the expected shape."""

    kind = "parse"


__all__ = ["SubmissionError", "ValidationError", "TransportError", "ParseError"]

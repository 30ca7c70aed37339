"""One submission cycle of the prompt form.

State lives in an explicit :class:`SubmissionContext` rather than in UI
fields, so the same cycle drives the Gradio form, the HTTP API and the CLI::

    Idle -> Validating -> InFlight -> Succeeded | Failed

Validation failures jump straight from Validating to Failed without any
network call. Whatever the result, ``loading`` is cleared and the outcome is
written last.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .client import OllamaClient, build_request
from .errors import SubmissionError, ValidationError
from .logging import get_logger
from .models import DEFAULT_HOST, DEFAULT_PORT, Failure, Outcome, Success
from .settings import get_settings

VALIDATION_MESSAGE = "Please select a model and enter a prompt"

log = get_logger(__name__)


class SubmissionState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class SubmissionContext:
    """Per-session form state threaded through :func:`submit`."""

    host: str = DEFAULT_HOST
    port: str = DEFAULT_PORT
    model: str = ""
    prompt: str = ""
    response: str = ""
    error: str = ""
    loading: bool = False
    state: SubmissionState = SubmissionState.IDLE
    outcome: Optional[Outcome] = None

    @property
    def can_submit(self) -> bool:
        return not self.loading


def validate_submission(model: str, prompt: str) -> None:
    """Reject an unset model or a blank prompt."""
    if not model or not (prompt or "").strip():
        raise ValidationError(VALIDATION_MESSAGE)


def _clear(ctx: SubmissionContext) -> None:
    ctx.outcome = None
    ctx.response = ""
    ctx.error = ""


def _finish(ctx: SubmissionContext, outcome: Outcome) -> Outcome:
    ctx.loading = False
    if isinstance(outcome, Success):
        ctx.response, ctx.error = outcome.text, ""
        ctx.state = SubmissionState.SUCCEEDED
    else:
        ctx.response, ctx.error = "", outcome.message
        ctx.state = SubmissionState.FAILED
    ctx.outcome = outcome
    return outcome


def submit(ctx: SubmissionContext, client: Optional[OllamaClient] = None) -> Outcome:
    """Run one cycle against ``ctx`` and return its outcome.

    The context is mutated in place. Concurrent calls on the same context are
    not coordinated: the last one to finish wins.
    """
    ctx.state = SubmissionState.VALIDATING
    try:
        validate_submission(ctx.model, ctx.prompt)
    except ValidationError as exc:
        log.warning(
            "submission rejected",
            extra={"extra": {"kind": exc.kind, "model": ctx.model or None}},
        )
        return _finish(ctx, Failure(exc.message, kind=exc.kind))

    _clear(ctx)
    ctx.loading = True
    ctx.state = SubmissionState.IN_FLIGHT
    if client is None:
        client = OllamaClient(timeout=get_settings().request_timeout)

    url, _ = build_request(ctx.host, ctx.port, ctx.model, ctx.prompt)
    log.info(
        "submission started",
        extra={"extra": {"url": url, "model": ctx.model, "prompt_chars": len(ctx.prompt)}},
    )
    t0 = time.perf_counter()
    outcome: Outcome
    try:
        text = client.generate(ctx.host, ctx.port, ctx.model, ctx.prompt)
    except SubmissionError as exc:
        outcome = Failure(exc.message, kind=exc.kind)
        log.warning(
            "submission failed",
            extra={
                "extra": {
                    "url": url,
                    "kind": exc.kind,
                    "error": exc.message,
                    "elapsed_ms": round((time.perf_counter() - t0) * 1000, 1),
                }
            },
        )
    else:
        outcome = Success(text)
        log.info(
            "submission succeeded",
            extra={
                "extra": {
                    "url": url,
                    "response_chars": len(text),
                    "elapsed_ms": round((time.perf_counter() - t0) * 1000, 1),
                }
            },
        )
    return _finish(ctx, outcome)


__all__ = [
    "VALIDATION_MESSAGE",
    "SubmissionContext",
    "SubmissionState",
    "submit",
    "validate_submission",
]

"""Thin client for a local Ollama-compatible ``/api/generate`` endpoint.

The exchange is split in three steps so each can be exercised on its own:

* :func:`build_request` turns host, port, model and prompt into a URL and a
  JSON body,
* :func:`post_generate` performs the single blocking POST,
* :func:`parse_generation` decodes the body into a
  :class:`~ollama_prompt.models.GenerationResponse`.

:class:`OllamaClient` chains them. All failures surface as
:class:`~ollama_prompt.errors.SubmissionError` subclasses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import requests
from pydantic import ValidationError as ShapeError
from urllib3.exceptions import LocationValueError

from .errors import ParseError, TransportError
from .models import GenerationRequest, GenerationResponse

CONNECT_FAILED_MESSAGE = "Failed to connect to Ollama server"
JSON_HEADERS = {"Content-Type": "application/json"}


def build_request(
    host: str, port: str, model: str, prompt: str
) -> Tuple[str, Dict[str, Any]]:
    """Return ``(url, body)`` for a non-streaming generate call.

    Host and port are interpolated verbatim; a malformed value yields a
    malformed URL which fails later in :func:`post_generate`.
    """
    url = f"http://{host}:{port}/api/generate"
    body = GenerationRequest(model=model, prompt=prompt, stream=False).model_dump()
    return url, body


def _next_cause(exc: BaseException) -> Optional[BaseException]:
    if exc.__cause__ is not None:
        return exc.__cause__
    # urllib3 MaxRetryError keeps the connection error on `reason`
    reason = getattr(exc, "reason", None)
    if isinstance(reason, BaseException):
        return reason
    # requests wraps the urllib3 error as its first argument
    if exc.args and isinstance(exc.args[0], BaseException):
        return exc.args[0]
    if not exc.__suppress_context__:
        return exc.__context__
    return None


def _transport_message(exc: BaseException) -> str:
    """Reduce a network failure to the socket-level reason.

    requests and urllib3 stack several wrappers whose text embeds pool and
    connection reprs; only the innermost OS error string is user-facing.
    """
    node: Optional[BaseException] = exc
    leaf = exc
    seen = set()
    while node is not None and id(node) not in seen:
        seen.add(id(node))
        if isinstance(node, OSError) and node.strerror:
            return node.strerror
        leaf = node
        node = _next_cause(node)
    if isinstance(exc, (requests.ConnectionError, requests.Timeout)):
        return str(leaf) or CONNECT_FAILED_MESSAGE
    return str(exc) or CONNECT_FAILED_MESSAGE


def post_generate(
    url: str, body: Dict[str, Any], timeout: Optional[float] = None
) -> requests.Response:
    """POST ``body`` as JSON to ``url`` and wait for the full response.

    Parameters
    ----------
    url:
        Full ``/api/generate`` URL.
    body:
        Generation request payload.
    timeout:
        Seconds to wait; ``None`` leaves it to the network stack.

    Raises
    ------
    TransportError
        On a non-2xx status (``status_code`` is set) or any network failure.
    """
    try:
        r = requests.post(url, json=body, headers=JSON_HEADERS, timeout=timeout)
    except (requests.RequestException, LocationValueError) as exc:
        # LocationValueError: hosts urllib3 only rejects when connecting
        raise TransportError(_transport_message(exc)) from exc
    if not 200 <= r.status_code < 300:
        raise TransportError(
            f"HTTP error! status: {r.status_code}", status_code=r.status_code
        )
    return r


def parse_generation(r: requests.Response) -> GenerationResponse:
    """Decode a generate response body.

    A missing or ``null`` ``response`` field is not an error here; callers
    read it as the empty string.

    Raises
    ------
    ParseError
        If the body is not JSON, is not an object, or ``response`` is not a
        string.
    """
    try:
        data = r.json()
    except ValueError as exc:
        raise ParseError(f"Invalid JSON in response: {exc}") from exc
    if not isinstance(data, dict):
        raise ParseError(
            f"Unexpected response shape: expected an object, got {type(data).__name__}"
        )
    try:
        return GenerationResponse.model_validate(data)
    except ShapeError as exc:
        details = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        )
        raise ParseError(f"Unexpected response shape: {details}") from exc


@dataclass
class OllamaClient:
    timeout: Optional[float] = None

    def generate_raw(
        self, host: str, port: str, model: str, prompt: str
    ) -> GenerationResponse:
        """Return the full parsed body (includes timings and counts)."""
        url, body = build_request(host, port, model, prompt)
        r = post_generate(url, body, timeout=self.timeout)
        return parse_generation(r)

    def generate(self, host: str, port: str, model: str, prompt: str) -> str:
        return self.generate_raw(host, port, model, prompt).response or ""


__all__ = [
    "CONNECT_FAILED_MESSAGE",
    "OllamaClient",
    "build_request",
    "parse_generation",
    "post_generate",
]

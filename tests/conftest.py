import os
from typing import Any, Dict, List, Optional

import orjson
import pytest
import requests

import ollama_prompt.settings as settings


def make_response(status_code: int = 200, body: Any = None, raw: Optional[bytes] = None) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status_code
    resp._content = raw if raw is not None else orjson.dumps(body)
    resp.headers["Content-Type"] = "application/json"
    resp.encoding = "utf-8"
    return resp


class FakePost:
    """Stand-in for ``requests.post`` that records calls."""

    def __init__(self, response: Optional[requests.Response] = None, exc: Optional[Exception] = None):
        self.response = response
        self.exc = exc
        self.calls: List[Dict[str, Any]] = []

    def __call__(self, url, json=None, headers=None, timeout=None):
        self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if self.exc is not None:
            raise self.exc
        return self.response


@pytest.fixture(autouse=True)
def _clean_settings(monkeypatch: pytest.MonkeyPatch):
    for key in list(os.environ):
        if key.startswith("OLLAMA_PROMPT_"):
            monkeypatch.delenv(key)
    settings.reset_settings_cache()
    yield
    settings.reset_settings_cache()


@pytest.fixture
def fake_post(monkeypatch: pytest.MonkeyPatch):
    def install(response=None, exc=None) -> FakePost:
        fake = FakePost(response=response, exc=exc)
        monkeypatch.setattr(requests, "post", fake)
        return fake

    return install

import socket

import pytest
import requests

from ollama_prompt.client import (
    CONNECT_FAILED_MESSAGE,
    OllamaClient,
    build_request,
    parse_generation,
    post_generate,
)
from ollama_prompt.errors import ParseError, TransportError

from conftest import make_response


def test_build_request_url_and_body():
    url, body = build_request("localhost", "11434", "llama2", "hello")
    assert url == "http://localhost:11434/api/generate"
    assert body == {"model": "llama2", "prompt": "hello", "stream": False}


def test_build_request_does_not_escape_host():
    url, _ = build_request("my host", "abc", "m", "p")
    assert url == "http://my host:abc/api/generate"


def test_post_sends_json_header_and_no_timeout(fake_post):
    fake = fake_post(make_response(200, {"response": "hi", "done": True}))
    url, body = build_request("10.0.0.2", "11434", "mistral", "hello")
    post_generate(url, body)
    call = fake.calls[0]
    assert call["url"] == "http://10.0.0.2:11434/api/generate"
    assert call["json"] == {"model": "mistral", "prompt": "hello", "stream": False}
    assert call["headers"]["Content-Type"] == "application/json"
    assert call["timeout"] is None


@pytest.mark.parametrize("code", [301, 404, 500, 503])
def test_non_2xx_is_transport_error(fake_post, code):
    fake_post(make_response(code, {"error": "boom"}))
    with pytest.raises(TransportError) as ei:
        post_generate("http://localhost:11434/api/generate", {})
    assert str(code) in ei.value.message
    assert ei.value.status_code == code


def test_network_error_keeps_underlying_message(fake_post):
    fake_post(exc=requests.ConnectionError("Connection refused"))
    with pytest.raises(TransportError) as ei:
        post_generate("http://localhost:1/api/generate", {})
    assert ei.value.message == "Connection refused"
    assert ei.value.status_code is None


def test_network_error_without_message_uses_fallback(fake_post):
    fake_post(exc=requests.Timeout())
    with pytest.raises(TransportError) as ei:
        post_generate("http://localhost:11434/api/generate", {})
    assert ei.value.message == CONNECT_FAILED_MESSAGE


def test_connection_refused_against_closed_port():
    with socket.socket() as s:
        s.bind(("127.0.0.1", 0))
        port = s.getsockname()[1]
    with pytest.raises(TransportError) as ei:
        OllamaClient(timeout=5).generate("127.0.0.1", str(port), "llama2", "hello")
    message = ei.value.message
    assert message
    assert "object at 0x" not in message
    assert "HTTPConnectionPool" not in message
    assert "Max retries" not in message


@pytest.mark.parametrize(
    "host,port",
    [
        ("", "11434"),
        ("my host", "11434"),
        ("a..b", "11434"),
        ("a" * 70, "11434"),
        ("localhost", "abc"),
    ],
)
def test_malformed_target_fails_in_transport(host, port):
    with pytest.raises(TransportError) as ei:
        OllamaClient(timeout=5).generate(host, port, "llama2", "hello")
    assert ei.value.message
    assert ei.value.status_code is None


def test_socket_error_reason_is_extracted(fake_post):
    refused = ConnectionRefusedError(111, "Connection refused")
    wrapped = requests.ConnectionError(
        "HTTPConnectionPool(host='localhost', port=11434): Max retries exceeded"
    )
    wrapped.__context__ = refused
    fake_post(exc=wrapped)
    with pytest.raises(TransportError) as ei:
        post_generate("http://localhost:11434/api/generate", {})
    assert ei.value.message == "Connection refused"


def test_parse_extracts_response_and_keeps_extras():
    parsed = parse_generation(
        make_response(200, {"response": "hi", "done": True, "eval_count": 3})
    )
    assert parsed.response == "hi"
    assert parsed.done is True
    assert parsed.model_extra == {"eval_count": 3}


def test_parse_rejects_invalid_json():
    with pytest.raises(ParseError) as ei:
        parse_generation(make_response(200, raw=b"not json"))
    assert ei.value.message.startswith("Invalid JSON in response")


@pytest.mark.parametrize("body", [["hi"], "hi", 3])
def test_parse_rejects_non_object(body):
    with pytest.raises(ParseError) as ei:
        parse_generation(make_response(200, body))
    assert "Unexpected response shape" in ei.value.message


def test_parse_ignores_unexpected_done_value():
    parsed = parse_generation(make_response(200, {"response": "hi", "done": "maybe"}))
    assert parsed.response == "hi"


def test_parse_rejects_non_string_response():
    with pytest.raises(ParseError) as ei:
        parse_generation(make_response(200, {"response": 42, "done": True}))
    assert "response" in ei.value.message


def test_missing_response_field_reads_as_empty(fake_post):
    fake_post(make_response(200, {"done": True}))
    assert OllamaClient().generate("localhost", "11434", "llama2", "hello") == ""


def test_client_passes_timeout(fake_post):
    fake = fake_post(make_response(200, {"response": "ok", "done": True}))
    OllamaClient(timeout=12.5).generate("localhost", "11434", "llama2", "hello")
    assert fake.calls[0]["timeout"] == 12.5

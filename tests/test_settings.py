import pytest

from ollama_prompt.settings import ServiceSettings, get_settings, reset_settings_cache


def test_defaults():
    s = ServiceSettings.from_env()
    assert s.default_host == "localhost"
    assert s.default_port == "11434"
    assert s.request_timeout is None
    assert s.readiness_check_llm is False
    assert s.default_generate_url == "http://localhost:11434/api/generate"


def test_from_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("OLLAMA_PROMPT_DEFAULT_HOST", "gpu-box")
    monkeypatch.setenv("OLLAMA_PROMPT_DEFAULT_PORT", "8080")
    monkeypatch.setenv("OLLAMA_PROMPT_REQUEST_TIMEOUT", "0")
    monkeypatch.setenv("OLLAMA_PROMPT_API_CORS_ORIGINS", "http://a, http://b,")
    monkeypatch.setenv("OLLAMA_PROMPT_READY_CHECK_LLM", "yes")
    monkeypatch.setenv("OLLAMA_PROMPT_LOG_LEVEL", "debug")
    s = ServiceSettings.from_env()
    assert s.default_generate_url == "http://gpu-box:8080/api/generate"
    assert s.request_timeout is None
    assert s.cors_origins == ["http://a", "http://b"]
    assert s.readiness_check_llm is True
    assert s.log_level == "DEBUG"


def test_cache_reset(monkeypatch: pytest.MonkeyPatch):
    assert get_settings().default_host == "localhost"
    monkeypatch.setenv("OLLAMA_PROMPT_DEFAULT_HOST", "elsewhere")
    assert get_settings().default_host == "localhost"
    reset_settings_cache()
    assert get_settings().default_host == "elsewhere"

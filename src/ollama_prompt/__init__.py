"""Ollama Prompt

Single-page prompt form for a locally hosted Ollama server. See
``ollama_prompt.client`` for the request/response exchange,
``ollama_prompt.submission`` for the submission cycle and ``ollama_prompt.ui``
/ ``ollama_prompt.api`` / ``ollama_prompt.cli`` for user entrypoints.
"""

__all__ = [
    "api",
    "cli",
    "client",
    "errors",
    "health",
    "logging",
    "models",
    "settings",
    "submission",
    "ui",
]

__version__ = "0.1.0"

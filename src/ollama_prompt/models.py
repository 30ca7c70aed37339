"""Data model for the prompt form and the Ollama generate exchange."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator

DEFAULT_HOST = "localhost"
DEFAULT_PORT = "11434"

# Advisory only; whatever string is selected is sent as-is.
MODEL_CHOICES: List[str] = [
    "llama2",
    "llama2:13b",
    "llama2:70b",
    "codellama",
    "codellama:13b",
    "codellama:34b",
    "mistral",
    "mixtral",
    "neural-chat",
    "starcode",
    "vicuna",
    "orca-mini",
]


class ConnectionTarget(BaseModel):
    """Where the model server lives. No validation beyond presence."""

    host: str = DEFAULT_HOST
    port: str = DEFAULT_PORT

    @field_validator("port", mode="before")
    @classmethod
    def coerce_port(cls, value):
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class RequestParameters(BaseModel):
    model: str = ""
    prompt: str = ""


class GenerationRequest(BaseModel):
    """Body of ``POST /api/generate``."""

    model: str
    prompt: str
    stream: bool = False


class GenerationResponse(BaseModel):
    """Body returned by ``/api/generate`` when ``stream`` is false.

    Only ``response`` is consumed. Timings and token counts sent alongside
    it are kept as extra fields.
    """

    model_config = ConfigDict(extra="allow")

    response: Optional[str] = None
    done: Any = None


@dataclass(frozen=True)
class Success:
    text: str


@dataclass(frozen=True)
class Failure:
    message: str
    kind: str = "error"


Outcome = Union[Success, Failure]


__all__ = [
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "MODEL_CHOICES",
    "ConnectionTarget",
    "RequestParameters",
    "GenerationRequest",
    "GenerationResponse",
    "Success",
    "Failure",
    "Outcome",
]

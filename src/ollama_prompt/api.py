"""FastAPI service exposing the prompt submission cycle as JSON.

* ``POST /generate`` runs one submission and returns the tagged outcome.
* ``GET /models`` lists the advisory model choices and form defaults.
* ``/health``, ``/livez`` and ``/readyz`` serve container probes.
* ``/metrics`` exposes Prometheus counters.

Run locally::

    uvicorn ollama_prompt.api:app --host 127.0.0.1 --port 8000

Or via console script::

    ollama-prompt-api
"""

from __future__ import annotations

from typing import List, Literal, Optional

from fastapi import APIRouter, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import Counter, make_asgi_app
from pydantic import BaseModel

from . import __version__
from .health import run_readiness_checks
from .models import (
    MODEL_CHOICES,
    ConnectionTarget,
    Outcome,
    RequestParameters,
    Success,
)
from .settings import ServiceSettings, get_settings
from .submission import SubmissionContext, submit

settings: ServiceSettings = get_settings()

REQUESTS = Counter("ollama_prompt_requests_total", "API requests", ["route"])
OUTCOMES = Counter(
    "ollama_prompt_outcomes_total", "Submission outcomes", ["status", "kind"]
)


class GenerateRequest(ConnectionTarget, RequestParameters):
    """Form fields posted by a client."""


class OutcomeResponse(BaseModel):
    """Tagged result of one submission."""

    status: Literal["success", "failure"]
    text: Optional[str] = None
    message: Optional[str] = None
    kind: Optional[str] = None

    @classmethod
    def from_outcome(cls, outcome: Outcome) -> "OutcomeResponse":
        if isinstance(outcome, Success):
            return cls(status="success", text=outcome.text)
        return cls(status="failure", message=outcome.message, kind=outcome.kind)


class ModelsResponse(BaseModel):
    models: List[str]
    default_host: str
    default_port: str


class HealthResponse(BaseModel):
    status: Literal["ok"] = "ok"


class ReadinessCheckModel(BaseModel):
    name: str
    status: Literal["pass", "warn", "fail"]
    detail: Optional[str] = None
    required: bool


class ReadyResponse(BaseModel):
    ready: bool
    checks: List[ReadinessCheckModel]


_FAILURE_STATUS = {
    "validation": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "transport": status.HTTP_502_BAD_GATEWAY,
    "parse": status.HTTP_502_BAD_GATEWAY,
}


app = FastAPI(
    title="Ollama Prompt API",
    description="Send a prompt to a local Ollama server and get the response.",
    version=__version__,
    openapi_tags=[
        {"name": "health", "description": "Service health and readiness probes."},
        {"name": "generate", "description": "Prompt submission against Ollama."},
    ],
)

if settings.cors_origins:
    allow_origins = ["*"] if "*" in settings.cors_origins else settings.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.mount("/metrics", make_asgi_app())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed bodies come back as a validation outcome, like empty fields."""
    details = "; ".join(
        f"{'.'.join(str(p) for p in err['loc'] if p != 'body') or 'body'}: {err['msg']}"
        for err in exc.errors()
    )
    OUTCOMES.labels(status="failure", kind="validation").inc()
    body = OutcomeResponse(
        status="failure", message=f"Invalid request: {details}", kind="validation"
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=body.model_dump(exclude_none=True),
    )


health_router = APIRouter(tags=["health"])
generate_router = APIRouter(tags=["generate"])


@health_router.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    REQUESTS.labels(route="health").inc()
    return HealthResponse()


@health_router.get("/livez", response_model=HealthResponse)
def livez() -> HealthResponse:
    return HealthResponse(status="ok")


@health_router.get("/readyz", response_model=ReadyResponse)
def readyz():
    checks = run_readiness_checks(settings)
    ready = True
    payload: List[ReadinessCheckModel] = []
    for check in checks:
        payload.append(
            ReadinessCheckModel(
                name=check.name,
                status=check.status,
                detail=check.detail,
                required=check.required,
            )
        )
        if check.required and check.status == "fail":
            ready = False
    response = ReadyResponse(ready=ready, checks=payload)
    status_code = status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE
    return JSONResponse(status_code=status_code, content=response.model_dump())


@generate_router.get("/models", response_model=ModelsResponse)
def list_models() -> ModelsResponse:
    REQUESTS.labels(route="models").inc()
    return ModelsResponse(
        models=MODEL_CHOICES,
        default_host=settings.default_host,
        default_port=settings.default_port,
    )


@generate_router.post(
    "/generate",
    response_model=OutcomeResponse,
    responses={422: {"model": OutcomeResponse}, 502: {"model": OutcomeResponse}},
)
def generate(payload: GenerateRequest) -> JSONResponse:
    """Run one submission cycle; failures come back as tagged outcomes."""
    REQUESTS.labels(route="generate").inc()
    ctx = SubmissionContext(
        host=payload.host, port=payload.port, model=payload.model, prompt=payload.prompt
    )
    outcome = submit(ctx)
    body = OutcomeResponse.from_outcome(outcome)
    OUTCOMES.labels(status=body.status, kind=body.kind or "none").inc()
    code = (
        status.HTTP_200_OK
        if body.status == "success"
        else _FAILURE_STATUS.get(body.kind or "", status.HTTP_502_BAD_GATEWAY)
    )
    return JSONResponse(status_code=code, content=body.model_dump(exclude_none=True))


app.include_router(health_router)
app.include_router(generate_router)


def run(
    host: Optional[str] = None,
    port: Optional[int] = None,
    reload: bool = False,
    workers: int = 1,
    log_level: str = "info",
) -> None:
    """Launch the API server via ``uvicorn``."""

    import uvicorn

    bind_host = host or settings.api_host
    bind_port = port or settings.api_port
    uvicorn.run(
        "ollama_prompt.api:app",
        host=bind_host,
        port=bind_port,
        reload=reload,
        workers=workers,
        log_level=log_level,
    )

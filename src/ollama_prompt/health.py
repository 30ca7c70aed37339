"""Readiness checks for the API's ``/readyz`` probe."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import requests

from .settings import ServiceSettings


@dataclass
class HealthCheckResult:
    name: str
    status: str  # "pass" | "fail" | "warn"
    detail: Optional[str] = None
    required: bool = True


def _check_llm_endpoint(url: str) -> HealthCheckResult:
    try:
        resp = requests.request("HEAD", url, timeout=2)
    except requests.RequestException as exc:
        return HealthCheckResult(name="llm", status="fail", detail=str(exc))
    if resp.status_code >= 500:
        return HealthCheckResult(
            name="llm", status="fail", detail=f"HTTP {resp.status_code}"
        )
    if resp.status_code in (404, 405):
        # Ollama only routes POST on /api/generate; reaching it is enough.
        return HealthCheckResult(
            name="llm",
            status="warn",
            detail="HEAD not supported, endpoint reachable",
            required=False,
        )
    return HealthCheckResult(name="llm", status="pass")


def run_readiness_checks(settings: ServiceSettings) -> List[HealthCheckResult]:
    checks: List[HealthCheckResult] = []
    if settings.readiness_check_llm:
        checks.append(_check_llm_endpoint(settings.default_generate_url))
    return checks

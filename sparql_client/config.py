# SPDX-License-Identifier: MIT
#
#  █████╗ ██████╗  █████╗ ███████╗
# ██╔══██╗██╔══██╗██╔══██╗██╔════╝
# ███████║██████╔╝███████║███████╗
# ██╔══██║██╔══██╗██╔══██║╚════██║
# ██║  ██║██║  ██║██║  ██║███████║
# ╚═╝  ╚═╝╚═╝  ╚═╝╚═╝  ╚═╝╚══════╝
# Copyright (C) 2026 Riza Emre ARAS <r.emrearas@proton.me>
#
# Licensed under the MIT License.
# See LICENSE and THIRD_PARTY_LICENSES for details.
"""Loads a client YAML file into typed dataclasses.

Pure loader — no network. The YAML structure IS the client contract:

    endpoint: https://query.wikidata.org/sparql
    update_endpoint: https://example.org/update   # optional
    method: POST                                   # GET or POST
    timeout: 30
    user_agent: sparql-client/0.1
    headers: {Authorization: "Bearer ..."}
    graph_parameters: false
    named_graphs: []
    retry:
      attempts: 1
      delay_seconds: 0
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from sparql_client.result import Fail, Ok, Result

METHODS = ("GET", "POST")


# ── Retry ──────────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class RetryConfig:
    attempts: int = 1
    delay_seconds: float = 0


# ── Top-level ──────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Transport settings applied uniformly to every query of a client."""
    endpoint: str | None = None
    update_endpoint: str | None = None
    method: str = "POST"
    timeout: float = 30
    user_agent: str = "sparql-client/0.1"
    headers: dict[str, str] = field(default_factory=dict)
    graph_parameters: bool = False
    named_graphs: tuple[str, ...] = ()
    retry: RetryConfig = field(default_factory=RetryConfig)


# ── Loader ─────────────────────────────────────────────────────

def _build_retry(raw: dict[str, Any]) -> RetryConfig:
    return RetryConfig(
        attempts=int(raw.get("attempts", 1)),
        delay_seconds=float(raw.get("delay_seconds", 0)),
    )


def _check(config: ClientConfig) -> str | None:
    """Return a message for the first invalid setting, or None."""
    if config.method not in METHODS:
        return f"Unsupported HTTP method: {config.method}"
    if config.timeout <= 0:
        return f"Timeout must be positive, got {config.timeout}"
    if config.retry.attempts < 1:
        return f"Retry attempts must be >= 1, got {config.retry.attempts}"
    if config.retry.delay_seconds < 0:
        return f"Retry delay must be >= 0, got {config.retry.delay_seconds}"
    return None


def build_config(raw: dict[str, Any]) -> Result[ClientConfig]:
    """Build a ClientConfig from an already parsed mapping."""
    try:
        config = ClientConfig(
            endpoint=raw.get("endpoint"),
            update_endpoint=raw.get("update_endpoint"),
            method=str(raw.get("method", "POST")).upper(),
            timeout=float(raw.get("timeout", 30)),
            user_agent=raw.get("user_agent", "sparql-client/0.1"),
            headers=dict(raw.get("headers") or {}),
            graph_parameters=bool(raw.get("graph_parameters", False)),
            named_graphs=tuple(raw.get("named_graphs") or ()),
            retry=_build_retry(raw.get("retry") or {}),
        )
    except (TypeError, ValueError, AttributeError) as exc:
        return Fail(error=f"Config structure error: {exc}")

    problem = _check(config)
    if problem:
        return Fail(error=problem)
    return Ok(data=config)


def load_config(path: Path) -> Result[ClientConfig]:
    """Load a client YAML file into ClientConfig."""
    if not path.exists():
        return Fail(error=f"Config file not found: {path}")

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        return Fail(error=f"YAML parse error: {exc}", context=str(path))

    if not isinstance(raw, dict):
        return Fail(error="Config root must be a mapping", context=str(path))

    result = build_config(raw)
    if not result.ok:
        return Fail(error=result.error, context=str(path))
    return result

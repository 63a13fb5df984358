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
"""SPARQL transports: HTTP (urllib) and local (rdflib).

A transport sends query or update text and returns raw response bytes
plus their content type. It knows nothing about result formats beyond
choosing the Accept header for a query form.
"""

from __future__ import annotations

import http.client
import re
import ssl
import time
import urllib.error
import urllib.parse
import urllib.request
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import certifi
from pyparsing import ParseException
from rdflib import Graph

from sparql_client.config import ClientConfig
from sparql_client.errors import (
    ConstructionError,
    MalformedQueryError,
    ServerError,
    TransportError,
    error_for_status,
)
from sparql_client.logger import get_logger

log = get_logger(__name__)

_ssl_ctx = ssl.create_default_context(cafile=certifi.where())

RESULTS_ACCEPT = ", ".join([
    "application/sparql-results+json",
    "application/sparql-results+xml;q=0.8",
    "text/boolean;q=0.7",
    "text/tab-separated-values;q=0.6",
    "text/csv;q=0.4",
])

GRAPH_ACCEPT = ", ".join([
    "application/n-triples",
    "text/turtle;q=0.9",
    "application/rdf+xml;q=0.8",
    "application/ld+json;q=0.7",
    "text/n3;q=0.6",
])

QUERY_FORMS = ("ask", "select", "construct", "describe")
UPDATE_KEYWORDS = ("insert", "delete", "clear", "load", "create", "drop", "with", "copy", "move", "add")

_PROLOGUE = re.compile(
    r"\A(?:\s+|#[^\n]*(?:\n|\Z)|PREFIX\s+[^\s:]*:\s*<[^>]*>|BASE\s*<[^>]*>)*",
    re.IGNORECASE,
)


@dataclass(frozen=True, slots=True)
class Response:
    body: bytes
    content_type: str | None
    status: int


def accept_for(form: str) -> str:
    """Accept header for a query form."""
    if form in ("construct", "describe"):
        return GRAPH_ACCEPT
    return RESULTS_ACCEPT


def detect_form(text: str) -> str:
    """Form of raw SPARQL text: a query form, or `update`."""
    body = text[_PROLOGUE.match(text).end():]
    keyword = body.split(None, 1)[0].lower() if body.strip() else ""
    if keyword in QUERY_FORMS:
        return keyword
    if keyword in UPDATE_KEYWORDS:
        return "update"
    raise ConstructionError(f"Cannot detect query form of: {text[:80]!r}")


# ── HTTP ──────────────────────────────────────────────────────

class HttpTransport:
    """Sends requests with urllib; one request per call, retried on transport failure."""

    def __init__(self, endpoint: str, config: ClientConfig | None = None) -> None:
        self.endpoint = endpoint
        self.config = config or ClientConfig()
        self.update_endpoint = self.config.update_endpoint or endpoint

    def _headers(self, accept: str | None) -> dict[str, str]:
        headers = {"User-Agent": self.config.user_agent, **self.config.headers}
        if accept:
            headers["Accept"] = accept
        return headers

    def _request(
        self,
        url: str,
        params: list[tuple[str, str]],
        method: str,
        accept: str | None,
    ) -> urllib.request.Request:
        encoded = urllib.parse.urlencode(params)
        headers = self._headers(accept)
        if method == "GET":
            separator = "&" if "?" in url else "?"
            return urllib.request.Request(f"{url}{separator}{encoded}", headers=headers, method="GET")
        headers["Content-Type"] = "application/x-www-form-urlencoded"
        return urllib.request.Request(url, data=encoded.encode("utf-8"), headers=headers, method="POST")

    def _send(self, req: urllib.request.Request) -> Response:
        """Single attempt."""
        timeout = self.config.timeout
        try:
            with urllib.request.urlopen(req, timeout=timeout, context=_ssl_ctx) as resp:
                return Response(
                    body=resp.read(),
                    content_type=resp.headers.get("Content-Type"),
                    status=resp.status,
                )
        except urllib.error.HTTPError as exc:
            body = exc.read().decode("utf-8", errors="replace")[:500]
            raise error_for_status(exc.code, str(exc.reason), body) from exc
        except urllib.error.URLError as exc:
            raise TransportError(f"SPARQL connection error: {exc.reason}", endpoint=req.full_url) from exc
        except TimeoutError as exc:
            raise TransportError(f"SPARQL timeout after {timeout}s", endpoint=req.full_url) from exc
        except (OSError, http.client.HTTPException) as exc:
            raise TransportError(f"SPARQL transport error: {exc}", endpoint=req.full_url) from exc

    def _send_with_retry(self, req: urllib.request.Request) -> Response:
        attempts = self.config.retry.attempts
        for attempt in range(1, attempts + 1):
            try:
                return self._send(req)
            except TransportError as exc:
                if attempt >= attempts:
                    raise
                log.warning("Attempt %d/%d failed: %s", attempt, attempts, exc)
                time.sleep(self.config.retry.delay_seconds)
        raise TransportError("No request attempts configured", endpoint=req.full_url)

    def execute(self, text: str, form: str, from_graphs: Iterable[Any] = ()) -> Response:
        """Send a query; the Accept header follows the form."""
        params = [("query", text)]
        if self.config.graph_parameters:
            params += [("default-graph-uri", str(g)) for g in from_graphs]
            params += [("named-graph-uri", str(g)) for g in self.config.named_graphs]

        req = self._request(self.endpoint, params, self.config.method, accept_for(form))
        log.info("SPARQL %s → %s (%d bytes)", form, self.endpoint, len(text.encode("utf-8")))
        response = self._send_with_retry(req)
        log.info("SPARQL %s answered %s (%d bytes)", form, response.content_type, len(response.body))
        return response

    def update(self, text: str) -> Response:
        """Send update text; success is any 2xx, the body is not interpreted."""
        req = self._request(self.update_endpoint, [("update", text)], "POST", None)
        log.info("SPARQL update → %s (%d bytes)", self.update_endpoint, len(text.encode("utf-8")))
        return self._send_with_retry(req)


# ── Local ─────────────────────────────────────────────────────

class LocalTransport:
    """Delegates evaluation to an rdflib Graph and answers in standard formats.

    SELECT/ASK results come back as SPARQL JSON, CONSTRUCT/DESCRIBE as
    N-Triples, so decoding is identical to the remote case.
    """

    endpoint = "local"

    def __init__(self, graph: Graph) -> None:
        self.graph = graph

    def execute(self, text: str, form: str, from_graphs: Iterable[Any] = ()) -> Response:
        try:
            result = self.graph.query(text)
            if form in ("construct", "describe"):
                body = result.serialize(format="nt")
                content_type = "application/n-triples"
            else:
                body = result.serialize(format="json")
                content_type = "application/sparql-results+json"
        except ParseException as exc:
            raise MalformedQueryError(f"Invalid SPARQL: {exc}", status=400) from exc
        except Exception as exc:
            raise ServerError(f"Local evaluation failed: {exc}", status=500) from exc

        if isinstance(body, str):
            body = body.encode("utf-8")
        log.info("SPARQL %s evaluated locally (%d bytes)", form, len(body or b""))
        return Response(body=body or b"", content_type=content_type, status=200)

    def update(self, text: str) -> Response:
        try:
            self.graph.update(text)
        except ParseException as exc:
            raise MalformedQueryError(f"Invalid SPARQL Update: {exc}", status=400) from exc
        except Exception as exc:
            raise ServerError(f"Local update failed: {exc}", status=500) from exc
        log.info("SPARQL update applied locally (%d triples)", len(self.graph))
        return Response(body=b"", content_type=None, status=204)

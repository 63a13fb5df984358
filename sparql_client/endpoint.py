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
"""Client facade — binds builders, transport and decoder together.

Flow per query:
  1. Render: Query → text (or raw text, form detected from its keyword)
  2. Send: transport picks Accept by form and returns bytes + content type
  3. Decode: content type selects the parser; shape must match the form
  4. Count: the exchange is recorded as ok/failed in `summary`
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from rdflib import Graph

from sparql_client.config import ClientConfig, load_config
from sparql_client.errors import ConfigurationError, ConstructionError, SparqlClientError
from sparql_client.logger import ExchangeSummary, get_logger
from sparql_client.sparql.client import HttpTransport, LocalTransport, detect_form
from sparql_client.sparql.processor import QueryResult, decode_for_form
from sparql_client.sparql.queries import Query
from sparql_client.sparql.update import (
    Clear,
    Create,
    DeleteData,
    DeleteInsert,
    Drop,
    InsertData,
    Load,
    UpdateOperation,
)

log = get_logger(__name__)


class Client:
    """SPARQL client for a remote endpoint URL or a local rdflib Graph."""

    def __init__(self, endpoint: str | Graph | None = None, config: ClientConfig | None = None) -> None:
        self.config = config or ClientConfig()
        target = endpoint if endpoint is not None else self.config.endpoint
        if target is None:
            raise ConfigurationError("No SPARQL endpoint configured")
        if isinstance(target, Graph):
            self.transport: HttpTransport | LocalTransport = LocalTransport(target)
        else:
            self.transport = HttpTransport(str(target), self.config)
        self.summary = ExchangeSummary()

    @classmethod
    def from_config(cls, path: str | Path) -> Client:
        """Build a client from a YAML config file; raises ConfigurationError on a bad file."""
        config = load_config(Path(path)).unwrap()
        return cls(config=config)

    @property
    def endpoint(self) -> str:
        return self.transport.endpoint

    def __repr__(self) -> str:
        return f"<{type(self).__name__}({self.endpoint})>"

    # ── Bound builders ──

    def ask(self) -> Query:
        return Query.ask(client=self)

    def select(self, *variables: Any, count: Mapping[str, str] | None = None) -> Query:
        return Query.select(*variables, count=count, client=self)

    def describe(self, *resources: Any) -> Query:
        return Query.describe(*resources, client=self)

    def construct(self, *patterns: Any) -> Query:
        return Query.construct(*patterns, client=self)

    # ── Exchanges ──

    def query(self, query: Query | str) -> QueryResult:
        """Send a query and decode the answer. Not memoized; see Query.execute."""
        if isinstance(query, Query):
            text, form, graphs = query.to_text(), query.form, query.options.from_graphs
        else:
            text, form, graphs = query, detect_form(query), []
        if form == "update":
            raise ConstructionError("Update text must be sent with update()")

        try:
            response = self.transport.execute(text, form, graphs)
            result = decode_for_form(response.body, response.content_type, form)
        except SparqlClientError as exc:
            log.warning("SPARQL %s failed: %s", form, exc)
            self.summary.record(form, ok=False)
            raise
        self.summary.record(form, ok=True)
        return result

    def update(self, operation: UpdateOperation | str) -> Client:
        """Submit update text; raises on failure, returns self on success."""
        text = operation.to_text() if isinstance(operation, UpdateOperation) else operation
        try:
            self.transport.update(text)
        except SparqlClientError as exc:
            log.warning("SPARQL update failed: %s", exc)
            self.summary.record("update", ok=False)
            raise
        self.summary.record("update", ok=True)
        return self

    # ── Update shortcuts ──

    def insert_data(self, data: Any, graph: Any = None) -> Client:
        return self.update(InsertData(data, graph=graph))

    def delete_data(self, data: Any, graph: Any = None) -> Client:
        return self.update(DeleteData(data, graph=graph))

    def delete_insert(self, delete: Any = (), insert: Any = (), where: Any = (), graph: Any = None) -> Client:
        return self.update(DeleteInsert(delete, insert, where, graph=graph))

    def clear_graph(self, graph: Any, silent: bool = False) -> Client:
        return self.update(Clear(graph=graph, silent=silent))

    def clear(self, target: str, silent: bool = False) -> Client:
        """CLEAR DEFAULT / NAMED / ALL."""
        return self.update(Clear(target=target, silent=silent))

    def load(self, source: Any, into: Any = None, silent: bool = False) -> Client:
        return self.update(Load(source, into=into, silent=silent))

    def create(self, graph: Any, silent: bool = False) -> Client:
        return self.update(Create(graph, silent=silent))

    def drop(self, graph: Any = None, target: str | None = None, silent: bool = False) -> Client:
        return self.update(Drop(graph=graph, target=target, silent=silent))

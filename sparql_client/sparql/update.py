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
"""SPARQL 1.1 Update text generation.

Each operation only renders text; submission goes through the client's
update entry point. Data arguments accept any iterable of triples,
including an rdflib Graph.

    InsertData(graph_data, graph="http://example.org/g").to_text()
    Clear(graph="http://example.org/g").silent().to_text()
"""

from __future__ import annotations

from typing import Any

from sparql_client.errors import ConstructionError
from sparql_client.sparql.terms import Pattern, as_iri, build_patterns, serialize_patterns, serialize_value

TARGETS = ("default", "named", "all")


def _ground(data: Any, operation: str) -> list[Pattern]:
    try:
        patterns = build_patterns(list(data))
    except TypeError as exc:
        raise ConstructionError(f"{operation} data must be an iterable of triples") from exc
    for pattern in patterns:
        if pattern.variables():
            raise ConstructionError(f"{operation} data must not contain variables: {pattern}")
    return patterns


def _block(patterns: list[Pattern], graph: Any = None) -> list[str]:
    body = serialize_patterns(patterns)
    if graph is not None:
        body = [f"GRAPH {serialize_value(graph)}", "{", *body, "}"]
    return ["{", *body, "}"]


class UpdateOperation:
    """Base for update operations; `form` drives the transport entry point."""

    form = "update"

    def __init__(self, silent: bool = False) -> None:
        self.is_silent = bool(silent)

    def silent(self, state: bool = True) -> UpdateOperation:
        self.is_silent = bool(state)
        return self

    def _silent(self) -> list[str]:
        return ["SILENT"] if self.is_silent else []

    def to_text(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.to_text()

    def __repr__(self) -> str:
        return f"<{type(self).__name__}({self.to_text()})>"


class InsertData(UpdateOperation):
    keyword = "INSERT DATA"

    def __init__(self, data: Any, graph: Any = None) -> None:
        super().__init__()
        self.patterns = _ground(data, self.keyword)
        self.graph = as_iri(graph) if graph is not None else None

    def to_text(self) -> str:
        return " ".join([self.keyword, *_block(self.patterns, self.graph)])


class DeleteData(InsertData):
    keyword = "DELETE DATA"


class DeleteInsert(UpdateOperation):
    """`[WITH <g>] DELETE { ... } INSERT { ... } WHERE { ... }`; templates may use variables."""

    def __init__(
        self,
        delete: Any = (),
        insert: Any = (),
        where: Any = (),
        graph: Any = None,
    ) -> None:
        super().__init__()
        self.delete = build_patterns(list(delete))
        self.insert = build_patterns(list(insert))
        self.where = build_patterns(list(where))
        if not self.delete and not self.insert:
            raise ConstructionError("DELETE/INSERT needs a delete or an insert template")
        self.graph = as_iri(graph) if graph is not None else None

    def to_text(self) -> str:
        buffer: list[str] = []
        if self.graph is not None:
            buffer.append(f"WITH {serialize_value(self.graph)}")
        if self.delete:
            buffer += ["DELETE", *_block(self.delete)]
        if self.insert:
            buffer += ["INSERT", *_block(self.insert)]
        buffer += ["WHERE", *_block(self.where)]
        return " ".join(buffer)


class Load(UpdateOperation):
    def __init__(self, source: Any, into: Any = None, silent: bool = False) -> None:
        super().__init__(silent)
        self.source = as_iri(source)
        self.into = as_iri(into) if into is not None else None

    def to_text(self) -> str:
        buffer = ["LOAD", *self._silent(), serialize_value(self.source)]
        if self.into is not None:
            buffer += ["INTO", "GRAPH", serialize_value(self.into)]
        return " ".join(buffer)


class _GraphManagement(UpdateOperation):
    """CLEAR / DROP target: one graph, or DEFAULT, NAMED or ALL."""

    keyword = ""

    def __init__(self, graph: Any = None, target: str | None = None, silent: bool = False) -> None:
        super().__init__(silent)
        if graph is not None and target is not None:
            raise ConstructionError(f"{self.keyword} takes a graph or a target, not both")
        if isinstance(target, str):
            target = target.lower()
        if target is not None and target not in TARGETS:
            raise ConstructionError(f"{self.keyword} target must be one of {TARGETS}, got {target!r}")
        if graph is None and target is None:
            raise ConstructionError(f"{self.keyword} needs a graph or a target")
        self.graph = as_iri(graph) if graph is not None else None
        self.target = target

    def to_text(self) -> str:
        buffer = [self.keyword, *self._silent()]
        if self.graph is not None:
            buffer += ["GRAPH", serialize_value(self.graph)]
        else:
            buffer.append(self.target.upper())
        return " ".join(buffer)


class Clear(_GraphManagement):
    keyword = "CLEAR"


class Drop(_GraphManagement):
    keyword = "DROP"


class Create(UpdateOperation):
    def __init__(self, graph: Any, silent: bool = False) -> None:
        super().__init__(silent)
        self.graph = as_iri(graph)

    def to_text(self) -> str:
        return " ".join(["CREATE", *self._silent(), "GRAPH", serialize_value(self.graph)])


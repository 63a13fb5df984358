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
"""SPARQL query builder.

A Query accumulates its form, projection, patterns and modifiers through
chained calls that each return the same Query. Arguments are validated
at the call, so a Query that finished construction always renders.

    Query.select("s").where(("s", RDF.type, FOAF.Person)).limit(10)

Block-based modifiers take a callable that receives its target
explicitly:

    q.where(("s", "p", "o"), block=lambda w: w.with_subquery("s").where(...))
    q.optional(("s", FOAF.name, "n"), block=lambda g: g.filter("lang(?n) = 'en'"))
    q.union(block=lambda b: b.where(("s", DC.title, "t")))

Execution is lazy and memoized: `execute()` sends the query through the
bound client once and keeps the decoded result.
"""

from __future__ import annotations

import hashlib
import threading
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from rdflib import BNode, Literal, URIRef, Variable
from rdflib.term import Node

from sparql_client.errors import ConstructionError
from sparql_client.sparql import serializer
from sparql_client.sparql.processor import (
    BooleanResult,
    QueryResult,
    Solution,
    Statement,
)
from sparql_client.sparql.terms import (
    Pattern,
    as_iri,
    as_resource,
    as_variable,
    build_patterns,
    is_pattern_like,
    is_var_name,
)

if TYPE_CHECKING:
    from sparql_client.endpoint import Client

FORMS = ("ask", "select", "describe", "construct")
ASC = "asc"
DESC = "desc"
DIRECTIONS = (ASC, DESC)


# ── Clause values ─────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class OrderCondition:
    """One ORDER BY / GROUP BY entry: a variable with optional direction, or raw text."""
    variable: Variable | None = None
    direction: str | None = None
    expression: str | None = None

    def to_text(self) -> str:
        if self.expression is not None:
            return self.expression
        if self.direction is None:
            return self.variable.n3()
        return f"{self.direction.upper()}({self.variable.n3()})"


@dataclass
class OptionalGroup:
    """An OPTIONAL block. Filters added here stay inside the block."""
    patterns: list[Pattern] = field(default_factory=list)
    filters: list[str] = field(default_factory=list)

    def where(self, *patterns: Any) -> OptionalGroup:
        self.patterns += build_patterns(patterns)
        return self

    def filter(self, expression: str | None) -> OptionalGroup:
        _add_filter(self.filters, expression)
        return self


@dataclass(frozen=True, slots=True)
class Service:
    endpoint: Node
    query: Query
    silent: bool = False


@dataclass(frozen=True, slots=True)
class ValuesBlock:
    """Inline data. A None cell is UNDEF."""
    variables: tuple[Variable, ...]
    rows: tuple[tuple[Node | None, ...], ...]


@dataclass(frozen=True, slots=True)
class BindBranch:
    patterns: list[Pattern]
    binds: dict[Variable, str]
    filters: dict[Variable, list[URIRef]]


@dataclass(frozen=True, slots=True)
class BindUnion:
    branches: list[BindBranch]
    optional: bool = False


@dataclass
class QueryOptions:
    template: list[Pattern] = field(default_factory=list)
    count: list[tuple[Variable | str, Variable]] = field(default_factory=list)
    from_graphs: list[URIRef] = field(default_factory=list)
    optionals: list[OptionalGroup] = field(default_factory=list)
    filters: list[str] = field(default_factory=list)
    unions: list[Query] = field(default_factory=list)
    minuses: list[Query] = field(default_factory=list)
    services: list[Service] = field(default_factory=list)
    bind_unions: list[BindUnion] = field(default_factory=list)
    values: ValuesBlock | None = None
    order_by: list[OrderCondition] = field(default_factory=list)
    group_by: list[OrderCondition] = field(default_factory=list)
    offset: int | None = None
    limit: int | None = None
    distinct: bool = False
    reduced: bool = False
    prefixes: list[str] = field(default_factory=list)
    graph: Node | None = None


@dataclass(frozen=True, slots=True)
class CacheKey:
    graphs: tuple[str, ...]
    query: str


def generate_cache_key(text: str, graphs: Iterable[Any]) -> CacheKey:
    """Key = sorted unique graph IRIs + MD5 of the query text."""
    names = sorted({str(g) for g in graphs})
    digest = hashlib.md5(text.encode("utf-8")).hexdigest()
    return CacheKey(
        graphs=tuple(f"sparql:graph:{name}" for name in names),
        query=f"sparql:{':'.join(names)}:{digest}",
    )


# ── Argument helpers ──────────────────────────────────────────

def _add_filter(target: list[str], expression: str | None) -> None:
    if expression is None:
        return
    if not isinstance(expression, str):
        raise ConstructionError(f"Filter expression must be a string, got {expression!r}")
    if not expression.strip():
        return
    target.append(expression)


def _direction(value: Any) -> str:
    if not isinstance(value, str) or value not in DIRECTIONS:
        raise ConstructionError(f"Direction must be 'asc' or 'desc', got {value!r}")
    return value


def _is_variable(value: Any) -> bool:
    return isinstance(value, Variable) or is_var_name(value)


def _conditions(entries: tuple[Any, ...]) -> list[OrderCondition]:
    conditions: list[OrderCondition] = []
    for entry in entries:
        if isinstance(entry, Mapping):
            for var, direction in entry.items():
                if not _is_variable(var):
                    raise ConstructionError(f"Mapping keys must be variables, got {var!r}")
                conditions.append(OrderCondition(as_variable(var), _direction(direction)))
        elif isinstance(entry, (tuple, list)):
            if len(entry) != 2:
                raise ConstructionError(f"Order pair must have two elements, got {entry!r}")
            var, direction = entry
            if not _is_variable(var):
                raise ConstructionError(f"First element of an order pair must be a variable, got {var!r}")
            conditions.append(OrderCondition(as_variable(var), _direction(direction)))
        elif _is_variable(entry):
            conditions.append(OrderCondition(as_variable(entry)))
        elif isinstance(entry, str) and not isinstance(entry, Node) and entry.strip():
            conditions.append(OrderCondition(expression=entry.strip()))
        else:
            raise ConstructionError(
                f"Order/group entries must be variables, (variable, direction) pairs, "
                f"mappings or expression strings, got {entry!r}"
            )
    return conditions


def _non_negative(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise ConstructionError(f"{name} must be an integer, got {value!r}")
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ConstructionError(f"{name} must be an integer, got {value!r}") from exc
    if number < 0:
        raise ConstructionError(f"{name} must be >= 0, got {number}")
    return number


def _values_cell(value: Any) -> Node | None:
    if value is None:
        return None
    if isinstance(value, Variable):
        raise ConstructionError(f"VALUES cells cannot be variables: {value!r}")
    if isinstance(value, (URIRef, Literal, BNode)):
        return value
    if isinstance(value, str):
        return Literal(value)
    raise ConstructionError(f"VALUES cells must be RDF terms, strings or None, got {value!r}")


def _bind_branch(branch: Any) -> BindBranch:
    if isinstance(branch, BindBranch):
        return branch
    if not isinstance(branch, (tuple, list)) or len(branch) != 3:
        raise ConstructionError(f"Bind branch must be (patterns, binds, filters), got {branch!r}")
    patterns, binds, filters = branch
    binds = binds or {}
    filters = filters or {}
    if not isinstance(binds, Mapping) or not isinstance(filters, Mapping):
        raise ConstructionError("Bind branch binds and filters must be mappings")
    return BindBranch(
        patterns=build_patterns(patterns),
        binds={as_variable(alias): str(value) for alias, value in binds.items()},
        filters={as_variable(var): [as_iri(i) for i in iris] for var, iris in filters.items()},
    )


# ── Query ─────────────────────────────────────────────────────

class Query:
    """A SPARQL query under construction (and, once executed, its result)."""

    def __init__(self, form: str = "ask", client: Client | None = None) -> None:
        if form not in FORMS:
            raise ConstructionError(f"Unknown query form: {form!r}")
        self.form = form
        self.client = client
        self.projection: list[Node] = []
        self.patterns: list[Pattern] = []
        self.subqueries: list[Query] = []
        self.options = QueryOptions()
        self._rendered: str | None = None
        self._result: QueryResult | None = None
        self._lock = threading.Lock()

    # ── Constructors ──

    @classmethod
    def ask(cls, client: Client | None = None) -> Query:
        return cls("ask", client=client)

    @classmethod
    def select(
        cls,
        *variables: Any,
        count: Mapping[str, str] | None = None,
        client: Client | None = None,
    ) -> Query:
        """SELECT; no variables means `*`. `count={"uri": "c"}` adds `(COUNT(?uri) AS ?c)`."""
        query = cls("select", client=client)
        query.projection = [as_variable(v) for v in variables]
        for var, alias in (count or {}).items():
            target = "*" if var == "*" else as_variable(var)
            query.options.count.append((target, as_variable(alias)))
        return query

    @classmethod
    def describe(cls, *resources: Any, client: Client | None = None) -> Query:
        query = cls("describe", client=client)
        query.projection = [v if isinstance(v, URIRef) else as_variable(v) for v in resources]
        return query

    @classmethod
    def construct(cls, *patterns: Any, client: Client | None = None) -> Query:
        if not patterns:
            raise ConstructionError("CONSTRUCT needs at least one template pattern")
        query = cls("construct", client=client)
        query.options.template = build_patterns(patterns)
        return query

    # ── Graph patterns ──

    def where(self, *patterns_and_queries: Any, block: Callable[[Query], Any] | None = None) -> Query:
        """Add patterns to the main group; Query arguments become `{ subquery } .`."""
        queries = [q for q in patterns_and_queries if isinstance(q, Query)]
        patterns = [p for p in patterns_and_queries if not isinstance(p, Query)]
        self.patterns += build_patterns(patterns)
        self.subqueries += queries
        if block is not None:
            block(self)
        return self

    whether = where

    def with_subquery(self, *variables: Any, count: Mapping[str, str] | None = None) -> Query:
        """Create a detached SELECT, attach it as a sub-query and return it."""
        subquery = Query.select(*variables, count=count)
        self.subqueries.append(subquery)
        return subquery

    def optional(self, *patterns: Any, block: Callable[[OptionalGroup], Any] | None = None) -> Query:
        group = OptionalGroup(patterns=build_patterns(patterns))
        if block is not None:
            block(group)
        self.options.optionals.append(group)
        return self

    def _branches(
        self,
        clause: str,
        args: tuple[Any, ...],
        block: Callable[[Query], Any] | None,
    ) -> list[Query]:
        if block is not None:
            if args:
                raise ConstructionError(f"{clause} takes either arguments or a block, not both")
            query = Query.select()
            block(query)
            return [query]
        if not args:
            raise ConstructionError(f"{clause} needs triple patterns, queries or a block")
        if all(isinstance(a, Query) for a in args):
            return list(args)
        if all(not isinstance(a, Query) and is_pattern_like(a) for a in args):
            return [Query.select().where(*args)]
        raise ConstructionError(f"{clause} arguments are triple patterns or queries, not both")

    def union(self, *patterns_or_queries: Any, block: Callable[[Query], Any] | None = None) -> Query:
        self.options.unions += self._branches("UNION", patterns_or_queries, block)
        return self

    def minus(self, *patterns_or_queries: Any, block: Callable[[Query], Any] | None = None) -> Query:
        self.options.minuses += self._branches("MINUS", patterns_or_queries, block)
        return self

    def service(
        self,
        endpoint: Any,
        *patterns_or_query: Any,
        silent: bool = False,
        block: Callable[[Query], Any] | None = None,
    ) -> Query:
        """Federated group: `SERVICE [SILENT] <endpoint> { ... }`."""
        target = as_resource(endpoint)
        branches = self._branches("SERVICE", patterns_or_query, block)
        if len(branches) != 1:
            raise ConstructionError("SERVICE takes exactly one query")
        self.options.services.append(Service(endpoint=target, query=branches[0], silent=bool(silent)))
        return self

    def union_with_bind(self, *branches: Any, optional: bool = False) -> Query:
        """UNION of branches that each tag their solutions with BIND values.

        A branch is `(patterns, binds, filters)`: binds maps alias → string,
        filters maps a variable to the IRIs it may equal.
        """
        if not branches:
            raise ConstructionError("union_with_bind needs at least one branch")
        built = [_bind_branch(b) for b in branches]
        self.options.bind_unions.append(BindUnion(branches=built, optional=bool(optional)))
        return self

    def values(self, variables: Any, *rows: Any) -> Query:
        """Inline data: `values("t", "a", "b")` or `values(["x", "y"], [a, None], ...)`."""
        names = list(variables) if isinstance(variables, (list, tuple)) else [variables]
        if not names:
            raise ConstructionError("VALUES needs at least one variable")
        variables_ = tuple(as_variable(v) for v in names)

        data = list(rows)
        if len(variables_) == 1:
            listed = [isinstance(r, (list, tuple)) for r in data]
            if any(listed) and not all(listed):
                raise ConstructionError("VALUES data must all be rows or all be scalars")
            data = [r if isinstance(r, (list, tuple)) else [r] for r in data]

        built: list[tuple[Node | None, ...]] = []
        for row in data:
            if not isinstance(row, (list, tuple)):
                raise ConstructionError(f"VALUES row must be a list, got {row!r}")
            if len(row) != len(variables_):
                raise ConstructionError(
                    f"VALUES row {list(row)!r} has {len(row)} cells, expected {len(variables_)}"
                )
            built.append(tuple(_values_cell(cell) for cell in row))

        self.options.values = ValuesBlock(variables=variables_, rows=tuple(built))
        return self

    def filter(self, expression: str | None) -> Query:
        _add_filter(self.options.filters, expression)
        return self

    # ── Solution modifiers ──

    def order(self, *entries: Any) -> Query:
        self.options.order_by = _conditions(entries)
        return self

    order_by = order

    def asc(self, variable: Any) -> Query:
        self.options.order_by.append(OrderCondition(as_variable(variable), ASC))
        return self

    def desc(self, variable: Any) -> Query:
        self.options.order_by.append(OrderCondition(as_variable(variable), DESC))
        return self

    def group(self, *entries: Any) -> Query:
        self.options.group_by = _conditions(entries)
        return self

    group_by = group

    def distinct(self, state: bool = True) -> Query:
        self.options.distinct = bool(state)
        return self

    def reduced(self, state: bool = True) -> Query:
        self.options.reduced = bool(state)
        return self

    def graph(self, graph_iri_or_var: Any) -> Query:
        self.options.graph = as_resource(graph_iri_or_var)
        return self

    def from_(self, *uris: Any) -> Query:
        if not uris:
            raise ConstructionError("FROM needs at least one graph IRI")
        self.options.from_graphs += [as_iri(u) for u in uris]
        return self

    def slice(self, start: Any, length: Any) -> Query:
        if start is not None:
            self.options.offset = _non_negative(start, "OFFSET")
        if length is not None:
            self.options.limit = _non_negative(length, "LIMIT")
        return self

    def offset(self, start: Any) -> Query:
        return self.slice(start, None)

    def limit(self, length: Any) -> Query:
        return self.slice(None, length)

    def prefix(self, declaration: str | Mapping[str, Any] | None = None, /, **mapping: Any) -> Query:
        """`prefix("dc: <http://...>")`, `prefix({"dc": DC})` or `prefix(dc=DC)`."""
        if declaration is None and not mapping:
            raise ConstructionError("prefix needs a declaration string or a name → IRI mapping")
        if isinstance(declaration, str):
            self.options.prefixes.append(declaration)
        elif isinstance(declaration, Mapping):
            mapping = {**declaration, **mapping}
        elif declaration is not None:
            raise ConstructionError(f"prefix must be a string or a mapping, got {declaration!r}")
        for name, iri in mapping.items():
            self.options.prefixes.append(f"{name}: <{iri}>")
        return self

    # ── Introspection ──

    def expects_statements(self) -> bool:
        return self.form in ("construct", "describe")

    def is_empty_group(self) -> bool:
        opts = self.options
        return not (
            self.patterns or self.subqueries or opts.optionals or opts.filters
            or opts.services or opts.values or opts.minuses or opts.unions
            or opts.bind_unions or opts.graph is not None
        )

    def to_text(self) -> str:
        """SPARQL text. Frozen once the query has been executed."""
        if self._rendered is not None:
            return self._rendered
        return serializer.render(self)

    def __str__(self) -> str:
        return self.to_text()

    def __repr__(self) -> str:
        return f"<{type(self).__name__}:{id(self):#x}({self.to_text()})>"

    def cache_key(self) -> CacheKey:
        """Key for an external cache: FROM graphs plus the MD5 of the rendered text."""
        return generate_cache_key(self.to_text(), self.options.from_graphs)

    # ── Execution ──

    def execute(self) -> QueryResult:
        """Send the query through the bound client once; later calls reuse the result."""
        if self._result is None:
            with self._lock:
                if self._result is None:
                    if self.client is None:
                        raise ConstructionError("Query is not bound to a client")
                    self._rendered = serializer.render(self)
                    try:
                        self._result = self.client.query(self)
                    except Exception:
                        # nothing memoized, so the text is not frozen either
                        self._rendered = None
                        raise
        return self._result

    def result(self) -> QueryResult:
        return self.execute()

    def solutions(self) -> tuple[Solution, ...]:
        result = self.execute()
        return getattr(result, "solutions", ())

    def each_solution(self) -> Iterator[Solution]:
        yield from self.solutions()

    def each_statement(self) -> Iterator[Statement]:
        result = self.execute()
        yield from getattr(result, "statements", ())

    def is_true(self) -> bool:
        result = self.execute()
        if isinstance(result, BooleanResult):
            return result.value
        return len(result) > 0

    def is_false(self) -> bool:
        return not self.is_true()

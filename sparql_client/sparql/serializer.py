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
"""Query AST → SPARQL text.

Pure functions over a fully built Query. Construction already validated
every argument, so nothing here raises. Output is a flat token list
joined by single spaces, e.g.:

    ASK WHERE { ?s ?p ?o . }
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rdflib import Literal

from sparql_client.sparql.terms import serialize_patterns, serialize_value

if TYPE_CHECKING:
    from rdflib import Variable

    from sparql_client.sparql.queries import BindUnion, OptionalGroup, Query


def _filter(expression: str) -> str:
    return f"FILTER({expression})"


def _count(variable: Variable | str, alias: Variable, distinct: bool) -> str:
    target = "*" if variable == "*" else serialize_value(variable)
    inner = f"DISTINCT {target}" if distinct else target
    return f"(COUNT({inner}) AS {serialize_value(alias)})"


def _optional(group: OptionalGroup) -> list[str]:
    buffer = ["OPTIONAL {"]
    buffer += serialize_patterns(group.patterns)
    buffer += [_filter(f) for f in group.filters]
    buffer.append("}")
    return buffer


def _bind_union(block: BindUnion) -> list[str]:
    buffer: list[str] = []
    if block.optional:
        buffer.append("OPTIONAL {")
    for index, branch in enumerate(block.branches):
        if index:
            buffer.append("UNION")
        buffer.append("{")
        buffer += serialize_patterns(branch.patterns)
        for variable, iris in branch.filters.items():
            tests = " || ".join(f"{variable.n3()} = {iri.n3()}" for iri in iris)
            buffer.append(_filter(tests))
        for alias, value in branch.binds.items():
            buffer.append(f"BIND({Literal(value).n3()} AS {alias.n3()})")
        buffer.append("}")
    if block.optional:
        buffer.append("}")
    return buffer


def _group(query: Query) -> list[str]:
    opts = query.options
    buffer = ["{"]

    if opts.graph is not None:
        buffer.append(f"GRAPH {serialize_value(opts.graph)}")
        buffer.append("{")

    for subquery in query.subqueries:
        buffer.append(f"{{ {render(subquery)} }} .")

    buffer += serialize_patterns(query.patterns)

    for group in opts.optionals:
        buffer += _optional(group)

    buffer += [_filter(f) for f in opts.filters]

    for service in opts.services:
        buffer.append("SERVICE")
        if service.silent:
            buffer.append("SILENT")
        buffer.append(serialize_value(service.endpoint))
        buffer += render_group(service.query)

    if opts.values is not None:
        names = " ".join(serialize_value(v) for v in opts.values.variables)
        buffer.append(f"VALUES ({names}) {{")
        for row in opts.values.rows:
            buffer.append("(")
            buffer.append(" ".join("UNDEF" if cell is None else serialize_value(cell) for cell in row))
            buffer.append(")")
        buffer.append("}")

    if opts.graph is not None:
        buffer.append("}")

    for minus in opts.minuses:
        buffer.append("MINUS")
        buffer += render_group(minus)

    for block in opts.bind_unions:
        buffer += _bind_union(block)

    buffer.append("}")
    return buffer


def render_group(query: Query) -> list[str]:
    """Render the group graph pattern of a query, braces and UNION branches included."""
    group = _group(query)
    if not query.options.unions:
        return group
    # own group is the first branch
    buffer = ["{"] + group
    for branch in query.options.unions:
        buffer.append("UNION")
        buffer += render_group(branch)
    buffer.append("}")
    return buffer


def _projection(query: Query) -> list[str]:
    opts = query.options
    only_count = not query.projection and bool(opts.count)
    buffer: list[str] = []
    if opts.distinct and not only_count:
        buffer.append("DISTINCT")
    if opts.reduced:
        buffer.append("REDUCED")
    if not query.projection and not opts.count:
        buffer.append("*")
        return buffer
    buffer += [serialize_value(v) for v in query.projection]
    buffer += [_count(var, alias, opts.distinct) for var, alias in opts.count]
    return buffer


def render(query: Query) -> str:
    """Render a complete query, PREFIX declarations first."""
    opts = query.options
    buffer = [query.form.upper()]

    if query.form in ("select", "describe"):
        buffer += _projection(query)
    elif query.form == "construct":
        buffer.append("{")
        buffer += serialize_patterns(opts.template)
        buffer.append("}")

    buffer += [f"FROM {serialize_value(g)}" for g in opts.from_graphs]

    if not (query.form == "describe" and query.is_empty_group()):
        buffer.append("WHERE")
        buffer += render_group(query)

    if opts.group_by:
        buffer.append("GROUP BY")
        buffer += [c.to_text() for c in opts.group_by]

    if opts.order_by:
        buffer.append("ORDER BY")
        buffer += [c.to_text() for c in opts.order_by]

    if opts.offset is not None:
        buffer.append(f"OFFSET {opts.offset}")
    if opts.limit is not None:
        buffer.append(f"LIMIT {opts.limit}")

    prefixes = [f"PREFIX {p}" for p in opts.prefixes]
    return " ".join(prefixes + buffer)

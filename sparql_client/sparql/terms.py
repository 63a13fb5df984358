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
"""Term coercion and rendering on top of rdflib.

Builder arguments arrive as loose Python values. This module turns them
into rdflib nodes and renders nodes and triple patterns as SPARQL text.
"""

from __future__ import annotations

import datetime
import re
from decimal import Decimal
from typing import Any, NamedTuple

from rdflib import BNode, Literal, URIRef, Variable
from rdflib.namespace import RDF, XSD
from rdflib.term import Node

from sparql_client.errors import ConstructionError

VAR_NAME = re.compile(r"^\??[A-Za-z_][A-Za-z0-9_]*$")

_LITERAL_TYPES = (bool, int, float, Decimal, datetime.date, datetime.datetime, datetime.time)


def is_var_name(value: Any) -> bool:
    return isinstance(value, str) and not isinstance(value, Node) and bool(VAR_NAME.match(value))


def as_variable(value: Any) -> Variable:
    """Coerce a variable name (with or without `?`) to a Variable."""
    if isinstance(value, Variable):
        return value
    if is_var_name(value):
        return Variable(value.lstrip("?"))
    raise ConstructionError(f"Not a variable name: {value!r}")


def as_term(value: Any) -> Node:
    """Coerce a pattern position: names become variables, scalars literals."""
    if isinstance(value, (URIRef, Literal, BNode, Variable)):
        return value
    if isinstance(value, str):
        return as_variable(value)
    if isinstance(value, _LITERAL_TYPES):
        return Literal(value)
    raise ConstructionError(f"Cannot use {type(value).__name__} as an RDF term: {value!r}")


def as_resource(value: Any) -> Node:
    """Graph names and service endpoints: bare names are variables, other strings IRIs."""
    if isinstance(value, (URIRef, BNode, Variable)):
        return value
    if is_var_name(value):
        return as_variable(value)
    if isinstance(value, str) and value:
        return URIRef(value)
    raise ConstructionError(f"Expected an IRI or variable, got {value!r}")


def as_iri(value: Any) -> URIRef:
    if isinstance(value, URIRef):
        return value
    if isinstance(value, str) and not isinstance(value, Node) and value:
        return URIRef(value)
    raise ConstructionError(f"Expected an IRI, got {value!r}")


class Pattern(NamedTuple):
    """A triple pattern; any position may hold a Variable."""

    subject: Node
    predicate: Node
    object: Node

    @classmethod
    def from_value(cls, value: Any) -> Pattern:
        if isinstance(value, Pattern):
            return value
        if not isinstance(value, (tuple, list)) or len(value) != 3:
            raise ConstructionError(f"A triple pattern needs exactly 3 terms, got {value!r}")
        s, p, o = (as_term(v) for v in value)
        if isinstance(s, Literal):
            raise ConstructionError(f"Literal in subject position: {value!r}")
        if isinstance(p, (Literal, BNode)):
            raise ConstructionError(f"Predicate must be an IRI or variable: {value!r}")
        return cls(s, p, o)

    def variables(self) -> list[Variable]:
        return [t for t in self if isinstance(t, Variable)]


def build_patterns(values: Any) -> list[Pattern]:
    return [Pattern.from_value(v) for v in values]


def is_pattern_like(value: Any) -> bool:
    return isinstance(value, (Pattern, tuple, list))


def serialize_value(term: Node) -> str:
    """Render one term in SPARQL syntax."""
    if isinstance(term, Literal) and term.datatype == XSD.string:
        # strict stores need the string datatype spelled out
        return f"{Literal(str(term)).n3()}^^<{XSD.string}>"
    return term.n3()


def serialize_pattern(pattern: Pattern) -> str:
    parts = []
    for index, term in enumerate(pattern):
        if index == 1 and term == RDF.type:
            parts.append("a")
        else:
            parts.append(serialize_value(term))
    return " ".join(parts) + " ."


def serialize_patterns(patterns: list[Pattern]) -> list[str]:
    return [serialize_pattern(p) for p in patterns]

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
"""SPARQL response processor — turns response bytes into a QueryResult.

Dispatch is keyed purely on the response content type:
  sparql-results+json → boolean or solutions (typed terms)
  sparql-results+xml  → boolean or solutions (typed terms)
  text/csv, TSV       → solutions (plain literals only)
  text/boolean        → boolean
  RDF serializations  → graph (parsed by rdflib)

An unknown or missing content type is an error, never a guess.
"""

from __future__ import annotations

import csv
import io
import json
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from lxml import etree
from rdflib import BNode, Dataset, Graph, Literal, URIRef
from rdflib.term import Node

from sparql_client.errors import ProtocolError
from sparql_client.logger import get_logger

log = get_logger(__name__)

SRX_NS = "http://www.w3.org/2005/sparql-results#"
XML_LANG = "{http://www.w3.org/XML/1998/namespace}lang"

Statement = tuple[Node, Node, Node]


# ── Result shapes ─────────────────────────────────────────────

class Solution(Mapping[str, Node]):
    """One row of bindings. Keys are variable names without `?`."""

    __slots__ = ("_bindings",)

    def __init__(self, bindings: Mapping[str, Node]) -> None:
        self._bindings = dict(bindings)

    def __getitem__(self, key: str) -> Node:
        return self._bindings[str(key).lstrip("?")]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lstrip("?") in self._bindings

    def __iter__(self) -> Iterator[str]:
        return iter(self._bindings)

    def __len__(self) -> int:
        return len(self._bindings)

    def __repr__(self) -> str:
        return f"Solution({self._bindings!r})"


@dataclass(frozen=True, slots=True)
class BooleanResult:
    value: bool
    kind: str = field(default="boolean", init=False)

    def __bool__(self) -> bool:
        return self.value


@dataclass(frozen=True, slots=True)
class SolutionsResult:
    variables: tuple[str, ...]
    solutions: tuple[Solution, ...]
    kind: str = field(default="solutions", init=False)

    def __iter__(self) -> Iterator[Solution]:
        return iter(self.solutions)

    def __len__(self) -> int:
        return len(self.solutions)


@dataclass(frozen=True, slots=True)
class GraphResult:
    statements: tuple[Statement, ...]
    kind: str = field(default="graph", init=False)

    def __iter__(self) -> Iterator[Statement]:
        return iter(self.statements)

    def __len__(self) -> int:
        return len(self.statements)

    def graph(self) -> Graph:
        """Copy the statements into a fresh rdflib Graph."""
        g = Graph()
        for triple in self.statements:
            g.add(triple)
        return g


QueryResult = BooleanResult | SolutionsResult | GraphResult

EXPECTED_KIND = {
    "ask": "boolean",
    "select": "solutions",
    "construct": "graph",
    "describe": "graph",
}


# ── JSON ──────────────────────────────────────────────────────

def _json_term(value: dict[str, Any]) -> Node:
    kind = value.get("type")
    text = value.get("value", "")
    if kind == "uri":
        return URIRef(text)
    if kind == "bnode":
        return BNode(text)
    if kind in ("literal", "typed-literal"):
        if "xml:lang" in value:
            return Literal(text, lang=value["xml:lang"])
        if "datatype" in value:
            return Literal(text, datatype=URIRef(value["datatype"]))
        return Literal(text)
    raise ProtocolError(f"Unsupported JSON binding type: {kind!r}")


def parse_json(body: bytes) -> QueryResult:
    try:
        raw = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ProtocolError(f"Invalid SPARQL JSON results: {exc}") from exc
    if not isinstance(raw, dict):
        raise ProtocolError("SPARQL JSON results must be an object")

    if "boolean" in raw:
        if not isinstance(raw["boolean"], bool):
            raise ProtocolError(f"Non-boolean ASK value: {raw['boolean']!r}")
        return BooleanResult(value=raw["boolean"])

    try:
        variables = tuple(raw.get("head", {}).get("vars", []))
        bindings = raw["results"]["bindings"]
        solutions = tuple(
            Solution({name: _json_term(value) for name, value in row.items()})
            for row in bindings
        )
    except (KeyError, TypeError, AttributeError) as exc:
        raise ProtocolError(f"Malformed SPARQL JSON results: {exc}") from exc
    return SolutionsResult(variables=variables, solutions=solutions)


# ── XML ───────────────────────────────────────────────────────

def _q(tag: str) -> str:
    return f"{{{SRX_NS}}}{tag}"


def _xml_term(element: etree._Element) -> Node:
    tag = etree.QName(element).localname
    text = element.text or ""
    if tag == "uri":
        return URIRef(text)
    if tag == "bnode":
        return BNode(text)
    if tag == "literal":
        lang = element.get(XML_LANG)
        datatype = element.get("datatype")
        if lang:
            return Literal(text, lang=lang)
        if datatype:
            return Literal(text, datatype=URIRef(datatype))
        return Literal(text)
    raise ProtocolError(f"Unsupported XML binding element: {tag!r}")


def parse_xml(body: bytes) -> QueryResult:
    parser = etree.XMLParser(resolve_entities=False, no_network=True)
    try:
        root = etree.fromstring(body, parser=parser)
    except etree.XMLSyntaxError as exc:
        raise ProtocolError(f"Invalid SPARQL XML results: {exc}") from exc

    boolean = root.find(_q("boolean"))
    if boolean is not None:
        text = (boolean.text or "").strip()
        if text not in ("true", "false"):
            raise ProtocolError(f"Non-boolean ASK value: {text!r}")
        return BooleanResult(value=text == "true")

    variables = tuple(v.get("name") for v in root.iterfind(f"{_q('head')}/{_q('variable')}"))
    results = root.find(_q("results"))
    if results is None:
        raise ProtocolError("SPARQL XML results have neither <boolean> nor <results>")

    solutions: list[Solution] = []
    for result in results.iterfind(_q("result")):
        row: dict[str, Node] = {}
        for binding in result.iterfind(_q("binding")):
            value = next(iter(binding), None)
            if value is None:
                raise ProtocolError(f"Empty binding for {binding.get('name')!r}")
            row[binding.get("name")] = _xml_term(value)
        solutions.append(Solution(row))
    return SolutionsResult(variables=variables, solutions=tuple(solutions))


# ── Delimited text ────────────────────────────────────────────

def _parse_delimited(body: bytes, delimiter: str) -> QueryResult:
    try:
        text = body.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ProtocolError(f"Undecodable tabular results: {exc}") from exc

    if delimiter == "\t":
        reader = csv.reader(io.StringIO(text), delimiter="\t", quoting=csv.QUOTE_NONE)
    else:
        reader = csv.reader(io.StringIO(text))

    try:
        rows = [row for row in reader if row]
    except csv.Error as exc:
        raise ProtocolError(f"Malformed tabular results: {exc}") from exc
    if not rows:
        return SolutionsResult(variables=(), solutions=())

    variables = tuple(name.strip().lstrip("?") for name in rows[0])
    solutions: list[Solution] = []
    for number, row in enumerate(rows[1:], start=2):
        if len(row) != len(variables):
            raise ProtocolError(
                f"Row {number} has {len(row)} columns, header has {len(variables)}"
            )
        solutions.append(Solution({
            name: Literal(cell) for name, cell in zip(variables, row) if cell != ""
        }))
    return SolutionsResult(variables=variables, solutions=tuple(solutions))


def parse_csv(body: bytes) -> QueryResult:
    return _parse_delimited(body, ",")


def parse_tsv(body: bytes) -> QueryResult:
    return _parse_delimited(body, "\t")


def parse_boolean(body: bytes) -> QueryResult:
    text = body.decode("utf-8", errors="replace").strip().lower()
    if text not in ("true", "false"):
        raise ProtocolError(f"Non-boolean ASK body: {text[:50]!r}")
    return BooleanResult(value=text == "true")


# ── RDF graphs ────────────────────────────────────────────────

GRAPH_FORMATS: dict[str, str] = {
    "text/turtle": "turtle",
    "application/x-turtle": "turtle",
    "application/n-triples": "nt",
    "text/plain": "nt",
    "application/rdf+xml": "xml",
    "application/ld+json": "json-ld",
    "text/n3": "n3",
    "text/rdf+n3": "n3",
    "application/n-quads": "nquads",
    "application/trig": "trig",
}

_QUAD_FORMATS = ("nquads", "trig")


def parse_graph(body: bytes, rdf_format: str) -> GraphResult:
    sink: Graph = Dataset(default_union=True) if rdf_format in _QUAD_FORMATS else Graph()
    try:
        sink.parse(data=body, format=rdf_format)
    except Exception as exc:
        # rdflib parsers raise their own syntax error types per format
        raise ProtocolError(f"Invalid {rdf_format} graph: {exc}") from exc
    return GraphResult(statements=tuple(sink.triples((None, None, None))))


# ── Dispatch ──────────────────────────────────────────────────

DECODERS: dict[str, Callable[[bytes], QueryResult]] = {
    "application/sparql-results+json": parse_json,
    "application/json": parse_json,
    "application/sparql-results+xml": parse_xml,
    "application/xml": parse_xml,
    "text/csv": parse_csv,
    "text/tab-separated-values": parse_tsv,
    "text/boolean": parse_boolean,
}


def media_type(content_type: str | None) -> str:
    """Strip parameters: `text/csv; charset=utf-8` → `text/csv`."""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def decode(body: bytes, content_type: str | None) -> QueryResult:
    """Decode a response body according to its content type."""
    kind = media_type(content_type)
    if not kind:
        raise ProtocolError("Response has no Content-Type")

    if kind in DECODERS:
        result = DECODERS[kind](body)
    elif kind in GRAPH_FORMATS:
        result = parse_graph(body, GRAPH_FORMATS[kind])
    else:
        raise ProtocolError(f"Unsupported result content type: {kind}")

    log.info("Decoded %s response as %s (%d)", kind, result.kind, _size(result))
    return result


def decode_for_form(body: bytes, content_type: str | None, form: str) -> QueryResult:
    """Decode and check that the result shape matches the query form."""
    result = decode(body, content_type)
    expected = EXPECTED_KIND.get(form)
    if expected is not None and result.kind != expected:
        raise ProtocolError(
            f"{form.upper()} query answered with a {result.kind} result "
            f"({media_type(content_type)})"
        )
    return result


def _size(result: QueryResult) -> int:
    if isinstance(result, BooleanResult):
        return 1
    return len(result)

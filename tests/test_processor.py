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
"""Tests for response decoding by content type."""
import json

import pytest
from rdflib import BNode, Literal, Namespace, URIRef, Variable, XSD

from sparql_client.errors import ProtocolError
from sparql_client.sparql.processor import (
    BooleanResult,
    GraphResult,
    Solution,
    SolutionsResult,
    decode,
    decode_for_form,
    media_type,
)

EX = Namespace("http://example.org/")

SELECT_JSON = json.dumps({
    "head": {"vars": ["s", "name", "age", "node"]},
    "results": {"bindings": [
        {
            "s": {"type": "uri", "value": "http://example.org/alice"},
            "name": {"type": "literal", "value": "Alice", "xml:lang": "en"},
            "age": {"type": "literal", "value": "42", "datatype": str(XSD.integer)},
            "node": {"type": "bnode", "value": "b0"},
        },
        {
            "s": {"type": "uri", "value": "http://example.org/bob"},
            "name": {"type": "typed-literal", "value": "Bob", "datatype": str(XSD.string)},
        },
    ]},
}).encode()

SELECT_XML = b"""<?xml version="1.0"?>
<sparql xmlns="http://www.w3.org/2005/sparql-results#">
  <head><variable name="s"/><variable name="name"/></head>
  <results>
    <result>
      <binding name="s"><uri>http://example.org/alice</uri></binding>
      <binding name="name"><literal xml:lang="en">Alice</literal></binding>
    </result>
    <result>
      <binding name="s"><bnode>b1</bnode></binding>
      <binding name="name"><literal datatype="http://www.w3.org/2001/XMLSchema#integer">7</literal></binding>
    </result>
    <result>
      <binding name="s"><uri>http://example.org/carol</uri></binding>
    </result>
  </results>
</sparql>"""

ASK_XML = b"""<?xml version="1.0"?>
<sparql xmlns="http://www.w3.org/2005/sparql-results#">
  <head/>
  <boolean>true</boolean>
</sparql>"""

TURTLE = b"""@prefix ex: <http://example.org/> .
ex:alice ex:knows ex:bob .
ex:bob ex:name "Bob" .
"""


# ========== JSON ==========

class TestJson:
    def test_select(self):
        result = decode(SELECT_JSON, "application/sparql-results+json")
        assert isinstance(result, SolutionsResult)
        assert result.kind == "solutions"
        assert result.variables == ("s", "name", "age", "node")
        assert len(result) == 2

        alice, bob = result.solutions
        assert alice["s"] == EX.alice
        assert alice["name"] == Literal("Alice", lang="en")
        assert alice["age"] == Literal("42", datatype=XSD.integer)
        assert isinstance(alice["node"], BNode)
        assert bob["name"] == Literal("Bob", datatype=XSD.string)

    def test_unbound_variable_is_absent(self):
        result = decode(SELECT_JSON, "application/sparql-results+json")
        bob = result.solutions[1]
        assert "age" not in bob
        with pytest.raises(KeyError):
            bob["age"]

    def test_ask(self):
        result = decode(b'{"head": {}, "boolean": false}', "application/sparql-results+json")
        assert isinstance(result, BooleanResult)
        assert result.value is False
        assert not result

    def test_plain_json_content_type(self):
        result = decode(b'{"head": {}, "boolean": true}', "application/json")
        assert result.value is True

    def test_non_boolean_ask(self):
        with pytest.raises(ProtocolError):
            decode(b'{"boolean": "yes"}', "application/sparql-results+json")

    def test_malformed(self):
        with pytest.raises(ProtocolError):
            decode(b"{not json", "application/sparql-results+json")

    def test_missing_results(self):
        with pytest.raises(ProtocolError):
            decode(b'{"head": {"vars": []}}', "application/sparql-results+json")

    def test_unknown_binding_type(self):
        body = json.dumps({
            "head": {"vars": ["x"]},
            "results": {"bindings": [{"x": {"type": "triple", "value": ""}}]},
        }).encode()
        with pytest.raises(ProtocolError):
            decode(body, "application/sparql-results+json")


# ========== XML ==========

class TestXml:
    def test_select(self):
        result = decode(SELECT_XML, "application/sparql-results+xml")
        assert result.variables == ("s", "name")
        assert len(result) == 3
        first, second, third = result
        assert first["s"] == EX.alice
        assert first["name"] == Literal("Alice", lang="en")
        assert isinstance(second["s"], BNode)
        assert second["name"] == Literal("7", datatype=XSD.integer)
        assert "name" not in third

    def test_ask(self):
        result = decode(ASK_XML, "application/sparql-results+xml")
        assert result == BooleanResult(True)

    def test_invalid(self):
        with pytest.raises(ProtocolError):
            decode(b"<sparql", "application/sparql-results+xml")

    def test_neither_boolean_nor_results(self):
        body = b'<sparql xmlns="http://www.w3.org/2005/sparql-results#"><head/></sparql>'
        with pytest.raises(ProtocolError):
            decode(body, "application/sparql-results+xml")


# ========== Delimited text ==========

class TestDelimited:
    def test_csv(self):
        body = b"s,name\r\nhttp://example.org/alice,Alice\r\nhttp://example.org/bob,\r\n"
        result = decode(body, "text/csv")
        assert result.variables == ("s", "name")
        alice, bob = result
        # CSV carries no term kinds: every value is a plain literal
        assert alice["s"] == Literal("http://example.org/alice")
        assert alice["name"] == Literal("Alice")
        assert "name" not in bob

    def test_csv_quoted_cells(self):
        body = b's,label\r\nx,"Smith, John"\r\n'
        result = decode(body, "text/csv; charset=utf-8")
        assert result.solutions[0]["label"] == Literal("Smith, John")

    def test_tsv_header_question_marks(self):
        body = b"?s\t?n\n<http://example.org/a>\t\"1\"\n"
        result = decode(body, "text/tab-separated-values")
        assert result.variables == ("s", "n")
        assert result.solutions[0]["n"] == Literal('"1"')

    def test_empty_body(self):
        result = decode(b"", "text/csv")
        assert result == SolutionsResult(variables=(), solutions=())

    def test_column_mismatch(self):
        with pytest.raises(ProtocolError):
            decode(b"a,b\r\n1\r\n", "text/csv")


# ========== text/boolean ==========

class TestBooleanText:
    @pytest.mark.parametrize("body,expected", [(b"true", True), (b"FALSE\n", False)])
    def test_values(self, body, expected):
        assert decode(body, "text/boolean").value is expected

    def test_garbage(self):
        with pytest.raises(ProtocolError):
            decode(b"maybe", "text/boolean")


# ========== Graphs ==========

class TestGraphs:
    def test_turtle(self):
        result = decode(TURTLE, "text/turtle")
        assert isinstance(result, GraphResult)
        assert result.kind == "graph"
        assert set(result) == {
            (EX.alice, EX.knows, EX.bob),
            (EX.bob, EX.name, Literal("Bob")),
        }
        assert len(result.graph()) == 2

    def test_ntriples(self):
        body = b"<http://example.org/a> <http://example.org/p> <http://example.org/b> .\n"
        result = decode(body, "application/n-triples")
        assert result.statements == ((EX.a, EX.p, EX.b),)

    def test_nquads_statements_lose_graph_name(self):
        body = (
            b"<http://example.org/a> <http://example.org/p> <http://example.org/b> "
            b"<http://example.org/g> .\n"
        )
        result = decode(body, "application/n-quads")
        assert list(result) == [(EX.a, EX.p, EX.b)]

    def test_invalid_turtle(self):
        with pytest.raises(ProtocolError):
            decode(b"ex:a ex:b", "text/turtle")


# ========== Dispatch ==========

class TestDispatch:
    def test_media_type(self):
        assert media_type("Text/CSV; charset=utf-8") == "text/csv"
        assert media_type(None) == ""

    def test_missing_content_type(self):
        with pytest.raises(ProtocolError, match="no Content-Type"):
            decode(b"true", None)

    def test_unsupported_content_type(self):
        with pytest.raises(ProtocolError, match="Unsupported result content type"):
            decode(b"<html/>", "text/html")

    def test_shape_mismatch(self):
        with pytest.raises(ProtocolError):
            decode_for_form(b"true", "text/boolean", "select")
        with pytest.raises(ProtocolError):
            decode_for_form(TURTLE, "text/turtle", "ask")

    def test_shape_match(self):
        result = decode_for_form(TURTLE, "text/turtle", "describe")
        assert len(result) == 2


class TestSolution:
    def test_keys_accept_question_mark_and_variables(self):
        row = Solution({"s": URIRef("http://example.org/a")})
        assert row["?s"] == row["s"] == row[Variable("s")]
        assert "?s" in row
        assert dict(row) == {"s": URIRef("http://example.org/a")}

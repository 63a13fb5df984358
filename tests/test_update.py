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
"""Tests for SPARQL Update text generation."""
import pytest
from rdflib import Graph, Literal, Namespace, RDF

from sparql_client.errors import ConstructionError
from sparql_client.sparql.update import (
    Clear,
    Create,
    DeleteData,
    DeleteInsert,
    Drop,
    InsertData,
    Load,
)

EX = Namespace("http://example.org/")


class TestData:
    def test_insert_data(self):
        op = InsertData([(EX.alice, RDF.type, EX.Person), (EX.alice, EX.name, Literal("Alice"))])
        assert op.to_text() == (
            "INSERT DATA { <http://example.org/alice> a <http://example.org/Person> . "
            '<http://example.org/alice> <http://example.org/name> "Alice" . }'
        )

    def test_insert_into_graph(self):
        op = InsertData([(EX.a, EX.p, EX.b)], graph=EX.g)
        assert op.to_text() == (
            "INSERT DATA { GRAPH <http://example.org/g> { "
            "<http://example.org/a> <http://example.org/p> <http://example.org/b> . } }"
        )

    def test_delete_data_from_rdflib_graph(self):
        g = Graph()
        g.add((EX.a, EX.p, EX.b))
        assert DeleteData(g).to_text() == (
            "DELETE DATA { <http://example.org/a> <http://example.org/p> <http://example.org/b> . }"
        )

    def test_variables_rejected(self):
        with pytest.raises(ConstructionError):
            InsertData([("s", EX.p, EX.b)])

    def test_not_iterable(self):
        with pytest.raises(ConstructionError):
            InsertData(42)


class TestDeleteInsert:
    def test_with_graph(self):
        op = DeleteInsert(
            delete=[("s", EX.name, "old")],
            insert=[("s", EX.name, Literal("New"))],
            where=[("s", EX.name, "old")],
            graph=EX.g,
        )
        assert op.to_text() == (
            "WITH <http://example.org/g> DELETE { ?s <http://example.org/name> ?old . } "
            'INSERT { ?s <http://example.org/name> "New" . } '
            "WHERE { ?s <http://example.org/name> ?old . }"
        )

    def test_delete_only(self):
        op = DeleteInsert(delete=[("s", "p", "o")], where=[("s", "p", "o")])
        assert op.to_text() == "DELETE { ?s ?p ?o . } WHERE { ?s ?p ?o . }"

    def test_needs_a_template(self):
        with pytest.raises(ConstructionError):
            DeleteInsert(where=[("s", "p", "o")])


class TestGraphManagement:
    def test_load(self):
        assert Load("http://example.org/data.ttl").to_text() == "LOAD <http://example.org/data.ttl>"

    def test_load_into_silent(self):
        op = Load(EX["data.ttl"], into=EX.g, silent=True)
        assert op.to_text() == "LOAD SILENT <http://example.org/data.ttl> INTO GRAPH <http://example.org/g>"

    def test_clear_graph(self):
        assert Clear(graph=EX.g).to_text() == "CLEAR GRAPH <http://example.org/g>"

    def test_clear_target_silent_chain(self):
        assert Clear(target="all").silent().to_text() == "CLEAR SILENT ALL"

    def test_drop_named(self):
        assert Drop(target="named").to_text() == "DROP NAMED"

    def test_create(self):
        assert Create(EX.g, silent=True).to_text() == "CREATE SILENT GRAPH <http://example.org/g>"

    @pytest.mark.parametrize("target,rendered", [
        ("DEFAULT", "CLEAR DEFAULT"),
        ("Named", "CLEAR NAMED"),
        ("all", "CLEAR ALL"),
    ])
    def test_target_case_is_ignored(self, target, rendered):
        assert Clear(target=target).to_text() == rendered

    @pytest.mark.parametrize("kwargs", [
        {},
        {"graph": EX.g, "target": "all"},
        {"target": "everything"},
    ])
    def test_invalid_targets(self, kwargs):
        with pytest.raises(ConstructionError):
            Clear(**kwargs)

    def test_repr(self):
        op = Drop(graph=EX.g)
        assert str(op) == "DROP GRAPH <http://example.org/g>"
        assert repr(op) == "<Drop(DROP GRAPH <http://example.org/g>)>"

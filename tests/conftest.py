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
"""Shared fixtures: a small rdflib graph and a fake urlopen response."""

from __future__ import annotations

import pytest
from rdflib import Graph, Literal, Namespace, RDF

EX = Namespace("http://example.org/")


class FakeResponse:
    """Stands in for the object urllib.request.urlopen returns."""

    def __init__(self, body: bytes, content_type: str | None, status: int = 200) -> None:
        self._body = body
        self.headers = {"Content-Type": content_type} if content_type else {}
        self.status = status

    def read(self) -> bytes:
        return self._body

    def __enter__(self) -> FakeResponse:
        return self

    def __exit__(self, *exc: object) -> bool:
        return False


@pytest.fixture
def people() -> Graph:
    g = Graph()
    g.add((EX.alice, RDF.type, EX.Person))
    g.add((EX.alice, EX.name, Literal("Alice")))
    g.add((EX.bob, RDF.type, EX.Person))
    g.add((EX.bob, EX.name, Literal("Bob")))
    g.add((EX.acme, RDF.type, EX.Company))
    return g


@pytest.fixture
def fake_response() -> type[FakeResponse]:
    return FakeResponse

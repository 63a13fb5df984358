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
"""SPARQL client — fluent query builder, protocol transport, result decoding."""

from sparql_client.config import ClientConfig, RetryConfig, load_config
from sparql_client.endpoint import Client
from sparql_client.errors import (
    ClientError,
    ConfigurationError,
    ConstructionError,
    MalformedQueryError,
    ProtocolError,
    ServerError,
    SparqlClientError,
    TransportError,
)
from sparql_client.sparql.processor import (
    BooleanResult,
    GraphResult,
    QueryResult,
    Solution,
    SolutionsResult,
)
from sparql_client.sparql.queries import ASC, DESC, CacheKey, Query, generate_cache_key
from sparql_client.sparql.update import (
    Clear,
    Create,
    DeleteData,
    DeleteInsert,
    Drop,
    InsertData,
    Load,
)

__all__ = [
    "ASC",
    "DESC",
    "BooleanResult",
    "CacheKey",
    "Clear",
    "Client",
    "ClientConfig",
    "ClientError",
    "ConfigurationError",
    "ConstructionError",
    "Create",
    "DeleteData",
    "DeleteInsert",
    "Drop",
    "GraphResult",
    "InsertData",
    "Load",
    "MalformedQueryError",
    "ProtocolError",
    "Query",
    "QueryResult",
    "RetryConfig",
    "ServerError",
    "Solution",
    "SolutionsResult",
    "SparqlClientError",
    "TransportError",
    "generate_cache_key",
    "load_config",
]

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
"""Exception hierarchy for builder, transport and decoding failures.

  SparqlClientError
    ConfigurationError   — client config file missing or malformed
    ConstructionError    — invalid builder arguments, raised at the call
    TransportError       — connection, DNS/TLS or timeout failure
    ProtocolError        — endpoint answered, but not with a usable result
      ClientError        — 4xx
        MalformedQueryError — 400
      ServerError        — 5xx
"""

from __future__ import annotations


class SparqlClientError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(SparqlClientError):
    pass


class ConstructionError(SparqlClientError, ValueError):
    """Invalid modifier arguments. Never deferred to serialization."""


class TransportError(SparqlClientError):
    """The request never produced an HTTP response."""

    def __init__(self, message: str, endpoint: str | None = None) -> None:
        super().__init__(message)
        self.endpoint = endpoint


class ProtocolError(SparqlClientError):
    """Non-success status, unparseable body or unknown content type."""

    def __init__(
        self,
        message: str,
        status: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.body = body


class ClientError(ProtocolError):
    pass


class MalformedQueryError(ClientError):
    pass


class ServerError(ProtocolError):
    pass


def error_for_status(status: int, reason: str, body: str) -> ProtocolError:
    """Map a non-success HTTP status to the matching ProtocolError subclass."""
    message = f"SPARQL HTTP {status}: {reason}"
    if status == 400:
        return MalformedQueryError(message, status=status, body=body)
    if 400 <= status < 500:
        return ClientError(message, status=status, body=body)
    if status >= 500:
        return ServerError(message, status=status, body=body)
    return ProtocolError(message, status=status, body=body)

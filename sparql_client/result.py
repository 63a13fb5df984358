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
"""Result pattern for loading steps that report failure without raising.

Provides Ok[T] and Fail types. Config loading returns Result[T] so the
caller decides whether a bad file is fatal; `unwrap()` converts a Fail
into a ConfigurationError for callers that prefer exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, NoReturn, TypeVar

from sparql_client.errors import ConfigurationError

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful result carrying typed data."""

    data: T
    ok: bool = field(default=True, init=False)

    def unwrap(self) -> T:
        return self.data


@dataclass(frozen=True, slots=True)
class Fail:
    """Failed result carrying error message and optional context."""

    error: str
    context: Any = None
    ok: bool = field(default=False, init=False)

    def unwrap(self) -> NoReturn:
        if self.context is not None:
            raise ConfigurationError(f"{self.error} ({self.context})")
        raise ConfigurationError(self.error)


Result = Ok[T] | Fail

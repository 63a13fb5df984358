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
"""Structured logger with per-form exchange counters.

Collects success/fail counts per query form (select, ask, construct,
describe, update) so a long-running caller can print a summary of
what a client instance has sent.
"""

from __future__ import annotations

import logging
import sys
import threading
from dataclasses import dataclass, field

_FMT = "%(asctime)s [%(levelname)s] %(name)s — %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return a stdlib logger configured with a consistent format."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FMT, datefmt="%H:%M:%S"))
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger


@dataclass
class FormCounter:
    """Tracks success/fail counts for a single query form."""

    name: str
    ok: int = 0
    failed: int = 0


@dataclass
class ExchangeSummary:
    """Accumulates counters across all exchanges of one client."""

    forms: dict[str, FormCounter] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def counter(self, name: str) -> FormCounter:
        """Get or create a counter for a named form."""
        with self._lock:
            if name not in self.forms:
                self.forms[name] = FormCounter(name=name)
            return self.forms[name]

    def record(self, name: str, ok: bool) -> None:
        counter = self.counter(name)
        with self._lock:
            if ok:
                counter.ok += 1
            else:
                counter.failed += 1

    def report(self) -> str:
        """Format a human-readable summary block."""
        lines: list[str] = ["", "SPARQL Exchange Summary", "=" * 40]
        for form in self.forms.values():
            parts = [f"{form.name}: {form.ok} ok"]
            if form.failed:
                parts.append(f"{form.failed} failed")
            lines.append("  ".join(parts))
        lines.append("=" * 40)
        return "\n".join(lines)

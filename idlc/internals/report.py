"""Collected diagnostics for one generation run.

Diagnostics point at a declaration (and optionally one of its members) rather
than at source text: modules reach the generator already resolved.
"""
from __future__ import annotations
import os
import sys
from dataclasses import dataclass
from typing import List, Optional, TextIO


class C:
    """ANSI color/style escape codes."""
    RESET = "\x1b[0m"
    BOLD  = "\x1b[1m"
    DIM   = "\x1b[2m"
    RED   = "\x1b[31m"
    YELLOW = "\x1b[33m"
    CYAN  = "\x1b[36m"


_KIND_COLOR = {"error": C.RED, "warning": C.YELLOW}


@dataclass(frozen=True)
class Location:
    """Where a diagnostic applies: a declaration, optionally one of its members."""
    declaration: str
    member: Optional[str] = None

    def __str__(self) -> str:
        if self.member is not None:
            return f"{self.declaration}.{self.member}"
        return self.declaration


@dataclass
class Diagnostic:
    kind: str  # "error" | "warning"
    code: str
    message: str
    location: Optional[Location] = None
    filename: Optional[str] = None

    def render(self, default_filename: str, use_color: bool) -> str:
        where = self.filename or default_filename
        if self.location is not None:
            where = f"{where}:{self.location}"
        text = self.message if self.message.endswith(".") else f"{self.message}."
        if not use_color:
            return f"{where}: {self.kind} [{self.code}]: {text}"
        kind = f"{C.BOLD}{_KIND_COLOR.get(self.kind, '')}{self.kind}{C.RESET}"
        return f"{C.CYAN}{where}{C.RESET}: {kind} [{C.DIM}{self.code}{C.RESET}]: {text}"


def _wants_color(stream: TextIO) -> bool:
    # Plain text unless writing to a terminal that accepts escapes
    if os.getenv("NO_COLOR") is not None or os.getenv("TERM") == "dumb":
        return False
    return bool(getattr(stream, "isatty", lambda: False)())


class Reporter:
    """Accumulates errors and warnings in the order they are raised."""

    def __init__(self, filename: str = "<module>") -> None:
        self.filename = filename
        self.items: List[Diagnostic] = []

    def error(self, code: str, msg: str, location: Optional[Location]) -> None:
        self.items.append(Diagnostic("error", code, msg, location, self.filename))

    def warn(self, code: str, msg: str, location: Optional[Location]) -> None:
        self.items.append(Diagnostic("warning", code, msg, location, self.filename))

    def count(self, kind: str) -> int:
        return sum(1 for d in self.items if d.kind == kind)

    @property
    def has_errors(self) -> bool:
        return self.count("error") > 0

    @property
    def has_warnings(self) -> bool:
        return self.count("warning") > 0

    def codes(self) -> List[str]:
        return [d.code for d in self.items]

    def summary(self) -> str:
        """E.g. "1 error, 2 warnings"; empty when nothing was reported."""
        parts = []
        for kind in ("error", "warning"):
            n = self.count(kind)
            if n:
                parts.append(f"{n} {kind}{'' if n == 1 else 's'}")
        return ", ".join(parts)

    def format(self, use_color: bool = True) -> str:
        return "\n".join(d.render(self.filename, use_color) for d in self.items)

    def print(self, stream: Optional[TextIO] = None, use_color: Optional[bool] = None) -> None:
        """Print diagnostics to `stream` (default: sys.stderr).

        Color is auto-enabled for a TTY unless NO_COLOR or TERM=dumb.
        """
        stream = stream or sys.stderr
        if not self.items:
            return
        if use_color is None:
            use_color = _wants_color(stream)
        print(self.format(use_color=use_color), file=stream)

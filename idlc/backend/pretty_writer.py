"""Indentation-aware line writer over a byte sink."""
from __future__ import annotations
from contextlib import contextmanager
from dataclasses import dataclass
from typing import BinaryIO, Iterable, Iterator


@dataclass
class _SinkState:
    sink: BinaryIO
    # Nothing written yet, or the last line was blank
    at_break: bool = True


class PrettyWriter:
    """Writes `\\n`-terminated UTF-8 lines at the current indentation depth.

    Nested blocks share the sink and its state; `block()` yields a writer one
    level deeper and the caller's depth is untouched when the block ends.
    Errors from the sink (closed or unwritable) propagate unchanged.
    """

    def __init__(self, sink: BinaryIO, indent: str = "    ", _depth: int = 0,
                 _state: _SinkState | None = None) -> None:
        self.indent = indent
        self.depth = _depth
        self._state = _state or _SinkState(sink)

    def write_line(self, text: str = "") -> "PrettyWriter":
        if text:
            self._state.sink.write(f"{self.indent * self.depth}{text}\n".encode("utf-8"))
            self._state.at_break = False
        else:
            self._state.sink.write(b"\n")
            self._state.at_break = True
        return self

    def write_lines(self, lines: Iterable[str]) -> "PrettyWriter":
        for line in lines:
            self.write_line(line)
        return self

    def eob(self) -> "PrettyWriter":
        """End of block: separate what follows with one blank line.

        Never doubles a blank line and never starts the output with one.
        """
        if not self._state.at_break:
            self.write_line()
        return self

    def new_block(self) -> "PrettyWriter":
        return PrettyWriter(self._state.sink, self.indent, self.depth + 1, self._state)

    @contextmanager
    def block(self, opener: str | None = None, closer: str | None = None) -> Iterator["PrettyWriter"]:
        """Optionally write `opener`, yield a nested writer, then write `closer`.

        Example:
            with w.block("struct Point {", "}") as inner:
                inner.write_line("x: f64,")
        """
        if opener is not None:
            self.write_line(opener)
        yield self.new_block()
        if closer is not None:
            self.write_line(closer)

    def flush(self) -> None:
        self._state.sink.flush()

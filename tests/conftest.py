"""Pytest configuration for the idlc test suite."""
from __future__ import annotations

import io

import pytest

from idlc.backend.config import BackendConfig
from idlc.backend.target import Target
from idlc.compiler.pipeline import generate_to_bytes
from idlc.internals.report import Reporter
from idlc.semantics.module import ModuleBuilder
from idlc.semantics.typesys import AtomType

X86_64 = "x86_64-unknown-linux-gnu"
I686 = "i686-unknown-linux-gnu"
AVR = "avr-unknown-unknown"


@pytest.fixture
def config() -> BackendConfig:
    return BackendConfig(Target.from_triple(X86_64))


@pytest.fixture
def sink() -> io.BytesIO:
    return io.BytesIO()


@pytest.fixture
def reporter() -> Reporter:
    return Reporter()


@pytest.fixture
def render(config):
    """Render a module with a backend and return the text."""
    def _render(module, backend="rust", cfg=None, reporter=None, **kwargs) -> str:
        output = generate_to_bytes(module, backend, cfg or config, reporter=reporter, **kwargs)
        return output.decode("utf-8")
    return _render


@pytest.fixture
def geometry():
    """A small module touching every declaration kind."""
    b = ModuleBuilder("geometry")
    coord = b.alias("coord", AtomType.F64)
    point = b.struct("point", [("x", coord), ("y", coord)])
    b.enum("color", ["red", "green", "blue"])
    b.struct("segment", [("start", point), ("end", point), ("width", AtomType.U16)])
    b.function("distance", [("a", point), ("b", point)], AtomType.F64)
    return b.build()


@pytest.fixture
def types_only():
    b = ModuleBuilder("shapes")
    weight = b.alias("weight", AtomType.U32)
    b.struct("parcel", [("w", weight), ("fragile", AtomType.BOOL)])
    b.enum("color", ["red", "green", "blue"])
    return b.build()

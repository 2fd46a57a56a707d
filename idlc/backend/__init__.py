"""Backends by host name."""
from __future__ import annotations

from idlc.backend.c import CGenerator
from idlc.backend.generator import Capability, Generator
from idlc.backend.llvm_ir import LLVMGenerator
from idlc.backend.rust import RustGenerator
from idlc.internals.errors import config_error

BACKENDS: dict[str, type[Generator]] = {
    RustGenerator.name: RustGenerator,
    CGenerator.name: CGenerator,
    LLVMGenerator.name: LLVMGenerator,
}


def get_backend(name: str) -> type[Generator]:
    """Look up a backend class.

    Raises:
        ConfigError: CE2001 for an unknown name.
    """
    try:
        return BACKENDS[name.lower()]
    except KeyError:
        raise config_error("CE2001", name=name, available=", ".join(sorted(BACKENDS))) from None


def backend_capabilities(name: str) -> frozenset[Capability]:
    return get_backend(name).capabilities

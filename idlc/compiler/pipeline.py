"""Generation driver: walks a module in order and feeds one generator session."""
from __future__ import annotations

import io
from typing import BinaryIO, Optional

from idlc.backend import get_backend
from idlc.backend.config import BackendConfig
from idlc.backend.generator import Capability, Generator
from idlc.internals import errors as er
from idlc.internals.errors import raise_unsupported
from idlc.internals.report import Location, Reporter
from idlc.semantics.module import Module
from idlc.semantics.typesys import FuncDecl


def check_capabilities(module: Module, generator: Generator, reporter: Reporter,
                       skip_unsupported: bool) -> bool:
    """Decide up front whether function declarations can be emitted.

    Returns:
        True if function declarations should be emitted, False if they are skipped.

    Raises:
        UnsupportedCapabilityError: CE1001 when the module declares functions,
            the backend cannot emit them and skipping was not requested.
    """
    functions = module.functions
    if not functions or generator.supports(Capability.FUNCTIONS):
        return True
    if not skip_unsupported:
        raise_unsupported("CE1001", backend=generator.name, name=functions[0].name)
    for func in functions:
        er.emit(reporter, er.ERR.CW0002, Location(func.name),
                name=func.name, backend=generator.name)
    return False


def run_session(module: Module, generator: Generator, *, skip_unsupported: bool = False) -> None:
    """Emit every declaration of `module` through `generator`, in module order.

    Fails fast: the first error aborts the session and propagates.
    """
    emit_functions = check_capabilities(module, generator, generator.reporter, skip_unsupported)

    generator.gen_prelude(module)
    for entry in module:
        if isinstance(entry.entity, FuncDecl):
            if emit_functions:
                generator.gen_declaration(module, entry)
            continue
        generator.gen_type_header(module, entry)
        generator.gen_declaration(module, entry)
    generator.gen_epilogue(module)
    generator.finish()


def generate_to_bytes(module: Module, backend: str, config: BackendConfig, *,
                      reporter: Optional[Reporter] = None,
                      skip_unsupported: bool = False) -> bytes:
    """Render `module` with the named backend into memory.

    Nothing is returned (and nothing reaches any destination) if the session fails.
    """
    buffer = io.BytesIO()
    generator = get_backend(backend)(config, buffer, reporter)
    run_session(module, generator, skip_unsupported=skip_unsupported)
    return buffer.getvalue()


def generate(module: Module, backend: str, config: BackendConfig, sink: BinaryIO, *,
             reporter: Optional[Reporter] = None, skip_unsupported: bool = False) -> None:
    """Render `module` and copy the result to `sink` only once generation succeeded."""
    output = generate_to_bytes(module, backend, config, reporter=reporter,
                               skip_unsupported=skip_unsupported)
    sink.write(output)
    sink.flush()

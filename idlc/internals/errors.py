# internals/errors.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, NoReturn, Optional

from idlc.internals.report import Location, Reporter


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class Category(str, Enum):
    GENERAL     = "general"
    INTERNAL    = "internal"
    UNSUPPORTED = "unsupported"
    CONFIG      = "config"
    LOADER      = "loader"
    LAYOUT      = "layout"


@dataclass(frozen=True)
class ErrorMessage:
    code: str
    severity: Severity
    text: str
    category: Category = Category.GENERAL
    doc: str = ""


REGISTRY: Dict[str, ErrorMessage] = {}

class _ErrorCatalog:
    def __init__(self, backing: Dict[str, ErrorMessage]) -> None:
        self._registry = backing

    def __getattr__(self, name: str) -> ErrorMessage:
        try:
            return self._registry[name]
        except KeyError as e:
            raise AttributeError(name) from e

    def __getitem__(self, code: str) -> ErrorMessage:
        return self._registry[code]


ERR = _ErrorCatalog(REGISTRY)


class CodedError(Exception):
    """Base for exceptions that carry a catalogue code."""

    def __init__(self, code: str, text: str) -> None:
        super().__init__(f"{code}: {text}")
        self.code = code
        self.text = text


class InternalError(CodedError, RuntimeError):
    """A broken invariant inside the generator or its driver.

    Never caused by a malformed module; not meant to be caught and retried.
    """


class UnsupportedCapabilityError(CodedError, NotImplementedError):
    """The selected backend cannot emit the requested declaration kind."""


class ConfigError(CodedError):
    pass


class LoaderError(CodedError):
    pass


def emit(r: Reporter, em: ErrorMessage, location: Optional[Location], **kwargs) -> None:
    text = _fmt(em.code, **kwargs)
    if em.severity == Severity.ERROR:
        r.error(em.code, text, location)
    else:
        r.warn(em.code, text, location)

def raise_internal_error(code: str, **kwargs) -> NoReturn:
    """Raise an InternalError for a generator invariant violation.

    Internal errors (CE0xxx codes) indicate a bug in the driver or in the
    upstream resolver, not a problem with the declarations themselves.

    Args:
        code: Error code (e.g., "CE0001")
        **kwargs: Format parameters for the error message

    Raises:
        InternalError: Always raises with formatted error message
    """
    raise InternalError(code, _fmt(code, **kwargs))

def raise_unsupported(code: str, **kwargs) -> NoReturn:
    raise UnsupportedCapabilityError(code, _fmt(code, **kwargs))

def config_error(code: str, **kwargs) -> ConfigError:
    return ConfigError(code, _fmt(code, **kwargs))

def loader_error(code: str, **kwargs) -> LoaderError:
    return LoaderError(code, _fmt(code, **kwargs))


#
# --- Helpers
#

def _add(msg: ErrorMessage) -> None:
    if msg.code in REGISTRY:
        raise ValueError(f"duplicate error code {REGISTRY[msg.code]} in {msg}")
    REGISTRY[msg.code] = msg

def _get(code: str) -> ErrorMessage:
    try:
        return REGISTRY[code]
    except KeyError:
        raise KeyError(f"unknown error code: {code}")

def _fmt(code: str, **kwargs) -> str:
    msg = _get(code)
    try:
        return msg.text.format(**kwargs)
    except KeyError as key_error:
        missing = key_error.args[0]
        raise KeyError(f"missing text key '{missing}' for {code} "
                       f"(needed by: {msg.text!r})") from None

#
# --- Registry population
#

# Internal errors (generator or driver bugs) - CE0xxx range
_add(ErrorMessage("CE0001", Severity.ERROR,
    "'{name}' ({id}) is already defined as '{existing}'",
    Category.INTERNAL, "A declaration was emitted twice in one session."))

_add(ErrorMessage("CE0002", Severity.ERROR,
    "reference to {target} before its declaration was emitted",
    Category.INTERNAL, "Declarations were not supplied in dependency order."))

_add(ErrorMessage("CE0003", Severity.ERROR,
    "{operation} invoked on {kind} declaration '{name}'",
    Category.INTERNAL, "The declaration kind does not match the generator operation."))

_add(ErrorMessage("CE0004", Severity.ERROR,
    "{host} atom table has no entry for {atoms}",
    Category.INTERNAL, "Every atom type must map to a host token."))

_add(ErrorMessage("CE0005", Severity.ERROR,
    "no layout for {kind} declaration '{name}'",
    Category.INTERNAL, "Only aliases, structs and enums have a memory layout."))

_add(ErrorMessage("CE0006", Severity.ERROR,
    "'{name}' ({id}) contains itself by value",
    Category.INTERNAL, "A struct cannot hold itself, directly or through other declarations, without indirection."))

_add(ErrorMessage("CE0007", Severity.ERROR,
    "enum '{name}' has no variants",
    Category.INTERNAL, "Hosts reject enums without variants; the module loader never produces one."))

# Unsupported capabilities - CE1xxx range
_add(ErrorMessage("CE1001", Severity.ERROR,
    "the {backend} backend cannot emit function declarations ('{name}')",
    Category.UNSUPPORTED, "Pick a backend that supports functions or skip them."))

# Configuration errors - CE20xx range
_add(ErrorMessage("CE2001", Severity.ERROR,
    "unknown backend '{name}' (available: {available})",
    Category.CONFIG))

_add(ErrorMessage("CE2002", Severity.ERROR,
    "unsupported target architecture '{arch}' in triple '{triple}'",
    Category.CONFIG))

_add(ErrorMessage("CE2003", Severity.ERROR,
    "invalid enum representation '{repr}': expected an integer atom",
    Category.CONFIG))

_add(ErrorMessage("CE2004", Severity.ERROR,
    "malformed configuration {path}: {reason}",
    Category.CONFIG))

# Module loader errors - CE21xx range
_add(ErrorMessage("CE2101", Severity.ERROR,
    "malformed module {path}: {reason}",
    Category.LOADER))

_add(ErrorMessage("CE2102", Severity.ERROR,
    "unknown type '{type}' referenced by '{name}'",
    Category.LOADER))

_add(ErrorMessage("CE2103", Severity.ERROR,
    "declaration '{name}' is declared more than once",
    Category.LOADER))

# Warnings
_add(ErrorMessage("CW0001", Severity.WARNING,
    "{atom} is emitted as {token} on the {host} backend, which changes layout",
    Category.LAYOUT, "The host token is wider than the declared atom."))

_add(ErrorMessage("CW0002", Severity.WARNING,
    "function '{name}' skipped: the {backend} backend cannot emit functions",
    Category.UNSUPPORTED))

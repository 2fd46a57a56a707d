"""Identifier casing rules for each host.

Declared names are split into words (on separators, camel humps and acronym
boundaries; digits stay attached to the letters around them) and re-joined in the style
a host expects for the role the name plays.
"""
from __future__ import annotations
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

_WORD_RE = re.compile(r"[A-Z]+[0-9]*(?=[A-Z][a-z])|[A-Z]?[a-z]+[0-9]*|[A-Z]+[0-9]*|[0-9]+[a-z]*")


class CaseStyle(Enum):
    CAMEL = "CamelCase"
    SNAKE = "snake_case"
    SHOUTY_SNAKE = "SHOUTY_SNAKE_CASE"


class NameRole(Enum):
    TYPE = "type"
    FIELD = "field"
    VARIANT = "variant"
    FUNCTION = "function"


def split_words(name: str) -> list[str]:
    return _WORD_RE.findall(name)


def to_camel_case(name: str) -> str:
    return "".join(w[:1].upper() + w[1:].lower() for w in split_words(name))


def to_snake_case(name: str) -> str:
    return "_".join(w.lower() for w in split_words(name))


def to_shouty_snake_case(name: str) -> str:
    return "_".join(w.upper() for w in split_words(name))


_CASE_FUNCS: dict[CaseStyle, Callable[[str], str]] = {
    CaseStyle.CAMEL: to_camel_case,
    CaseStyle.SNAKE: to_snake_case,
    CaseStyle.SHOUTY_SNAKE: to_shouty_snake_case,
}


def _no_escape(name: str) -> str:
    return name


@dataclass(frozen=True)
class NamingRules:
    """Per-host casing for every name role plus reserved-word escaping.

    The transform is pure: it never deduplicates, declared names are already
    unique within their scope.
    """
    type_case: CaseStyle
    field_case: CaseStyle
    variant_case: CaseStyle
    function_case: CaseStyle
    reserved: frozenset[str] = field(default_factory=frozenset)
    escape: Callable[[str], str] = _no_escape

    def case_for(self, role: NameRole) -> CaseStyle:
        return {
            NameRole.TYPE: self.type_case,
            NameRole.FIELD: self.field_case,
            NameRole.VARIANT: self.variant_case,
            NameRole.FUNCTION: self.function_case,
        }[role]

    def apply(self, name: str, role: NameRole) -> str:
        converted = _CASE_FUNCS[self.case_for(role)](name)
        if not converted:
            # Nothing word-like to keep (e.g. "_"); hand back the declared spelling.
            converted = name
        if converted in self.reserved:
            converted = self.escape(converted)
        return converted

    def type_name(self, name: str) -> str:
        return self.apply(name, NameRole.TYPE)

    def field_name(self, name: str) -> str:
        return self.apply(name, NameRole.FIELD)

    def variant_name(self, name: str) -> str:
        return self.apply(name, NameRole.VARIANT)

    def function_name(self, name: str) -> str:
        return self.apply(name, NameRole.FUNCTION)


RUST_RESERVED = frozenset({
    "as", "async", "await", "break", "const", "continue", "crate", "dyn", "else",
    "enum", "extern", "false", "fn", "for", "if", "impl", "in", "let", "loop",
    "match", "mod", "move", "mut", "pub", "ref", "return", "static", "struct",
    "trait", "true", "type", "unsafe", "use", "where", "while", "abstract",
    "become", "box", "do", "final", "macro", "override", "priv", "try",
    "typeof", "unsized", "virtual", "yield",
})

# Keywords that cannot be raw identifiers in Rust
_RUST_NOT_RAW = frozenset({"crate", "self", "super", "Self"})

C_RESERVED = frozenset({
    "auto", "bool", "break", "case", "char", "const", "continue", "default", "do",
    "double", "else", "enum", "extern", "float", "for", "goto", "if", "inline",
    "int", "long", "register", "restrict", "return", "short", "signed", "sizeof",
    "static", "struct", "switch", "typedef", "union", "unsigned", "void",
    "volatile", "while",
})


def _rust_escape(name: str) -> str:
    if name in _RUST_NOT_RAW:
        return f"{name}_"
    return f"r#{name}"


def _c_escape(name: str) -> str:
    return f"{name}_"


RUST_NAMING = NamingRules(
    type_case=CaseStyle.CAMEL,
    field_case=CaseStyle.SNAKE,
    variant_case=CaseStyle.CAMEL,
    function_case=CaseStyle.SNAKE,
    reserved=RUST_RESERVED | _RUST_NOT_RAW,
    escape=_rust_escape,
)

C_NAMING = NamingRules(
    type_case=CaseStyle.SNAKE,
    field_case=CaseStyle.SNAKE,
    variant_case=CaseStyle.SHOUTY_SNAKE,
    function_case=CaseStyle.SNAKE,
    reserved=C_RESERVED,
    escape=_c_escape,
)

# llvmlite quotes every identifier, so nothing needs escaping
LLVM_NAMING = NamingRules(
    type_case=CaseStyle.CAMEL,
    field_case=CaseStyle.SNAKE,
    variant_case=CaseStyle.CAMEL,
    function_case=CaseStyle.SNAKE,
)

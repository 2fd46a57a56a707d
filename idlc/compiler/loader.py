"""Loading modules from their TOML description.

The file lists declarations in the order they are generated:

    name = "geometry"

    [[declaration]]
    kind = "struct"
    name = "point"
    members = [{ name = "x", type = "f64" }, { name = "y", type = "f64" }]

Type names are atoms (``u32``, ``f64``...) or aliases, structs and enums
declared anywhere in the file; functions are not types. The order is kept as
written; putting a use before its declaration is caught by the generator, not
here.
"""
from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Optional

from idlc.internals.errors import loader_error
from idlc.semantics.module import Module, ModuleBuilder
from idlc.semantics.typesys import AtomRef, AtomType, DataTypeRef, DefinedRef, Ident

KINDS = ("alias", "struct", "enum", "function")


def load_module(path: Path) -> Module:
    """Load a module file; the module is named after the file unless it says otherwise."""
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise loader_error("CE2101", path=path, reason=e) from e
    return _parse_module(data, str(path), default_name=path.stem)


def load_module_from_string(text: str, origin: str = "<string>",
                            default_name: str = "module") -> Module:
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise loader_error("CE2101", path=origin, reason=e) from e
    return _parse_module(data, origin, default_name)


def _parse_module(data: dict, origin: str, default_name: str) -> Module:
    name = data.get("name", default_name)
    entries = data.get("declaration", [])
    if not isinstance(name, str):
        raise loader_error("CE2101", path=origin, reason="'name' must be a string")
    if not isinstance(entries, list):
        raise loader_error("CE2101", path=origin, reason="'declaration' must be an array of tables")

    builder = ModuleBuilder(name)

    # First pass: give every declaration its ident so references can point forward.
    idents: dict[str, Ident] = {}
    # Only data types can be used as a type
    type_idents: dict[str, Ident] = {}
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise loader_error("CE2101", path=origin, reason=f"declaration #{index} is not a table")
        decl_name = _require_str(entry, "name", origin, index)
        kind = _require_str(entry, "kind", origin, index)
        if kind not in KINDS:
            raise loader_error("CE2101", path=origin,
                               reason=f"declaration '{decl_name}' has unknown kind '{kind}'")
        if decl_name in idents:
            raise loader_error("CE2103", name=decl_name)
        idents[decl_name] = builder.reserve()
        if kind != "function":
            type_idents[decl_name] = idents[decl_name]

    def ref(type_name: Any, owner: str) -> DataTypeRef:
        if not isinstance(type_name, str):
            raise loader_error("CE2101", path=origin, reason=f"type in '{owner}' must be a string")
        if type_name in type_idents:
            return DefinedRef(type_idents[type_name])
        atom = AtomType.parse(type_name)
        if atom is None:
            raise loader_error("CE2102", type=type_name, name=owner)
        return AtomRef(atom)

    for index, entry in enumerate(entries):
        decl_name = entry["name"]
        ident = idents[decl_name]
        match entry["kind"]:
            case "alias":
                builder.alias(decl_name, ref(entry.get("to"), decl_name), ident=ident)
            case "struct":
                members = [
                    (_require_str(m, "name", origin, index), ref(m.get("type"), decl_name))
                    for m in _table_list(entry, "members", origin, decl_name)
                ]
                builder.struct(decl_name, members, ident=ident)
            case "enum":
                variants = entry.get("variants", [])
                if not isinstance(variants, list) or not all(isinstance(v, str) for v in variants):
                    raise loader_error("CE2101", path=origin,
                                       reason=f"variants of '{decl_name}' must be strings")
                if not variants:
                    raise loader_error("CE2101", path=origin,
                                       reason=f"enum '{decl_name}' needs at least one variant")
                builder.enum(decl_name, variants, ident=ident)
            case "function":
                args = [
                    (_require_str(a, "name", origin, index), ref(a.get("type"), decl_name))
                    for a in _table_list(entry, "args", origin, decl_name)
                ]
                ret_name: Optional[str] = entry.get("ret")
                ret = ref(ret_name, decl_name) if ret_name is not None else None
                builder.function(decl_name, args, ret, ident=ident)

    return builder.build()


def _require_str(entry: dict, key: str, origin: str, index: int) -> str:
    value = entry.get(key)
    if not isinstance(value, str) or not value:
        raise loader_error("CE2101", path=origin,
                           reason=f"declaration #{index} needs a string '{key}'")
    return value


def _table_list(entry: dict, key: str, origin: str, owner: str) -> list[dict]:
    items = entry.get(key, [])
    if not isinstance(items, list) or not all(isinstance(i, dict) for i in items):
        raise loader_error("CE2101", path=origin,
                           reason=f"'{key}' of '{owner}' must be an array of tables")
    return items

"""Backend configuration and its idlc.toml representation."""
from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional

from idlc.backend.target import Target
from idlc.internals.errors import config_error
from idlc.semantics.typesys import AtomType

CONFIG_NAME = "idlc.toml"
DEFAULT_BACKEND = "rust"


@dataclass(frozen=True)
class BackendConfig:
    """Options every backend receives.

    `enum_repr` overrides the discriminant of generated enums; by default it
    is the unsigned atom as wide as the target's C `int`.
    """
    target: Target = field(default_factory=Target.host)
    enum_repr: Optional[AtomType] = None

    def __post_init__(self) -> None:
        if self.enum_repr is not None and not self.enum_repr.is_integer:
            raise config_error("CE2003", repr=self.enum_repr)

    @property
    def enum_discriminant(self) -> AtomType:
        if self.enum_repr is not None:
            return self.enum_repr
        return AtomType.unsigned_of_width(self.target.int_bits)

    def with_overrides(self, target: Optional[str] = None,
                       enum_repr: Optional[str] = None) -> "BackendConfig":
        """Return a copy with CLI-style string overrides applied."""
        config = self
        if target is not None:
            config = replace(config, target=Target.from_triple(target))
        if enum_repr is not None:
            config = replace(config, enum_repr=parse_enum_repr(enum_repr))
        return config


@dataclass(frozen=True)
class ProjectConfig:
    backend: str = DEFAULT_BACKEND
    backend_config: BackendConfig = field(default_factory=BackendConfig)


def parse_enum_repr(text: str) -> AtomType:
    atom = AtomType.parse(text)
    if atom is None or not atom.is_integer:
        raise config_error("CE2003", repr=text)
    return atom


def load_config(path: Path) -> ProjectConfig:
    """Load and validate an idlc.toml file."""
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise config_error("CE2004", path=path, reason=e) from e
    return _parse_config(data, str(path))


def load_config_from_string(text: str, origin: str = "<string>") -> ProjectConfig:
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise config_error("CE2004", path=origin, reason=e) from e
    return _parse_config(data, origin)


def _parse_config(data: dict, origin: str) -> ProjectConfig:
    section = data.get("backend", {})
    if not isinstance(section, dict):
        raise config_error("CE2004", path=origin, reason="[backend] must be a table")

    name = section.get("name", DEFAULT_BACKEND)
    triple = section.get("target")
    enum_repr = section.get("enum_repr")
    for key, value in (("name", name), ("target", triple), ("enum_repr", enum_repr)):
        if value is not None and not isinstance(value, str):
            raise config_error("CE2004", path=origin, reason=f"'{key}' must be a string")

    target = Target.from_triple(triple) if triple else Target.host()
    repr_atom = parse_enum_repr(enum_repr) if enum_repr else None
    return ProjectConfig(name, BackendConfig(target, repr_atom))

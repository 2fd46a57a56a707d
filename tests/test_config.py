"""Backend configuration and idlc.toml parsing."""
import pytest

from idlc.backend.config import (
    DEFAULT_BACKEND,
    BackendConfig,
    load_config,
    load_config_from_string,
    parse_enum_repr,
)
from idlc.backend.target import Target
from idlc.internals.errors import ConfigError
from idlc.semantics.typesys import AtomType

from conftest import AVR, I686, X86_64


def test_full_backend_table():
    project = load_config_from_string(f"""
[backend]
name = "c"
target = "{I686}"
enum_repr = "u8"
""")
    assert project.backend == "c"
    assert project.backend_config.target.triple == I686
    assert project.backend_config.enum_discriminant is AtomType.U8


def test_backend_name_defaults_to_rust():
    project = load_config_from_string(f'[backend]\ntarget = "{X86_64}"\n')
    assert project.backend == DEFAULT_BACKEND == "rust"
    assert project.backend_config.enum_repr is None


@pytest.mark.parametrize("triple, atom", [
    (X86_64, AtomType.U32),
    (I686, AtomType.U32),
    (AVR, AtomType.U16),
])
def test_default_discriminant_is_c_int_width(triple, atom):
    assert BackendConfig(Target.from_triple(triple)).enum_discriminant is atom


def test_overrides_return_a_copy():
    base = BackendConfig(Target.from_triple(X86_64))
    changed = base.with_overrides(target=AVR, enum_repr="i16")
    assert changed.target.platform.arch == "avr"
    assert changed.enum_discriminant is AtomType.I16
    assert base.target.platform.arch == "x86_64"
    assert base.with_overrides() == base


@pytest.mark.parametrize("text", ["f32", "bool", "u128", ""])
def test_enum_repr_must_be_an_integer_atom(text):
    with pytest.raises(ConfigError) as exc:
        parse_enum_repr(text)
    assert exc.value.code == "CE2003"


def test_float_repr_rejected_at_construction():
    with pytest.raises(ConfigError):
        BackendConfig(Target.from_triple(X86_64), AtomType.F64)


@pytest.mark.parametrize("text", [
    "[backend",
    "backend = 1",
    "[backend]\nname = 2\n",
    "[backend]\ntarget = false\n",
])
def test_malformed_config(text):
    with pytest.raises(ConfigError) as exc:
        load_config_from_string(text)
    assert exc.value.code == "CE2004"


def test_unknown_target_architecture():
    with pytest.raises(ConfigError) as exc:
        load_config_from_string('[backend]\ntarget = "sparc-sun-solaris"\n')
    assert exc.value.code == "CE2002"


def test_load_config_from_file(tmp_path):
    path = tmp_path / "idlc.toml"
    path.write_text(f'[backend]\nname = "llvm"\ntarget = "{AVR}"\n')
    project = load_config(path)
    assert project.backend == "llvm"
    assert project.backend_config.target.int_bits == 16


def test_malformed_file_names_path(tmp_path):
    path = tmp_path / "idlc.toml"
    path.write_text("[backend\n")
    with pytest.raises(ConfigError) as exc:
        load_config(path)
    assert str(path) in exc.value.text

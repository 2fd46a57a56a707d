"""Target triples and per-architecture ABI facts."""
import pytest

from idlc.backend.target import ARCHITECTURES, Target, TargetPlatform, parse_triple
from idlc.internals.errors import ConfigError


@pytest.mark.parametrize("triple, expected", [
    ("arm64-apple-darwin25.0.0", TargetPlatform("arm64", "apple", "darwin", "")),
    ("x86_64-pc-linux-gnu", TargetPlatform("x86_64", "pc", "linux", "gnu")),
    ("x86_64-w64-windows-msvc", TargetPlatform("x86_64", "w64", "windows", "msvc")),
    ("avr", TargetPlatform("avr", "unknown", "unknown", "")),
])
def test_parse_triple(triple, expected):
    assert parse_triple(triple) == expected


def test_target_keeps_the_original_triple():
    target = Target.from_triple("arm64-apple-darwin25.0.0")
    assert target.triple == "arm64-apple-darwin25.0.0"
    assert target.platform.arch == "arm64"
    assert target.platform.os == "darwin"


@pytest.mark.parametrize("triple, pointer_bits, int_bits", [
    ("x86_64-unknown-linux-gnu", 64, 32),
    ("i686-pc-windows-msvc", 32, 32),
    ("aarch64-unknown-linux-gnu", 64, 32),
    ("wasm32-unknown-unknown", 32, 32),
    ("avr-unknown-unknown", 16, 16),
])
def test_widths(triple, pointer_bits, int_bits):
    target = Target.from_triple(triple)
    assert target.pointer_bits == pointer_bits
    assert target.int_bits == int_bits


def test_unknown_architecture():
    with pytest.raises(ConfigError) as exc:
        Target.from_triple("mips-unknown-linux-gnu")
    assert exc.value.code == "CE2002"
    assert "'mips'" in exc.value.text


@pytest.mark.parametrize("arch", sorted(ARCHITECTURES))
def test_every_data_layout_is_accepted_by_llvm(arch):
    target = Target.from_triple(f"{arch}-unknown-unknown")
    assert target.create_target_data() is not None

"""LLVM IR backend."""
import io

from idlc.backend.config import BackendConfig
from idlc.backend.generator import Capability
from idlc.backend.llvm_ir import LLVMGenerator
from idlc.backend.target import Target
from idlc.semantics.module import ModuleBuilder
from idlc.semantics.typesys import AtomType

from conftest import I686


def test_supports_functions():
    assert LLVMGenerator.supports(Capability.FUNCTIONS)


def test_prelude_names_target(render, geometry, config):
    out = render(geometry, "llvm")
    lines = out.splitlines()
    assert lines[0] == '; ModuleID = "geometry"'
    assert lines[1] == 'target triple = "x86_64-unknown-linux-gnu"'
    assert lines[2] == f'target datalayout = "{config.target.data_layout}"'


def test_alias_is_transparent(render, geometry):
    out = render(geometry, "llvm")
    assert "; Coord = double\n" in out
    assert '%"Point" = type {double, double}\n' in out


def test_struct_layout_comment(render, geometry):
    out = render(geometry, "llvm")
    assert '%"Segment" = type {%"Point", %"Point", i16}\n; size 40, align 8\n' in out


def test_struct_layout_follows_target(render):
    b = ModuleBuilder("stamp")
    b.struct("stamp", [("tag", AtomType.U8), ("at", AtomType.U64)])
    out = render(b.build(), "llvm", cfg=BackendConfig(Target.from_triple(I686)))
    assert "; size 12, align 4" in out


def test_enum_variants_are_constants(render, geometry):
    out = render(geometry, "llvm")
    assert "; Color = i32\n" in out
    red, green, blue = (out.index(f'@"Color.{v}"') for v in ("Red", "Green", "Blue"))
    assert red < green < blue
    assert "constant i32 0" in out
    assert "constant i32 2" in out


def test_enum_used_as_member(render):
    b = ModuleBuilder("paint")
    color = b.enum("color", ["red"])
    b.struct("pixel", [("c", color), ("alpha", AtomType.U8)])
    out = render(b.build(), "llvm")
    assert '%"Pixel" = type {i32, i8}' in out


def test_function_declaration(render, geometry):
    out = render(geometry, "llvm")
    line = next(line for line in out.splitlines() if line.startswith("declare"))
    assert line.startswith('declare double @"distance"(')
    assert '%"Point" %"a"' in line
    assert '%"Point" %"b"' in line


def test_void_function(render):
    b = ModuleBuilder("ops")
    b.function("reset", [("flag", AtomType.BOOL)])
    out = render(b.build(), "llvm")
    assert 'declare void @"reset"(i8 %"flag")' in out


def test_i8_is_not_widened(render, reporter):
    b = ModuleBuilder("narrow")
    b.struct("pair", [("a", AtomType.I8)])
    out = render(b.build(), "llvm", reporter=reporter)
    assert '%"Pair" = type {i8}' in out
    assert reporter.items == []


def test_sessions_have_separate_contexts(config, geometry):
    first = LLVMGenerator(config, io.BytesIO())
    second = LLVMGenerator(config, io.BytesIO())
    assert first.context is not second.context
    entry = geometry.get_by_name("color")
    first.gen_enum(geometry, entry)
    second.gen_enum(geometry, entry)


def test_deterministic(render, geometry):
    assert render(geometry, "llvm") == render(geometry, "llvm")

"""Rust backend output and failure behaviour."""
import io

import pytest

from idlc.backend.config import BackendConfig
from idlc.backend.generator import Capability
from idlc.backend.rust import RustGenerator
from idlc.compiler.pipeline import generate
from idlc.internals.errors import InternalError, UnsupportedCapabilityError
from idlc.semantics.module import ModuleBuilder
from idlc.semantics.typesys import AtomType, DefinedRef, Ident, Named, StructDataType

from conftest import AVR


def test_enum_variants_in_order(render):
    b = ModuleBuilder("paint")
    b.enum("Color", ["Red", "Green", "Blue"])
    out = render(b.build())

    assert out == (
        "/// Color: enum { Red, Green, Blue }\n"
        "#[repr(u32)]\n"
        "#[derive(Clone, Copy, Debug, PartialEq, Eq, PartialOrd, Ord, Hash)]\n"
        "pub enum Color {\n"
        "    Red,\n"
        "    Green,\n"
        "    Blue,\n"
        "}\n"
        "\n"
    )


def test_variant_names_use_type_casing(render):
    b = ModuleBuilder()
    b.enum("traffic_light", ["stop_now", "go"])
    out = render(b.build())
    assert "pub enum TrafficLight {" in out
    assert "    StopNow,\n    Go,\n" in out


def test_alias_then_struct(render):
    b = ModuleBuilder("shipping")
    weight = b.alias("Weight", AtomType.U32)
    b.struct("parcel", [("w", weight)])
    out = render(b.build())

    assert "pub type Weight = u32;\n" in out
    assert "#[repr(C)]\npub struct Parcel {\n    pub w: Weight,\n}\n" in out


def test_struct_member_order_is_kept(render):
    b = ModuleBuilder()
    b.struct("vec3", [("x", AtomType.F64), ("y", AtomType.F64), ("z", AtomType.F64)])
    out = render(b.build())
    assert "    pub x: f64,\n    pub y: f64,\n    pub z: f64,\n" in out


def test_members_are_not_reordered_by_size(render):
    b = ModuleBuilder()
    b.struct("mixed", [("flag", AtomType.BOOL), ("big", AtomType.U64), ("small", AtomType.U8)])
    out = render(b.build())
    assert out.index("pub flag") < out.index("pub big") < out.index("pub small")


def test_alias_chain_reaches_the_atom_token(render):
    b = ModuleBuilder()
    a = b.alias("a", AtomType.U16)
    bb = b.alias("b", a)
    c = b.alias("c", bb)
    b.struct("holder", [("v", c)])
    out = render(b.build())
    assert "pub type A = u16;" in out
    assert "pub type B = A;" in out
    assert "pub type C = B;" in out


def test_struct_of_structs(render, types_only):
    out = render(types_only)
    assert "/// parcel: struct { w: weight, fragile: bool }" in out
    assert "    pub w: Weight,\n    pub fragile: bool,\n" in out


def test_field_keywords_are_escaped(render):
    b = ModuleBuilder()
    b.struct("token", [("type", AtomType.U8), ("self", AtomType.U8)])
    out = render(b.build())
    assert "pub r#type: u8," in out
    assert "pub self_: u8," in out


def test_output_is_deterministic(render, types_only):
    assert render(types_only) == render(types_only)


def test_enum_repr_override(render, config):
    b = ModuleBuilder()
    b.enum("small", ["a", "b"])
    out = render(b.build(), cfg=BackendConfig(config.target, AtomType.U8))
    assert "#[repr(u8)]" in out


def test_avr_uses_16_bit_discriminant(render, config):
    b = ModuleBuilder()
    b.enum("state", ["off", "on"])
    out = render(b.build(), cfg=config.with_overrides(target=AVR))
    assert "#[repr(u16)]" in out


def test_i8_widening_is_warned_once(render, reporter):
    b = ModuleBuilder()
    b.struct("pair", [("a", AtomType.I8), ("b", AtomType.I8)])
    out = render(b.build(), reporter=reporter)
    assert "pub a: i32," in out
    assert reporter.codes() == ["CW0001"]
    assert str(reporter.items[0].location) == "pair.a"


def test_i8_enum_repr_is_warned(render, config, reporter):
    b = ModuleBuilder()
    b.enum("tiny", ["a"])
    render(b.build(), cfg=BackendConfig(config.target, AtomType.I8), reporter=reporter)
    assert reporter.codes() == ["CW0001"]


def test_functions_are_not_a_capability():
    assert not RustGenerator.supports(Capability.FUNCTIONS)


def test_gen_function_raises_not_implemented(config, sink, geometry):
    gen = RustGenerator(config, sink)
    func = geometry.functions[0]
    with pytest.raises(NotImplementedError) as exc:
        gen.gen_function(geometry, func)
    assert exc.value.code == "CE1001"
    assert sink.getvalue() == b""


def test_module_with_functions_writes_nothing(config, geometry):
    sink = io.BytesIO()
    with pytest.raises(UnsupportedCapabilityError):
        generate(geometry, "rust", config, sink)
    assert sink.getvalue() == b""


def test_skip_unsupported_drops_functions(render, geometry, reporter):
    out = render(geometry, skip_unsupported=True, reporter=reporter)
    assert "distance" not in out
    assert "pub struct Segment {" in out
    assert reporter.codes() == ["CW0002"]


def test_forward_reference_is_fatal(config):
    b = ModuleBuilder()
    later = b.reserve()
    b.struct("early", [("x", later)])
    b.alias("later", AtomType.U8, ident=later)
    sink = io.BytesIO()

    with pytest.raises(InternalError) as exc:
        generate(b.build(), "rust", config, sink)
    assert exc.value.code == "CE0002"
    assert "'later' (#0)" in exc.value.text
    assert sink.getvalue() == b""


def test_self_reference_resolves_after_define(config, sink):
    b = ModuleBuilder()
    ident = b.reserve()
    b.struct("node", [("count", AtomType.U32)], ident=ident)
    module = b.build()
    gen = RustGenerator(config, sink)
    gen.gen_struct(module, module.declarations[0])
    assert gen.resolve(module, DefinedRef(ident)) == "Node"


@pytest.mark.parametrize("backend", ["rust", "c", "llvm"])
def test_struct_containing_itself_is_fatal(config, backend):
    b = ModuleBuilder()
    ident = b.reserve()
    b.struct("node", [("value", AtomType.U8), ("next", ident)], ident=ident)
    sink = io.BytesIO()

    with pytest.raises(InternalError) as exc:
        generate(b.build(), backend, config, sink)
    assert exc.value.code == "CE0006"
    assert "'node'" in exc.value.text
    assert sink.getvalue() == b""


@pytest.mark.parametrize("backend", ["rust", "c", "llvm"])
def test_enum_without_variants_is_fatal(config, backend):
    b = ModuleBuilder()
    b.enum("empty", [])
    sink = io.BytesIO()

    with pytest.raises(InternalError) as exc:
        generate(b.build(), backend, config, sink)
    assert exc.value.code == "CE0007"
    assert sink.getvalue() == b""


def test_operation_mismatch_is_fatal(config, sink):
    b = ModuleBuilder()
    b.struct("point", [("x", AtomType.F32)])
    module = b.build()
    gen = RustGenerator(config, sink)
    with pytest.raises(InternalError) as exc:
        gen.gen_alias(module, module.declarations[0])
    assert exc.value.code == "CE0003"
    assert "struct" in exc.value.text
    assert sink.getvalue() == b""


def test_dispatch_rejects_unknown_payload(config, sink):
    b = ModuleBuilder()
    module = b.build()
    gen = RustGenerator(config, sink)
    with pytest.raises(InternalError) as exc:
        gen.gen_declaration(module, Named(Ident(0), "odd", "not a declaration"))
    assert exc.value.code == "CE0003"


def test_double_emission_is_fatal(config, sink):
    b = ModuleBuilder()
    b.enum("color", ["red"])
    module = b.build()
    gen = RustGenerator(config, sink)
    gen.gen_enum(module, module.declarations[0])
    with pytest.raises(InternalError) as exc:
        gen.gen_enum(module, module.declarations[0])
    assert exc.value.code == "CE0001"


def test_sessions_are_independent(config, types_only):
    first = RustGenerator(config, io.BytesIO())
    second = RustGenerator(config, io.BytesIO())
    entry = types_only.declarations[0]
    first.gen_alias(types_only, entry)
    second.gen_alias(types_only, entry)
    assert second.defined.resolve(DefinedRef(entry.id)) == "Weight"


def test_empty_struct(render):
    b = ModuleBuilder()
    b.struct("unit", [])
    out = render(b.build())
    assert "/// unit: struct {}\n#[repr(C)]\npub struct Unit {\n}\n" in out
    assert isinstance(b.build().declarations[0].entity, StructDataType)

"""Rust backend: `#[repr(C)]` declarations matching the IDL layouts."""
from __future__ import annotations

from idlc.backend.atoms import RUST_ATOMS
from idlc.backend.generator import Generator, expect_entity, expect_variants
from idlc.backend.naming import RUST_NAMING
from idlc.backend.registry import DefinedRegistry
from idlc.internals.report import Location
from idlc.semantics.module import Module
from idlc.semantics.typesys import (
    AliasDataType,
    AtomRef,
    DataType,
    DataTypeRef,
    Named,
    StructDataType,
)


class RustGenerator(Generator[str]):
    """Generator for the Rust backend.

    Function declarations are not supported; `gen_function` keeps the base
    class behaviour and raises `UnsupportedCapabilityError`.
    """

    name = "rust"
    atoms = RUST_ATOMS
    naming = RUST_NAMING

    def new_registry(self) -> DefinedRegistry[str]:
        return DefinedRegistry(self.atoms.name)

    def define_name(self, data_type_entry: Named[DataType]) -> str:
        typename = self.naming.type_name(data_type_entry.name)
        return self.defined.define(data_type_entry.id, typename, data_type_entry.name)

    def get_defined_name(self, module: Module, data_type_ref: DataTypeRef) -> str:
        return self.resolve(module, data_type_ref)

    def gen_type_header(self, module: Module, data_type_entry: Named[DataType]) -> None:
        self.w.eob().write_line(
            f"/// {data_type_entry.name}: {module.describe(data_type_entry.entity)}")

    def gen_alias(self, module: Module, data_type_entry: Named[DataType]) -> None:
        alias = expect_entity(data_type_entry, AliasDataType, "gen_alias")

        pointee_name = self.get_defined_name(module, alias.to)
        self.check_widening(alias.to, Location(data_type_entry.name))
        typename = self.define_name(data_type_entry)

        self.w.write_line(f"pub type {typename} = {pointee_name};").eob()

    def gen_struct(self, module: Module, data_type_entry: Named[DataType]) -> None:
        struct = expect_entity(data_type_entry, StructDataType, "gen_struct")

        typename = self.define_name(data_type_entry)
        # Rejects structs that contain themselves by value
        self.layouts(module).layout_of(data_type_entry.id)

        self.w.write_line("#[repr(C)]")
        with self.w.block(f"pub struct {typename} {{", "}") as w:
            for m in struct.members:
                self.check_widening(m.type_, Location(data_type_entry.name, m.name))
                w.write_line(
                    f"pub {self.naming.field_name(m.name)}: {self.get_defined_name(module, m.type_)},")
        self.w.eob()

    def gen_enum(self, module: Module, data_type_entry: Named[DataType]) -> None:
        enum = expect_variants(data_type_entry, "gen_enum")

        typename = self.define_name(data_type_entry)
        discriminant = AtomRef(self.config.enum_discriminant)
        self.check_widening(discriminant, Location(data_type_entry.name))

        self.w.write_line(f"#[repr({self.get_defined_name(module, discriminant)})]")
        self.w.write_line("#[derive(Clone, Copy, Debug, PartialEq, Eq, PartialOrd, Ord, Hash)]")
        with self.w.block(f"pub enum {typename} {{", "}") as w:
            for m in enum.members:
                w.write_line(f"{self.naming.variant_name(m.name)},")
        self.w.eob()

"""C backend: a self-contained header with layout checks.

Every struct is followed by `_Static_assert`s on its size, alignment and
member offsets as computed for the configured target, so a compiler that lays
the struct out differently rejects the header instead of miscompiling.
"""
from __future__ import annotations

from idlc.backend.atoms import C_ATOMS
from idlc.backend.generator import Capability, Generator, expect_entity, expect_variants
from idlc.backend.naming import C_NAMING, to_shouty_snake_case
from idlc.backend.registry import DefinedRegistry
from idlc.semantics.module import Module
from idlc.semantics.typesys import (
    AliasDataType,
    AtomRef,
    DataType,
    FuncDecl,
    Named,
    StructDataType,
)

C_INCLUDES = ("stdbool.h", "stddef.h", "stdint.h")


class CGenerator(Generator[str]):
    """Generator for the C backend."""

    name = "c"
    atoms = C_ATOMS
    naming = C_NAMING
    capabilities = frozenset({Capability.FUNCTIONS})

    def new_registry(self) -> DefinedRegistry[str]:
        return DefinedRegistry(self.atoms.name)

    def include_guard(self, module: Module) -> str:
        return f"{to_shouty_snake_case(module.name) or 'IDL'}_H"

    def gen_prelude(self, module: Module) -> None:
        guard = self.include_guard(module)
        self.w.write_line(f"// Generated by idlc from '{module.name}' for {self.target.triple}.")
        self.w.write_line(f"#ifndef {guard}")
        self.w.write_line(f"#define {guard}").eob()
        self.w.write_lines(f"#include <{header}>" for header in C_INCLUDES)
        self.w.eob()

    def gen_epilogue(self, module: Module) -> None:
        self.w.eob().write_line(f"#endif // {self.include_guard(module)}")

    def gen_type_header(self, module: Module, data_type_entry: Named[DataType]) -> None:
        self.w.eob().write_line(
            f"// {data_type_entry.name}: {module.describe(data_type_entry.entity)}")

    def gen_alias(self, module: Module, data_type_entry: Named[DataType]) -> None:
        alias = expect_entity(data_type_entry, AliasDataType, "gen_alias")

        pointee_name = self.resolve(module, alias.to)
        typename = self.naming.type_name(data_type_entry.name)
        self.defined.define(data_type_entry.id, typename, data_type_entry.name)

        self.w.write_line(f"typedef {pointee_name} {typename};").eob()

    def gen_struct(self, module: Module, data_type_entry: Named[DataType]) -> None:
        struct = expect_entity(data_type_entry, StructDataType, "gen_struct")

        tag = f"struct {self.naming.type_name(data_type_entry.name)}"
        self.defined.define(data_type_entry.id, tag, data_type_entry.name)

        fields = [self.naming.field_name(m.name) for m in struct.members]
        with self.w.block(f"{tag} {{", "};") as w:
            for field, m in zip(fields, struct.members):
                w.write_line(f"{self.resolve(module, m.type_)} {field};")

        layout = self.layouts(module).layout_of(data_type_entry.id)
        self._static_assert(f"sizeof({tag}) == {layout.size}", f"sizeof({tag})")
        self._static_assert(f"_Alignof({tag}) == {layout.align}", f"_Alignof({tag})")
        for field, offset in zip(fields, layout.offsets):
            self._static_assert(f"offsetof({tag}, {field}) == {offset}",
                                f"offsetof({tag}, {field})")
        self.w.eob()

    # C enum constants are `int`; the typedef pins the stored representation.
    def gen_enum(self, module: Module, data_type_entry: Named[DataType]) -> None:
        enum = expect_variants(data_type_entry, "gen_enum")

        typename = self.naming.type_name(data_type_entry.name)
        self.defined.define(data_type_entry.id, typename, data_type_entry.name)
        prefix = to_shouty_snake_case(data_type_entry.name)
        repr_name = self.resolve(module, AtomRef(self.config.enum_discriminant))

        with self.w.block(f"enum ___{typename} {{", "};") as w:
            for value, m in enumerate(enum.members):
                w.write_line(f"{prefix}_{self.naming.variant_name(m.name)} = {value},")
        self.w.write_line(f"typedef {repr_name} {typename}; // enum ___{typename}").eob()

    def gen_function(self, module: Module, func_decl_entry: Named[FuncDecl]) -> None:
        func = expect_entity(func_decl_entry, FuncDecl, "gen_function")

        ret = self.resolve(module, func.ret) if func.ret is not None else "void"
        args = ", ".join(
            f"{self.resolve(module, a.type_)} {self.naming.field_name(a.name)}"
            for a in func.args
        ) or "void"
        self.w.write_line(
            f"{ret} {self.naming.function_name(func_decl_entry.name)}({args});").eob()

    def _static_assert(self, condition: str, what: str) -> None:
        self.w.write_line(f'_Static_assert({condition}, "bad {what}");')

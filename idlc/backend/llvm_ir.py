"""LLVM IR backend: identified struct types, enum constants and function declarations.

Types are built with llvmlite in a context private to the session, so names
never leak between sessions. LLVM IR has no type aliases; an alias resolves
straight to its target type and only leaves a comment behind.
"""
from __future__ import annotations
from typing import BinaryIO, Optional

from llvmlite import ir

from idlc.backend.atoms import LLVM_ATOMS, AtomSizing
from idlc.backend.config import BackendConfig
from idlc.backend.generator import Capability, Generator, expect_entity, expect_variants
from idlc.backend.naming import LLVM_NAMING
from idlc.backend.registry import DefinedRegistry
from idlc.internals.report import Reporter
from idlc.semantics.module import Module
from idlc.semantics.typesys import (
    AliasDataType,
    AtomRef,
    DataType,
    FuncDecl,
    Named,
    StructDataType,
)


class LLVMGenerator(Generator[ir.Type]):
    """Generator for textual LLVM IR."""

    name = "llvm"
    atoms = LLVM_ATOMS
    naming = LLVM_NAMING
    capabilities = frozenset({Capability.FUNCTIONS})

    def __init__(self, config: BackendConfig, sink: BinaryIO,
                 reporter: Optional[Reporter] = None) -> None:
        self.context = ir.Context()
        super().__init__(config, sink, reporter)
        self.ir_module = ir.Module(name="idlc", context=self.context)
        self.ir_module.triple = self.target.triple
        self.ir_module.data_layout = self.target.data_layout

    def new_registry(self) -> DefinedRegistry[ir.Type]:
        return DefinedRegistry(lambda atom: AtomSizing.llvm_type(self.atoms.representation(atom)))

    def gen_prelude(self, module: Module) -> None:
        self.w.write_line(f'; ModuleID = "{module.name}"')
        self.w.write_line(f'target triple = "{self.ir_module.triple}"')
        self.w.write_line(f'target datalayout = "{self.ir_module.data_layout}"').eob()

    def gen_type_header(self, module: Module, data_type_entry: Named[DataType]) -> None:
        self.w.eob().write_line(
            f"; {data_type_entry.name}: {module.describe(data_type_entry.entity)}")

    def gen_alias(self, module: Module, data_type_entry: Named[DataType]) -> None:
        alias = expect_entity(data_type_entry, AliasDataType, "gen_alias")

        pointee = self.resolve(module, alias.to)
        self.defined.define(data_type_entry.id, pointee, data_type_entry.name)

        typename = self.naming.type_name(data_type_entry.name)
        self.w.write_line(f"; {typename} = {pointee}").eob()

    def gen_struct(self, module: Module, data_type_entry: Named[DataType]) -> None:
        struct = expect_entity(data_type_entry, StructDataType, "gen_struct")

        typename = self.naming.type_name(data_type_entry.name)
        struct_ty = self.context.get_identified_type(typename)
        self.defined.define(data_type_entry.id, struct_ty, data_type_entry.name)

        struct_ty.set_body(*(self.resolve(module, m.type_) for m in struct.members))
        self.w.write_line(struct_ty.get_declaration())
        layout = self.layouts(module).layout_of(data_type_entry.id)
        self.w.write_line(f"; size {layout.size}, align {layout.align}").eob()

    def gen_enum(self, module: Module, data_type_entry: Named[DataType]) -> None:
        enum = expect_variants(data_type_entry, "gen_enum")

        typename = self.naming.type_name(data_type_entry.name)
        repr_ty = self.resolve(module, AtomRef(self.config.enum_discriminant))
        self.defined.define(data_type_entry.id, repr_ty, data_type_entry.name)

        self.w.write_line(f"; {typename} = {repr_ty}")
        for value, m in enumerate(enum.members):
            gv = ir.GlobalVariable(
                self.ir_module, repr_ty, f"{typename}.{self.naming.variant_name(m.name)}")
            gv.global_constant = True
            gv.initializer = ir.Constant(repr_ty, value)
            self.w.write_line(str(gv).strip())
        self.w.eob()

    def gen_function(self, module: Module, func_decl_entry: Named[FuncDecl]) -> None:
        func = expect_entity(func_decl_entry, FuncDecl, "gen_function")

        ret = self.resolve(module, func.ret) if func.ret is not None else ir.VoidType()
        fnty = ir.FunctionType(ret, [self.resolve(module, a.type_) for a in func.args])
        fn = ir.Function(self.ir_module, fnty, self.naming.function_name(func_decl_entry.name))
        for arg, a in zip(fn.args, func.args):
            arg.name = self.naming.field_name(a.name)
        self.w.write_line(str(fn).strip()).eob()

"""
Generator contract shared by every backend.

A generator session owns its registry, its writer and its diagnostics; the
driver hands it declarations one at a time, in dependency order. Each
declaration kind has one operation; `gen_declaration` is the tagged dispatch
that picks it.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from enum import Enum
from typing import BinaryIO, ClassVar, Generic, Optional, TypeVar

from idlc.backend.atoms import AtomSizing, AtomTable
from idlc.backend.config import BackendConfig
from idlc.backend.naming import NamingRules
from idlc.backend.pretty_writer import PrettyWriter
from idlc.backend.registry import DefinedRegistry
from idlc.backend.sizing import TypeSizing
from idlc.internals import errors as er
from idlc.internals.errors import raise_internal_error, raise_unsupported
from idlc.internals.report import Location, Reporter
from idlc.semantics.module import Declaration, Module
from idlc.semantics.typesys import (
    AliasDataType,
    AtomRef,
    DataType,
    DataTypeRef,
    EnumDataType,
    FuncDecl,
    Named,
    StructDataType,
)

T = TypeVar("T")
E = TypeVar("E")


class Capability(Enum):
    """Optional declaration kinds a backend may be able to emit."""
    FUNCTIONS = "functions"


def expect_entity(entry: Named, kind: type[E], operation: str) -> E:
    """Return the entry's payload, or fail if the driver paired it with the wrong operation.

    Raises:
        InternalError: CE0003 on a variant/operation mismatch.
    """
    if not isinstance(entry.entity, kind):
        raise_internal_error(
            "CE0003", operation=operation,
            kind=getattr(entry.entity, "kind", type(entry.entity).__name__),
            name=entry.name)
    return entry.entity


def expect_variants(entry: Named, operation: str) -> EnumDataType:
    """Return the enum payload of `entry`; it must have at least one variant.

    Raises:
        InternalError: CE0003 if `entry` is not an enum, CE0007 if it is empty.
    """
    enum = expect_entity(entry, EnumDataType, operation)
    if not enum.members:
        raise_internal_error("CE0007", name=entry.name)
    return enum


class Generator(ABC, Generic[T]):
    """Base class for one host backend.

    Subclasses set `name`, `atoms`, `naming` and `capabilities`, and implement
    the per-kind operations. `T` is the registry value type.
    """

    name: ClassVar[str]
    atoms: ClassVar[AtomTable]
    naming: ClassVar[NamingRules]
    capabilities: ClassVar[frozenset[Capability]] = frozenset()

    def __init__(self, config: BackendConfig, sink: BinaryIO,
                 reporter: Optional[Reporter] = None) -> None:
        self.config = config
        self.target = config.target
        self.w = PrettyWriter(sink)
        self.reporter = reporter if reporter is not None else Reporter()
        self.sizing = AtomSizing(self.target.create_target_data())
        self.defined: DefinedRegistry[T] = self.new_registry()
        self._layouts: Optional[TypeSizing] = None
        self._reported_widening: set[str] = set()

    @classmethod
    def supports(cls, capability: Capability) -> bool:
        return capability in cls.capabilities

    @abstractmethod
    def new_registry(self) -> DefinedRegistry[T]:
        """Create the empty registry for this session."""

    # Hooks around the declarations; most hosts need no framing.
    def gen_prelude(self, module: Module) -> None:
        pass

    def gen_epilogue(self, module: Module) -> None:
        pass

    @abstractmethod
    def gen_type_header(self, module: Module, data_type_entry: Named[DataType]) -> None:
        ...

    @abstractmethod
    def gen_alias(self, module: Module, data_type_entry: Named[DataType]) -> None:
        ...

    @abstractmethod
    def gen_struct(self, module: Module, data_type_entry: Named[DataType]) -> None:
        ...

    @abstractmethod
    def gen_enum(self, module: Module, data_type_entry: Named[DataType]) -> None:
        ...

    def gen_function(self, module: Module, func_decl_entry: Named[FuncDecl]) -> None:
        """Emit a function declaration.

        Backends without `Capability.FUNCTIONS` keep this default, which fails
        before anything is written.

        Raises:
            UnsupportedCapabilityError: CE1001.
        """
        raise_unsupported("CE1001", backend=self.name, name=func_decl_entry.name)

    def gen_declaration(self, module: Module, entry: Declaration) -> None:
        """Dispatch one declaration to the operation for its kind."""
        match entry.entity:
            case AliasDataType():
                self.gen_alias(module, entry)
            case StructDataType():
                self.gen_struct(module, entry)
            case EnumDataType():
                self.gen_enum(module, entry)
            case FuncDecl():
                self.gen_function(module, entry)
            case _:
                raise_internal_error(
                    "CE0003", operation="gen_declaration",
                    kind=type(entry.entity).__name__, name=entry.name)

    def resolve(self, module: Module, ref: DataTypeRef) -> T:
        """Resolve `ref` in this session; errors name the declaration from `module`."""
        return self.defined.resolve(ref, module.name_of)

    def layouts(self, module: Module) -> TypeSizing:
        """Layout calculator for `module`, built on first use in the session."""
        if self._layouts is None or self._layouts.module is not module:
            self._layouts = TypeSizing(module, self.atoms, self.sizing,
                                       self.config.enum_discriminant)
        return self._layouts

    def check_widening(self, ref: Optional[DataTypeRef], where: Location) -> None:
        """Report CW0001 once per atom when `ref` goes through a widened token."""
        if not isinstance(ref, AtomRef):
            return
        info = self.atoms.info(ref.atom, self.sizing)
        if info.widened and str(ref.atom) not in self._reported_widening:
            self._reported_widening.add(str(ref.atom))
            er.emit(self.reporter, er.ERR.CW0001, where,
                    atom=ref.atom, token=info.type_name, host=self.name)

    def finish(self) -> None:
        self.w.flush()


"""Compilation unit: the ordered declarations handed to a generator."""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional, Union

from idlc.semantics.typesys import (
    AliasDataType,
    AtomRef,
    AtomType,
    DataType,
    DataTypeRef,
    DefinedRef,
    EnumDataType,
    EnumMember,
    FuncArg,
    FuncDecl,
    Ident,
    Named,
    StructDataType,
    StructMember,
)

Declaration = Union[Named[DataType], Named[FuncDecl]]


@dataclass(frozen=True)
class Module:
    """Ordered declarations of one compilation unit.

    The order is the order generators see; the driver is responsible for it
    being a valid dependency order.
    """
    name: str
    declarations: tuple[Declaration, ...]
    _by_id: dict[Ident, Declaration] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_by_id", {d.id: d for d in self.declarations})

    def __iter__(self) -> Iterator[Declaration]:
        return iter(self.declarations)

    def __len__(self) -> int:
        return len(self.declarations)

    @property
    def functions(self) -> list[Named[FuncDecl]]:
        return [d for d in self.declarations if isinstance(d.entity, FuncDecl)]

    def get(self, id: Ident) -> Optional[Declaration]:
        return self._by_id.get(id)

    def get_by_name(self, name: str) -> Optional[Declaration]:
        for decl in self.declarations:
            if decl.name == name:
                return decl
        return None

    def name_of(self, id: Ident) -> str:
        decl = self._by_id.get(id)
        return decl.name if decl is not None else str(id)

    def ref_str(self, ref: DataTypeRef) -> str:
        """Render a reference with declared (IDL) names."""
        if isinstance(ref, DefinedRef):
            return self.name_of(ref.id)
        return str(ref)

    def describe(self, entity: Union[DataType, FuncDecl]) -> str:
        """One-line IDL-style rendering of a declaration payload, used for headers."""
        match entity:
            case AliasDataType(to=to):
                return f"alias {self.ref_str(to)}"
            case StructDataType(members=members):
                fields = ", ".join(f"{m.name}: {self.ref_str(m.type_)}" for m in members)
                return f"struct {{ {fields} }}" if fields else "struct {}"
            case EnumDataType(members=members):
                variants = ", ".join(m.name for m in members)
                return f"enum {{ {variants} }}" if variants else "enum {}"
            case FuncDecl(args=args, ret=ret):
                params = ", ".join(f"{a.name}: {self.ref_str(a.type_)}" for a in args)
                tail = f" -> {self.ref_str(ret)}" if ret is not None else ""
                return f"fn({params}){tail}"
        return repr(entity)


TypeSpec = Union[AtomType, Ident, DataTypeRef]


def as_ref(spec: TypeSpec) -> DataTypeRef:
    """Accept an atom, an ident or an existing reference."""
    if isinstance(spec, AtomType):
        return AtomRef(spec)
    if isinstance(spec, Ident):
        return DefinedRef(spec)
    return spec


class ModuleBuilder:
    """Builds a Module, handing out idents in declaration order.

    Example:
        b = ModuleBuilder("geometry")
        weight = b.alias("weight", AtomType.U32)
        b.struct("parcel", [("w", weight)])
        module = b.build()
    """

    def __init__(self, name: str = "module") -> None:
        self.name = name
        self._declarations: list[Declaration] = []
        self._next = 0

    def reserve(self) -> Ident:
        """Allocate an ident without declaring anything yet."""
        ident = Ident(self._next)
        self._next += 1
        return ident

    def add(self, decl: Declaration) -> Ident:
        self._declarations.append(decl)
        self._next = max(self._next, decl.id.index + 1)
        return decl.id

    def alias(self, name: str, to: TypeSpec, ident: Optional[Ident] = None) -> Ident:
        return self.add(Named(ident or self.reserve(), name, AliasDataType(as_ref(to))))

    def struct(self, name: str, members: Iterable[tuple[str, TypeSpec]],
               ident: Optional[Ident] = None) -> Ident:
        payload = StructDataType(tuple(StructMember(n, as_ref(t)) for n, t in members))
        return self.add(Named(ident or self.reserve(), name, payload))

    def enum(self, name: str, variants: Iterable[str], ident: Optional[Ident] = None) -> Ident:
        payload = EnumDataType(tuple(EnumMember(v) for v in variants))
        return self.add(Named(ident or self.reserve(), name, payload))

    def function(self, name: str, args: Iterable[tuple[str, TypeSpec]],
                 ret: Optional[TypeSpec] = None, ident: Optional[Ident] = None) -> Ident:
        payload = FuncDecl(
            tuple(FuncArg(n, as_ref(t)) for n, t in args),
            as_ref(ret) if ret is not None else None,
        )
        return self.add(Named(ident or self.reserve(), name, payload))

    def build(self) -> Module:
        return Module(self.name, tuple(self._declarations))

"""Size, alignment and member offsets of declared types on one host.

Layouts follow the C rules the emitted declarations request: members in
declaration order, each aligned to its own alignment, the aggregate padded to
its largest member alignment.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import assert_never

from idlc.backend.atoms import AtomSizing, AtomTable
from idlc.internals.errors import raise_internal_error
from idlc.semantics.module import Module
from idlc.semantics.typesys import (
    AliasDataType,
    AtomRef,
    AtomType,
    DataTypeRef,
    DefinedRef,
    EnumDataType,
    FuncDecl,
    Ident,
    StructDataType,
)


@dataclass(frozen=True)
class Layout:
    size: int
    align: int
    offsets: tuple[int, ...] = ()


class TypeSizing:
    """Calculate sizes and alignments for declared types."""

    def __init__(self, module: Module, atoms: AtomTable, sizing: AtomSizing,
                 discriminant: AtomType) -> None:
        """Initialize the type sizing calculator.

        Args:
            module: Declarations that defined references point into.
            atoms: Host atom table; layouts use each token's representation.
            sizing: Atom sizes for the target data layout.
            discriminant: Atom used to represent enum values.
        """
        self.module = module
        self.atoms = atoms
        self.sizing = sizing
        self.discriminant = discriminant
        self._cache: dict[Ident, Layout] = {}
        # Declarations whose layout is being computed; meeting one again is a cycle
        self._pending: set[Ident] = set()

    def layout_of_ref(self, ref: DataTypeRef) -> Layout:
        match ref:
            case AtomRef(atom=atom):
                size, align = self.sizing.layout(self.atoms.representation(atom))
                return Layout(size, align)
            case DefinedRef(id=id):
                return self.layout_of(id)
            case _:
                assert_never(ref)

    def layout_of(self, id: Ident) -> Layout:
        cached = self._cache.get(id)
        if cached is not None:
            return cached

        decl = self.module.get(id)
        if decl is None:
            raise_internal_error("CE0002", target=str(id))

        if id in self._pending:
            raise_internal_error("CE0006", name=decl.name, id=id)

        self._pending.add(id)
        try:
            match decl.entity:
                case AliasDataType(to=to):
                    layout = self.layout_of_ref(to)
                case StructDataType(members=members):
                    layout = self._struct_layout([m.type_ for m in members])
                case EnumDataType():
                    size, align = self.sizing.layout(self.atoms.representation(self.discriminant))
                    layout = Layout(size, align)
                case FuncDecl():
                    raise_internal_error("CE0005", kind="function", name=decl.name)
                case _:
                    raise_internal_error("CE0005", kind=type(decl.entity).__name__, name=decl.name)
        finally:
            self._pending.discard(id)

        self._cache[id] = layout
        return layout

    def _struct_layout(self, member_types: list[DataTypeRef]) -> Layout:
        """Calculate member offsets and total size accounting for padding."""
        offset = 0
        max_align = 1
        offsets = []

        for member_type in member_types:
            member = self.layout_of_ref(member_type)
            max_align = max(max_align, member.align)

            # Add padding to align this member
            if offset % member.align != 0:
                offset += member.align - (offset % member.align)
            offsets.append(offset)
            offset += member.size

        # Add final padding to align the entire struct
        if offset % max_align != 0:
            offset += max_align - (offset % max_align)

        return Layout(offset, max_align, tuple(offsets))

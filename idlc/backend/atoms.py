"""
Atomic type table: host tokens for every IDL atom, with ABI size and alignment.

Each host table maps an atom to the token the host spells it with and to the
atom whose layout that token actually has. Sizes and alignments are computed
by LLVM for the configured target data layout, so the same table answers
correctly for 32-bit and 64-bit targets.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Mapping, assert_never

from llvmlite import binding as llvm
from llvmlite import ir

from idlc.internals.errors import raise_internal_error
from idlc.semantics.typesys import AtomType


@dataclass(frozen=True)
class AtomTypeInfo:
    """The native token for an atom together with its layout on the target."""
    type_name: str
    type_size: int
    type_align: int
    atom: AtomType
    repr_atom: AtomType

    @property
    def widened(self) -> bool:
        """True when the host token is wider than the declared atom."""
        return self.repr_atom.bits != self.atom.bits


class AtomSizing:
    """ABI size and alignment of atoms for one target data layout."""

    def __init__(self, target_data: llvm.TargetData) -> None:
        self.target_data = target_data
        self._cache: dict[AtomType, tuple[int, int]] = {}

    @staticmethod
    def llvm_type(atom: AtomType) -> ir.Type:
        """LLVM IR type with the layout of an atom (booleans occupy an i8)."""
        if atom.is_float:
            return ir.FloatType() if atom is AtomType.F32 else ir.DoubleType()
        return ir.IntType(atom.bits)

    def layout(self, atom: AtomType) -> tuple[int, int]:
        """Return (size, alignment) in bytes."""
        cached = self._cache.get(atom)
        if cached is None:
            llty = self.llvm_type(atom)
            cached = (llty.get_abi_size(self.target_data), llty.get_abi_alignment(self.target_data))
            self._cache[atom] = cached
        return cached


class AtomTable:
    """Total mapping from atoms to (host token, representation atom)."""

    def __init__(self, host: str, entries: Mapping[AtomType, tuple[str, AtomType]]) -> None:
        missing = [str(a) for a in AtomType if a not in entries]
        if missing:
            raise_internal_error("CE0004", host=host, atoms=", ".join(missing))
        self.host = host
        self._entries = dict(entries)

    @classmethod
    def from_function(cls, host: str,
                      fn: Callable[[AtomType], tuple[str, AtomType]]) -> "AtomTable":
        return cls(host, {atom: fn(atom) for atom in AtomType})

    def name(self, atom: AtomType) -> str:
        return self._entries[atom][0]

    def representation(self, atom: AtomType) -> AtomType:
        return self._entries[atom][1]

    def widened(self) -> list[AtomType]:
        """Atoms whose host token is wider than their declared width."""
        return [a for a, (_, rep) in self._entries.items() if rep.bits != a.bits]

    def info(self, atom: AtomType, sizing: AtomSizing) -> AtomTypeInfo:
        name, rep = self._entries[atom]
        size, align = sizing.layout(rep)
        return AtomTypeInfo(name, size, align, atom, rep)


def _rust_atom(atom: AtomType) -> tuple[str, AtomType]:
    match atom:
        case AtomType.BOOL:
            return "bool", AtomType.BOOL
        case AtomType.U8:
            return "u8", AtomType.U8
        case AtomType.U16:
            return "u16", AtomType.U16
        case AtomType.U32:
            return "u32", AtomType.U32
        case AtomType.U64:
            return "u64", AtomType.U64
        case AtomType.I8:
            # Reviewed: i8 is emitted as i32 and keeps that layout. Generators
            # report CW0001 wherever a declaration goes through it.
            return "i32", AtomType.I32
        case AtomType.I16:
            return "i16", AtomType.I16
        case AtomType.I32:
            return "i32", AtomType.I32
        case AtomType.I64:
            return "i64", AtomType.I64
        case AtomType.F32:
            return "f32", AtomType.F32
        case AtomType.F64:
            return "f64", AtomType.F64
        case _:
            assert_never(atom)


def _c_atom(atom: AtomType) -> tuple[str, AtomType]:
    match atom:
        case AtomType.BOOL:
            return "bool", atom
        case AtomType.U8 | AtomType.U16 | AtomType.U32 | AtomType.U64:
            return f"uint{atom.bits}_t", atom
        case AtomType.I8 | AtomType.I16 | AtomType.I32 | AtomType.I64:
            return f"int{atom.bits}_t", atom
        case AtomType.F32:
            return "float", atom
        case AtomType.F64:
            return "double", atom
        case _:
            assert_never(atom)


def _llvm_atom(atom: AtomType) -> tuple[str, AtomType]:
    match atom:
        case AtomType.BOOL | AtomType.U8 | AtomType.I8:
            return "i8", atom
        case AtomType.U16 | AtomType.I16:
            return "i16", atom
        case AtomType.U32 | AtomType.I32:
            return "i32", atom
        case AtomType.U64 | AtomType.I64:
            return "i64", atom
        case AtomType.F32:
            return "float", atom
        case AtomType.F64:
            return "double", atom
        case _:
            assert_never(atom)


RUST_ATOMS = AtomTable.from_function("rust", _rust_atom)
C_ATOMS = AtomTable.from_function("c", _c_atom)
LLVM_ATOMS = AtomTable.from_function("llvm", _llvm_atom)

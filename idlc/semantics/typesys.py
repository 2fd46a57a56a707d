"""Declaration data model shared by the module loader and every backend.

Declarations are immutable once built. References between declarations go
through `Ident` handles so that a backend can resolve them against the names
it has already emitted.
"""
from __future__ import annotations
from enum import Enum
from typing import Generic, Optional, TypeVar, Union
from dataclasses import dataclass


class AtomType(Enum):
    BOOL = "bool"
    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"
    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    F32 = "f32"
    F64 = "f64"

    def __str__(self) -> str:
        return self.value

    @property
    def bits(self) -> int:
        """Declared width in bits; BOOL occupies one byte."""
        return _ATOM_BITS[self]

    @property
    def size_bytes(self) -> int:
        return self.bits // 8

    @property
    def is_float(self) -> bool:
        return self in (AtomType.F32, AtomType.F64)

    @property
    def is_integer(self) -> bool:
        return not self.is_float and self is not AtomType.BOOL

    @classmethod
    def parse(cls, text: str) -> Optional["AtomType"]:
        """Look up an atom by its IDL spelling (``u32``, ``F64``...); None if unknown."""
        try:
            return cls(text.lower())
        except ValueError:
            return None

    @classmethod
    def unsigned_of_width(cls, bits: int) -> "AtomType":
        return {8: cls.U8, 16: cls.U16, 32: cls.U32, 64: cls.U64}[bits]


_ATOM_BITS: dict[AtomType, int] = {
    AtomType.BOOL: 8,
    AtomType.U8: 8,
    AtomType.U16: 16,
    AtomType.U32: 32,
    AtomType.U64: 64,
    AtomType.I8: 8,
    AtomType.I16: 16,
    AtomType.I32: 32,
    AtomType.I64: 64,
    AtomType.F32: 32,
    AtomType.F64: 64,
}


@dataclass(frozen=True, order=True)
class Ident:
    """Opaque handle for one declaration of a module."""
    index: int

    def __str__(self) -> str:
        return f"#{self.index}"


@dataclass(frozen=True)
class AtomRef:
    atom: AtomType

    def __str__(self) -> str:
        return str(self.atom)


@dataclass(frozen=True)
class DefinedRef:
    id: Ident

    def __str__(self) -> str:
        return str(self.id)


DataTypeRef = Union[AtomRef, DefinedRef]


@dataclass(frozen=True)
class StructMember:
    name: str
    type_: DataTypeRef


@dataclass(frozen=True)
class EnumMember:
    name: str


@dataclass(frozen=True)
class AliasDataType:
    to: DataTypeRef

    kind = "alias"


@dataclass(frozen=True)
class StructDataType:
    """Struct with members in declaration order; the order is the memory layout."""
    members: tuple[StructMember, ...]

    kind = "struct"


@dataclass(frozen=True)
class EnumDataType:
    """Closed set of variants; the position of each variant is its discriminant."""
    members: tuple[EnumMember, ...]

    kind = "enum"


DataType = Union[AliasDataType, StructDataType, EnumDataType]


@dataclass(frozen=True)
class FuncArg:
    name: str
    type_: DataTypeRef


@dataclass(frozen=True)
class FuncDecl:
    args: tuple[FuncArg, ...]
    ret: Optional[DataTypeRef] = None

    kind = "function"


T = TypeVar("T")


@dataclass(frozen=True)
class Named(Generic[T]):
    """A declared name and its identity paired with the declaration payload."""
    id: Ident
    name: str
    entity: T

"""Session-scoped map from declaration identity to its emitted host name.

Entries are added once, as each declaration is emitted, and consulted when a
later declaration references an earlier one. A missing entry means the driver
broke dependency order; a repeated entry means a declaration was emitted
twice. Both are internal errors.
"""
from __future__ import annotations
from typing import Callable, Generic, Iterator, Optional, TypeVar, assert_never

from idlc.internals.errors import raise_internal_error
from idlc.semantics.typesys import AtomRef, AtomType, DataTypeRef, DefinedRef, Ident

T = TypeVar("T")


class DefinedRegistry(Generic[T]):
    """Resolves type references to a host representation.

    `T` is whatever the backend refers to types by: the token string for
    source backends, an `llvmlite.ir.Type` for the LLVM backend.
    """

    def __init__(self, atom_resolver: Callable[[AtomType], T]) -> None:
        self._atom_resolver = atom_resolver
        self._defined: dict[Ident, T] = {}
        self._names: dict[Ident, str] = {}

    def define(self, id: Ident, value: T, name: Optional[str] = None) -> T:
        """Record that `id` now resolves to `value`.

        Raises:
            InternalError: CE0001 if `id` was already defined.
        """
        if id in self._defined:
            raise_internal_error(
                "CE0001", name=name or id, id=id, existing=self._defined[id])
        self._defined[id] = value
        if name is not None:
            self._names[id] = name
        return value

    def resolve(self, ref: DataTypeRef,
                name_of: Optional[Callable[[Ident], str]] = None) -> T:
        """Resolve a reference to its host representation.

        Args:
            ref: Atom or defined reference.
            name_of: Maps an ident to its declared name for the error message.

        Raises:
            InternalError: CE0002 if a defined reference is not registered yet.
        """
        match ref:
            case AtomRef(atom=atom):
                return self._atom_resolver(atom)
            case DefinedRef(id=id):
                try:
                    return self._defined[id]
                except KeyError:
                    target = f"'{name_of(id)}' ({id})" if name_of is not None else str(id)
                    raise_internal_error("CE0002", target=target)
            case _:
                assert_never(ref)

    def get(self, id: Ident) -> Optional[T]:
        return self._defined.get(id)

    def declared_name(self, id: Ident) -> Optional[str]:
        return self._names.get(id)

    def __contains__(self, id: object) -> bool:
        return id in self._defined

    def __len__(self) -> int:
        return len(self._defined)

    def __iter__(self) -> Iterator[Ident]:
        return iter(self._defined)

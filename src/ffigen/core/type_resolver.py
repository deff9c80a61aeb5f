"""
Type Resolver - Map description type names to Dart FFI types
"""
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Set

from ..errors import InvalidArgumentError
from .models.ffi_types import ImportSpec, TypeEntry

logger = logging.getLogger(__name__)

FFI_IMPORT = ImportSpec('dart:ffi', prefix='ffi')

POINTER_MARKER = '*'
POINTER_TYPE = 'ffi.Pointer'
VOID_POINTER_KEY = '*void'


def _ffi(native: str, host: str) -> TypeEntry:
    return TypeEntry(native=native, host=host, import_spec=FFI_IMPORT)


# Lowercase description names to mappings
TYPE_MAP: Mapping[str, TypeEntry] = MappingProxyType({
    VOID_POINTER_KEY: _ffi(POINTER_TYPE, POINTER_TYPE),
    'void': _ffi('ffi.Void', 'void'),

    'intptr': _ffi('ffi.IntPtr', 'int'),
    # For convenience
    'size_t': _ffi('ffi.IntPtr', 'int'),

    'char': _ffi('ffi.Uint8', 'int'),
    'int8': _ffi('ffi.Int8', 'int'),
    'int16': _ffi('ffi.Int16', 'int'),
    'int32': _ffi('ffi.Int32', 'int'),
    'int64': _ffi('ffi.Int64', 'int'),
    'uint8': _ffi('ffi.Uint8', 'int'),
    'uint16': _ffi('ffi.Uint16', 'int'),
    'uint32': _ffi('ffi.Uint32', 'int'),
    'uint64': _ffi('ffi.Uint64', 'int'),
    'float': _ffi('ffi.Float', 'double'),
    'double': _ffi('ffi.Double', 'double'),
    'float32': _ffi('ffi.Float', 'double'),
    'float64': _ffi('ffi.Double', 'double'),
})


@dataclass(frozen=True)
class TypeExpression:
    """
    Parsed form of a description type name.

    Grammar::

        type := '*' type | base-name
    """
    base_name: str
    pointer_depth: int = 0

    @property
    def is_pointer(self) -> bool:
        return self.pointer_depth > 0

    @property
    def is_void_pointer(self) -> bool:
        return self.pointer_depth == 1 and self.base_name.lower() == 'void'

    @property
    def pointee(self) -> 'TypeExpression':
        """The type one pointer level down"""
        return TypeExpression(self.base_name, self.pointer_depth - 1)


def parse_type_expression(name: str) -> TypeExpression:
    """
    Parse a description type name into a TypeExpression.

    Examples:
        'int32'   --> TypeExpression('int32', 0)
        '**Point' --> TypeExpression('Point', 2)
    """
    if name.startswith(POINTER_MARKER):
        inner = parse_type_expression(name[len(POINTER_MARKER):])
        return TypeExpression(inner.base_name, inner.pointer_depth + 1)
    return TypeExpression(name)


class TypeResolver:
    """
    Resolve description type names to Dart types

    Handles:
    - Primitives: int32 → ffi.Int32 (native) / int (host)
    - Pointers: *uint8 → ffi.Pointer<ffi.Uint8>, **uint8 → ffi.Pointer<ffi.Pointer<ffi.Uint8>>
    - Opaque pointers: *void → ffi.Pointer
    - Anything else: passed through unchanged (struct and opaque names)

    Every table lookup registers the entry's import into ``imports``. The set
    belongs to the caller, so one resolver per generated file accumulates
    the imports that file needs.
    """

    TYPE_MAP: Mapping[str, TypeEntry] = TYPE_MAP

    def __init__(self, imports: Optional[Set[ImportSpec]] = None):
        self.imports: Set[ImportSpec] = imports if imports is not None else set()

    @classmethod
    def lookup(cls, name: str) -> Optional[TypeEntry]:
        """Case-insensitive table lookup, without side effects"""
        return cls.TYPE_MAP.get(name.lower())

    def resolve_host_type(self, name: str) -> str:
        """
        Convert a description type to the Dart type used in ordinary code.

        Examples:
            'Int32'     --> 'int'
            '*CFString' --> 'ffi.Pointer<CFString>'
            '*void'     --> 'ffi.Pointer'

        Raises:
            InvalidArgumentError: if name is None
        """
        if name is None:
            raise InvalidArgumentError('name')
        return self._render(parse_type_expression(name), native=False)

    def resolve_native_type(self, name: str) -> str:
        """
        Convert a description type to the Dart type used at the native call
        boundary.

        Examples:
            'Int32'     --> 'ffi.Int32'
            '*CFString' --> 'ffi.Pointer<CFString>'
            '*void'     --> 'ffi.Pointer'
            'void'      --> 'ffi.Void'

        Raises:
            InvalidArgumentError: if name is None
        """
        if name is None:
            raise InvalidArgumentError('name')
        return self._render(parse_type_expression(name), native=True)

    def resolve_annotation_type(self, name: Optional[str]) -> Optional[str]:
        """
        Native type usable as a struct field annotation.

        Pointers always give the untyped ``ffi.Pointer``. Names missing from
        the table give None, meaning no annotation should be written.
        """
        if name is None:
            return None
        if parse_type_expression(name).is_pointer:
            return POINTER_TYPE
        entry = self.lookup(name)
        if entry is None:
            return None
        return entry.native

    def _render(self, expression: TypeExpression, native: bool) -> str:
        if expression.is_void_pointer:
            return self._select(self.TYPE_MAP[VOID_POINTER_KEY], native)

        if expression.is_pointer:
            # Pointer type arguments are always native types
            inner = self._render(expression.pointee, native=True)
            return f"{POINTER_TYPE}<{inner}>"

        entry = self.lookup(expression.base_name)
        if entry is None:
            logger.debug(f"Type '{expression.base_name}' not in table, using it as-is")
            return expression.base_name
        return self._select(entry, native)

    def _select(self, entry: TypeEntry, native: bool) -> str:
        if entry.import_spec is not None:
            self.imports.add(entry.import_spec)
        return entry.native if native else entry.host

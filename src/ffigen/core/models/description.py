"""
Models describing a native library whose bindings are generated
"""
from dataclasses import dataclass, field
from typing import List, Optional

from .ffi_types import ImportSpec


@dataclass
class FieldDescription:
    """A struct field or function parameter"""
    name: str
    type_name: str


@dataclass
class StructDescription:
    """A C struct exposed as an ``ffi.Struct`` subclass"""
    name: str
    fields: List[FieldDescription] = field(default_factory=list)
    docs: Optional[str] = None


@dataclass
class FunctionDescription:
    """A C function looked up from the dynamic library"""
    name: str
    return_type: str = "void"
    parameters: List[FieldDescription] = field(default_factory=list)
    docs: Optional[str] = None


@dataclass
class OpaqueDescription:
    """A type only ever handled through pointers"""
    name: str
    docs: Optional[str] = None


@dataclass
class ConstantDescription:
    """A compile-time constant (``#define`` style)"""
    name: str
    type_name: str
    value: str


@dataclass
class LibraryDescription:
    """Everything needed to generate one bindings file"""
    name: str
    dynamic_library: Optional[str] = None
    preamble: Optional[str] = None
    library_identifier: Optional[str] = None
    parent_module: Optional[str] = None

    imports: List[ImportSpec] = field(default_factory=list)
    parts: List[str] = field(default_factory=list)

    # Declarations
    opaques: List[OpaqueDescription] = field(default_factory=list)
    structs: List[StructDescription] = field(default_factory=list)
    functions: List[FunctionDescription] = field(default_factory=list)
    constants: List[ConstantDescription] = field(default_factory=list)

    # Metadata
    source_path: str = ""

    @property
    def dynamic_library_path(self) -> str:
        """Path passed to ``DynamicLibrary.open``"""
        return self.dynamic_library or f"lib{self.name}.so"

    def get_all_declaration_names(self) -> List[str]:
        """Names of all declarations, in emission order"""
        names = [constant.name for constant in self.constants]
        names.extend(opaque.name for opaque in self.opaques)
        names.extend(struct.name for struct in self.structs)
        names.extend(func.name for func in self.functions)
        return names

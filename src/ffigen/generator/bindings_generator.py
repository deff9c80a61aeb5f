"""
Bindings Generator - Emit Dart FFI declarations for a library description
"""
import logging
from typing import List, Optional, Set

from ..core.models.description import (
    LibraryDescription,
    StructDescription,
    FunctionDescription,
    OpaqueDescription,
    ConstantDescription,
)
from ..core.models.generation_result import GenerationResult, GenerationIssueType
from ..core.source_assembler import SourceAssembler
from ..core.type_resolver import FFI_IMPORT, POINTER_TYPE

DEFAULT_PREAMBLE = "// AUTOMATICALLY GENERATED. DO NOT EDIT."
INDENT = "  "


class BindingsGenerator:
    """
    Generate a Dart bindings file from a LibraryDescription

    Emission order:
    1. Constants
    2. Opaque types
    3. Structs
    4. Dynamic library handle (only when functions exist)
    5. Functions (wrapper, lookup, native and Dart typedefs)
    """

    def __init__(self, preamble: Optional[str] = None):
        self.logger = logging.getLogger(__name__)
        self.preamble = preamble if preamble is not None else DEFAULT_PREAMBLE

    def generate(
        self,
        description: LibraryDescription,
        result: Optional[GenerationResult] = None
    ) -> str:
        """
        Generate the bindings source for one library

        Args:
            description: Library to generate
            result: Optional result that receives metrics and warnings

        Returns:
            Dart source code string
        """
        declarations = description.get_all_declaration_names()
        self.logger.info(f"Generating bindings for {description.name} ({len(declarations)} declarations)...")

        assembler = self.create_assembler(description)
        seen: Set[str] = set()

        for constant in description.constants:
            if self._claim(constant.name, seen, description, result):
                self._emit_constant(assembler, constant)
                if result is not None:
                    result.metrics.constants += 1

        for opaque in description.opaques:
            if self._claim(opaque.name, seen, description, result):
                self._emit_opaque(assembler, opaque)
                if result is not None:
                    result.metrics.opaques += 1

        for struct in description.structs:
            if self._claim(struct.name, seen, description, result):
                self._emit_struct(assembler, struct)
                if result is not None:
                    result.metrics.structs += 1

        functions = [
            func for func in description.functions
            if self._claim(func.name, seen, description, result)
        ]
        if functions:
            self._emit_dynamic_library(assembler, description)
            for func in functions:
                self._emit_function(assembler, func)
            if result is not None:
                result.metrics.functions += len(functions)

        source = assembler.render()
        if result is not None:
            result.metrics.imports = len(assembler.imports)
            result.metrics.lines_generated = len(source.splitlines())

        self.logger.info(f"✓ Generated {len(source.splitlines())} lines for {description.name}")
        return source

    def create_assembler(self, description: LibraryDescription) -> SourceAssembler:
        """Create the assembler for a description, with its header state filled in"""
        assembler = SourceAssembler(
            library_identifier=description.library_identifier,
            parent_module_identifier=description.parent_module,
            preamble_text=description.preamble if description.preamble is not None else self.preamble,
        )
        for spec in description.imports:
            assembler.register_import(spec)
        for part in description.parts:
            assembler.register_file_part(part)
        return assembler

    def _claim(
        self,
        name: str,
        seen: Set[str],
        description: LibraryDescription,
        result: Optional[GenerationResult]
    ) -> bool:
        """Reserve a declaration name; False if it was already emitted"""
        if name in seen:
            message = f"Declaration '{name}' already exists, skipping duplicate"
            self.logger.warning(message)
            if result is not None:
                result.add_issue(
                    GenerationIssueType.DUPLICATE_DECLARATION,
                    "warning",
                    message,
                    description.source_path or None
                )
            return False
        seen.add(name)
        return True

    def _emit_docs(self, assembler: SourceAssembler, docs: Optional[str]) -> None:
        if not docs:
            return
        for line in docs.strip().splitlines():
            assembler.append_text(f"/// {line.strip()}".rstrip() + "\n")

    def _emit_constant(self, assembler: SourceAssembler, constant: ConstantDescription) -> None:
        host_type = assembler.types.resolve_host_type(constant.type_name)
        assembler.append_text(f"const {host_type} {constant.name} = {constant.value};\n\n")

    def _emit_opaque(self, assembler: SourceAssembler, opaque: OpaqueDescription) -> None:
        assembler.register_import(FFI_IMPORT)
        self._emit_docs(assembler, opaque.docs)
        assembler.append_text(f"class {opaque.name} extends ffi.Opaque {{}}\n\n")

    def _emit_struct(self, assembler: SourceAssembler, struct: StructDescription) -> None:
        """
        Emit a struct as an ``ffi.Struct`` subclass.

        Fields whose annotation type is known and is not a pointer get an
        ``@ffi.X()`` annotation; pointer and nested struct fields carry their
        type in the field declaration alone.
        """
        assembler.register_import(FFI_IMPORT)
        self._emit_docs(assembler, struct.docs)
        assembler.append_text(f"class {struct.name} extends ffi.Struct {{\n")

        members: List[str] = []
        for member in struct.fields:
            lines = []
            annotation = assembler.types.resolve_annotation_type(member.type_name)
            if annotation is not None and annotation != POINTER_TYPE:
                lines.append(f"{INDENT}@{annotation}()\n")
            host_type = assembler.types.resolve_host_type(member.type_name)
            lines.append(f"{INDENT}external {host_type} {member.name};\n")
            members.append("".join(lines))

        assembler.append_all(members, separator="\n")
        assembler.append_text("}\n\n")

    def _emit_dynamic_library(self, assembler: SourceAssembler, description: LibraryDescription) -> None:
        assembler.register_import(FFI_IMPORT)
        path = description.dynamic_library_path
        assembler.append_text(
            f"final ffi.DynamicLibrary _dynamicLibrary = ffi.DynamicLibrary.open('{path}');\n\n"
        )

    def _emit_function(self, assembler: SourceAssembler, func: FunctionDescription) -> None:
        resolve_host = assembler.types.resolve_host_type
        resolve_native = assembler.types.resolve_native_type

        host_return = resolve_host(func.return_type)
        native_return = resolve_native(func.return_type)
        host_params = ", ".join(
            f"{resolve_host(param.type_name)} {param.name}" for param in func.parameters
        )
        native_params = ", ".join(
            f"{resolve_native(param.type_name)} {param.name}" for param in func.parameters
        )
        arguments = ", ".join(param.name for param in func.parameters)

        native_typedef = f"_{func.name}_C"
        dart_typedef = f"_{func.name}_Dart"

        self._emit_docs(assembler, func.docs)
        assembler.append_text(f"{host_return} {func.name}({host_params}) => _{func.name}({arguments});\n")
        assembler.append_text(
            f"final {dart_typedef} _{func.name} = _dynamicLibrary"
            f".lookupFunction<{native_typedef}, {dart_typedef}>('{func.name}');\n"
        )
        assembler.append_text(f"typedef {native_typedef} = {native_return} Function({native_params});\n")
        assembler.append_text(f"typedef {dart_typedef} = {host_return} Function({host_params});\n\n")

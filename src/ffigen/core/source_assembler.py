"""
Source Assembler - Accumulate declarations and render a Dart source file
"""
import logging
from typing import Iterable, List, Optional, Set, Tuple

from .models.ffi_types import ImportSpec
from .type_resolver import TypeResolver


class SourceAssembler:
    """
    Builder for one generated source file

    Declarations are appended to the body as they are produced, while
    imports and parts are collected into sets. ``render()`` projects the
    current state into the final text:

    1. Preamble
    2. ``library`` line (optional)
    3. ``partOf`` line (optional)
    4. Imports, sorted by (uri, prefix), followed by parts, sorted by name
    5. Body fragments, in append order

    The assembler is meant to be owned by a single generation pass.
    """

    def __init__(
        self,
        library_identifier: Optional[str] = None,
        parent_module_identifier: Optional[str] = None,
        preamble_text: str = ""
    ):
        self.logger = logging.getLogger(__name__)
        self.library_identifier = library_identifier
        self.parent_module_identifier = parent_module_identifier
        self.preamble_text = preamble_text
        self.imports: Set[ImportSpec] = set()
        self.file_parts: Set[str] = set()
        self._body: List[str] = []

        # Resolver sharing this file's import set
        self.types = TypeResolver(self.imports)

    @property
    def body(self) -> Tuple[str, ...]:
        """Fragments appended so far"""
        return tuple(self._body)

    def append_text(self, fragment: object) -> None:
        """Append one fragment to the body, as-is"""
        self._body.append(str(fragment))

    def append_all(self, fragments: Iterable[object], separator: str = "") -> None:
        """Append each fragment, with separator between consecutive fragments"""
        for index, fragment in enumerate(fragments):
            if index > 0 and separator:
                self.append_text(separator)
            self.append_text(fragment)

    def register_import(self, spec: ImportSpec) -> None:
        if spec not in self.imports:
            self.logger.debug(f"Registering import '{spec.uri}'")
        self.imports.add(spec)

    def register_file_part(self, name: str) -> None:
        self.file_parts.add(name)

    def render(self) -> str:
        """
        Render the complete source file.

        Returns:
            Source text; depends only on the current state
        """
        lines: List[str] = []
        lines.append(self.preamble_text or "")
        lines.append("\n")

        # Library name
        if self.library_identifier is not None:
            lines.append("\n")
            lines.append(f"library {self.library_identifier};\n")

        # Part of
        if self.parent_module_identifier is not None:
            lines.append("\n")
            lines.append(f"partOf {self.parent_module_identifier};\n")

        # Imports and parts
        if self.imports or self.file_parts:
            lines.append("\n")
            for spec in sorted(self.imports, key=lambda item: item.sort_key):
                lines.append(spec.to_directive() + "\n")
            for part in sorted(self.file_parts):
                lines.append(f"part '{part}';\n")

        # Content
        lines.append("\n")
        lines.extend(self._body)
        return "".join(lines)

    def __str__(self) -> str:
        return self.render()

"""
Description Loader - Read YAML library descriptions into models
"""
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from ..core.models.description import (
    LibraryDescription,
    StructDescription,
    FunctionDescription,
    FieldDescription,
    OpaqueDescription,
    ConstantDescription,
)
from ..core.models.ffi_types import ImportSpec
from ..errors import DescriptionError

DESCRIPTION_SUFFIXES = ('.yaml', '.yml')


class DescriptionLoader:
    """
    Load library descriptions from YAML

    Example document::

        name: mylib
        dynamic_library: libmylib.so
        structs:
          Point:
            fields: {x: int32, y: int32}
        functions:
          add:
            returns: int32
            parameters: {a: int32, b: int32}

    Pointer types must be quoted ("*uint8"), a bare leading '*' is a
    YAML alias.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def find_description_files(self, path: str) -> List[Path]:
        """
        Find description files

        Args:
            path: A description file or a directory containing them

        Returns:
            Sorted list of description file paths
        """
        root = Path(path)
        if root.is_file():
            return [root]
        files = sorted(
            p for p in root.rglob('*')
            if p.is_file() and p.suffix.lower() in DESCRIPTION_SUFFIXES
        )
        self.logger.debug(f"Found {len(files)} description files under {root}")
        return files

    def load_file(self, path: Path) -> LibraryDescription:
        """Load and parse one description file"""
        source = str(path)
        try:
            text = Path(path).read_text(encoding='utf-8')
        except OSError as e:
            raise DescriptionError(source, f"cannot read file: {e}") from e

        description = self.load_string(text, source=source)
        description.source_path = source
        return description

    def load_string(self, text: str, source: str = "<string>") -> LibraryDescription:
        """Parse a description from YAML text"""
        try:
            document = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise DescriptionError(source, f"invalid YAML: {e}") from e

        if not isinstance(document, dict):
            raise DescriptionError(source, "description must be a mapping")

        return self.parse(document, source=source)

    def parse(self, document: Dict[str, Any], source: str = "<string>") -> LibraryDescription:
        """
        Build a LibraryDescription from an already-parsed document

        Args:
            document: Mapping as produced by ``yaml.safe_load``
            source: Name used in error messages

        Returns:
            LibraryDescription
        """
        name = document.get('name')
        if not name or not isinstance(name, str):
            raise DescriptionError(source, "missing library name", key='name')

        description = LibraryDescription(
            name=name,
            dynamic_library=self._optional_str(document, 'dynamic_library', source),
            preamble=self._optional_str(document, 'preamble', source),
            library_identifier=self._optional_str(document, 'library', source),
            parent_module=self._optional_str(document, 'part_of', source),
            source_path=source,
        )

        description.imports = self._parse_imports(document.get('imports'), source)
        description.parts = [
            str(part) for part in self._as_list(document.get('parts'), 'parts', source)
        ]
        description.opaques = self._parse_opaques(document.get('opaque'), source)
        description.constants = self._parse_constants(document.get('constants'), source)
        description.structs = self._parse_structs(document.get('structs'), source)
        description.functions = self._parse_functions(document.get('functions'), source)

        self.logger.debug(
            f"Parsed {name}: {len(description.structs)} structs, "
            f"{len(description.functions)} functions, {len(description.constants)} constants"
        )
        return description

    def _parse_imports(self, raw: Any, source: str) -> List[ImportSpec]:
        imports = []
        for item in self._as_list(raw, 'imports', source):
            if isinstance(item, str):
                imports.append(ImportSpec(item))
                continue
            if not isinstance(item, dict) or 'uri' not in item:
                raise DescriptionError(source, "import needs a 'uri'", key='imports')
            imports.append(ImportSpec(
                uri=str(item['uri']),
                prefix=item.get('prefix'),
                show=item.get('show'),
                hide=item.get('hide'),
            ))
        return imports

    def _parse_opaques(self, raw: Any, source: str) -> List[OpaqueDescription]:
        """Accepts a list of names or a mapping of name to {docs: ...}"""
        if isinstance(raw, dict):
            opaques = []
            for name, body in self._named_items(raw, 'opaque', source):
                key = f"opaque.{name}"
                body = body or {}
                if not isinstance(body, dict):
                    raise DescriptionError(source, "opaque type must be a mapping", key=key)
                opaques.append(OpaqueDescription(
                    name=name,
                    docs=self._optional_str(body, 'docs', source, path=f"{key}.docs"),
                ))
            return opaques

        opaques = []
        for name in self._as_list(raw, 'opaque', source):
            if not isinstance(name, str):
                raise DescriptionError(source, "expected a name", key=f"opaque.{name}")
            opaques.append(OpaqueDescription(name=name))
        return opaques

    def _parse_constants(self, raw: Any, source: str) -> List[ConstantDescription]:
        constants = []
        for name, body in self._named_items(raw, 'constants', source):
            key = f"constants.{name}"
            if not isinstance(body, dict) or 'value' not in body:
                raise DescriptionError(source, "constant needs a 'value'", key=key)
            constants.append(ConstantDescription(
                name=name,
                type_name=str(body.get('type', 'int64')),
                value=str(body['value']),
            ))
        return constants

    def _parse_structs(self, raw: Any, source: str) -> List[StructDescription]:
        structs = []
        for name, body in self._named_items(raw, 'structs', source):
            key = f"structs.{name}"
            body = body or {}
            if not isinstance(body, dict):
                raise DescriptionError(source, "struct must be a mapping", key=key)
            structs.append(StructDescription(
                name=name,
                fields=self._parse_fields(body.get('fields'), f"{key}.fields", source),
                docs=self._optional_str(body, 'docs', source, path=f"{key}.docs"),
            ))
        return structs

    def _parse_functions(self, raw: Any, source: str) -> List[FunctionDescription]:
        functions = []
        for name, body in self._named_items(raw, 'functions', source):
            key = f"functions.{name}"
            body = body or {}
            if not isinstance(body, dict):
                raise DescriptionError(source, "function must be a mapping", key=key)
            functions.append(FunctionDescription(
                name=name,
                return_type=str(body.get('returns') or 'void'),
                parameters=self._parse_fields(body.get('parameters'), f"{key}.parameters", source),
                docs=self._optional_str(body, 'docs', source, path=f"{key}.docs"),
            ))
        return functions

    def _parse_fields(self, raw: Any, key: str, source: str) -> List[FieldDescription]:
        fields = []
        for name, type_name in self._named_items(raw, key, source):
            if type_name is None:
                raise DescriptionError(source, "missing type", key=f"{key}.{name}")
            fields.append(FieldDescription(name=name, type_name=str(type_name)))
        return fields

    def _named_items(self, raw: Any, key: str, source: str) -> List[Tuple[str, Any]]:
        """
        Items of a name-keyed mapping section.

        YAML 1.1 reads unquoted keys such as `on`, `off`, `yes` or `1` as
        booleans or numbers; those must be quoted to be used as names.
        """
        items = []
        for name, body in self._as_mapping(raw, key, source).items():
            if not isinstance(name, str):
                raise DescriptionError(
                    source, f"name {name!r} is not a string, quote it", key=f"{key}.{name}"
                )
            items.append((name, body))
        return items

    @staticmethod
    def _as_mapping(raw: Any, key: str, source: str) -> Dict[Any, Any]:
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            raise DescriptionError(source, "expected a mapping", key=key)
        return raw

    @staticmethod
    def _as_list(raw: Any, key: str, source: str) -> List[Any]:
        if raw is None:
            return []
        if not isinstance(raw, list):
            raise DescriptionError(source, "expected a list", key=key)
        return raw

    @staticmethod
    def _optional_str(
        document: Dict[str, Any],
        key: str,
        source: str,
        path: Optional[str] = None
    ) -> Optional[str]:
        value = document.get(key)
        if value is None:
            return None
        if not isinstance(value, str):
            raise DescriptionError(source, "expected a string", key=path or key)
        return value

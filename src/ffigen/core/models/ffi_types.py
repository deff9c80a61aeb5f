"""
FFI type models - table entries and import references
"""
from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class ImportSpec:
    """
    An import directive required by the generated file.

    Identity is the ``(uri, prefix)`` pair: two imports of the same uri under
    different prefixes are distinct, while ``show``/``hide`` do not take part
    in equality or hashing.
    """
    uri: str
    prefix: Optional[str] = None
    show: Optional[str] = field(default=None, compare=False)
    hide: Optional[str] = field(default=None, compare=False)

    @property
    def sort_key(self) -> Tuple[str, str]:
        """Ordering key; a missing prefix sorts before any prefix"""
        return (self.uri, self.prefix or '')

    def to_directive(self) -> str:
        """Render as a single import line (without trailing newline)"""
        directive = f"import '{self.uri}'"
        if self.prefix is not None:
            directive += f" as {self.prefix}"
        if self.show is not None:
            directive += f" show {self.show}"
        if self.hide is not None:
            directive += f" hide {self.hide}"
        return directive + ";"


@dataclass(frozen=True)
class TypeEntry:
    """Mapping of one abstract type name to its native and host spellings"""
    native: str
    host: str
    import_spec: Optional[ImportSpec] = None

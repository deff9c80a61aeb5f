from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path

SRC_DIR = Path(__file__).resolve().parent.parent / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

import pytest

from ffigen.core.models.description import (
    FieldDescription,
    FunctionDescription,
    LibraryDescription,
    StructDescription,
)
from ffigen.core.source_assembler import SourceAssembler
from ffigen.core.type_resolver import TypeResolver
from ffigen.generator.description_loader import DescriptionLoader


GEOMETRY_YAML = """\
name: geometry
dynamic_library: libgeometry.so
preamble: "// generated"
structs:
  Point:
    fields:
      x: int32
      y: int32
functions:
  distance:
    returns: double
    parameters:
      a: "*Point"
      b: "*Point"
"""


@pytest.fixture
def geometry_yaml() -> str:
    return GEOMETRY_YAML


@pytest.fixture
def resolver() -> TypeResolver:
    return TypeResolver()


@pytest.fixture
def assembler() -> SourceAssembler:
    return SourceAssembler()


@pytest.fixture
def loader() -> DescriptionLoader:
    return DescriptionLoader()


@pytest.fixture
def make_struct() -> Callable[..., StructDescription]:
    def _make_struct(name: str, **fields: str) -> StructDescription:
        return StructDescription(
            name=name,
            fields=[FieldDescription(field_name, type_name) for field_name, type_name in fields.items()],
        )

    return _make_struct


@pytest.fixture
def make_function() -> Callable[..., FunctionDescription]:
    def _make_function(name: str, return_type: str = "void", **parameters: str) -> FunctionDescription:
        return FunctionDescription(
            name=name,
            return_type=return_type,
            parameters=[FieldDescription(param_name, type_name) for param_name, type_name in parameters.items()],
        )

    return _make_function


@pytest.fixture
def make_library() -> Callable[..., LibraryDescription]:
    def _make_library(name: str = "geometry", **overrides: object) -> LibraryDescription:
        base: dict[str, object] = {"preamble": "// generated"}
        base.update(overrides)
        return LibraryDescription(name=name, **base)

    return _make_library


@pytest.fixture
def write_description(tmp_path: Path) -> Callable[[str, str], Path]:
    def _write_description(filename: str, text: str) -> Path:
        path = tmp_path / "descriptions" / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write_description

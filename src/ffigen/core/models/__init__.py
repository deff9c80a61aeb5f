"""Core models"""
from .ffi_types import ImportSpec, TypeEntry
from .description import (
    LibraryDescription,
    StructDescription,
    FunctionDescription,
    FieldDescription,
    OpaqueDescription,
    ConstantDescription,
)
from .generation_result import (
    GenerationResult,
    GenerationReport,
    GenerationStatus,
    GenerationIssueType,
)

__all__ = [
    'ImportSpec',
    'TypeEntry',
    'LibraryDescription',
    'StructDescription',
    'FunctionDescription',
    'FieldDescription',
    'OpaqueDescription',
    'ConstantDescription',
    'GenerationResult',
    'GenerationReport',
    'GenerationStatus',
    'GenerationIssueType',
]

"""
Core - type resolution and source assembly
"""
from .type_resolver import TypeResolver, TypeExpression, parse_type_expression, TYPE_MAP
from .source_assembler import SourceAssembler

__all__ = [
    'TypeResolver',
    'TypeExpression',
    'parse_type_expression',
    'TYPE_MAP',
    'SourceAssembler',
]

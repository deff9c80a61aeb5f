"""
Generator Layer - Turn library descriptions into Dart bindings
"""
from .bindings_generator import BindingsGenerator
from .description_loader import DescriptionLoader

__all__ = ['BindingsGenerator', 'DescriptionLoader']

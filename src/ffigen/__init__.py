"""
ffigen - Generate Dart FFI bindings from YAML library descriptions
"""

__version__ = "1.0.0"

#!/usr/bin/env python3
"""
ffigen - Main Entry Point
"""
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from ffigen.cli import cli


if __name__ == '__main__':
    cli()

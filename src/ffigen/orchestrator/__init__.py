"""
Orchestrator Layer - Run generation over description files
"""
from .generation_orchestrator import GenerationOrchestrator

__all__ = ['GenerationOrchestrator']

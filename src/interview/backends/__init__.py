"""Backends for interview output generation (Mermaid diagrams)."""

from .mermaid import DiagramMode, generate_mermaid, save_mermaid_file

__all__ = ["DiagramMode", "generate_mermaid", "save_mermaid_file"]

"""DXM Converter Data Models

This package contains Pydantic models for DLM payloads, OBJ meshes and export settings.
"""

__all__ = [
    "dxm",
    "mesh",
    "transform",
    "summary",
]

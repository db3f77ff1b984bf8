"""DXM Converter

Converts DXM/DLM 3D models to Wavefront OBJ, with a command-line interface
and an MCP server.
"""

__version__ = "1.0.0"

__all__ = [
    "cli",
    "config",
    "converter",
    "server",
]

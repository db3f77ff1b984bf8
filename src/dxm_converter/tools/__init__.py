"""DXM Converter Tools

This package contains the MCP tool implementations for model conversion.
"""

__all__ = [
    "model_tools",
]

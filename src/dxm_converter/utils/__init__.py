"""DXM Converter Utilities

This package contains utility modules for the DXM converter.
"""

__all__ = [
    "binary",
    "errors",
    "number_format",
]

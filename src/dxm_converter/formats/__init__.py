"""DXM Converter File Formats

This package contains the DLM reader, the DXM optimizer and the OBJ reader/writer.
"""

__all__ = [
    "dlm_loader",
    "optimizer",
    "dxm_mesh",
    "obj_loader",
    "obj_exporter",
]

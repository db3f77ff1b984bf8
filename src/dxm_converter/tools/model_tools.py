"""DXM Converter - Model Tools

This module contains the MCP tool implementations:
- Model inspection
- Conversion to OBJ with rotation/mirroring
- Listing convertible models in a folder
"""
from typing import Optional, Dict, Any, List
import logging
from pathlib import Path

from mcp.server.fastmcp import Context
from ..converter import MODEL_EXTENSIONS
from ..models.transform import Transform
from ..utils.errors import ModelNotFoundError

logger = logging.getLogger(__name__)


async def dxm_inspect_model(
    ctx: Context,
    path: str
) -> Dict[str, Any]:
    """Load a model and report its statistics.

    Args:
        ctx: MCP context with the model converter
        path: Path to a .dlm, .dxm or .obj file

    Returns:
        Model summary (counts, groups, materials and, for DLM, header info)
    """
    logger.info(f"Inspecting model: path='{path}'")
    converter = ctx.request_context.lifespan_context["converter"]

    summary = converter.inspect(path)
    return summary.model_dump()


async def dxm_convert_model(
    ctx: Context,
    path: str,
    output_dir: Optional[str] = None,
    name: Optional[str] = None,
    rot_x: float = 0.0,
    rot_y: float = 0.0,
    rot_z: float = 0.0,
    flip_x: bool = False,
    flip_y: bool = False,
    flip_z: bool = False
) -> Dict[str, Any]:
    """Convert a model to OBJ/MTL.

    Args:
        ctx: MCP context with the model converter
        path: Path to a .dlm, .dxm or .obj file
        output_dir: Destination folder (default: DXM_EXPORT_DIR)
        name: Output base name (default: input file name)
        rot_x: Rotation about X in degrees, -180..180
        rot_y: Rotation about Y in degrees, -180..180
        rot_z: Rotation about Z in degrees, -180..180
        flip_x: Mirror along X
        flip_y: Mirror along Y
        flip_z: Mirror along Z

    Returns:
        Written file paths and mesh statistics

    Raises:
        pydantic.ValidationError: If a rotation is outside -180..180
        DXMError: If the model cannot be loaded or written
    """
    logger.info(f"Converting model: path='{path}', output_dir={output_dir}, name={name}")
    converter = ctx.request_context.lifespan_context["converter"]

    transform = Transform(
        rot_x=rot_x, rot_y=rot_y, rot_z=rot_z,
        flip_x=flip_x, flip_y=flip_y, flip_z=flip_z
    )
    logger.debug(f"Export pose: {transform.model_dump()}")

    result = converter.export(path, transform=transform, output_dir=output_dir, name=name)
    return result.model_dump()


async def dxm_list_models(
    ctx: Context,
    folder: str
) -> List[str]:
    """List convertible model files in a folder (non-recursive).

    Args:
        ctx: MCP context
        folder: Folder to scan

    Returns:
        Sorted paths of .dlm, .dxm and .obj files
    """
    logger.info(f"Listing models in: {folder}")
    root = Path(folder)
    if not root.is_dir():
        raise ModelNotFoundError(f"Folder not found: {folder}", details={"folder": folder})

    return sorted(
        str(p) for p in root.iterdir()
        if p.is_file() and p.suffix.lower() in MODEL_EXTENSIONS
    )

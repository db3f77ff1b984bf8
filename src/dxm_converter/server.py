from contextlib import asynccontextmanager
from collections.abc import AsyncIterator
import logging

from mcp.server.fastmcp import FastMCP, Context
from .config import ConverterConfig
from .converter import ModelConverter
from .tools import model_tools

config = ConverterConfig.from_env()

# Configure basic logging FIRST
logging.basicConfig(level=config.log_level, format='%(asctime)s - SERVER - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


@asynccontextmanager
async def converter_lifespan(server: FastMCP) -> AsyncIterator[dict]:
    """
    Manages the ModelConverter lifecycle, building it once from the
    environment configuration.
    """
    try:
        converter = ModelConverter(config)
        logger.info(f"Model converter ready (export folder: {config.export_dir})")
        yield {"converter": converter}
    except Exception as e:
        logger.error(f"Failed to initialize model converter: {e}")
        raise
    finally:
        logger.info("Converter lifespan context manager exiting.")


# Instantiate the FastMCP server with the lifespan manager
mcp = FastMCP(
    "DXM Converter Server",
    lifespan=converter_lifespan,
)

# --- Tool Implementations ---

@mcp.tool()
async def dxm_inspect_model(path: str, ctx: Context) -> dict:
    """
    Loads a .dlm, .dxm or .obj model and reports its statistics.

    Args:
        path: Path to the model file.

    Returns:
        A dictionary with vertex/normal/uv/face counts, groups, materials
        and, for DLM models, the header version and vertex composition.

    Raises:
        DXMError: If the model cannot be read.
    """
    return await model_tools.dxm_inspect_model(ctx, path)


@mcp.tool()
async def dxm_convert_model(
    path: str,
    ctx: Context,
    output_dir: str | None = None,
    name: str | None = None,
    rot_x: float = 0.0,
    rot_y: float = 0.0,
    rot_z: float = 0.0,
    flip_x: bool = False,
    flip_y: bool = False,
    flip_z: bool = False
) -> dict:
    """Convert a model to Wavefront OBJ/MTL.

    Args:
        path: Path to a .dlm, .dxm or .obj file
        output_dir: Destination folder (default: DXM_EXPORT_DIR or ./)
        name: Output base name (default: input file name without extension)
        rot_x: Rotation about X in degrees (-180..180)
        rot_y: Rotation about Y in degrees (-180..180)
        rot_z: Rotation about Z in degrees (-180..180)
        flip_x: Mirror along X
        flip_y: Mirror along Y
        flip_z: Mirror along Z
        ctx: MCP context

    Returns:
        Paths of the written files and mesh statistics
    """
    return await model_tools.dxm_convert_model(
        ctx, path,
        output_dir=output_dir, name=name,
        rot_x=rot_x, rot_y=rot_y, rot_z=rot_z,
        flip_x=flip_x, flip_y=flip_y, flip_z=flip_z
    )


@mcp.tool()
async def dxm_list_models(folder: str, ctx: Context) -> list[str]:
    """List .dlm, .dxm and .obj files in a folder.

    Args:
        folder: Folder to scan (not recursive)
        ctx: MCP context

    Returns:
        Sorted list of model file paths
    """
    return await model_tools.dxm_list_models(ctx, folder)


def main():
    """Entry point for the dxm-converter-mcp script."""
    logger.info("Starting DXM converter MCP server...")
    mcp.run()

if __name__ == "__main__":
    # This allows running the server directly with `python -m dxm_converter.server`
    main()

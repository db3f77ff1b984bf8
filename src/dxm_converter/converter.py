"""Model Converter

Facade over the format modules used by both the CLI and the MCP server:
- Extension based dispatch (.dlm/.dxm vs .obj)
- Standardized error handling
- Default export folder and texture lookup from configuration
"""

import logging
from pathlib import Path
from typing import Optional, Tuple, Union

from .config import ConverterConfig
from .formats.dlm_loader import load_dxm, resolve_payload_path
from .formats.dxm_mesh import convert_dxm_to_obj
from .formats.obj_exporter import export_obj
from .formats.obj_loader import load_obj
from .formats.optimizer import optimize_dxm_model
from .models.dxm import DXMModel
from .models.mesh import Mesh
from .models.summary import ExportResult, MaterialSummary, ModelSummary
from .models.transform import Transform
from .utils.errors import (
    ConversionError,
    ModelNotFoundError,
    UnsupportedFormatError,
    handle_load_error,
)

logger = logging.getLogger(__name__)

DXM_EXTENSIONS = (".dlm", ".dxm")
OBJ_EXTENSIONS = (".obj",)
MODEL_EXTENSIONS = DXM_EXTENSIONS + OBJ_EXTENSIONS


def model_name(path: Union[str, Path]) -> str:
    """File name without directory and extension, used as the export name."""
    return Path(str(path).replace("\\", "/")).stem


class ModelConverter:
    """Loads DLM/OBJ models and exports them as OBJ.

    All failures surface as ``DXMError`` subclasses:
    - Format problems keep their specific type
    - OS errors are mapped by ``handle_load_error``
    """

    def __init__(self, config: Optional[ConverterConfig] = None):
        """Initialize converter.

        Args:
            config: Settings, read from the environment when omitted
        """
        self.config = config or ConverterConfig.from_env()
        logger.debug(f"Converter export folder: {self.config.export_dir}")

    def _check_path(self, path: Path) -> str:
        """Return the lower-case extension, validating the file exists."""
        suffix = path.suffix.lower()
        if suffix not in MODEL_EXTENSIONS:
            raise UnsupportedFormatError(
                "Invalid file, must be .dlm or .obj",
                details={"path": str(path)}
            )
        # a .dxm only needs its .dlm, resolve_payload_path reports that case
        if suffix != ".dxm" and not path.exists():
            raise ModelNotFoundError(f"Model file not found: {path}", details={"path": str(path)})
        return suffix

    def _load(self, path: Union[str, Path]) -> Tuple[Mesh, Optional[DXMModel]]:
        path = Path(path)
        suffix = self._check_path(path)
        try:
            if suffix in OBJ_EXTENSIONS:
                return load_obj(path), None

            dxm = load_dxm(path)
            optimize_dxm_model(dxm)
            mesh = convert_dxm_to_obj(dxm, resolve_payload_path(path), self.config.texture_dir)
            return mesh, dxm
        except Exception as e:
            error = handle_load_error(str(path), e)
            if error is not e:
                logger.error(f"Failed to load model {path}: {e}")
                raise error from e
            raise

    def load(self, path: Union[str, Path]) -> Mesh:
        """Load any supported model into an OBJ mesh.

        Raises:
            UnsupportedFormatError: Unknown extension or unsupported DLM features
            ModelNotFoundError: Input file missing
            DXMError: Any other loading failure
        """
        mesh, _ = self._load(path)
        return mesh

    def inspect(self, path: Union[str, Path]) -> ModelSummary:
        """Load a model and summarize its contents."""
        mesh, dxm = self._load(path)
        summary = ModelSummary(
            path=str(path),
            format="obj" if dxm is None else "dlm",
            vertex_count=len(mesh.vertices),
            normal_count=len(mesh.normals),
            uv_count=len(mesh.uvs),
            face_count=mesh.face_count,
            groups=[g.name for g in mesh.groups],
            materials=[MaterialSummary(name=m.name, albedo=m.albedo) for m in mesh.materials.values()],
        )
        if dxm is not None:
            header = dxm.header
            summary.version = f"{header.major_version}.{header.minor_version}"
            summary.vertex_composition = "point_cloud" if header.is_point_cloud else "mesh"
            summary.index_byte_count = header.index_byte_count
        return summary

    def export(
        self,
        path: Union[str, Path],
        transform: Optional[Transform] = None,
        output_dir: Optional[Union[str, Path]] = None,
        name: Optional[str] = None
    ) -> ExportResult:
        """Load a model and write it as OBJ/MTL.

        Args:
            path: Model to convert
            transform: Pose applied on export (identity when None)
            output_dir: Destination folder (default: configured export folder)
            name: Output base name (default: model file name without extension)

        Returns:
            Paths written and mesh statistics
        """
        mesh = self.load(path)
        return self.export_mesh(mesh, path, transform, output_dir, name)

    def export_mesh(
        self,
        mesh: Mesh,
        path: Union[str, Path],
        transform: Optional[Transform] = None,
        output_dir: Optional[Union[str, Path]] = None,
        name: Optional[str] = None
    ) -> ExportResult:
        """Write an already loaded mesh; ``path`` is the file it came from."""
        folder = Path(output_dir) if output_dir is not None else self.config.export_dir
        name = name or model_name(path)
        try:
            result = export_obj(name, mesh, transform, folder)
        except Exception as e:
            logger.error(f"Failed to export model {path}: {e}")
            raise ConversionError(
                f"Failed to export model: {e}",
                details={"path": str(path), "folder": str(folder)}
            ) from e
        logger.info(f"Model exported to {result.obj_path}")
        return result

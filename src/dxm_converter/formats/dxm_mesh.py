"""DXM to OBJ Mesh Conversion"""
import logging
from pathlib import Path
from typing import List, Optional, Union

from ..models.dxm import DXMModel
from ..models.mesh import Face, Group, Material, Mesh
from ..utils.errors import InvalidFormatError

logger = logging.getLogger(__name__)


def _parse(entries: Optional[List[str]]) -> list:
    if not entries:
        return []
    return [tuple(float(c) for c in entry.split(" ")) for entry in entries]


def texture_name(texture: str) -> str:
    """Strip any Windows or POSIX directory part from a stored texture path."""
    texture = texture.replace("\\", "/")
    return texture[texture.rfind("/") + 1:]


def find_texture(folder: Path, texture: str, texture_dir: str = "Textures") -> Optional[Path]:
    """Look for a texture beside the model, then in its texture sub-folder."""
    for candidate in (folder / texture, folder / texture_dir / texture):
        if candidate.is_file():
            return candidate
    return None


def convert_dxm_to_obj(
    model: DXMModel,
    path: Union[str, Path],
    texture_dir: str = "Textures"
) -> Mesh:
    """Build an OBJ mesh from an optimized DXM model.

    Groups without a texture are skipped. Each remaining group gets a material
    named after its texture file.

    Args:
        model: Model already passed through ``optimize_dxm_model``
        path: Path the model was loaded from, used to locate textures
        texture_dir: Fallback folder name for textures

    Returns:
        Mesh with triangle faces

    Raises:
        InvalidFormatError: If the model was not optimized
    """
    if model.v is None:
        raise InvalidFormatError("Model must be optimized before conversion")

    mesh = Mesh(
        vertices=_parse(model.v),
        normals=_parse(model.vn),
        uvs=_parse(model.vt),
    )
    normals = model.vn is not None
    uvs = model.vt is not None

    folder = Path(path).parent
    for index, dxm_group in enumerate(model.groups):
        if dxm_group.texture is None:
            if dxm_group.vi:
                logger.warning(f"Skipping group {index} without texture ({len(dxm_group.vi) // 3} faces)")
            continue

        name = texture_name(dxm_group.texture)
        albedo = find_texture(folder, name, texture_dir)
        if albedo is None:
            logger.warning(f"Texture '{name}' not found next to {path}")

        mesh.materials[name] = Material(name=name, albedo=str(albedo) if albedo else None)
        group = Group(name=name, material=name)
        mesh.groups.append(group)

        if dxm_group.vi is None:
            continue

        corners = len(dxm_group.vi) - len(dxm_group.vi) % 3
        for i in range(0, corners, 3):
            group.faces.append(Face(
                vertices=dxm_group.vi[i:i + 3],
                uvs=dxm_group.ti[i:i + 3] if uvs else [],
                normals=dxm_group.ni[i:i + 3] if normals else [],
            ))

    return mesh

"""Wavefront OBJ/MTL Exporter

Writes a mesh as ``<name>.obj`` plus ``<name>.mtl`` with the export pose
applied to positions and normals.
"""
import logging
import os
from pathlib import Path
from typing import List, Optional, TextIO, Union

import numpy as np

from ..models.mesh import Face, Mesh
from ..models.summary import ExportResult
from ..models.transform import Transform
from ..utils.number_format import format_vector

logger = logging.getLogger(__name__)

HEADER = "# Exported by dxm-converter"


def format_face(face: Face, reverse: bool = False) -> str:
    """Render a face as an ``f`` statement with 1-based indices.

    The corner form follows the attributes the face carries:
    ``v/vt/vn``, ``v//vn``, ``v/vt`` or ``v``.
    """
    order = range(len(face.vertices))
    if reverse:
        # keep the first corner, reverse the rest
        order = [0] + list(range(len(face.vertices) - 1, 0, -1))

    corners = []
    for i in order:
        v = face.vertices[i] + 1
        vt = face.uvs[i] + 1 if face.uvs else None
        vn = face.normals[i] + 1 if face.normals else None
        if vt is not None and vn is not None:
            corners.append(f"{v}/{vt}/{vn}")
        elif vn is not None:
            corners.append(f"{v}//{vn}")
        elif vt is not None:
            corners.append(f"{v}/{vt}")
        else:
            corners.append(f"{v}")
    return "f " + " ".join(corners)


def transform_points(points: List[tuple], matrix: np.ndarray) -> np.ndarray:
    if not points:
        return np.zeros((0, 3))
    # adding 0.0 turns -0.0 into 0.0
    return np.asarray(points, dtype=np.float64) @ matrix.T + 0.0


def transform_normals(normals: List[tuple], matrix: np.ndarray) -> np.ndarray:
    """Apply the normal matrix and re-normalize; zero normals stay zero."""
    result = transform_points(normals, matrix)
    lengths = np.linalg.norm(result, axis=1, keepdims=True)
    np.divide(result, lengths, out=result, where=lengths > 0)
    return result


def _relative_texture(albedo: str, folder: Path) -> str:
    try:
        return Path(os.path.relpath(albedo, folder)).as_posix()
    except ValueError:
        # different drive on Windows
        return Path(albedo).as_posix()


def write_mtl(stream: TextIO, mesh: Mesh, folder: Path) -> None:
    stream.write(HEADER + "\n")
    for material in mesh.materials.values():
        stream.write(f"\nnewmtl {material.name}\n")
        stream.write("Kd 1 1 1\n")
        if material.albedo:
            stream.write(f"map_Kd {_relative_texture(material.albedo, folder)}\n")


def write_obj(
    stream: TextIO,
    mesh: Mesh,
    pose: Optional[Transform] = None,
    mtl_name: Optional[str] = None
) -> None:
    """Write OBJ statements for ``mesh`` to ``stream``."""
    pose = pose or Transform()

    stream.write(HEADER + "\n")
    if mtl_name:
        stream.write(f"mtllib {mtl_name}\n")

    if pose.is_identity:
        vertices, normals = mesh.vertices, mesh.normals
    else:
        vertices = transform_points(mesh.vertices, pose.matrix())
        normals = transform_normals(mesh.normals, pose.normal_matrix())

    for v in vertices:
        stream.write(f"v {format_vector(v)}\n")
    for vt in mesh.uvs:
        stream.write(f"vt {format_vector(vt)}\n")
    for vn in normals:
        stream.write(f"vn {format_vector(vn)}\n")

    reverse = pose.mirrors
    for group in mesh.groups:
        stream.write(f"\ng {group.name}\n")
        if group.material:
            stream.write(f"usemtl {group.material}\n")
        for face in group.faces:
            stream.write(format_face(face, reverse) + "\n")


def export_obj(
    name: str,
    mesh: Mesh,
    pose: Optional[Transform],
    folder: Union[str, Path]
) -> ExportResult:
    """Export ``mesh`` to ``<folder>/<name>.obj`` (and ``.mtl``).

    Args:
        name: Base file name without extension
        mesh: Mesh to write
        pose: Rotation/mirroring to apply, identity when None
        folder: Destination folder, created if missing

    Returns:
        Paths written and mesh statistics
    """
    folder = Path(folder)
    folder.mkdir(parents=True, exist_ok=True)

    obj_path = folder / f"{name}.obj"
    mtl_path = folder / f"{name}.mtl" if mesh.materials else None
    logger.info(f"Exporting {obj_path}")

    if mtl_path is not None:
        with open(mtl_path, "w", encoding="utf-8", newline="\n") as f:
            write_mtl(f, mesh, folder)

    with open(obj_path, "w", encoding="utf-8", newline="\n") as f:
        write_obj(f, mesh, pose, mtl_path.name if mtl_path else None)

    return ExportResult(
        obj_path=str(obj_path),
        mtl_path=str(mtl_path) if mtl_path else None,
        vertex_count=len(mesh.vertices),
        face_count=mesh.face_count,
        group_count=len(mesh.groups),
    )

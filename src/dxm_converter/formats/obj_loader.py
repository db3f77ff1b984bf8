"""Wavefront OBJ/MTL Loader

Reads positions, texture coordinates, normals, groups, materials and polygon
faces. Statements the exporter has no use for (smoothing groups, lines,
free-form geometry) are ignored.
"""
import logging
import re
from pathlib import Path
from typing import Dict, List, Optional, Union

from ..models.mesh import Face, Group, Material, Mesh
from ..utils.errors import InvalidFormatError

logger = logging.getLogger(__name__)

DEFAULT_GROUP = "default"

# texture map options and how many values follow them
_MAP_OPTIONS = {
    "-blendu": 1, "-blendv": 1, "-boost": 1, "-cc": 1, "-clamp": 1,
    "-imfchan": 1, "-texres": 1, "-bm": 1, "-type": 1,
    "-mm": 2, "-o": 3, "-s": 3, "-t": 3,
}


def _floats(parts: List[str], count: int, path: Path, line_no: int) -> tuple:
    if len(parts) < count:
        raise InvalidFormatError(
            f"Expected {count} numbers on line {line_no}",
            details={"path": str(path), "line": line_no}
        )
    try:
        return tuple(float(p) for p in parts[:count])
    except ValueError:
        raise InvalidFormatError(
            f"Invalid number on line {line_no}",
            details={"path": str(path), "line": line_no}
        )


def _map_file(rest: str) -> str:
    """File name of a texture map statement.

    Leading options are skipped; the rest of the line is the file name, which
    may contain spaces.
    """
    tokens = list(re.finditer(r"\S+", rest))
    i = 0
    while i < len(tokens) and tokens[i].group() in _MAP_OPTIONS:
        count = _MAP_OPTIONS[tokens[i].group()]
        i += 1
        # -o, -s and -t take one to three numbers
        for _ in range(count):
            if i >= len(tokens) - 1 or (count == 3 and not _is_number(tokens[i].group())):
                break
            i += 1
    if i >= len(tokens):
        return ""
    return rest[tokens[i].start():].strip()


def _is_number(token: str) -> bool:
    try:
        float(token)
    except ValueError:
        return False
    return True


def _resolve(token: str, count: int, path: Path, line_no: int) -> int:
    """Turn a 1-based or negative OBJ index into a 0-based one."""
    try:
        value = int(token)
    except ValueError:
        raise InvalidFormatError(
            f"Invalid face index '{token}' on line {line_no}",
            details={"path": str(path), "line": line_no}
        )
    index = value - 1 if value > 0 else count + value
    if value == 0 or not 0 <= index < count:
        raise InvalidFormatError(
            f"Face index {value} out of range on line {line_no}",
            details={"path": str(path), "line": line_no, "count": count}
        )
    return index


def _parse_face(parts: List[str], mesh: Mesh, path: Path, line_no: int) -> Face:
    vertices: List[int] = []
    uvs: List[int] = []
    normals: List[int] = []
    for corner in parts:
        fields = corner.split("/")
        if len(fields) > 3:
            raise InvalidFormatError(
                f"Invalid face corner '{corner}' on line {line_no}",
                details={"path": str(path), "line": line_no}
            )
        vertices.append(_resolve(fields[0], len(mesh.vertices), path, line_no))
        if len(fields) > 1 and fields[1]:
            uvs.append(_resolve(fields[1], len(mesh.uvs), path, line_no))
        if len(fields) > 2 and fields[2]:
            normals.append(_resolve(fields[2], len(mesh.normals), path, line_no))

    if len(vertices) < 3:
        raise InvalidFormatError(
            f"Face with fewer than 3 vertices on line {line_no}",
            details={"path": str(path), "line": line_no}
        )
    # mixed corner forms are dropped to the common subset
    if len(uvs) != len(vertices):
        uvs = []
    if len(normals) != len(vertices):
        normals = []
    return Face(vertices=vertices, uvs=uvs, normals=normals)


def load_mtl(path: Union[str, Path]) -> Dict[str, Material]:
    """Read material names and diffuse textures from an MTL file.

    Texture paths are resolved against the MTL's folder; missing textures are
    kept as ``None``.
    """
    path = Path(path)
    materials: Dict[str, Material] = {}
    current: Optional[Material] = None

    with open(path, "r", encoding="utf-8", errors="replace") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            keyword, _, rest = line.partition(" ")
            rest = rest.strip()
            if keyword == "newmtl":
                current = Material(name=rest)
                materials[rest] = current
            elif keyword == "map_Kd" and current is not None:
                name = _map_file(rest)
                texture = path.parent / name if name else None
                current.albedo = str(texture) if texture and texture.is_file() else None
    return materials


def load_obj(path: Union[str, Path]) -> Mesh:
    """Load an OBJ file and the MTL libraries it references.

    Args:
        path: Path to the ``.obj`` file

    Returns:
        Mesh with 0-based face indices

    Raises:
        InvalidFormatError: On malformed statements or out-of-range indices
    """
    path = Path(path)
    logger.info(f"Loading OBJ {path}")
    mesh = Mesh()
    group: Optional[Group] = None
    group_name = DEFAULT_GROUP
    material: Optional[str] = None

    with open(path, "r", encoding="utf-8", errors="replace") as f:
        for line_no, line in enumerate(f, start=1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            keyword, *parts = line.split()

            if keyword == "v":
                mesh.vertices.append(_floats(parts, 3, path, line_no))
            elif keyword == "vt":
                # v of "vt u [v] [w]" is optional
                uv = _floats(parts, min(len(parts), 2) or 1, path, line_no)
                mesh.uvs.append(uv if len(uv) == 2 else (uv[0], 0.0))
            elif keyword == "vn":
                mesh.normals.append(_floats(parts, 3, path, line_no))
            elif keyword in ("g", "o"):
                group_name = " ".join(parts) or DEFAULT_GROUP
                group = None
            elif keyword == "usemtl":
                name = " ".join(parts)
                if group is not None and group.material != name:
                    group = None
                material = name
            elif keyword == "mtllib":
                for lib in parts:
                    lib_path = path.parent / lib
                    if lib_path.is_file():
                        mesh.materials.update(load_mtl(lib_path))
                    else:
                        logger.warning(f"Material library '{lib}' not found next to {path}")
            elif keyword == "f":
                if group is None:
                    group = Group(name=group_name, material=material)
                    mesh.groups.append(group)
                group.faces.append(_parse_face(parts, mesh, path, line_no))

    # usemtl may name materials no library defined
    for g in mesh.groups:
        if g.material and g.material not in mesh.materials:
            mesh.materials[g.material] = Material(name=g.material)

    logger.info(f"Loaded {len(mesh.vertices)} vertices, {mesh.face_count} faces in {len(mesh.groups)} groups")
    return mesh

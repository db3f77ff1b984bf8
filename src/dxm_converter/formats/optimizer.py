"""DXM Model Optimizer

Collapses duplicate positions, normals and texture coordinates. Values are
compared by their six-decimal text form, so floats that only differ past the
sixth decimal are merged.
"""
import logging
from typing import Dict, List, Optional, Sequence

import numpy as np

from ..models.dxm import DXMModel
from ..utils.errors import InvalidFormatError
from ..utils.number_format import format_vector

logger = logging.getLogger(__name__)

NORMALS_EPSILON = np.float32(1e-6)


def _dedupe(values: Sequence[float], width: int) -> Dict[str, int]:
    """Map each distinct formatted tuple to its first-seen position."""
    table: Dict[str, int] = {}
    for i in range(0, len(values) - width + 1, width):
        key = format_vector(values[i:i + width])
        if key not in table:
            table[key] = len(table)
    return table


def _only_zeroes(table: Dict[str, int], values: Sequence[float]) -> bool:
    """True when every unique normal is effectively zero length.

    Checks the raw floats of the first occurrence of each key. The squared
    length is computed and compared in single precision, as stored in the file.
    """
    seen = set()
    for i in range(0, len(values) - 2, 3):
        key = format_vector(values[i:i + 3])
        if key in seen:
            continue
        seen.add(key)
        with np.errstate(over="ignore"):
            x, y, z = (np.float32(c) for c in values[i:i + 3])
            length = x * x + y * y + z * z
        if length > NORMALS_EPSILON:
            return False
    return True


def _key_at(values: Sequence[float], index: int, width: int, what: str) -> str:
    start = index * width
    if index < 0 or start + width > len(values):
        raise InvalidFormatError(
            f"Index {index} is out of range for {what}",
            details={"index": index, "count": len(values) // width}
        )
    return format_vector(values[start:start + width])


def optimize_dxm_model(model: DXMModel) -> None:
    """Deduplicate attribute tables and remap group indices, in place.

    After this call ``model.v`` (and ``model.vn``/``model.vt`` when present)
    hold the unique formatted tuples, and every group with indices has
    ``vi`` (and ``ni``/``ti``) pointing into them.

    Raises:
        InvalidFormatError: If a group references a vertex that doesn't exist
    """
    logger.info("## Optimizing DXM ##")

    logger.info("Processing vertices...")
    vertex_map = _dedupe(model.vertex, 3)

    normal_map: Optional[Dict[str, int]] = None
    if model.normal is not None:
        logger.info("Processing normals...")
        normal_map = _dedupe(model.normal, 3)
        if _only_zeroes(normal_map, model.normal):
            logger.info("All normals are effectively zero, ignoring...")
            normal_map = None

    uv_map: Optional[Dict[str, int]] = None
    if model.uv is not None:
        logger.info("Processing UVs...")
        uv_map = _dedupe(model.uv, 2)

    logger.info("Updating model indices...")
    for group in model.groups:
        if group.indices is None:
            continue

        vi: List[int] = []
        ni: List[int] = []
        ti: List[int] = []
        for index in group.indices:
            vi.append(vertex_map[_key_at(model.vertex, index, 3, "vertices")])
            if normal_map is not None:
                ni.append(normal_map[_key_at(model.normal, index, 3, "normals")])
            if uv_map is not None:
                ti.append(uv_map[_key_at(model.uv, index, 2, "texture coordinates")])

        group.vi = vi
        group.ni = ni if normal_map is not None else None
        group.ti = ti if uv_map is not None else None

    logger.info("Updating model data...")
    # dicts keep insertion order, which is the index order
    model.v = list(vertex_map)
    model.vn = list(normal_map) if normal_map is not None else None
    model.vt = list(uv_map) if uv_map is not None else None

    logger.debug(
        f"Optimized to {len(model.v)} vertices, "
        f"{len(model.vn or [])} normals, {len(model.vt or [])} uvs"
    )

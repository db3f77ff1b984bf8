"""Sample DLM Payloads

Builders for binary DLM files and ready-made sample models for tests.
Layout follows the DLM 2.2 de-interleaved, uncompressed format.
"""

import struct
from typing import List, Optional, Sequence, Tuple

HEADER_FORMAT = "<4sBBBBQIHBBQQ"

MESH_FLAGS = 1 | 2 | 4
POINT_CLOUD_FLAGS = 1 | 8


def build_header(
    vertex_count: int,
    group_count: int,
    magic: bytes = b"DXM1",
    major: int = 2,
    minor: int = 2,
    encoding: int = 1,
    compression: int = 0,
    flags: int = MESH_FLAGS,
    index_format: int = 0,
    index_bytes: int = 2,
    vertex_table_addr: int = 0,
    index_table_addr: int = 0
) -> bytes:
    """Pack the 40-byte header."""
    return struct.pack(
        HEADER_FORMAT,
        magic, major, minor, encoding, compression,
        vertex_count, flags, group_count,
        index_format, index_bytes,
        vertex_table_addr, index_table_addr
    )


def build_group(length: int, texture: Optional[str], offset: int = 0) -> bytes:
    """Pack one group record; the texture name carries a terminator byte."""
    record = struct.pack("<QQ", offset, length)
    if texture is None:
        return record + struct.pack("<H", 0)
    name = texture.encode("utf-8")
    return record + struct.pack("<H", len(name) + 1) + name + b"\x00"


def _chunk(payload: bytes) -> bytes:
    return struct.pack("<QQ", len(payload), len(payload)) + payload


def _floats(values: Sequence[Sequence[float]]) -> bytes:
    flat = [c for v in values for c in v]
    return struct.pack(f"<{len(flat)}f", *flat)


def build_dlm(
    vertices: Sequence[Tuple[float, float, float]],
    groups: Sequence[Tuple[Optional[str], List[int]]],
    normals: Optional[Sequence[Tuple[float, float, float]]] = None,
    uvs: Optional[Sequence[Tuple[float, float]]] = None,
    colors: Optional[bytes] = None,
    index_bytes: int = 2,
    **header_overrides
) -> bytes:
    """Build a complete DLM payload.

    Without ``colors`` the payload is a mesh: ``normals`` and ``uvs`` default
    to zero vectors. With ``colors`` it is a point cloud.
    """
    count = len(vertices)
    flags = POINT_CLOUD_FLAGS if colors is not None else MESH_FLAGS
    header_args = {"flags": flags, "index_bytes": index_bytes}
    header_args.update(header_overrides)

    data = build_header(count, len(groups), **header_args)
    for texture, indices in groups:
        data += build_group(len(indices), texture)

    vertex_payload = _floats(vertices)
    if colors is not None:
        vertex_payload += colors
    else:
        vertex_payload += _floats(normals if normals is not None else [(0.0, 0.0, 0.0)] * count)
        vertex_payload += _floats(uvs if uvs is not None else [(0.0, 0.0)] * count)
    data += _chunk(vertex_payload)

    code = "H" if index_bytes == 2 else "I"
    index_payload = b""
    for _, indices in groups:
        index_payload += struct.pack(f"<{len(indices)}{code}", *indices)
    data += _chunk(index_payload)
    return data


# Quad made of two triangles with every corner stored separately:
# 6 stored vertices, 4 unique positions, 1 unique normal, 4 unique uvs.

QUAD_VERTICES = [
    (0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 1.0, 0.0),
    (0.0, 0.0, 0.0), (1.0, 1.0, 0.0), (0.0, 1.0, 0.0),
]
QUAD_NORMALS = [(0.0, 0.0, 1.0)] * 6
QUAD_UVS = [
    (0.0, 0.0), (1.0, 0.0), (1.0, 1.0),
    (0.0, 0.0), (1.0, 1.0), (0.0, 1.0),
]
QUAD_INDICES = [0, 1, 2, 3, 4, 5]
QUAD_TEXTURE = "C:\\Art\\Textures\\wood.png"


def build_quad_dlm(texture: Optional[str] = QUAD_TEXTURE, **overrides) -> bytes:
    return build_dlm(
        QUAD_VERTICES,
        [(texture, QUAD_INDICES)],
        normals=QUAD_NORMALS,
        uvs=QUAD_UVS,
        **overrides
    )


MINIMAL_PNG = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"
    b"\x08\x06\x00\x00\x00\x1f\x15\xc4\x89\x00\x00\x00\rIDATx\x9cc\xf8\x0f"
    b"\x00\x00\x01\x01\x00\x05\x18\xd8N\x00\x00\x00\x00IEND\xaeB`\x82"
)


SAMPLE_OBJ = """# sample
mtllib sample.mtl
v 0 0 0
v 1 0 0
v 1 1 0
v 0 1 0
vt 0 0
vt 1 0
vt 1 1
vt 0 1
vn 0 0 1
g panel
usemtl wood
f 1/1/1 2/2/1 3/3/1 4/4/1
g edge
f 1 2 3
f -4 -3 -1
"""

SAMPLE_MTL = """newmtl wood
Kd 1 1 1
map_Kd wood.png
"""

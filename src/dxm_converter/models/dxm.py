"""DXM/DLM Data Model

Pydantic models mirroring the on-disk layout of a de-interleaved DLM payload.
"""

from enum import IntEnum, IntFlag
from typing import Optional, List
from pydantic import BaseModel, Field


class DXMEncoding(IntEnum):
    """Vertex data layout. Only DEINTERLEAVED is readable."""

    INTERLEAVED = 0
    DEINTERLEAVED = 1
    BYTE_PACK = 2


class DXMCompression(IntEnum):
    """Payload compression. Only NO_COMPRESSION is readable."""

    NO_COMPRESSION = 0
    LZ77 = 1


class DXMVertexFlag(IntFlag):
    """Vertex attribute bits of ``vertex_composition_flags``."""

    VERTEX_3_F32 = 1
    NORMAL_3_F32 = 1 << 1
    TEXCOORD_2_F32 = 1 << 2
    COLOR_4_U8 = 1 << 3


MESH_COMPOSITION = int(DXMVertexFlag.VERTEX_3_F32 | DXMVertexFlag.NORMAL_3_F32 | DXMVertexFlag.TEXCOORD_2_F32)
POINT_CLOUD_COMPOSITION = int(DXMVertexFlag.VERTEX_3_F32 | DXMVertexFlag.COLOR_4_U8)


class DXMHeader(BaseModel):
    """Fixed 40-byte DLM header."""

    magic: str = Field(default="DXM1", description="Four identification characters")
    major_version: int = Field(default=2, ge=0, le=0xFF)
    minor_version: int = Field(default=2, ge=0, le=0xFF)
    encoding: int = Field(default=int(DXMEncoding.DEINTERLEAVED), ge=0, le=0xFF)
    compression: int = Field(default=int(DXMCompression.NO_COMPRESSION), ge=0, le=0xFF)

    vertex_count: int = Field(default=0, ge=0, description="u64")
    vertex_composition_flags: int = Field(default=MESH_COMPOSITION, ge=0, description="u32")

    group_count: int = Field(default=0, ge=0, le=0xFFFF, description="u16")

    index_format: int = Field(default=0, ge=0, le=0xFF)
    index_byte_count: int = Field(default=2, ge=0, le=0xFF)

    vertex_table_addr: int = Field(default=0, ge=0, description="u64, not used for seeking")
    index_table_addr: int = Field(default=0, ge=0, description="u64, not used for seeking")

    @property
    def version(self) -> int:
        return self.major_version * 256 + self.minor_version

    @property
    def is_point_cloud(self) -> bool:
        return self.vertex_composition_flags == POINT_CLOUD_COMPOSITION

    class Config:
        json_schema_extra = {
            "example": {
                "magic": "DXM1",
                "major_version": 2,
                "minor_version": 2,
                "encoding": 1,
                "compression": 0,
                "vertex_count": 24,
                "vertex_composition_flags": 7,
                "group_count": 1,
                "index_format": 0,
                "index_byte_count": 2
            }
        }


class DXMData(BaseModel):
    """Size prefix of the vertex and index chunks."""

    compressed_size: int = Field(default=0, ge=0)
    uncompressed_size: int = Field(default=0, ge=0)


class DXMGroup(BaseModel):
    """Index range drawn with one texture.

    ``indices`` holds the raw per-corner vertex indices. ``vi``, ``ni`` and
    ``ti`` are filled by the optimizer and point into the deduplicated tables.
    """

    offset: int = Field(default=0, ge=0)
    length: int = Field(default=0, ge=0, description="Number of indices")
    texture: Optional[str] = Field(default=None, description="Texture path as stored in the file")
    indices: Optional[List[int]] = None

    vi: Optional[List[int]] = None
    ni: Optional[List[int]] = None
    ti: Optional[List[int]] = None


class DXMModel(BaseModel):
    """A loaded DLM payload and, after optimization, its unique attribute tables."""

    header: DXMHeader = Field(default_factory=DXMHeader)
    groups: List[DXMGroup] = Field(default_factory=list)
    vertex_data: Optional[DXMData] = Field(default=None, description="Vertex chunk size prefix")
    index_data: Optional[DXMData] = Field(default=None, description="Index chunk size prefix")

    vertex: List[float] = Field(default_factory=list, description="3 floats per vertex")
    normal: Optional[List[float]] = Field(default=None, description="3 floats per vertex")
    uv: Optional[List[float]] = Field(default=None, description="2 floats per vertex")
    color: Optional[bytes] = Field(default=None, description="4 bytes per vertex (RGBA)")

    v: Optional[List[str]] = None
    vn: Optional[List[str]] = None
    vt: Optional[List[str]] = None

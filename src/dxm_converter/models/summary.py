"""Inspection and Export Result Models"""

from typing import Optional, List
from pydantic import BaseModel, Field


class MaterialSummary(BaseModel):
    """Material name and the texture it resolved to."""

    name: str
    albedo: Optional[str] = None


class ModelSummary(BaseModel):
    """Statistics of a loaded model."""

    path: str = Field(description="Model file that was read")
    format: str = Field(description="'dlm' or 'obj'")
    vertex_count: int = Field(description="Unique positions")
    normal_count: int = Field(description="Unique normals (0 when dropped)")
    uv_count: int = Field(description="Unique texture coordinates")
    face_count: int
    groups: List[str] = Field(default_factory=list)
    materials: List[MaterialSummary] = Field(default_factory=list)

    # DLM sources only
    version: Optional[str] = Field(default=None, description="Header version as 'major.minor'")
    vertex_composition: Optional[str] = Field(default=None, description="'mesh' or 'point_cloud'")
    index_byte_count: Optional[int] = None

    class Config:
        json_schema_extra = {
            "example": {
                "path": "models/crate.dlm",
                "format": "dlm",
                "vertex_count": 8,
                "normal_count": 6,
                "uv_count": 4,
                "face_count": 12,
                "groups": ["crate.png"],
                "materials": [{"name": "crate.png", "albedo": "models/Textures/crate.png"}],
                "version": "2.2",
                "vertex_composition": "mesh",
                "index_byte_count": 2
            }
        }


class ExportResult(BaseModel):
    """Files written by an export."""

    obj_path: str
    mtl_path: Optional[str] = None
    vertex_count: int
    face_count: int
    group_count: int

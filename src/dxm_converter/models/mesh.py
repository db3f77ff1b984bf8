"""OBJ Mesh Data Model

Pydantic models for the in-memory Wavefront OBJ representation shared by the
DXM conversion, the OBJ loader and the OBJ exporter.
"""

from typing import Optional, Dict, List, Tuple
from pydantic import BaseModel, Field, field_validator

Vec3 = Tuple[float, float, float]
Vec2 = Tuple[float, float]


class Face(BaseModel):
    """Polygon with 0-based indices into the mesh tables.

    ``uvs`` and ``normals`` are either empty or as long as ``vertices``.
    """

    vertices: List[int] = Field(description="Position indices")
    uvs: List[int] = Field(default_factory=list, description="Texture coordinate indices")
    normals: List[int] = Field(default_factory=list, description="Normal indices")

    @field_validator("vertices")
    @classmethod
    def validate_vertices(cls, v: List[int]) -> List[int]:
        if len(v) < 3:
            raise ValueError(f"A face needs at least 3 vertices, got {len(v)}")
        return v


class Material(BaseModel):
    """Material with an optional diffuse texture."""

    name: str = Field(description="Material name")
    albedo: Optional[str] = Field(default=None, description="Path to the diffuse texture, if found")


class Group(BaseModel):
    """Named set of faces sharing one material."""

    name: str = Field(description="Group name")
    material: Optional[str] = Field(default=None, description="Name of the material in Mesh.materials")
    faces: List[Face] = Field(default_factory=list)


class Mesh(BaseModel):
    """Complete OBJ model."""

    vertices: List[Vec3] = Field(default_factory=list)
    uvs: List[Vec2] = Field(default_factory=list)
    normals: List[Vec3] = Field(default_factory=list)
    groups: List[Group] = Field(default_factory=list)
    materials: Dict[str, Material] = Field(default_factory=dict)

    @property
    def face_count(self) -> int:
        return sum(len(g.faces) for g in self.groups)

    class Config:
        json_schema_extra = {
            "example": {
                "vertices": [[0, 0, 0], [1, 0, 0], [0, 1, 0]],
                "uvs": [[0, 0], [1, 0], [0, 1]],
                "normals": [[0, 0, 1]],
                "groups": [{
                    "name": "wood.png",
                    "material": "wood.png",
                    "faces": [{"vertices": [0, 1, 2], "uvs": [0, 1, 2], "normals": [0, 0, 0]}]
                }],
                "materials": {"wood.png": {"name": "wood.png", "albedo": "Textures/wood.png"}}
            }
        }

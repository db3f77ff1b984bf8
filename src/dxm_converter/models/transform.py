"""Export Pose Model

Rotation and mirroring applied to a model before it is written out.
"""

import numpy as np
from pydantic import BaseModel, Field


def _rotation(axis: int, degrees: float) -> np.ndarray:
    """Right-handed rotation about the x (0), y (1) or z (2) axis."""
    rad = np.deg2rad(degrees)
    c, s = np.cos(rad), np.sin(rad)
    if axis == 0:
        return np.array([[1, 0, 0], [0, c, -s], [0, s, c]], dtype=np.float64)
    if axis == 1:
        return np.array([[c, 0, s], [0, 1, 0], [-s, 0, c]], dtype=np.float64)
    return np.array([[c, -s, 0], [s, c, 0], [0, 0, 1]], dtype=np.float64)


class Transform(BaseModel):
    """Per-axis rotation in degrees plus per-axis mirroring."""

    rot_x: float = Field(default=0.0, ge=-180.0, le=180.0, description="Rotation about X in degrees")
    rot_y: float = Field(default=0.0, ge=-180.0, le=180.0, description="Rotation about Y in degrees")
    rot_z: float = Field(default=0.0, ge=-180.0, le=180.0, description="Rotation about Z in degrees")
    flip_x: bool = Field(default=False, description="Mirror along X")
    flip_y: bool = Field(default=False, description="Mirror along Y")
    flip_z: bool = Field(default=False, description="Mirror along Z")

    @property
    def is_identity(self) -> bool:
        return not (self.rot_x or self.rot_y or self.rot_z or self.flip_x or self.flip_y or self.flip_z)

    @property
    def mirrors(self) -> bool:
        """True when an odd number of axes is flipped, which inverts face winding."""
        return (self.flip_x + self.flip_y + self.flip_z) % 2 == 1

    def matrix(self) -> np.ndarray:
        """Build the 3x3 pose ``S * Rz * Ry * Rx``."""
        scale = np.diag([
            -1.0 if self.flip_x else 1.0,
            -1.0 if self.flip_y else 1.0,
            -1.0 if self.flip_z else 1.0,
        ])
        matrix = scale @ _rotation(2, self.rot_z) @ _rotation(1, self.rot_y) @ _rotation(0, self.rot_x)
        # exact zeros for right angles, cos(90) is 6e-17 otherwise
        matrix[np.abs(matrix) < 1e-12] = 0.0
        return matrix

    def normal_matrix(self) -> np.ndarray:
        normal = np.linalg.inv(self.matrix()).T
        normal[np.abs(normal) < 1e-12] = 0.0
        return normal

    class Config:
        json_schema_extra = {
            "example": {
                "rot_x": -90,
                "rot_y": 0,
                "rot_z": 0,
                "flip_x": False,
                "flip_y": False,
                "flip_z": True
            }
        }

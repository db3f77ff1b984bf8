"""Converter configuration read from environment variables."""

import os
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class ConverterConfig(BaseModel):
    """Settings shared by the CLI and the MCP server."""

    export_dir: Path = Field(
        default=Path("./"),
        description="Folder exported OBJ/MTL files are written to"
    )
    log_level: str = Field(default="INFO", description="Root logging level")
    texture_dir: str = Field(
        default="Textures",
        description="Sub-folder searched for textures missing beside the model"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Invalid log level '{v}', must be one of {sorted(_LOG_LEVELS)}")
        return level

    @field_validator("texture_dir")
    @classmethod
    def validate_texture_dir(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Texture folder name cannot be empty")
        return v

    @classmethod
    def from_env(cls) -> "ConverterConfig":
        return cls(
            export_dir=Path(os.environ.get("DXM_EXPORT_DIR", "./")),
            log_level=os.environ.get("DXM_LOG_LEVEL", "INFO"),
            texture_dir=os.environ.get("DXM_TEXTURE_DIR", "Textures"),
        )

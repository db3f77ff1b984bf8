"""Pytest fixtures for DXM Converter tests.

Common fixtures for sample model files, configuration and the MCP context.
"""

import pytest
from unittest.mock import MagicMock
from pathlib import Path

from dxm_converter.config import ConverterConfig
from dxm_converter.converter import ModelConverter
from . import dlm_samples


@pytest.fixture
def quad_dlm_bytes():
    """Binary DLM payload of a textured quad."""
    return dlm_samples.build_quad_dlm()


@pytest.fixture
def model_folder(tmp_path):
    """Folder holding sample models, with the quad texture under Textures/."""
    folder = tmp_path / "models"
    (folder / "Textures").mkdir(parents=True)
    (folder / "Textures" / "wood.png").write_bytes(dlm_samples.MINIMAL_PNG)
    return folder


@pytest.fixture
def quad_dlm_path(model_folder, quad_dlm_bytes) -> Path:
    """Quad written to ``models/quad.dlm``."""
    path = model_folder / "quad.dlm"
    path.write_bytes(quad_dlm_bytes)
    return path


@pytest.fixture
def sample_obj_path(model_folder) -> Path:
    """OBJ + MTL pair with the texture beside them."""
    (model_folder / "wood.png").write_bytes(dlm_samples.MINIMAL_PNG)
    (model_folder / "sample.mtl").write_text(dlm_samples.SAMPLE_MTL)
    path = model_folder / "sample.obj"
    path.write_text(dlm_samples.SAMPLE_OBJ)
    return path


@pytest.fixture
def export_dir(tmp_path) -> Path:
    return tmp_path / "export"


@pytest.fixture
def converter_config(export_dir):
    """Configuration exporting into the test's temporary folder."""
    return ConverterConfig(export_dir=export_dir)


@pytest.fixture
def model_converter(converter_config):
    return ModelConverter(converter_config)


@pytest.fixture
def mcp_context(model_converter):
    """Mock MCP context with the model converter."""
    context = MagicMock()
    context.request_context.lifespan_context = {"converter": model_converter}
    return context


@pytest.fixture(autouse=True)
def reset_environment_for_tests(monkeypatch, export_dir):
    """Reset environment variables for each test.

    This fixture automatically runs before each test so configuration read
    from the environment never points outside the test's temporary folder.
    """
    monkeypatch.setenv("DXM_EXPORT_DIR", str(export_dir))
    monkeypatch.setenv("DXM_LOG_LEVEL", "INFO")
    monkeypatch.delenv("DXM_TEXTURE_DIR", raising=False)

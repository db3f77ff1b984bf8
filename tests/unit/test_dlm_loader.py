"""Unit tests for the DLM payload loader.

Tests header parsing, header validation order, group records, vertex data and
index data for both index sizes.
"""
import io
import struct

import pytest

from dxm_converter.formats.dlm_loader import (
    load_dxm,
    load_header,
    resolve_payload_path,
    validate_header,
)
from dxm_converter.models.dxm import DXMHeader, MESH_COMPOSITION, POINT_CLOUD_COMPOSITION
from dxm_converter.utils.errors import (
    InvalidFormatError,
    TruncatedFileError,
    UnsupportedFormatError,
    UnsupportedVersionError,
)
from ..fixtures import dlm_samples


def test_load_header_reads_all_fields():
    """Test every header field lands in the right attribute."""
    data = dlm_samples.build_header(
        vertex_count=1234, group_count=3,
        major=2, minor=5, flags=9, index_format=7, index_bytes=4,
        vertex_table_addr=0x1122334455, index_table_addr=0x66778899
    )
    stream = io.BytesIO(data + b"trailing")

    header = load_header(stream)

    assert stream.tell() == 40
    assert header.magic == "DXM1"
    assert (header.major_version, header.minor_version) == (2, 5)
    assert header.encoding == 1
    assert header.compression == 0
    assert header.vertex_count == 1234
    assert header.vertex_composition_flags == 9
    assert header.group_count == 3
    assert header.index_format == 7
    assert header.index_byte_count == 4
    assert header.vertex_table_addr == 0x1122334455
    assert header.index_table_addr == 0x66778899


def test_load_header_truncated():
    """Test a short header raises TruncatedFileError."""
    data = dlm_samples.build_header(vertex_count=1, group_count=1)[:20]

    with pytest.raises(TruncatedFileError, match="Unexpected end of file"):
        load_header(io.BytesIO(data))


def test_validate_header_accepts_supported_compositions():
    """Test mesh and point cloud compositions pass and the flag pair is returned."""
    for flags in (MESH_COMPOSITION, POINT_CLOUD_COMPOSITION):
        header = DXMHeader(vertex_composition_flags=flags)
        assert validate_header(header) == (7, 9)


def test_validate_header_accepts_newer_versions():
    """Test versions above 2.2 are accepted."""
    assert validate_header(DXMHeader(major_version=3, minor_version=0))


@pytest.mark.parametrize("changes, error, message", [
    ({"magic": "DXM2"}, InvalidFormatError, "Invalid file format of type: DXM2"),
    ({"major_version": 2, "minor_version": 1}, UnsupportedVersionError, "Outdated loader"),
    ({"major_version": 1, "minor_version": 9}, UnsupportedVersionError, "Outdated loader"),
    ({"encoding": 0}, UnsupportedFormatError, "Unsupported encoding"),
    ({"encoding": 2}, UnsupportedFormatError, "Unsupported encoding"),
    ({"compression": 1}, UnsupportedFormatError, "Unsupported compression"),
    ({"vertex_composition_flags": 1}, UnsupportedFormatError, "Unsupported vertex format"),
    ({"vertex_composition_flags": 15}, UnsupportedFormatError, "Unsupported vertex format"),
])
def test_validate_header_rejects(changes, error, message):
    """Test each unsupported header value raises its own error."""
    header = DXMHeader(**changes)

    with pytest.raises(error, match=message):
        validate_header(header)


def test_validate_header_checks_magic_first():
    """Test the magic is reported even when every other field is also wrong."""
    header = DXMHeader(magic="ABCD", major_version=1, encoding=0, compression=1, vertex_composition_flags=2)

    with pytest.raises(InvalidFormatError, match="ABCD"):
        validate_header(header)


def test_validate_header_checks_version_before_encoding():
    header = DXMHeader(major_version=1, encoding=0)

    with pytest.raises(UnsupportedVersionError):
        validate_header(header)


def test_load_dxm_mesh(quad_dlm_path):
    """Test positions, normals, uvs, groups and indices of a mesh payload."""
    model = load_dxm(quad_dlm_path)

    assert model.header.vertex_count == 6
    assert len(model.vertex) == 18
    assert model.vertex[3:6] == [1.0, 0.0, 0.0]
    assert model.normal == [0.0, 0.0, 1.0] * 6
    assert len(model.uv) == 12
    assert model.color is None

    assert len(model.groups) == 1
    group = model.groups[0]
    assert group.length == 6
    assert group.texture == dlm_samples.QUAD_TEXTURE
    assert group.indices == dlm_samples.QUAD_INDICES


def test_load_dxm_point_cloud(tmp_path):
    """Test point clouds load colors instead of normals and uvs."""
    vertices = [(0.0, 0.0, 0.0), (1.0, 2.0, 3.0)]
    colors = bytes([255, 0, 0, 255, 0, 255, 0, 128])
    path = tmp_path / "cloud.dlm"
    path.write_bytes(dlm_samples.build_dlm(vertices, [("dots.png", [0, 1, 1])], colors=colors))

    model = load_dxm(path)

    assert model.header.is_point_cloud
    assert model.vertex == [0.0, 0.0, 0.0, 1.0, 2.0, 3.0]
    assert model.color == colors
    assert model.normal is None
    assert model.uv is None


def test_load_dxm_32bit_indices(tmp_path):
    """Test 4-byte indices are read."""
    path = tmp_path / "wide.dlm"
    path.write_bytes(dlm_samples.build_quad_dlm(index_bytes=4))

    model = load_dxm(path)

    assert model.header.index_byte_count == 4
    assert model.groups[0].indices == dlm_samples.QUAD_INDICES


def test_load_dxm_16bit_indices_are_unsigned(tmp_path):
    """Test indices above 32767 are not read as negative numbers."""
    path = tmp_path / "big.dlm"
    path.write_bytes(dlm_samples.build_dlm([(0.0, 0.0, 0.0)], [("t.png", [65535, 40000, 0])]))

    model = load_dxm(path)

    assert model.groups[0].indices == [65535, 40000, 0]


def test_load_dxm_unknown_index_size_leaves_groups_without_indices(tmp_path):
    """Test an index size other than 2 or 4 reads no indices."""
    data = dlm_samples.build_dlm(dlm_samples.QUAD_VERTICES, [("wood.png", [])], index_bytes=2)
    # patch index_byte_count (header byte 23) to 3
    data = data[:23] + bytes([3]) + data[24:]
    path = tmp_path / "odd.dlm"
    path.write_bytes(data)

    model = load_dxm(path)

    assert model.groups[0].indices is None


def test_load_dxm_groups_without_texture(tmp_path):
    """Test a zero-length name means no texture."""
    path = tmp_path / "plain.dlm"
    path.write_bytes(dlm_samples.build_dlm(dlm_samples.QUAD_VERTICES[:3], [(None, [0, 1, 2]), ("a.png", [2, 1, 0])]))

    model = load_dxm(path)

    assert model.groups[0].texture is None
    assert model.groups[1].texture == "a.png"
    assert model.groups[1].indices == [2, 1, 0]


def test_load_dxm_truncated_vertex_data(tmp_path, quad_dlm_bytes):
    """Test a file cut inside the vertex data reports what was being read."""
    path = tmp_path / "cut.dlm"
    # header (40) + group record (8 + 8 + 2 + len(name) + 1) + chunk prefix (16) + 10 bytes
    group_size = 19 + len(dlm_samples.QUAD_TEXTURE.encode())
    path.write_bytes(quad_dlm_bytes[:40 + group_size + 16 + 10])

    with pytest.raises(TruncatedFileError, match="vertex positions"):
        load_dxm(path)


def test_load_dxm_invalid_magic(tmp_path):
    path = tmp_path / "bad.dlm"
    path.write_bytes(b"NOPE" + dlm_samples.build_quad_dlm()[4:])

    with pytest.raises(InvalidFormatError, match="Invalid file format of type: NOPE"):
        load_dxm(path)


def test_dxm_path_reads_sibling_dlm(model_folder, quad_dlm_path):
    """Test a .dxm path loads the .dlm beside it."""
    dxm_path = model_folder / "quad.DXM"
    dxm_path.write_bytes(b"packed data the loader never reads")

    assert resolve_payload_path(dxm_path) == model_folder / "quad.dlm"
    model = load_dxm(dxm_path)
    assert model.header.vertex_count == 6


def test_dxm_path_without_dlm_is_unsupported(tmp_path):
    """Test a .dxm without an unpacked .dlm is rejected."""
    dxm_path = tmp_path / "packed.dxm"
    dxm_path.write_bytes(b"\x00" * 64)

    with pytest.raises(UnsupportedFormatError, match="Unpacking of DXM files is not yet supported"):
        load_dxm(dxm_path)


def test_non_dxm_path_is_read_as_is(tmp_path):
    path = tmp_path / "model.bin"
    assert resolve_payload_path(path) == path


def test_float32_values_are_widened_exactly(tmp_path):
    """Test vertex floats keep their float32 value."""
    path = tmp_path / "f.dlm"
    path.write_bytes(dlm_samples.build_dlm([(0.1, 0.0, 0.0)], [("t.png", [0])]))

    model = load_dxm(path)

    assert model.vertex[0] == struct.unpack("<f", struct.pack("<f", 0.1))[0]


def test_load_dxm_keeps_chunk_sizes(quad_dlm_path):
    """Test the vertex and index chunk size prefixes are stored on the model."""
    model = load_dxm(quad_dlm_path)

    # 6 vertices: positions and normals (12 bytes each) plus uvs (8 bytes)
    assert model.vertex_data.compressed_size == 192
    assert model.vertex_data.uncompressed_size == 192
    assert model.index_data.uncompressed_size == 12


@pytest.mark.parametrize("vertex_count", [2 ** 27, 2 ** 62])
def test_load_dxm_vertex_count_past_end_of_file(tmp_path, quad_dlm_bytes, vertex_count):
    """Test a vertex count larger than the file is a truncation, not an allocation."""
    # vertex_count is the u64 at header byte 8
    data = quad_dlm_bytes[:8] + struct.pack("<Q", vertex_count) + quad_dlm_bytes[16:]
    path = tmp_path / "huge.dlm"
    path.write_bytes(data)

    with pytest.raises(TruncatedFileError, match="vertex positions"):
        load_dxm(path)


def test_load_dxm_group_length_past_end_of_file(tmp_path, quad_dlm_bytes):
    # the first group record starts after the header: offset u64, then length u64
    data = quad_dlm_bytes[:48] + struct.pack("<Q", 2 ** 61) + quad_dlm_bytes[56:]
    path = tmp_path / "long.dlm"
    path.write_bytes(data)

    with pytest.raises(TruncatedFileError, match="indices of group 0"):
        load_dxm(path)


def test_converter_reports_truncation(model_converter, tmp_path, quad_dlm_bytes):
    """Test oversized counts reach the caller as TruncatedFileError."""
    path = tmp_path / "huge.dlm"
    path.write_bytes(quad_dlm_bytes[:8] + struct.pack("<Q", 2 ** 62) + quad_dlm_bytes[16:])

    with pytest.raises(TruncatedFileError):
        model_converter.load(path)

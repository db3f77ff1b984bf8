"""DLM Payload Loader

Reads the uncompressed, de-interleaved payload of a DXM model:

- 40-byte header
- group table (index ranges and texture names)
- vertex chunk (positions, then normals + UVs or colors)
- index chunk (per-group u16 or u32 indices)
"""
import logging
from pathlib import Path
from typing import BinaryIO, Tuple, Union

from ..models.dxm import (
    DXMCompression,
    DXMData,
    DXMEncoding,
    DXMGroup,
    DXMHeader,
    DXMModel,
    MESH_COMPOSITION,
    POINT_CLOUD_COMPOSITION,
)
from ..utils.binary import (
    read_exact,
    read_f32_array,
    read_index_array,
    read_u8,
    read_u16,
    read_u32,
    read_u64,
)
from ..utils.errors import InvalidFormatError, UnsupportedFormatError, UnsupportedVersionError

logger = logging.getLogger(__name__)

MAGIC = "DXM1"
MIN_VERSION = 2 * 256 + 2


def resolve_payload_path(path: Union[str, Path]) -> Path:
    """Map a model path to the file that actually holds the payload.

    A ``.dxm`` path is redirected to the sibling ``.dlm``; anything else is
    returned unchanged.

    Raises:
        UnsupportedFormatError: If a ``.dxm`` has no unpacked ``.dlm`` beside it
    """
    path = Path(path)
    if path.suffix.lower() != ".dxm":
        return path

    dlm_path = path.with_suffix(".dlm")
    if not dlm_path.exists():
        raise UnsupportedFormatError(
            "Unpacking of DXM files is not yet supported",
            details={"path": str(path), "expected": str(dlm_path)}
        )
    return dlm_path


def load_dxm(path: Union[str, Path]) -> DXMModel:
    """Load a DXM model from its ``.dlm`` payload.

    Args:
        path: Path to a ``.dlm`` file, or to a ``.dxm`` with a ``.dlm`` beside it

    Returns:
        Raw model; run ``optimize_dxm_model`` before converting it

    Raises:
        UnsupportedFormatError: Packed ``.dxm`` or unsupported header values
        InvalidFormatError: Wrong magic
        UnsupportedVersionError: Header older than 2.2
        TruncatedFileError: File ends early
    """
    logger.info("## Loading DXM ##")
    dlm_path = resolve_payload_path(path)

    with open(dlm_path, "rb") as stream:
        header = load_header(stream)
        mesh_flags, point_cloud_flags = validate_header(header)
        model = DXMModel(header=header)

        logger.info("Loading DXM groups...")
        for i in range(header.group_count):
            model.groups.append(_load_group(stream, i))

        logger.info("Loading DXM vertex data...")
        model.vertex_data = _load_chunk_prefix(stream, "vertex chunk")
        count = header.vertex_count
        model.vertex = read_f32_array(stream, count * 3, "vertex positions")

        if header.vertex_composition_flags == mesh_flags:
            model.normal = read_f32_array(stream, count * 3, "vertex normals")
            model.uv = read_f32_array(stream, count * 2, "texture coordinates")
        elif header.vertex_composition_flags == point_cloud_flags:
            model.color = read_exact(stream, count * 4, "vertex colors")

        logger.info("Loading DXM index data...")
        model.index_data = _load_chunk_prefix(stream, "index chunk")
        if header.index_byte_count in (2, 4):
            for i, group in enumerate(model.groups):
                group.indices = read_index_array(
                    stream, group.length, header.index_byte_count, f"indices of group {i}"
                )
        else:
            logger.warning(
                f"Unsupported index size of {header.index_byte_count} bytes, groups will have no faces"
            )

    logger.debug(
        f"Loaded {dlm_path}: {header.vertex_count} vertices, {len(model.groups)} groups"
    )
    return model


def load_header(stream: BinaryIO) -> DXMHeader:
    """Read the fixed 40-byte header."""
    logger.info("Loading DXM header...")

    magic = read_exact(stream, 4, "header magic").decode("latin-1")
    return DXMHeader(
        magic=magic,
        major_version=read_u8(stream, "header version"),
        minor_version=read_u8(stream, "header version"),
        encoding=read_u8(stream, "header encoding"),
        compression=read_u8(stream, "header compression"),
        vertex_count=read_u64(stream, "header vertex count"),
        vertex_composition_flags=read_u32(stream, "header vertex composition"),
        group_count=read_u16(stream, "header group count"),
        index_format=read_u8(stream, "header index format"),
        index_byte_count=read_u8(stream, "header index size"),
        vertex_table_addr=read_u64(stream, "header vertex table address"),
        index_table_addr=read_u64(stream, "header index table address"),
    )


def validate_header(header: DXMHeader) -> Tuple[int, int]:
    """Check that the header describes a payload this loader can read.

    Returns:
        The (mesh, point cloud) vertex composition values

    Raises:
        InvalidFormatError: Magic is not "DXM1"
        UnsupportedVersionError: Version below 2.2
        UnsupportedFormatError: Encoding, compression or vertex composition not supported
    """
    logger.info("Validating DXM header...")

    if header.magic != MAGIC:
        raise InvalidFormatError(f"Invalid file format of type: {header.magic}")

    if header.version < MIN_VERSION:
        raise UnsupportedVersionError(
            "Outdated loader",
            details={"version": f"{header.major_version}.{header.minor_version}"}
        )

    if header.encoding != DXMEncoding.DEINTERLEAVED:
        raise UnsupportedFormatError("Unsupported encoding", details={"encoding": header.encoding})

    if header.compression != DXMCompression.NO_COMPRESSION:
        raise UnsupportedFormatError("Unsupported compression", details={"compression": header.compression})

    if header.vertex_composition_flags not in (MESH_COMPOSITION, POINT_CLOUD_COMPOSITION):
        raise UnsupportedFormatError(
            "Unsupported vertex format",
            details={"flags": header.vertex_composition_flags}
        )

    return MESH_COMPOSITION, POINT_CLOUD_COMPOSITION


def _load_group(stream: BinaryIO, index: int) -> DXMGroup:
    what = f"group {index}"
    group = DXMGroup(
        offset=read_u64(stream, what),
        length=read_u64(stream, what),
    )

    name_length = read_u16(stream, what)
    if name_length > 0:
        # name is stored with a trailing terminator byte
        texture = read_exact(stream, name_length - 1, f"texture name of {what}")
        read_exact(stream, 1, f"texture name of {what}")
        group.texture = texture.decode("utf-8", errors="replace")
    return group


def _load_chunk_prefix(stream: BinaryIO, what: str) -> DXMData:
    return DXMData(
        compressed_size=read_u64(stream, what),
        uncompressed_size=read_u64(stream, what),
    )

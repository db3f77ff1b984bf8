"""Little-endian binary reading helpers for DLM payloads."""

import os
import struct
from typing import BinaryIO, List, Optional

from .errors import TruncatedFileError

_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")
_U64 = struct.Struct("<Q")


def bytes_left(stream: BinaryIO) -> Optional[int]:
    """Bytes between the current position and the end, None for unseekable streams."""
    if not stream.seekable():
        return None
    position = stream.tell()
    end = stream.seek(0, os.SEEK_END)
    stream.seek(position)
    return end - position


def read_exact(stream: BinaryIO, size: int, what: str) -> bytes:
    """Read exactly ``size`` bytes from ``stream``.

    Args:
        stream: Binary stream positioned at the data
        size: Number of bytes to read
        what: Name of the section, used in the error message

    Returns:
        The bytes read

    Raises:
        TruncatedFileError: If the stream ends early
    """
    # header counts may point past the end of the file
    left = bytes_left(stream)
    if left is not None and size > left:
        raise TruncatedFileError(
            f"Unexpected end of file while reading {what}",
            details={"expected": size, "read": left}
        )
    data = stream.read(size)
    if len(data) != size:
        raise TruncatedFileError(
            f"Unexpected end of file while reading {what}",
            details={"expected": size, "read": len(data)}
        )
    return data


def read_u8(stream: BinaryIO, what: str) -> int:
    return read_exact(stream, 1, what)[0]


def read_u16(stream: BinaryIO, what: str) -> int:
    return _U16.unpack(read_exact(stream, 2, what))[0]


def read_u32(stream: BinaryIO, what: str) -> int:
    return _U32.unpack(read_exact(stream, 4, what))[0]


def read_u64(stream: BinaryIO, what: str) -> int:
    return _U64.unpack(read_exact(stream, 8, what))[0]


def read_f32_array(stream: BinaryIO, count: int, what: str) -> List[float]:
    """Read ``count`` little-endian 32-bit floats."""
    data = read_exact(stream, count * 4, what)
    return list(struct.unpack(f"<{count}f", data))


def read_index_array(stream: BinaryIO, count: int, byte_count: int, what: str) -> List[int]:
    """Read ``count`` unsigned indices of ``byte_count`` bytes each (2 or 4)."""
    code = "H" if byte_count == 2 else "I"
    data = read_exact(stream, count * byte_count, what)
    return list(struct.unpack(f"<{count}{code}", data))

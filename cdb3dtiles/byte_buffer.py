from __future__ import annotations

import json
from typing import Any

from .errors import TileFormatError


ALIGNMENT = 8


def round_up(value: int, align: int = ALIGNMENT) -> int:
    if align <= 0:
        raise TileFormatError(f"Alignment must be > 0, got {align}")
    return (value + align - 1) // align * align


def pad_bytes(data: bytes, *, fill: bytes = b"\x00", header_size: int = 0, align: int = ALIGNMENT) -> bytes:
    """Pad ``data`` so that ``header_size + len(result)`` is a multiple of ``align``."""
    used = header_size + len(data)
    return data + fill * (round_up(used, align) - used)


def pad_text(text: str, *, header_size: int = 0, align: int = ALIGNMENT) -> bytes:
    return pad_bytes(text.encode("utf-8"), fill=b" ", header_size=header_size, align=align)


def pad_json(obj: dict[str, Any], *, header_size: int = 0, align: int = ALIGNMENT) -> bytes:
    # An empty object encodes as a zero-length section.
    if not obj:
        return b""
    text = json.dumps(obj, ensure_ascii=True, separators=(",", ":"))
    return pad_text(text, header_size=header_size, align=align)


class ByteBuffer:
    """Growable byte buffer with bounds-checked positional writes."""

    def __init__(self, size: int = 0) -> None:
        if size < 0:
            raise TileFormatError(f"Buffer size must be >= 0, got {size}")
        self._data = bytearray(size)

    def __len__(self) -> int:
        return len(self._data)

    def reserve(self, size: int) -> None:
        if size > len(self._data):
            self._data.extend(b"\x00" * (size - len(self._data)))

    def align(self, alignment: int = ALIGNMENT) -> int:
        self.reserve(round_up(len(self._data), alignment))
        return len(self._data)

    def append(self, data: bytes) -> int:
        offset = len(self._data)
        self._data.extend(data)
        return offset

    def write_at(self, offset: int, data: bytes) -> None:
        if offset < 0 or offset + len(data) > len(self._data):
            raise TileFormatError(
                f"Write of {len(data)} bytes at offset {offset} exceeds buffer of {len(self._data)} bytes"
            )
        self._data[offset : offset + len(data)] = data

    def getvalue(self) -> bytes:
        return bytes(self._data)

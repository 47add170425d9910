from __future__ import annotations

import base64
import copy
import json
import struct
from typing import Any

from .errors import TileFormatError


GLB_MAGIC = b"glTF"
GLB_VERSION = 2

CHUNK_TYPE_JSON = 0x4E4F534A  # b"JSON"
CHUNK_TYPE_BIN = 0x004E4942  # b"BIN\0"

TARGET_ARRAY_BUFFER = 34962

COMPONENT_TYPE_FLOAT32 = 5126

DATA_URI_PREFIX = "data:application/octet-stream;base64,"


class GltfScene:
    """A glTF document plus the bytes of each of its buffers.

    Buffer 0 becomes the GLB BIN chunk; any further buffers are embedded as
    base64 data URIs when serialized.
    """

    def __init__(self, gltf: dict[str, Any] | None = None, buffers: list[bytes] | None = None) -> None:
        self.gltf: dict[str, Any] = gltf if gltf is not None else {"asset": {"version": "2.0"}}
        self.buffers: list[bytearray] = [bytearray(b) for b in (buffers or [])]
        declared = self.gltf.setdefault("buffers", [])
        if len(declared) != len(self.buffers):
            raise TileFormatError(
                f"glTF declares {len(declared)} buffers but {len(self.buffers)} were supplied"
            )

    def add_buffer(self, data: bytes) -> int:
        self.buffers.append(bytearray(data))
        self.gltf["buffers"].append({"byteLength": len(data)})
        return len(self.buffers) - 1

    def add_buffer_view(
        self,
        buffer: int,
        byte_offset: int,
        byte_length: int,
        target: int | None = None,
    ) -> int:
        if not (0 <= buffer < len(self.buffers)):
            raise TileFormatError(f"Buffer index out of range: {buffer}")
        if byte_offset < 0 or byte_offset + byte_length > len(self.buffers[buffer]):
            raise TileFormatError("Buffer view points outside its buffer")
        view: dict[str, Any] = {"buffer": buffer, "byteOffset": byte_offset, "byteLength": byte_length}
        if target is not None:
            view["target"] = target
        buffer_views = self.gltf.setdefault("bufferViews", [])
        buffer_views.append(view)
        return len(buffer_views) - 1

    def add_accessor(
        self,
        buffer_view: int,
        component_type: int,
        count: int,
        accessor_type: str,
        *,
        min_values: list[float] | None = None,
        max_values: list[float] | None = None,
    ) -> int:
        accessor: dict[str, Any] = {
            "bufferView": buffer_view,
            "componentType": component_type,
            "count": count,
            "type": accessor_type,
        }
        if min_values is not None and max_values is not None:
            accessor["min"] = list(min_values)
            accessor["max"] = list(max_values)
        accessors = self.gltf.setdefault("accessors", [])
        accessors.append(accessor)
        return len(accessors) - 1

    def to_json(self) -> dict[str, Any]:
        gltf = copy.deepcopy(self.gltf)
        for index, (buffer, data) in enumerate(zip(gltf["buffers"], self.buffers)):
            buffer["byteLength"] = len(data)
            if index == 0:
                buffer.pop("uri", None)
            else:
                buffer["uri"] = DATA_URI_PREFIX + base64.b64encode(bytes(data)).decode("ascii")
        if not gltf["buffers"]:
            del gltf["buffers"]
        return gltf

    def to_glb(self) -> bytes:
        json_bytes = json.dumps(self.to_json(), ensure_ascii=True, separators=(",", ":")).encode("utf-8")
        json_padding = (4 - len(json_bytes) % 4) % 4
        if json_padding:
            json_bytes += b" " * json_padding

        bin_chunk = bytes(self.buffers[0]) if self.buffers else b""
        bin_padding = (4 - len(bin_chunk) % 4) % 4
        if bin_padding:
            bin_chunk += b"\x00" * bin_padding

        total_length = 12 + 8 + len(json_bytes)
        if bin_chunk:
            total_length += 8 + len(bin_chunk)

        parts = [
            struct.pack("<4sII", GLB_MAGIC, GLB_VERSION, total_length),
            struct.pack("<II", len(json_bytes), CHUNK_TYPE_JSON),
            json_bytes,
        ]
        if bin_chunk:
            parts.append(struct.pack("<II", len(bin_chunk), CHUNK_TYPE_BIN))
            parts.append(bin_chunk)
        return b"".join(parts)

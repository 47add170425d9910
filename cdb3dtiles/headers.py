from __future__ import annotations

import struct
from dataclasses import dataclass


I3DM_MAGIC = b"i3dm"
B3DM_MAGIC = b"b3dm"
CMPT_MAGIC = b"cmpt"

TILE_FORMAT_VERSION = 1

I3DM_HEADER_FORMAT = "<4s7I"
B3DM_HEADER_FORMAT = "<4s6I"
CMPT_HEADER_FORMAT = "<4s3I"

I3DM_HEADER_SIZE = struct.calcsize(I3DM_HEADER_FORMAT)  # 32
B3DM_HEADER_SIZE = struct.calcsize(B3DM_HEADER_FORMAT)  # 28
CMPT_HEADER_SIZE = struct.calcsize(CMPT_HEADER_FORMAT)  # 16

GLTF_FORMAT_URI = 0


@dataclass
class I3dmHeader:
    byte_length: int = I3DM_HEADER_SIZE
    feature_table_json_byte_length: int = 0
    feature_table_bin_byte_length: int = 0
    batch_table_json_byte_length: int = 0
    batch_table_bin_byte_length: int = 0
    gltf_format: int = GLTF_FORMAT_URI
    version: int = TILE_FORMAT_VERSION

    def pack(self) -> bytes:
        return struct.pack(
            I3DM_HEADER_FORMAT,
            I3DM_MAGIC,
            self.version,
            self.byte_length,
            self.feature_table_json_byte_length,
            self.feature_table_bin_byte_length,
            self.batch_table_json_byte_length,
            self.batch_table_bin_byte_length,
            self.gltf_format,
        )


@dataclass
class B3dmHeader:
    byte_length: int = B3DM_HEADER_SIZE
    feature_table_json_byte_length: int = 0
    feature_table_bin_byte_length: int = 0
    batch_table_json_byte_length: int = 0
    batch_table_bin_byte_length: int = 0
    version: int = TILE_FORMAT_VERSION

    def pack(self) -> bytes:
        return struct.pack(
            B3DM_HEADER_FORMAT,
            B3DM_MAGIC,
            self.version,
            self.byte_length,
            self.feature_table_json_byte_length,
            self.feature_table_bin_byte_length,
            self.batch_table_json_byte_length,
            self.batch_table_bin_byte_length,
        )


@dataclass
class CmptHeader:
    tiles_length: int = 0
    byte_length: int = CMPT_HEADER_SIZE
    version: int = TILE_FORMAT_VERSION

    def pack(self) -> bytes:
        return struct.pack(CMPT_HEADER_FORMAT, CMPT_MAGIC, self.version, self.byte_length, self.tiles_length)

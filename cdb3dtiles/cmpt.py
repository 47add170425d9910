from __future__ import annotations

import io
import logging
from typing import BinaryIO, Callable

from .errors import TileFormatError
from .headers import CMPT_HEADER_SIZE, CmptHeader


logger = logging.getLogger(__name__)

TileWriter = Callable[[BinaryIO, int], int]


def write_cmpt(tile_count: int, fp: BinaryIO, write_tile: TileWriter) -> int:
    """Write a composite tile made of ``tile_count`` inner tiles.

    ``write_tile(sink, index)`` writes one complete inner tile to ``sink`` and
    returns its byte length. Inner tiles are collected in memory so the header
    is written once with its final length.
    """
    if tile_count < 0:
        raise TileFormatError(f"Tile count must be >= 0, got {tile_count}")

    header = CmptHeader(tiles_length=tile_count)
    body = io.BytesIO()
    for index in range(tile_count):
        header.byte_length += write_tile(body, index)

    body_bytes = body.getvalue()
    if header.byte_length != CMPT_HEADER_SIZE + len(body_bytes):
        raise TileFormatError(
            f"Inner tiles reported {header.byte_length - CMPT_HEADER_SIZE} bytes but wrote {len(body_bytes)}"
        )

    fp.write(header.pack())
    fp.write(body_bytes)

    logger.debug("Wrote cmpt: %d tiles, %d bytes", tile_count, header.byte_length)
    return header.byte_length

from __future__ import annotations


class TileFormatError(RuntimeError):
    pass

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Sequence, TextIO

from .errors import TileFormatError
from .geodesy import BoundingRegion
from .tile import Tile, Tileset


logger = logging.getLogger(__name__)

MAX_GEOMETRIC_ERROR = 300000.0
TILESET_VERSION = "1.0"
CONTENT_GLTF_EXTENSION = "3DTILES_content_gltf"


def _bounding_volume(region: BoundingRegion) -> dict[str, Any]:
    return {"region": region.to_region_array()}


def tile_to_json(tile: Tile, geometric_error: float) -> dict[str, Any]:
    """Render ``tile`` and its subtree; each level halves the geometric error."""
    node: dict[str, Any] = {"boundingVolume": _bounding_volume(tile.bound_region)}
    if tile.custom_content_uri is not None:
        node["content"] = {"uri": tile.custom_content_uri}

    children = tile.present_children()
    if not children:
        node["geometricError"] = 0.0
        return node

    node["geometricError"] = geometric_error
    node["children"] = [tile_to_json(child, geometric_error / 2.0) for child in children]
    return node


def tileset_to_json(tileset: Tileset, replace: bool) -> dict[str, Any] | None:
    if tileset.root is None:
        return None

    root = {"refine": "REPLACE" if replace else "ADD"}
    root.update(tile_to_json(tileset.root, MAX_GEOMETRIC_ERROR))
    return {
        "asset": {"version": TILESET_VERSION},
        "geometricError": root["geometricError"],
        "root": root,
    }


def _dump(tileset_json: dict[str, Any], fp: TextIO) -> None:
    json.dump(tileset_json, fp, ensure_ascii=True)
    fp.write("\n")


def write_tileset_json(tileset: Tileset, replace: bool, fp: TextIO) -> bool:
    """Write ``tileset`` to ``fp``. Returns False (writing nothing) when it has no root."""
    tileset_json = tileset_to_json(tileset, replace)
    if tileset_json is None:
        logger.debug("Tileset has no root, nothing written")
        return False
    _dump(tileset_json, fp)
    return True


def build_combined_tileset(
    tileset_paths: Sequence[str | Path],
    regions: Sequence[BoundingRegion],
    use_3d_tiles_next: bool = False,
) -> dict[str, Any]:
    if not regions:
        raise TileFormatError("At least one region is required to combine tilesets")
    if len(tileset_paths) != len(regions):
        raise TileFormatError(f"Got {len(tileset_paths)} tileset paths but {len(regions)} regions")

    tileset_json: dict[str, Any] = {
        "asset": {"version": TILESET_VERSION},
        "geometricError": MAX_GEOMETRIC_ERROR,
    }
    if use_3d_tiles_next:
        tileset_json["extensionsUsed"] = [CONTENT_GLTF_EXTENSION]
        tileset_json["extensionsRequired"] = [CONTENT_GLTF_EXTENSION]

    children = []
    root_region = regions[0]
    for path, region in zip(tileset_paths, regions):
        children.append(
            {
                "geometricError": MAX_GEOMETRIC_ERROR,
                "content": {"uri": Path(path).as_posix()},
                "boundingVolume": _bounding_volume(region),
            }
        )
        root_region = root_region.union(region)

    tileset_json["root"] = {
        "refine": "ADD",
        "geometricError": MAX_GEOMETRIC_ERROR,
        "children": children,
        "boundingVolume": _bounding_volume(root_region),
    }
    return tileset_json


def combine_tileset_json(
    tileset_paths: Sequence[str | Path],
    regions: Sequence[BoundingRegion],
    fp: TextIO,
    use_3d_tiles_next: bool = False,
) -> None:
    _dump(build_combined_tileset(tileset_paths, regions, use_3d_tiles_next), fp)

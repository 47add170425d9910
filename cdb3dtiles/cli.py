from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any

from .errors import TileFormatError
from .geodesy import BoundingRegion
from .tileset import combine_tileset_json


logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False) -> None:
    default_level = "DEBUG" if verbose else "INFO"
    level_name = os.getenv("LOG_LEVEL", default_level).upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


def _load_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text("utf-8"))
    except Exception as exc:  # noqa: BLE001
        raise TileFormatError(f"Failed to read JSON: {path} ({exc})") from exc
    if not isinstance(data, dict):
        raise TileFormatError(f"JSON root must be an object: {path}")
    return data


def read_root_region(path: Path) -> BoundingRegion:
    tileset = _load_json(path)
    root = tileset.get("root")
    if not isinstance(root, dict):
        raise TileFormatError(f"tileset.root missing or invalid: {path}")
    bounding_volume = root.get("boundingVolume")
    if not isinstance(bounding_volume, dict):
        raise TileFormatError(f"tileset.root.boundingVolume missing or invalid: {path}")
    region = bounding_volume.get("region")
    if not (isinstance(region, list) and len(region) == 6):
        raise TileFormatError(f"tileset.root.boundingVolume.region missing or invalid: {path}")
    return BoundingRegion.from_region_array(region)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Combine sibling tileset.json files into one tileset whose root region is their union.",
    )
    parser.add_argument("tilesets", type=Path, nargs="+", help="Input tileset.json files")
    parser.add_argument("-o", "--out", type=Path, required=True, help="Output tileset.json path")
    parser.add_argument(
        "--gltf",
        action="store_true",
        help="Declare 3DTILES_content_gltf as used and required",
    )
    parser.add_argument(
        "--relative-to",
        type=Path,
        default=None,
        help="Directory child URIs are made relative to (default: directory of --out)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)

    out_path: Path = args.out
    base_dir: Path = args.relative_to or out_path.parent

    regions = []
    uris = []
    for tileset_path in args.tilesets:
        if not tileset_path.is_file():
            raise TileFormatError(f"tileset.json not found: {tileset_path}")
        regions.append(read_root_region(tileset_path))
        uris.append(Path(os.path.relpath(tileset_path, base_dir)))

    out_path.parent.mkdir(parents=True, exist_ok=True)
    with out_path.open("w", encoding="utf-8") as fp:
        combine_tileset_json(uris, regions, fp, use_3d_tiles_next=args.gltf)

    logger.info("Combined %d tilesets into %s", len(uris), out_path)
    return 0


def run() -> None:
    try:
        raise SystemExit(main())
    except TileFormatError as exc:
        print(f"error: {exc}", file=sys.stderr)
        raise SystemExit(2)


if __name__ == "__main__":
    run()

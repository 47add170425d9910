"""Encoders for 3D Tiles containers (i3dm, b3dm, cmpt), tileset JSON and glTF feature metadata from CDB data."""

__version__ = "0.1.0"

from .attributes import InstancesAttributes, ModelsAttributes
from .b3dm import write_b3dm
from .batch_table import create_batch_table
from .byte_buffer import ByteBuffer, round_up
from .cmpt import write_cmpt
from .errors import TileFormatError
from .feature_metadata import add_feature_metadata
from .geodesy import WGS84, BoundingRegion, Cartographic, Ellipsoid, HeadingPitchRoll, Rectangle
from .gltf_writer import write_gltf
from .i3dm import write_i3dm
from .scene import GltfScene
from .tile import Tile, Tileset
from .tileset import MAX_GEOMETRIC_ERROR, combine_tileset_json, tile_to_json, write_tileset_json

__all__ = [
    # Values
    "BoundingRegion",
    "Cartographic",
    "Ellipsoid",
    "HeadingPitchRoll",
    "InstancesAttributes",
    "ModelsAttributes",
    "Rectangle",
    "Tile",
    "Tileset",
    "WGS84",
    # Buffers
    "ByteBuffer",
    "GltfScene",
    "round_up",
    # Encoders
    "add_feature_metadata",
    "create_batch_table",
    "write_b3dm",
    "write_cmpt",
    "write_gltf",
    "write_i3dm",
    # Tileset
    "MAX_GEOMETRIC_ERROR",
    "combine_tileset_json",
    "tile_to_json",
    "write_tileset_json",
    # Errors
    "TileFormatError",
]

from __future__ import annotations

import json
import math
import struct
from typing import Any

import pytest

from cdb3dtiles.attributes import InstancesAttributes, ModelsAttributes
from cdb3dtiles.geodesy import BoundingRegion, Cartographic, HeadingPitchRoll, Rectangle
from cdb3dtiles.scene import COMPONENT_TYPE_FLOAT32, TARGET_ARRAY_BUFFER, GltfScene
from cdb3dtiles.tile import Tile


def region_from_degrees(west: float, south: float, east: float, north: float, min_h: float = 0.0, max_h: float = 0.0):
    return BoundingRegion(
        Rectangle(math.radians(west), math.radians(south), math.radians(east), math.radians(north)),
        min_h,
        max_h,
    )


def parse_glb_json(data: bytes) -> dict[str, Any]:
    magic, version, total_length = struct.unpack_from("<4sII", data, 0)
    assert magic == b"glTF"
    assert version == 2
    json_length, chunk_type = struct.unpack_from("<II", data, 12)
    assert chunk_type == 0x4E4F534A
    return json.loads(data[20 : 20 + json_length].decode("utf-8"))


@pytest.fixture
def instances() -> InstancesAttributes:
    return InstancesAttributes(
        cnams=["tree_a", "tree_b", "tree_c"],
        integer_attribs={"NIS": [1, 2, 3]},
        double_attribs={"BSR": [1.5, 2.5, 3.5]},
        string_attribs={"MODL": ["oak", "pine", "birch"]},
    )


@pytest.fixture
def tile() -> Tile:
    return Tile(region_from_degrees(10.0, 45.0, 10.01, 45.01, 0.0, 200.0))


@pytest.fixture
def models(tile: Tile, instances: InstancesAttributes) -> ModelsAttributes:
    return ModelsAttributes(
        tile=tile,
        instances=instances,
        cartographic_positions=[
            Cartographic.from_degrees(10.001, 45.002, 120.0),
            Cartographic.from_degrees(10.005, 45.005, 80.0),
            Cartographic.from_degrees(10.009, 45.008, 10.0),
        ],
        scales=[(1.0, 1.0, 1.0), (2.0, 2.0, 3.0), (0.5, 0.5, 0.5)],
        orientations=[HeadingPitchRoll(0.0), HeadingPitchRoll(90.0), HeadingPitchRoll(45.0, 5.0, 0.0)],
    )


@pytest.fixture
def scene() -> GltfScene:
    """A single triangle whose vertices carry _BATCHID 0, 1 and 2."""
    scene = GltfScene()
    positions = struct.pack("<9f", 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 1.0, 0.0)
    batch_ids = struct.pack("<3f", 0.0, 1.0, 2.0)
    buffer_index = scene.add_buffer(positions + batch_ids)
    position_view = scene.add_buffer_view(buffer_index, 0, len(positions), TARGET_ARRAY_BUFFER)
    batch_id_view = scene.add_buffer_view(buffer_index, len(positions), len(batch_ids), TARGET_ARRAY_BUFFER)
    position_accessor = scene.add_accessor(
        position_view,
        COMPONENT_TYPE_FLOAT32,
        3,
        "VEC3",
        min_values=[0.0, 0.0, 0.0],
        max_values=[1.0, 1.0, 0.0],
    )
    batch_id_accessor = scene.add_accessor(batch_id_view, COMPONENT_TYPE_FLOAT32, 3, "SCALAR")
    scene.gltf["meshes"] = [
        {"primitives": [{"attributes": {"POSITION": position_accessor, "_BATCHID": batch_id_accessor}}]}
    ]
    scene.gltf["nodes"] = [{"mesh": 0}]
    scene.gltf["scenes"] = [{"nodes": [0]}]
    scene.gltf["scene"] = 0
    return scene

from __future__ import annotations

import logging
import struct
from typing import Any, BinaryIO

from .attributes import ModelsAttributes
from .batch_table import create_batch_table
from .byte_buffer import ByteBuffer, pad_json, pad_text, round_up
from .geodesy import WGS84, Ellipsoid, calculate_model_orientation, mat4_column, normalize_vec3
from .headers import GLTF_FORMAT_URI, I3DM_HEADER_SIZE, I3dmHeader


logger = logging.getLogger(__name__)

VEC3_FLOAT32_SIZE = 12


def create_feature_table(
    models: ModelsAttributes,
    selection: list[int],
    ellipsoid: Ellipsoid = WGS84,
) -> tuple[dict[str, Any], bytes]:
    models.check_placements()
    models.instances.check_selection(selection)

    count = len(selection)
    array_size = count * VEC3_FLOAT32_SIZE
    position_offset = 0
    scale_offset = position_offset + array_size
    normal_up_offset = scale_offset + array_size
    normal_right_offset = normal_up_offset + array_size

    center_cartographic = models.tile.bound_region.rectangle.center()
    cx, cy, cz = ellipsoid.cartographic_to_cartesian(center_cartographic)

    feature_table = {
        "INSTANCES_LENGTH": count,
        "RTC_CENTER": [cx, cy, cz],
        "POSITION": {"byteOffset": position_offset},
        "SCALE_NON_UNIFORM": {"byteOffset": scale_offset},
        "NORMAL_UP": {"byteOffset": normal_up_offset},
        "NORMAL_RIGHT": {"byteOffset": normal_right_offset},
    }

    body = ByteBuffer(round_up(4 * array_size))
    for i, instance_index in enumerate(selection):
        cartographic = models.cartographic_positions[instance_index]
        wx, wy, wz = ellipsoid.cartographic_to_cartesian(cartographic)
        rotation = calculate_model_orientation(cartographic, models.orientations[instance_index], ellipsoid)
        normal_up = normalize_vec3(mat4_column(rotation, 1))
        normal_right = normalize_vec3(mat4_column(rotation, 0))

        element = i * VEC3_FLOAT32_SIZE
        body.write_at(position_offset + element, struct.pack("<3f", wx - cx, wy - cy, wz - cz))
        body.write_at(scale_offset + element, struct.pack("<3f", *models.scales[instance_index]))
        body.write_at(normal_up_offset + element, struct.pack("<3f", *normal_up))
        body.write_at(normal_right_offset + element, struct.pack("<3f", *normal_right))

    return feature_table, body.getvalue()


def write_i3dm(
    gltf_uri: str,
    models: ModelsAttributes,
    selection: list[int],
    fp: BinaryIO,
    ellipsoid: Ellipsoid = WGS84,
) -> int:
    """Write an instanced 3D model tile referencing an external glTF.

    Positions are stored relative to the tile region center. Returns the
    number of bytes written.
    """
    selection = list(selection)
    feature_table, feature_table_bin = create_feature_table(models, selection, ellipsoid)
    batch_table, batch_table_bin = create_batch_table(models.instances, selection)

    feature_table_json = pad_json(feature_table, header_size=I3DM_HEADER_SIZE)
    batch_table_json = pad_json(batch_table)
    uri = pad_text(gltf_uri)

    header = I3dmHeader(
        feature_table_json_byte_length=len(feature_table_json),
        feature_table_bin_byte_length=len(feature_table_bin),
        batch_table_json_byte_length=len(batch_table_json),
        batch_table_bin_byte_length=len(batch_table_bin),
        gltf_format=GLTF_FORMAT_URI,
    )
    header.byte_length = (
        I3DM_HEADER_SIZE
        + len(feature_table_json)
        + len(feature_table_bin)
        + len(batch_table_json)
        + len(batch_table_bin)
        + len(uri)
    )

    fp.write(header.pack())
    fp.write(feature_table_json)
    fp.write(feature_table_bin)
    fp.write(batch_table_json)
    fp.write(batch_table_bin)
    fp.write(uri)

    logger.debug("Wrote i3dm: %d instances, %d bytes, uri=%s", len(selection), header.byte_length, gltf_uri)
    return header.byte_length

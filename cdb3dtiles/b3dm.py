from __future__ import annotations

import logging
from typing import BinaryIO

from .attributes import InstancesAttributes
from .batch_table import create_batch_table
from .byte_buffer import pad_json
from .gltf_writer import scene_to_glb
from .headers import B3DM_HEADER_SIZE, B3dmHeader
from .scene import GltfScene


logger = logging.getLogger(__name__)


def write_b3dm(scene: GltfScene, instances: InstancesAttributes | None, fp: BinaryIO) -> int:
    """Write a batched 3D model tile wrapping ``scene``.

    Every instance of ``instances`` is a batch, in table order. Returns the
    number of bytes written.
    """
    glb = scene_to_glb(scene)

    batch_length = instances.instances_count if instances is not None else 0
    feature_table_json = pad_json({"BATCH_LENGTH": batch_length}, header_size=B3DM_HEADER_SIZE)
    batch_table, batch_table_bin = create_batch_table(instances)
    batch_table_json = pad_json(batch_table)

    header = B3dmHeader(
        feature_table_json_byte_length=len(feature_table_json),
        feature_table_bin_byte_length=0,
        batch_table_json_byte_length=len(batch_table_json),
        batch_table_bin_byte_length=len(batch_table_bin),
    )
    header.byte_length = (
        B3DM_HEADER_SIZE + len(feature_table_json) + len(batch_table_json) + len(batch_table_bin) + len(glb)
    )

    fp.write(header.pack())
    fp.write(feature_table_json)
    fp.write(batch_table_json)
    fp.write(batch_table_bin)
    fp.write(glb)

    logger.debug("Wrote b3dm: %d batches, %d bytes", batch_length, header.byte_length)
    return header.byte_length

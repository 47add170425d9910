from __future__ import annotations

import logging
from typing import BinaryIO

from .attributes import InstancesAttributes
from .byte_buffer import pad_bytes
from .feature_metadata import add_feature_metadata
from .scene import GltfScene


logger = logging.getLogger(__name__)


def scene_to_glb(scene: GltfScene) -> bytes:
    return pad_bytes(scene.to_glb())


def write_gltf(scene: GltfScene, instances: InstancesAttributes | None, fp: BinaryIO) -> int:
    add_feature_metadata(scene, instances)
    glb = scene_to_glb(scene)
    fp.write(glb)
    logger.debug("Wrote glb: %d bytes", len(glb))
    return len(glb)

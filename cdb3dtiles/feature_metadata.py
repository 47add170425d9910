from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping

from .attributes import InstancesAttributes
from .byte_buffer import ByteBuffer
from .scene import GltfScene


logger = logging.getLogger(__name__)

EXT_FEATURE_METADATA = "EXT_feature_metadata"
CDB_CLASS_NAME = "CDBClass"
CDB_FEATURE_TABLE_NAME = "CDBFeatureTable"

BATCH_ID_ATTRIBUTE = "_BATCHID"
FEATURE_ID_ATTRIBUTE = "_FEATURE_ID_0"


@dataclass(frozen=True)
class AttributeInfo:
    name: str
    description: str


UNKNOWN_ATTRIBUTE = AttributeInfo("", "")

CDB_ATTRIBUTES: Mapping[str, AttributeInfo] = MappingProxyType(
    {
        "AO1": AttributeInfo(
            "Angle of Orientation",
            "The angular distance measured from true north (0 deg) clockwise to the major (Y) axis of the feature. If the feature is square, the axis 0 through 89.999 deg shall be recorded. If the feature is circular, 360.000 deg shall be recorded. Recommended Usage. CDB readers should default to a value of 0.000 if AO1 is missing. Applicable to Point, Light Point, Moving Model Location and Figure Point features. When used in conjunction with the PowerLine dataset, AO1 corresponds to the orientation of the Y-axis of the modeled pylon. The modeled pylon should be oriented (in its local Cartesian space) so that the wires nominally attach along the Y-axis.",
        ),
        "BBH": AttributeInfo(
            "Bounding Box Height",
            "The Height/Width/Length of the Bounding Box of the 3D model associated with a point feature. It is the dimension of the box centered at the model origin and that bounds the portion of the model above its XY plane, including the envelopes of all articulated parts. BBH refers to height of the box above the XY plane of the model, BBW refers to the width of the box along the X-axis, and BBL refers to the length of the box along the Y-axis. Note that for 3D models used as cultural features, the XY plane of the model corresponds to its ground reference plane. The value of BBH, BBW and BBL should be accounted for by client-devices (in combination with other information) to determine the appropriate distance at which the model should be paged-in, rendered or processed. BBH, BBW and BBL are usually generated through database authoring tool automation. Optional on features for which a MODL has been assigned. When missing, CDB readers should default BBH to the value of BSR, and BBW and BBL to twice the value of BSR. The dimension of the bounding box is intrinsic to the model and identical for all LOD representations.",
        ),
        "BBL": AttributeInfo(
            "Bounding Box Length",
            "The length of a feature.",
        ),
        "BBW": AttributeInfo(
            "Bounding Box Width",
            "The width of a feature.",
        ),
        "BSR": AttributeInfo(
            "Bounding Sphere Radius",
            "The radius of a feature. In the case where a feature references an associated 3D model, it is the radius of the hemisphere centered at the model origin and that bounds the portion of the model above its XY plane, including the envelopes of all articulated parts. Note that for 3D models used as cultural features, the XY plane of the model corresponds to its ground reference plane. The value of BSR should be accounted for by client-devices (in combination with other information) to determine the appropriate distance at which the model should be paged-in, rendered or processed. When the feature does not reference a 3D model, BSR is the radius of the abstract point representing the feature (e.g., a city).",
        ),
        "CMIX": AttributeInfo(
            "Composite Material Index",
            "Index into the Composite Material Table is used to determine the Base Materials composition of the associated feature.",
        ),
        "FSC": AttributeInfo(
            "Feature Classification Code",
            "This code, in conjunction with the FACC is used to distinguish and categorize features within a dataset.",
        ),
        "HGT": AttributeInfo(
            "Height above surface level",
            "Distance measured from the lowest point of the base at ground (non-floating objects) or water level (floating objects downhill side/downstream side) to the tallest point of the feature above the surface. Recorded values are positive numbers. In the case of roads and railroads, HGT corresponds to the elevation of the road/railroad wrt terrain in its immediate vicinity.",
        ),
        "MLOD": AttributeInfo(
            "Model Level Of Detail",
            "The level of detail of the 3D model associated with the point feature. When used in conjunction with MODL, the MLOD attribute indicates the LOD where the corresponding MODL is found. In this case, the value of MLOD can never be larger than the LOD of the Vector Tile-LOD that contains it. When used in the context of Airport and Environmental Light Point features, the value of MLOD, if present, indicates that this light point also exist in a 3D model found at the specified LOD. In such case, the value of MLOD is not constrained and can indicate any LOD.",
        ),
        "NIS": AttributeInfo(
            "Number of Instances",
            "Number of instances found in the 3D model associated with the cultural point feature.",
        ),
        "NIX": AttributeInfo(
            "Number of Indices",
            "Number of indices found in the 3D model associated with the cultural point feature.",
        ),
        "NNL": AttributeInfo(
            "Number of Normals",
            "Number of normal vectors found in the 3D model associated with the cultural point feature.",
        ),
        "NTC": AttributeInfo(
            "Number of Texture Coordinates",
            "Number of texture coordinates found in the 3D model associated with the cultural point feature.",
        ),
        "NTX": AttributeInfo(
            "Number of Texels",
            "Number of texels found in the 3D model associated with the cultural point feature.",
        ),
        "NVT": AttributeInfo(
            "Number of Vertices",
            "Number of vertices of the 3D model associated with a point feature.",
        ),
        "RTAI": AttributeInfo(
            "Relative Tactical Importance",
            "Provides the Relative TActical Importance of moving models or cultural features relative to other features for the purpose of client-device scene/load management. A value of 100% corresponds to the highest importance; a value of 0% corresponds to the lowest importance. When confronted with otherwise identical objects that differ only wrt to their RelativeTActical Importance, client-devices should always discard features with lower importance before those of higher importance in the course of performing their scene / load management function. As a result, a value of zero gives complete freedom to client-devices to discard the feature as soon as the load of the client-device is exceeded. The effectiveness of scene / load management functions can be severely hampered if large quantities of features are assigned the same Relative TActical Importance by the modeler. In effect, if all models are assigned the same value, the client-devices have no means to distinguish tactically important objects from each other. Assigning a value of 1% to all objects is equivalent to assigning them all a value of 99%. Ideally, the assignment of tactical importance to features should be in accordance to a histogram similar to the one shown here. The shape of the curve is not critical, however the proportion of models tagged with a high importance compared to those with low importance is critical in achieving effective scene/load management schemes. It is illustrated here to show that few models should have an importance of 100 with progressively more models with lower importance. The assignment of the RTAI to each feature lends itself to database tools automation. For instance, RTAI could be based on a look-up function which factors the feature's type (FACC or MMDC). The value of Relative TActical Importance should be accounted for by client-devices (in combination with other information) to determine the appropriate distance at which the model should be rendered or processed. Relative TActical Importance is mandatory. It has no default value.",
        ),
        "SSC": AttributeInfo(
            "Structure Shape Category",
            "Describes the Geometric form, appearance, or configuration of the feature.",
        ),
        "SSR": AttributeInfo(
            "Structure Shape of Roof",
            "Describes the roof shape.",
        ),
    }
)


def lookup_attribute(code: str) -> AttributeInfo:
    info = CDB_ATTRIBUTES.get(code)
    if info is None:
        logger.warning("Unknown CDB attribute code %s, emitting empty name and description", code)
        return UNKNOWN_ATTRIBUTE
    return info


def _primitive_extension() -> dict[str, Any]:
    return {
        "featureIdAttributes": [
            {
                "featureTable": CDB_FEATURE_TABLE_NAME,
                "featureIds": {"attribute": FEATURE_ID_ATTRIBUTE},
            }
        ]
    }


def _rename_batch_ids(scene: GltfScene) -> None:
    for mesh_index, mesh in enumerate(scene.gltf.get("meshes", [])):
        primitives = [p for p in mesh.get("primitives", []) if BATCH_ID_ATTRIBUTE in p.get("attributes", {})]
        if not primitives:
            continue
        # Only one primitive per mesh carries the feature ids.
        if len(primitives) > 1:
            logger.warning(
                "Mesh %d has %d primitives with %s, only the first is converted",
                mesh_index,
                len(primitives),
                BATCH_ID_ATTRIBUTE,
            )
        primitive = primitives[0]
        attributes = primitive["attributes"]
        attributes[FEATURE_ID_ATTRIBUTE] = attributes.pop(BATCH_ID_ATTRIBUTE)
        primitive.setdefault("extensions", {})[EXT_FEATURE_METADATA] = _primitive_extension()


def add_feature_metadata(scene: GltfScene, instances: InstancesAttributes | None) -> None:
    """Attach ``EXT_feature_metadata`` describing the numeric instance columns.

    Each integer and double column is copied into a new buffer and exposed as
    a property of the shared CDB feature table. String columns are not part
    of the metadata. Does nothing when ``instances`` is None or empty.
    """
    if instances is None:
        return
    instances.check_columns()
    if instances.instances_count == 0:
        # A feature table needs at least one element.
        logger.debug("No instances, skipping %s", EXT_FEATURE_METADATA)
        return

    _rename_batch_ids(scene)

    instances_count = instances.instances_count
    class_properties: dict[str, Any] = {}
    table_properties: dict[str, Any] = {}
    metadata = ByteBuffer()
    pending_views: list[tuple[str, int, int]] = []

    columns: list[tuple[str, str, bytes]] = []
    for code, column in instances.integer_attribs.items():
        columns.append((code, "INT32", struct.pack(f"<{instances_count}i", *(int(v) for v in column))))
    for code, column in instances.double_attribs.items():
        columns.append((code, "FLOAT64", struct.pack(f"<{instances_count}d", *(float(v) for v in column))))

    for code, value_type, data in columns:
        metadata.align()
        offset = metadata.append(data)
        pending_views.append((code, offset, len(data)))
        info = lookup_attribute(code)
        class_properties[code] = {"name": info.name, "description": info.description, "type": value_type}

    if len(metadata):
        buffer_index = scene.add_buffer(metadata.getvalue())
        for code, offset, length in pending_views:
            view_index = scene.add_buffer_view(buffer_index, offset, length)
            table_properties[code] = {"bufferView": view_index}

    scene.gltf.setdefault("extensions", {})[EXT_FEATURE_METADATA] = {
        "schema": {"classes": {CDB_CLASS_NAME: {"properties": class_properties}}},
        "featureTables": {
            CDB_FEATURE_TABLE_NAME: {
                "class": CDB_CLASS_NAME,
                "elementCount": instances_count,
                "properties": table_properties,
            }
        },
    }

    extensions_used = scene.gltf.setdefault("extensionsUsed", [])
    if EXT_FEATURE_METADATA not in extensions_used:
        extensions_used.append(EXT_FEATURE_METADATA)

    logger.debug(
        "Added %s: %d properties, %d instances", EXT_FEATURE_METADATA, len(class_properties), instances_count
    )

import struct

from cdb3dtiles.attributes import InstancesAttributes
from cdb3dtiles.feature_metadata import (
    CDB_ATTRIBUTES,
    EXT_FEATURE_METADATA,
    add_feature_metadata,
    lookup_attribute,
)


def test_dictionary_covers_known_codes():
    assert len(CDB_ATTRIBUTES) == 18
    assert CDB_ATTRIBUTES["RTAI"].name == "Relative Tactical Importance"
    assert CDB_ATTRIBUTES["BBL"].description == "The length of a feature."


def test_unknown_code_degrades_to_empty_strings():
    info = lookup_attribute("ZZZ")
    assert info.name == ""
    assert info.description == ""


def test_no_instances_leaves_scene_untouched(scene):
    before = len(scene.gltf["bufferViews"])
    add_feature_metadata(scene, None)
    assert len(scene.gltf["bufferViews"]) == before
    assert "extensions" not in scene.gltf


def test_single_integer_column(scene):
    instances = InstancesAttributes(cnams=["a", "b", "c"], integer_attribs={"NIS": [4, 5, 6]})
    views_before = len(scene.gltf["bufferViews"])
    buffers_before = len(scene.buffers)

    add_feature_metadata(scene, instances)

    assert len(scene.gltf["bufferViews"]) == views_before + 1
    assert len(scene.buffers) == buffers_before + 1

    extension = scene.gltf["extensions"][EXT_FEATURE_METADATA]
    table = extension["featureTables"]["CDBFeatureTable"]
    assert table["class"] == "CDBClass"
    assert table["elementCount"] == 3
    assert table["properties"] == {"NIS": {"bufferView": views_before}}

    prop = extension["schema"]["classes"]["CDBClass"]["properties"]["NIS"]
    assert prop["type"] == "INT32"
    assert prop["name"] == "Number of Instances"

    view = scene.gltf["bufferViews"][views_before]
    assert view["buffer"] == buffers_before
    data = bytes(scene.buffers[view["buffer"]])
    assert struct.unpack_from("<3i", data, view["byteOffset"]) == (4, 5, 6)


def test_batch_id_renamed_to_feature_id(scene, instances):
    batch_id_accessor = scene.gltf["meshes"][0]["primitives"][0]["attributes"]["_BATCHID"]

    add_feature_metadata(scene, instances)

    primitive = scene.gltf["meshes"][0]["primitives"][0]
    assert "_BATCHID" not in primitive["attributes"]
    assert primitive["attributes"]["_FEATURE_ID_0"] == batch_id_accessor
    assert primitive["extensions"][EXT_FEATURE_METADATA] == {
        "featureIdAttributes": [
            {"featureTable": "CDBFeatureTable", "featureIds": {"attribute": "_FEATURE_ID_0"}}
        ]
    }


def test_numeric_columns_share_one_aligned_buffer(scene, instances):
    instances.integer_attribs["ZZZ"] = [7, 8, 9]

    add_feature_metadata(scene, instances)

    extension = scene.gltf["extensions"][EXT_FEATURE_METADATA]
    properties = extension["featureTables"]["CDBFeatureTable"]["properties"]
    assert list(properties) == ["NIS", "ZZZ", "BSR"]
    assert "MODL" not in properties

    views = [scene.gltf["bufferViews"][p["bufferView"]] for p in properties.values()]
    assert len({v["buffer"] for v in views}) == 1
    assert [v["byteOffset"] for v in views] == [0, 16, 32]
    assert all(v["byteOffset"] % 8 == 0 for v in views)

    classes = extension["schema"]["classes"]["CDBClass"]["properties"]
    assert classes["BSR"]["type"] == "FLOAT64"
    assert classes["ZZZ"] == {"name": "", "description": "", "type": "INT32"}


def test_extension_declared_once(scene, instances):
    scene.gltf["extensionsUsed"] = [EXT_FEATURE_METADATA]
    add_feature_metadata(scene, instances)
    assert scene.gltf["extensionsUsed"] == [EXT_FEATURE_METADATA]


def test_only_first_batch_id_primitive_is_converted(scene, instances):
    primitives = scene.gltf["meshes"][0]["primitives"]
    primitives.append({"attributes": {"POSITION": 0, "_BATCHID": 1}})

    add_feature_metadata(scene, instances)

    assert "_FEATURE_ID_0" in primitives[0]["attributes"]
    assert primitives[1]["attributes"] == {"POSITION": 0, "_BATCHID": 1}


def test_zero_instances_leaves_scene_untouched(scene):
    views_before = len(scene.gltf["bufferViews"])
    buffers_before = len(scene.buffers)

    add_feature_metadata(scene, InstancesAttributes(cnams=[], integer_attribs={"NIS": []}))

    assert len(scene.gltf["bufferViews"]) == views_before
    assert len(scene.buffers) == buffers_before
    assert "extensions" not in scene.gltf
    assert "extensionsUsed" not in scene.gltf
    primitive = scene.gltf["meshes"][0]["primitives"][0]
    assert "_BATCHID" in primitive["attributes"]

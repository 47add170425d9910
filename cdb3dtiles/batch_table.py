from __future__ import annotations

import struct
from typing import Any

from .attributes import InstancesAttributes
from .byte_buffer import ByteBuffer


def _resolve_selection(instances: InstancesAttributes, selection: list[int] | None) -> list[int]:
    if selection is None:
        return list(range(instances.instances_count))
    selection = list(selection)
    instances.check_selection(selection)
    return selection


def create_batch_table(
    instances: InstancesAttributes | None,
    selection: list[int] | None = None,
) -> tuple[dict[str, Any], bytes]:
    """Build the batch table JSON object and binary body.

    ``selection`` lists the instance indices to emit, in output order; ``None``
    emits every instance. Integer columns are packed first as int32, the
    section is rounded up to 8 bytes, then double columns follow as float64.
    String columns live in the JSON only.
    """
    if instances is None:
        return {}, b""

    instances.check_columns()
    indices = _resolve_selection(instances, selection)
    count = len(indices)

    batch_table: dict[str, Any] = {"CNAM": [instances.cnams[i] for i in indices]}
    for code, column in instances.string_attribs.items():
        batch_table[code] = [column[i] for i in indices]

    body = ByteBuffer()
    for code, column in instances.integer_attribs.items():
        offset = body.append(struct.pack(f"<{count}i", *(int(column[i]) for i in indices)))
        batch_table[code] = {"byteOffset": offset, "type": "SCALAR", "componentType": "INT"}

    body.align()
    for code, column in instances.double_attribs.items():
        offset = body.append(struct.pack(f"<{count}d", *(float(column[i]) for i in indices)))
        batch_table[code] = {"byteOffset": offset, "type": "SCALAR", "componentType": "DOUBLE"}

    return batch_table, body.getvalue()

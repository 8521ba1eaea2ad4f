from __future__ import annotations

from pathlib import Path

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from feng_core.objects import BaseObject, ObjectType

from .package import Package

OBJECTS_SCHEMA = pa.schema(
    [
        ("guid", pa.uint32()),
        ("name", pa.string()),
        ("name_hash", pa.uint32()),
        ("type", pa.string()),
        ("flags", pa.uint32()),
        ("parent_guid", pa.uint32()),
        ("resource", pa.string()),
        ("data_type", pa.string()),
        ("pos_x", pa.float32()),
        ("pos_y", pa.float32()),
        ("pos_z", pa.float32()),
        ("scripts", pa.int32()),
        ("message_responses", pa.int32()),
    ]
)

# Nullable pandas dtypes so missing parents/positions stay null instead of NaN floats.
OBJECTS_DTYPES = {
    "guid": "UInt32",
    "name_hash": "UInt32",
    "flags": "UInt32",
    "parent_guid": "UInt32",
    "pos_x": "Float32",
    "pos_y": "Float32",
    "pos_z": "Float32",
    "scripts": "Int32",
    "message_responses": "Int32",
}

TARGETS_SCHEMA = pa.schema(
    [
        ("list_index", pa.int32()),
        ("position", pa.int32()),
        ("target_guid", pa.uint32()),
    ]
)


def _type_name(value: int) -> str:
    try:
        return ObjectType(value).name
    except ValueError:
        return str(int(value))


def object_record(obj: BaseObject) -> dict:
    position = obj.data.position if obj.data is not None else (None, None, None)
    return {
        "guid": obj.guid,
        "name": obj.name,
        "name_hash": obj.name_hash,
        "type": _type_name(obj.type),
        "flags": int(obj.flags),
        "parent_guid": obj.parent.guid if obj.parent is not None else None,
        "resource": obj.resource_request.name if obj.resource_request is not None else None,
        "data_type": type(obj.data).__name__ if obj.data is not None else None,
        "pos_x": position[0],
        "pos_y": position[1],
        "pos_z": position[2],
        "scripts": len(obj.scripts),
        "message_responses": len(obj.message_responses),
    }


def package_summary(package: Package) -> dict:
    return {
        "name": package.name,
        "version": package.version,
        "objects": [object_record(o) for o in package.objects],
        "resource_requests": [r.name for r in package.resource_requests],
        "message_target_lists": [list(t) for t in package.message_target_lists],
        "message_responses": len(package.message_responses),
    }


def export_objects(package: Package, out_path: Path) -> None:
    """Write objects.parquet and message_targets.parquet under out_path."""
    out_path = Path(out_path)
    out_path.mkdir(parents=True, exist_ok=True)

    df = pd.DataFrame([object_record(o) for o in package.objects], columns=OBJECTS_SCHEMA.names)
    df = df.astype(OBJECTS_DTYPES)
    table = pa.Table.from_pandas(df, schema=OBJECTS_SCHEMA, preserve_index=False)
    pq.write_table(table, out_path / "objects.parquet")

    targets = [
        {"list_index": i, "position": j, "target_guid": guid}
        for i, lst in enumerate(package.message_target_lists)
        for j, guid in enumerate(lst)
    ]
    df = pd.DataFrame(targets, columns=TARGETS_SCHEMA.names)
    df = df.astype({"list_index": "Int32", "position": "Int32", "target_guid": "UInt32"})
    table = pa.Table.from_pandas(df, schema=TARGETS_SCHEMA, preserve_index=False)
    pq.write_table(table, out_path / "message_targets.parquet")

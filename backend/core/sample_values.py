"""
Sample value synthesis for generated request bodies.
Maps a column's declared DBML type (and naming convention) to an example value.
"""
from datetime import datetime, timezone
from typing import Any, Iterable

from models.schema import Table

NIL_UUID = "00000000-0000-0000-0000-000000000000"
GUID_PLACEHOLDER = "{{guid}}"


def iso_now() -> str:
    # Millisecond precision with a Z suffix, e.g. 2024-05-01T12:00:00.000Z
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def sample_value(col_type: str, field_name: str) -> Any:
    """Return an example value for a column. First matching rule wins."""
    upper = (col_type or "").upper()

    if field_name == "guid":
        return GUID_PLACEHOLDER
    if field_name.endswith("_id") and "UUID" in upper:
        return GUID_PLACEHOLDER

    if "UUID" in upper:
        return NIL_UUID
    if "FLOAT" in upper or "INT" in upper or "NUMERIC" in upper:
        return 0
    if "BOOL" in upper:
        return False
    if "TIMESTAMP" in upper or "DATE" in upper:
        return iso_now()
    if "TEXT[]" in upper:
        return ["value"]
    if "UUID[]" in upper:  # unreachable while the UUID rule above matches first
        return [NIL_UUID]
    return ""


def sample_body(table: Table, exclude_fields: Iterable[str] = ()) -> dict[str, Any]:
    """Build an example body from a table's columns, in column order."""
    excluded = set(exclude_fields)
    return {
        col.name: sample_value(col.type, col.name)
        for col in table.columns
        if col.name not in excluded
    }

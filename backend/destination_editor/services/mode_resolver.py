"""
Create/edit mode resolution.

The form edits a record only when the requested identifier matches a record
in the most recently fetched collection.
"""

from typing import Iterable

from destination_editor.schemas.record import Record


def resolve_record(records: Iterable[Record], record_id: str | None) -> Record | None:
    """
    Find the record to edit.

    Args:
        records: Loaded collection, in server order
        record_id: Requested identifier; empty or None means create

    Returns:
        The first record whose id equals ``record_id`` exactly, else None
    """
    if not record_id:
        return None
    for record in records:
        if record.id == record_id:
            return record
    return None


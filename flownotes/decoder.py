from __future__ import annotations

import logging
from typing import Any

from .cadence import (
    LedgerValue,
    as_array,
    as_optional,
    as_string,
    as_struct,
    as_uint64,
    field_at,
    parse_value,
)
from .note import Note

logger = logging.getLogger(__name__)


def decode_note(value: LedgerValue) -> Note | None:
    """
    NoteDTO fields are positional: id (UInt64), title (String), body (String).
    """
    struct = as_struct(value)
    note_id = as_uint64(field_at(struct, 0))
    title = as_string(field_at(struct, 1))
    body = as_string(field_at(struct, 2))

    if note_id is None or title is None or body is None:
        return None
    return Note(id=note_id, title=title, body=body)


def decode_notes(value: LedgerValue | None) -> list[Note] | None:
    """
    Decode the result of the all-notes script, ``[NoteDTO]?``.

    Returns ``None`` when the account has no public notepad. Malformed entries
    are dropped so a single bad record never hides the rest of the notepad.
    """
    optional = as_optional(value)
    if optional is None:
        logger.warning(f"Unexpected notes result shape: {type(value).__name__}")
        return None
    if optional.value is None:
        return None

    items = as_array(optional.value)
    if items is None:
        logger.warning(f"Notes result is not an array: {type(optional.value).__name__}")
        return None

    notes: list[Note] = []
    for index, item in enumerate(items):
        note = decode_note(item)
        if note is None:
            logger.debug(f"Skipping malformed note at index {index}")
            continue
        notes.append(note)
    return notes


def decode_script_result(data: Any) -> list[Note] | None:
    try:
        value = parse_value(data)
    except ValueError as e:
        logger.warning(f"Could not parse notes result: {e}")
        return None
    return decode_notes(value)

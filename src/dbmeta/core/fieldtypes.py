"""Mapping of Firebird catalog field types to SQL type strings."""

from __future__ import annotations

from dbmeta.core.errors import UnsupportedTypeError

# RDB$FIELDS.RDB$FIELD_TYPE codes with a fixed rendering.
_FIXED_TYPES: dict[int, str] = {
    7: "SMALLINT",
    8: "INTEGER",
    10: "FLOAT",
    12: "DATE",
    13: "TIME",
    23: "BOOLEAN",
    24: "DECFLOAT(16)",
    25: "DECFLOAT(34)",
    26: "INT128",
    27: "DOUBLE PRECISION",
    28: "TIME WITH TIME ZONE",
    29: "TIMESTAMP WITH TIME ZONE",
    35: "TIMESTAMP",
    261: "BLOB",
}

_CHAR = 14
_INT64 = 16
_VARCHAR = 37


def map_field_type(
    field_type: int,
    field_length: int,
    character_length: int | None,
    field_precision: int,
    field_scale: int,
) -> str:
    """
    Render a catalog field descriptor as a canonical SQL type.

    Character types use the character length when the catalog provides one
    and fall back to the byte length otherwise. 64-bit integers with a
    non-zero scale are rendered as NUMERIC.

    Raises:
        UnsupportedTypeError: If the type code is not supported.
    """
    if field_type in _FIXED_TYPES:
        return _FIXED_TYPES[field_type]

    if field_type in (_CHAR, _VARCHAR):
        length = character_length if character_length is not None else field_length
        name = "CHAR" if field_type == _CHAR else "VARCHAR"
        return f"{name}({length})"

    if field_type == _INT64:
        if field_scale == 0:
            return "BIGINT"
        return f"NUMERIC({field_precision},{abs(field_scale)})"

    raise UnsupportedTypeError(field_type)

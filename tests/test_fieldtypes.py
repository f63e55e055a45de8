import pytest

from dbmeta.core.errors import UnsupportedTypeError
from dbmeta.core.fieldtypes import map_field_type


@pytest.mark.parametrize(
    ("code", "expected"),
    [
        (7, "SMALLINT"),
        (8, "INTEGER"),
        (10, "FLOAT"),
        (12, "DATE"),
        (13, "TIME"),
        (23, "BOOLEAN"),
        (24, "DECFLOAT(16)"),
        (25, "DECFLOAT(34)"),
        (26, "INT128"),
        (27, "DOUBLE PRECISION"),
        (28, "TIME WITH TIME ZONE"),
        (29, "TIMESTAMP WITH TIME ZONE"),
        (35, "TIMESTAMP"),
        (261, "BLOB"),
    ],
)
def test_map_field_type_fixed_types(code: int, expected: str):
    assert map_field_type(code, 8, None, 0, 0) == expected


def test_map_field_type_char_prefers_character_length():
    assert map_field_type(14, 40, 10, 0, 0) == "CHAR(10)"
    assert map_field_type(37, 200, 50, 0, 0) == "VARCHAR(50)"


def test_map_field_type_char_falls_back_to_field_length():
    assert map_field_type(14, 40, None, 0, 0) == "CHAR(40)"
    assert map_field_type(37, 200, None, 0, 0) == "VARCHAR(200)"


def test_map_field_type_int64_without_scale_is_bigint():
    assert map_field_type(16, 8, None, 18, 0) == "BIGINT"


def test_map_field_type_int64_with_scale_is_numeric():
    assert map_field_type(16, 8, None, 18, -2) == "NUMERIC(18,2)"


@pytest.mark.parametrize("code", [0, 9, 11, 40, 262])
def test_map_field_type_rejects_unknown_codes(code: int):
    with pytest.raises(UnsupportedTypeError, match=str(code)) as excinfo:
        map_field_type(code, 4, None, 0, 0)

    assert excinfo.value.field_type == code

from dbmeta.cli.common.progress import _MAX_STATEMENT_WIDTH, _statement_label


def test_statement_label_uses_first_non_blank_line():
    statement = "\n  CREATE TABLE T (\n    ID INTEGER\n);"

    assert _statement_label(statement) == "CREATE TABLE T ("


def test_statement_label_truncates_long_lines():
    statement = "CREATE DOMAIN " + "X" * (_MAX_STATEMENT_WIDTH + 10) + " AS INTEGER;"

    label = _statement_label(statement)

    assert len(label) == _MAX_STATEMENT_WIDTH
    assert label.endswith("...")

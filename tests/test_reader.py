import pytest

from dbmeta.core import reader as catalog
from dbmeta.core.errors import CatalogQueryError, UnsupportedTypeError
from dbmeta.core.models import ConstraintType
from dbmeta.core.reader import MetadataReader
from dbmeta.core.writer import generate_tables_metadata


class _Catalog:
    """Canned catalog: maps query text to rows (or to a callable of params)."""

    def __init__(self, responses: dict):
        self.responses = responses
        self.calls: list[tuple[str, tuple]] = []

    def query(self, sql: str, params=()) -> list[tuple]:
        self.calls.append((sql, tuple(params)))
        value = self.responses.get(sql, [])
        if callable(value):
            return value(tuple(params))
        return value


def _columns(params: tuple) -> list[tuple]:
    (table,) = params
    return {
        "CUSTOMERS": [
            ("ID                 ", 1, None, "RDB$1", 8, 4, None, 0, 0),
            ("NAME", None, None, "D_NAME", 37, 200, 50, 0, 0),
        ],
        "ORDERS": [
            ("ID", 1, None, "RDB$2", 8, 4, None, 0, 0),
            ("CUSTOMER_ID", None, None, "RDB$3", 8, 4, None, 0, 0),
            ("AMOUNT", None, "DEFAULT 0", "RDB$4", 16, 8, None, 18, -2),
            ("NOTE", None, None, "d_name", 37, 200, 50, 0, 0),
        ],
    }[table]


def _shop_catalog() -> _Catalog:
    return _Catalog(
        {
            catalog.DOMAINS_QUERY: [
                ("D_NAME                 ", 37, 200, 50, None, 0, 1, "DEFAULT 'n/a'"),
                ("D_PRICE", 16, 8, None, 18, -2, None, None),
            ],
            catalog.DOMAIN_NAMES_QUERY: [("D_NAME  ",), ("D_PRICE",)],
            catalog.TABLES_QUERY: [("CUSTOMERS    ",), ("ORDERS",)],
            catalog.COLUMNS_QUERY: _columns,
            catalog.KEY_CONSTRAINTS_QUERY: [
                ("CUSTOMERS", "PK_CUSTOMERS", "PRIMARY KEY", "ID"),
                ("ORDERS", "PK_ORDERS", "PRIMARY KEY", "ID"),
                ("ORDERS", "UQ_ORDERS", "UNIQUE", "CUSTOMER_ID"),
                ("ORDERS", "UQ_ORDERS", "UNIQUE", "AMOUNT"),
            ],
            catalog.FOREIGN_KEYS_QUERY: [
                ("ORDERS", "FK_ORDERS_CUSTOMER", "CUSTOMER_ID", "CUSTOMERS", "ID"),
            ],
            catalog.PROCEDURES_QUERY: [
                ("GET_LABEL  ", "BEGIN\n  LABEL = 'x';\n  SUSPEND;\nEND  "),
                ("NOOP", None),
            ],
            catalog.PARAMETERS_QUERY: lambda params: {
                ("GET_LABEL",): [
                    ("CUSTOMER_ID", 0, "RDB$5", 8, 4, None, 0, 0),
                    ("LABEL", 1, "D_NAME", 37, 200, 50, 0, 0),
                ],
            }.get(params, []),
        }
    )


def test_get_domains_maps_types_flags_and_defaults():
    domains = MetadataReader(_shop_catalog()).get_domains()

    assert [d.name for d in domains] == ["D_NAME", "D_PRICE"]
    assert domains[0].sql_type == "VARCHAR(50)"
    assert domains[0].is_not_null is True
    assert domains[0].default_source == "'n/a'"
    assert domains[1].sql_type == "NUMERIC(18,2)"
    assert domains[1].is_not_null is False
    assert domains[1].default_source is None


def test_get_tables_keeps_column_order_and_resolves_domains():
    tables = MetadataReader(_shop_catalog()).get_tables()

    assert [t.name for t in tables] == ["CUSTOMERS", "ORDERS"]
    orders = tables[1]
    assert [(c.name, c.sql_type) for c in orders.columns] == [
        ("ID", "INTEGER"),
        ("CUSTOMER_ID", "INTEGER"),
        ("AMOUNT", "NUMERIC(18,2)"),
        ("NOTE", "d_name"),
    ]
    assert orders.columns[0].is_not_null is True
    assert orders.columns[2].default_source == "0"
    assert tables[0].columns[1].sql_type == "D_NAME"


def test_get_tables_attaches_constraints_in_discovery_order():
    orders = MetadataReader(_shop_catalog()).get_tables()[1]

    assert [(c.name, c.type) for c in orders.constraints] == [
        ("PK_ORDERS", ConstraintType.PRIMARY_KEY),
        ("UQ_ORDERS", ConstraintType.UNIQUE),
        ("FK_ORDERS_CUSTOMER", ConstraintType.FOREIGN_KEY),
    ]
    assert orders.constraints[1].columns == ["CUSTOMER_ID", "AMOUNT"]
    assert orders.constraints[0].referenced_table is None


def test_foreign_key_uses_referenced_key_columns():
    constraints = MetadataReader(_shop_catalog()).get_constraints()

    fk = constraints["ORDERS"][-1]
    assert fk.columns == ["CUSTOMER_ID"]
    assert fk.referenced_table == "CUSTOMERS"
    assert fk.referenced_columns == ["ID"]


def test_tables_round_trip_into_constraint_statements():
    tables = MetadataReader(_shop_catalog()).get_tables()

    sql = generate_tables_metadata([t for t in tables if t.name == "ORDERS"])

    assert sql.count("ADD CONSTRAINT PK_ORDERS PRIMARY KEY (ID);") == 1
    assert sql.count("FOREIGN KEY") == 1
    assert (
        "ALTER TABLE ORDERS ADD CONSTRAINT FK_ORDERS_CUSTOMER FOREIGN KEY (CUSTOMER_ID) "
        "REFERENCES CUSTOMERS (ID);"
    ) in sql


def test_get_procedures_reads_body_and_parameters():
    procedures = MetadataReader(_shop_catalog()).get_procedures()

    assert [p.name for p in procedures] == ["GET_LABEL", "NOOP"]
    get_label, noop = procedures
    assert get_label.body == "BEGIN\n  LABEL = 'x';\n  SUSPEND;\nEND"
    assert [(p.name, p.sql_type, p.is_output) for p in get_label.parameters] == [
        ("CUSTOMER_ID", "INTEGER", False),
        ("LABEL", "D_NAME", True),
    ]
    assert noop.body == ""
    assert noop.parameters == []


def test_get_procedures_queries_parameters_per_procedure():
    cat = _shop_catalog()

    MetadataReader(cat).get_procedures()

    param_calls = [params for sql, params in cat.calls if sql == catalog.PARAMETERS_QUERY]
    assert param_calls == [("GET_LABEL",), ("NOOP",)]


def test_unsupported_type_aborts_read():
    cat = _Catalog({catalog.DOMAINS_QUERY: [("D_ODD", 999, 4, None, 0, 0, 0, None)]})

    with pytest.raises(UnsupportedTypeError):
        MetadataReader(cat).get_domains()


def test_query_failure_is_reported_as_catalog_error():
    class _Broken:
        def query(self, sql, params=()):
            raise RuntimeError("connection lost")

    with pytest.raises(CatalogQueryError, match="connection lost"):
        MetadataReader(_Broken()).get_domains()


def test_null_required_value_is_reported_as_catalog_error():
    cat = _Catalog({catalog.TABLES_QUERY: [(None,)]})

    with pytest.raises(CatalogQueryError, match="table name"):
        MetadataReader(cat).get_tables()


def test_unexpected_constraint_type_is_reported():
    cat = _Catalog(
        {catalog.KEY_CONSTRAINTS_QUERY: [("T", "CK_T", "CHECK", "ID")]}
    )

    with pytest.raises(CatalogQueryError, match="CHECK"):
        MetadataReader(cat).get_constraints()


class _Blob:
    def __init__(self, payload: str):
        self.payload = payload
        self.closed = False

    def read(self) -> str:
        return self.payload

    def close(self) -> None:
        self.closed = True


def test_blob_source_is_read_and_closed():
    blob = _Blob("BEGIN\n  SUSPEND;\nEND  ")

    assert catalog._text(blob) == "BEGIN\n  SUSPEND;\nEND"
    assert blob.closed is True

"""Reconstruction of schema objects from the Firebird system catalog.

The reader only depends on a small query capability (`CatalogQueryExecutor`),
so it can run against a live connection or against canned rows in tests. All
operations are read-only.
"""

from __future__ import annotations

import re
from typing import Any, Protocol, Sequence

from dbmeta.core.errors import CatalogQueryError
from dbmeta.core.fieldtypes import map_field_type
from dbmeta.core.models import (
    ColumnDefinition,
    ConstraintDefinition,
    ConstraintType,
    DomainDefinition,
    ProcedureDefinition,
    ProcedureParameter,
    TableDefinition,
)


class CatalogQueryExecutor(Protocol):
    """Interface for running parameterized catalog queries."""

    def query(self, sql: str, params: Sequence[Any] = ()) -> list[tuple]:
        """Run a query and return all rows as tuples."""
        ...


DOMAINS_QUERY = """
    SELECT f.RDB$FIELD_NAME, f.RDB$FIELD_TYPE, f.RDB$FIELD_LENGTH,
           f.RDB$CHARACTER_LENGTH, f.RDB$FIELD_PRECISION, f.RDB$FIELD_SCALE,
           f.RDB$NULL_FLAG, f.RDB$DEFAULT_SOURCE
    FROM RDB$FIELDS f
    WHERE f.RDB$SYSTEM_FLAG = 0 AND f.RDB$FIELD_NAME NOT LIKE 'RDB$%'
    ORDER BY f.RDB$FIELD_NAME
"""

DOMAIN_NAMES_QUERY = """
    SELECT f.RDB$FIELD_NAME
    FROM RDB$FIELDS f
    WHERE f.RDB$SYSTEM_FLAG = 0 AND f.RDB$FIELD_NAME NOT LIKE 'RDB$%'
"""

TABLES_QUERY = """
    SELECT r.RDB$RELATION_NAME
    FROM RDB$RELATIONS r
    WHERE r.RDB$SYSTEM_FLAG = 0 AND r.RDB$VIEW_BLR IS NULL
    ORDER BY r.RDB$RELATION_NAME
"""

COLUMNS_QUERY = """
    SELECT rf.RDB$FIELD_NAME, rf.RDB$NULL_FLAG, rf.RDB$DEFAULT_SOURCE,
           rf.RDB$FIELD_SOURCE, f.RDB$FIELD_TYPE, f.RDB$FIELD_LENGTH,
           f.RDB$CHARACTER_LENGTH, f.RDB$FIELD_PRECISION, f.RDB$FIELD_SCALE
    FROM RDB$RELATION_FIELDS rf
    JOIN RDB$FIELDS f ON f.RDB$FIELD_NAME = rf.RDB$FIELD_SOURCE
    WHERE rf.RDB$RELATION_NAME = ?
    ORDER BY rf.RDB$FIELD_POSITION
"""

KEY_CONSTRAINTS_QUERY = """
    SELECT rc.RDB$RELATION_NAME, rc.RDB$CONSTRAINT_NAME, rc.RDB$CONSTRAINT_TYPE,
           sg.RDB$FIELD_NAME
    FROM RDB$RELATION_CONSTRAINTS rc
    JOIN RDB$INDICES i ON i.RDB$INDEX_NAME = rc.RDB$INDEX_NAME
    JOIN RDB$INDEX_SEGMENTS sg ON sg.RDB$INDEX_NAME = i.RDB$INDEX_NAME
    WHERE rc.RDB$CONSTRAINT_TYPE IN ('PRIMARY KEY', 'UNIQUE')
    ORDER BY rc.RDB$RELATION_NAME, rc.RDB$CONSTRAINT_NAME, sg.RDB$FIELD_POSITION
"""

# Referenced columns come from the referenced key's own index segments,
# matched to the local segments by position.
FOREIGN_KEYS_QUERY = """
    SELECT rc.RDB$RELATION_NAME, rc.RDB$CONSTRAINT_NAME, sg.RDB$FIELD_NAME,
           rc2.RDB$RELATION_NAME, rsg.RDB$FIELD_NAME
    FROM RDB$RELATION_CONSTRAINTS rc
    JOIN RDB$REF_CONSTRAINTS refc ON refc.RDB$CONSTRAINT_NAME = rc.RDB$CONSTRAINT_NAME
    JOIN RDB$INDEX_SEGMENTS sg ON sg.RDB$INDEX_NAME = rc.RDB$INDEX_NAME
    JOIN RDB$RELATION_CONSTRAINTS rc2 ON rc2.RDB$CONSTRAINT_NAME = refc.RDB$CONST_NAME_UQ
    JOIN RDB$INDEX_SEGMENTS rsg ON rsg.RDB$INDEX_NAME = rc2.RDB$INDEX_NAME
        AND rsg.RDB$FIELD_POSITION = sg.RDB$FIELD_POSITION
    WHERE rc.RDB$CONSTRAINT_TYPE = 'FOREIGN KEY'
    ORDER BY rc.RDB$RELATION_NAME, rc.RDB$CONSTRAINT_NAME, sg.RDB$FIELD_POSITION
"""

PROCEDURES_QUERY = """
    SELECT p.RDB$PROCEDURE_NAME, p.RDB$PROCEDURE_SOURCE
    FROM RDB$PROCEDURES p
    WHERE p.RDB$SYSTEM_FLAG = 0
    ORDER BY p.RDB$PROCEDURE_NAME
"""

PARAMETERS_QUERY = """
    SELECT pp.RDB$PARAMETER_NAME, pp.RDB$PARAMETER_TYPE, pp.RDB$FIELD_SOURCE,
           f.RDB$FIELD_TYPE, f.RDB$FIELD_LENGTH, f.RDB$CHARACTER_LENGTH,
           f.RDB$FIELD_PRECISION, f.RDB$FIELD_SCALE
    FROM RDB$PROCEDURE_PARAMETERS pp
    JOIN RDB$FIELDS f ON f.RDB$FIELD_NAME = pp.RDB$FIELD_SOURCE
    WHERE pp.RDB$PROCEDURE_NAME = ?
    ORDER BY pp.RDB$PARAMETER_NUMBER
"""

_DEFAULT_KEYWORD_RE = re.compile(r"^\s*DEFAULT\s+", re.IGNORECASE)


def _text(value: Any) -> str | None:
    """Return a trimmed catalog string (CHAR columns are blank padded)."""
    if value is None:
        return None
    if hasattr(value, "read"):
        # Large BLOB SUB_TYPE TEXT values arrive as an open BlobReader.
        blob = value
        try:
            value = blob.read()
        finally:
            if hasattr(blob, "close"):
                blob.close()
    if isinstance(value, bytes):
        value = value.decode("utf-8")
    return str(value).strip()


def _required_text(row: Sequence[Any], index: int, what: str) -> str:
    value = _text(row[index])
    if not value:
        raise CatalogQueryError(f"Catalog returned no value for {what}.")
    return value


def _required_int(row: Sequence[Any], index: int, what: str) -> int:
    value = row[index]
    if value is None:
        raise CatalogQueryError(f"Catalog returned no value for {what}.")
    return int(value)


def _optional_int(value: Any, default: int | None = 0) -> int | None:
    return default if value is None else int(value)


def _default_expression(value: Any) -> str | None:
    """
    Return the bare default expression.

    RDB$DEFAULT_SOURCE stores the clause including its keyword
    (`DEFAULT 0`), which is stripped here.
    """
    source = _text(value)
    if not source:
        return None
    return _DEFAULT_KEYWORD_RE.sub("", source, count=1) or None


def _field_type(row: Sequence[Any], start: int) -> str:
    """Map the five field descriptor columns starting at `start`."""
    return map_field_type(
        _required_int(row, start, "RDB$FIELD_TYPE"),
        _required_int(row, start + 1, "RDB$FIELD_LENGTH"),
        _optional_int(row[start + 2], None),
        _optional_int(row[start + 3]),
        _optional_int(row[start + 4]),
    )


class MetadataReader:
    """Reads domains, tables and procedures from a Firebird catalog."""

    def __init__(self, executor: CatalogQueryExecutor) -> None:
        self.executor = executor

    def _query(self, sql: str, params: Sequence[Any] = ()) -> list[tuple]:
        try:
            return self.executor.query(sql, params)
        except CatalogQueryError:
            raise
        except Exception as exc:
            raise CatalogQueryError(f"Catalog query failed: {exc}") from exc

    def _user_domain_names(self) -> set[str]:
        """Return upper-cased names of user domains for case-insensitive lookup."""
        return {
            _required_text(row, 0, "domain name").upper()
            for row in self._query(DOMAIN_NAMES_QUERY)
        }

    def _resolve_type(
        self, field_source: str, row: Sequence[Any], start: int, domain_names: set[str]
    ) -> str:
        """Return the domain name when the field source is a user domain."""
        if field_source.upper() in domain_names:
            return field_source
        return _field_type(row, start)

    def get_domains(self) -> list[DomainDefinition]:
        """Return all user domains ordered by name."""
        domains: list[DomainDefinition] = []
        for row in self._query(DOMAINS_QUERY):
            domains.append(
                DomainDefinition(
                    name=_required_text(row, 0, "domain name"),
                    sql_type=_field_type(row, 1),
                    is_not_null=_optional_int(row[6]) == 1,
                    default_source=_default_expression(row[7]),
                )
            )
        return domains

    def get_tables(self) -> list[TableDefinition]:
        """Return user tables (views excluded) with columns and constraints."""
        domain_names = self._user_domain_names()
        table_names = [
            _required_text(row, 0, "table name") for row in self._query(TABLES_QUERY)
        ]

        columns_by_table: dict[str, list[ColumnDefinition]] = {}
        for table_name in table_names:
            columns: list[ColumnDefinition] = []
            for row in self._query(COLUMNS_QUERY, (table_name,)):
                field_source = _required_text(row, 3, "column field source")
                columns.append(
                    ColumnDefinition(
                        name=_required_text(row, 0, "column name"),
                        sql_type=self._resolve_type(field_source, row, 4, domain_names),
                        is_not_null=_optional_int(row[1]) == 1,
                        default_source=_default_expression(row[2]),
                    )
                )
            columns_by_table[table_name] = columns

        constraints = self.get_constraints()
        return [
            TableDefinition(
                name=name,
                columns=columns_by_table[name],
                constraints=constraints.get(name.upper(), []),
            )
            for name in table_names
        ]

    def get_constraints(self) -> dict[str, list[ConstraintDefinition]]:
        """
        Return PRIMARY KEY, UNIQUE and FOREIGN KEY constraints per table.

        The map is keyed by upper-cased table name. Within a table, constraints
        are listed in discovery order (key constraints first, then foreign
        keys) and columns in index segment order.
        """
        result: dict[str, list[ConstraintDefinition]] = {}

        def _constraint_for(
            table: str, name: str, factory
        ) -> ConstraintDefinition:
            items = result.setdefault(table.upper(), [])
            for existing in items:
                if existing.name == name:
                    return existing
            created = factory()
            items.append(created)
            return created

        for row in self._query(KEY_CONSTRAINTS_QUERY):
            table = _required_text(row, 0, "constraint table")
            name = _required_text(row, 1, "constraint name")
            raw_type = _required_text(row, 2, "constraint type")
            try:
                constraint_type = ConstraintType(raw_type.upper())
            except ValueError as exc:
                raise CatalogQueryError(
                    f"Unexpected constraint type '{raw_type}' for {name}."
                ) from exc
            constraint = _constraint_for(
                table,
                name,
                lambda: ConstraintDefinition(name=name, type=constraint_type),
            )
            constraint.columns.append(_required_text(row, 3, "constraint column"))

        for row in self._query(FOREIGN_KEYS_QUERY):
            table = _required_text(row, 0, "foreign key table")
            name = _required_text(row, 1, "foreign key name")
            referenced_table = _required_text(row, 3, "referenced table")
            constraint = _constraint_for(
                table,
                name,
                lambda: ConstraintDefinition(
                    name=name,
                    type=ConstraintType.FOREIGN_KEY,
                    referenced_table=referenced_table,
                    referenced_columns=[],
                ),
            )
            constraint.columns.append(_required_text(row, 2, "foreign key column"))
            constraint.referenced_columns.append(
                _required_text(row, 4, "referenced column")
            )

        return result

    def get_procedures(self) -> list[ProcedureDefinition]:
        """Return user procedures ordered by name, with ordered parameters."""
        domain_names = self._user_domain_names()
        procedures: list[ProcedureDefinition] = []

        for row in self._query(PROCEDURES_QUERY):
            name = _required_text(row, 0, "procedure name")
            parameters: list[ProcedureParameter] = []
            for param in self._query(PARAMETERS_QUERY, (name,)):
                field_source = _required_text(param, 2, "parameter field source")
                parameters.append(
                    ProcedureParameter(
                        name=_text(param[0]) or "",
                        sql_type=self._resolve_type(field_source, param, 3, domain_names),
                        is_output=_required_int(param, 1, "parameter type") == 1,
                    )
                )
            procedures.append(
                ProcedureDefinition(
                    name=name, parameters=parameters, body=_text(row[1]) or ""
                )
            )

        return procedures

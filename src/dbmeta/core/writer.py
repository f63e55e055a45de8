"""Rendering of schema models into canonical, re-executable DDL scripts.

The `generate_*` functions are pure; the `write_*` functions only persist
their output as UTF-8 text.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from dbmeta.core.models import (
    ConstraintDefinition,
    ConstraintType,
    DomainDefinition,
    ProcedureDefinition,
    ProcedureParameter,
    TableDefinition,
)

_INDENT = "    "


def _column_suffix(is_not_null: bool, default_source: str | None) -> str:
    suffix = " NOT NULL" if is_not_null else ""
    if default_source:
        suffix += f" DEFAULT {default_source}"
    return suffix


def generate_domains_metadata(domains: Iterable[DomainDefinition]) -> str:
    """Render one `CREATE DOMAIN` statement per line."""
    lines = [
        f"CREATE DOMAIN {d.name} AS {d.sql_type}"
        f"{_column_suffix(d.is_not_null, d.default_source)};"
        for d in domains
    ]
    return "".join(f"{line}\n" for line in lines)


def _constraint_statement(table: str, constraint: ConstraintDefinition) -> str | None:
    """Render an ALTER TABLE statement, or None for an incomplete foreign key."""
    columns = ", ".join(constraint.columns)

    if constraint.type in (ConstraintType.PRIMARY_KEY, ConstraintType.UNIQUE):
        return (
            f"ALTER TABLE {table} ADD CONSTRAINT {constraint.name} "
            f"{constraint.type.value} ({columns});"
        )

    if not constraint.referenced_table or constraint.referenced_columns is None:
        return None

    referenced = ", ".join(constraint.referenced_columns)
    return (
        f"ALTER TABLE {table} ADD CONSTRAINT {constraint.name} FOREIGN KEY ({columns}) "
        f"REFERENCES {constraint.referenced_table} ({referenced});"
    )


def generate_tables_metadata(tables: Iterable[TableDefinition]) -> str:
    """
    Render `CREATE TABLE` statements followed by their constraints.

    Constraints are emitted as separate `ALTER TABLE ... ADD CONSTRAINT`
    statements after the table body. Foreign keys without a referenced table
    or referenced columns are skipped.
    """
    lines: list[str] = []

    for table in tables:
        lines.append(f"CREATE TABLE {table.name} (")
        last = len(table.columns) - 1
        for i, column in enumerate(table.columns):
            separator = "," if i < last else ""
            lines.append(
                f"{_INDENT}{column.name} {column.sql_type}"
                f"{_column_suffix(column.is_not_null, column.default_source)}{separator}"
            )
        lines.append(");")
        lines.append("")

        for constraint in table.constraints:
            statement = _constraint_statement(table.name, constraint)
            if statement:
                lines.append(statement)

        lines.append("")

    return "".join(f"{line}\n" for line in lines)


def _parameter_block(parameters: list[ProcedureParameter]) -> list[str]:
    return [
        ",\n".join(f"{_INDENT}{p.name} {p.sql_type}" for p in parameters),
        ")",
    ]


def _procedure_header(verb: str, procedure: ProcedureDefinition) -> list[str]:
    """Render `<verb> PROCEDURE name [(inputs)] [RETURNS (outputs)] AS`."""
    lines: list[str] = []
    inputs = procedure.input_parameters
    outputs = procedure.output_parameters

    if inputs:
        lines.append(f"{verb} PROCEDURE {procedure.name} (")
        lines.extend(_parameter_block(inputs))
    else:
        lines.append(f"{verb} PROCEDURE {procedure.name}")

    if outputs:
        lines.append("RETURNS (")
        lines.extend(_parameter_block(outputs))

    lines.append("AS")
    return lines


def generate_procedures_metadata(procedures: Iterable[ProcedureDefinition]) -> str:
    """
    Render each procedure as a stub followed by its real definition.

    The stub (`CREATE PROCEDURE ... BEGIN SUSPEND; END;`) declares every
    procedure with its signature first, so the `ALTER PROCEDURE` carrying the
    real body can reference procedures defined later in the script.
    """
    lines: list[str] = []

    for procedure in procedures:
        lines.extend(_procedure_header("CREATE", procedure))
        lines.extend(["BEGIN", "  SUSPEND;", "END;", ""])

        lines.extend(_procedure_header("ALTER", procedure))
        lines.append(f"{procedure.body};")
        lines.append("")

    return "".join(f"{line}\n" for line in lines)


def _write(path: Path, text: str) -> None:
    Path(path).write_text(text, encoding="utf-8")


def write_domains_metadata(domains: Iterable[DomainDefinition], path: Path) -> None:
    """Write rendered domains to `path`."""
    _write(path, generate_domains_metadata(domains))


def write_tables_metadata(tables: Iterable[TableDefinition], path: Path) -> None:
    """Write rendered tables and constraints to `path`."""
    _write(path, generate_tables_metadata(tables))


def write_procedures_metadata(
    procedures: Iterable[ProcedureDefinition], path: Path
) -> None:
    """Write rendered procedures to `path`."""
    _write(path, generate_procedures_metadata(procedures))

"""Core schema models for Firebird metadata.

These models represent catalog objects (domains, tables, procedures) in a
simple form that can be rendered back into DDL. They are intentionally free of
driver types and CLI concerns, and live only for a single export/build/update
invocation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True)
class DomainDefinition:
    """
    A named, reusable column type.

    Attributes:
        name: Domain name as stored in the catalog (trimmed).
        sql_type: Canonical SQL type string, e.g. `VARCHAR(50)`.
        is_not_null: True if the domain carries a NOT NULL constraint.
        default_source: Bare default expression, or None when there is no default.
    """

    name: str
    sql_type: str
    is_not_null: bool = False
    default_source: str | None = None


@dataclass(frozen=True)
class ColumnDefinition:
    """
    A table column.

    `sql_type` is either a canonical primitive type or the name of a user
    domain; the domain name is kept as-is so the primitive type stays defined
    in the domain script only.
    """

    name: str
    sql_type: str
    is_not_null: bool = False
    default_source: str | None = None


class ConstraintType(str, Enum):
    """Constraint kinds that are reconstructed from the catalog."""

    PRIMARY_KEY = "PRIMARY KEY"
    UNIQUE = "UNIQUE"
    FOREIGN_KEY = "FOREIGN KEY"


@dataclass(frozen=True)
class ConstraintDefinition:
    """
    A table-level constraint.

    Attributes:
        name: Constraint name.
        type: One of PRIMARY KEY, UNIQUE, FOREIGN KEY.
        columns: Local column names in index segment order.
        referenced_table: Referenced table (FOREIGN KEY only).
        referenced_columns: Referenced columns, positionally matching `columns`
            (FOREIGN KEY only).
    """

    name: str
    type: ConstraintType
    columns: list[str] = field(default_factory=list)
    referenced_table: str | None = None
    referenced_columns: list[str] | None = None


@dataclass(frozen=True)
class TableDefinition:
    """A user table with its columns (in field position order) and constraints."""

    name: str
    columns: list[ColumnDefinition] = field(default_factory=list)
    constraints: list[ConstraintDefinition] = field(default_factory=list)


@dataclass(frozen=True)
class ProcedureParameter:
    """A stored procedure parameter (`is_output` False = input, True = output)."""

    name: str
    sql_type: str
    is_output: bool = False


@dataclass(frozen=True)
class ProcedureDefinition:
    """
    A stored procedure.

    `body` is the raw procedural block source (`AS` clause contents), without
    any enclosing CREATE statement.
    """

    name: str
    parameters: list[ProcedureParameter] = field(default_factory=list)
    body: str = ""

    @property
    def input_parameters(self) -> list[ProcedureParameter]:
        return [p for p in self.parameters if not p.is_output]

    @property
    def output_parameters(self) -> list[ProcedureParameter]:
        return [p for p in self.parameters if p.is_output]

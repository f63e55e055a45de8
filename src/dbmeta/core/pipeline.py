"""Build, update and export flows.

This module wires the script orderer, the statement splitter and the metadata
reader/writer to the executor capabilities. It is synchronous and free of
output concerns; callers observe progress through optional callbacks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, Iterator, Protocol

from dbmeta.core.errors import DbMetaError
from dbmeta.core.reader import MetadataReader
from dbmeta.core.scripts import ScriptInfo
from dbmeta.core.statements import split_sql_statements
from dbmeta.core.writer import (
    write_domains_metadata,
    write_procedures_metadata,
    write_tables_metadata,
)

DOMAINS_FILE = "domains.sql"
TABLES_FILE = "tables.sql"
PROCEDURES_FILE = "procedures.sql"


class StatementExecutor(Protocol):
    """Interface for executing DDL statements with explicit transaction control."""

    def execute(self, statement: str) -> None:
        """Execute one statement in the current transaction."""
        ...

    def commit(self) -> None:
        """Commit the current transaction."""
        ...

    def rollback(self) -> None:
        """Roll back the current transaction."""
        ...


@dataclass(frozen=True)
class StatementResult:
    """Outcome of executing a single statement during an update."""

    script: str
    statement: str
    ok: bool
    error: str | None = None

    @property
    def summary(self) -> str:
        """First line of the statement, for compact reporting."""
        return self.statement.strip().splitlines()[0] if self.statement.strip() else ""


@dataclass(frozen=True)
class ExportSummary:
    """Counts and files produced by an export."""

    domains: int
    tables: int
    procedures: int
    files: list[Path] = field(default_factory=list)


def iter_statements(scripts: Iterable[ScriptInfo]) -> Iterator[tuple[ScriptInfo, str]]:
    """
    Yield (script, statement) pairs in execution order.

    Scripts are expected to be ordered already; statements are produced from
    the verbatim script text so literals keep their case.
    """
    for script in scripts:
        for statement in split_sql_statements(script.source_text or script.file_content):
            yield script, statement


def build_database(
    executor: StatementExecutor,
    scripts: Iterable[ScriptInfo],
    *,
    on_statement: Callable[[ScriptInfo, str], None] | None = None,
) -> int:
    """
    Execute every statement of every script, committing each one.

    The first failing statement propagates and aborts the build; statements
    executed before it stay committed.

    Returns:
        The number of executed statements.
    """
    executed = 0
    for script, statement in iter_statements(scripts):
        executor.execute(statement)
        executor.commit()
        executed += 1
        if on_statement:
            on_statement(script, statement)
    return executed


def apply_statement(
    executor: StatementExecutor, script_name: str, statement: str
) -> StatementResult:
    """
    Execute one statement in its own transaction.

    Success commits; failure rolls back and is reported in the result rather
    than raised. A failed rollback is appended to the reported error.
    """
    try:
        executor.execute(statement)
        executor.commit()
    except DbMetaError as exc:
        error = str(exc)
        try:
            executor.rollback()
        except DbMetaError as rollback_exc:
            error = f"{error} (rollback failed: {rollback_exc})"
        return StatementResult(
            script=script_name, statement=statement, ok=False, error=error
        )
    return StatementResult(script=script_name, statement=statement, ok=True)


def update_database(
    executor: StatementExecutor,
    scripts: Iterable[ScriptInfo],
    *,
    on_result: Callable[[StatementResult], None] | None = None,
) -> list[StatementResult]:
    """Apply all statements best-effort and return one result per statement."""
    results: list[StatementResult] = []
    for script, statement in iter_statements(scripts):
        result = apply_statement(executor, script.display_name, statement)
        results.append(result)
        if on_result:
            on_result(result)
    return results


def export_scripts(reader: MetadataReader, output_dir: Path) -> ExportSummary:
    """
    Export domains, tables and procedures into `output_dir`.

    Each phase reads first and writes only when its read succeeded, so a
    failure leaves the files of earlier phases in place and none for the
    failing phase.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    domains = reader.get_domains()
    write_domains_metadata(domains, output_dir / DOMAINS_FILE)

    tables = reader.get_tables()
    write_tables_metadata(tables, output_dir / TABLES_FILE)

    procedures = reader.get_procedures()
    write_procedures_metadata(procedures, output_dir / PROCEDURES_FILE)

    return ExportSummary(
        domains=len(domains),
        tables=len(tables),
        procedures=len(procedures),
        files=[output_dir / name for name in (DOMAINS_FILE, TABLES_FILE, PROCEDURES_FILE)],
    )

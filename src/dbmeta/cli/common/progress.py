"""Progress formatting utilities for the CLI."""

from __future__ import annotations

from rich.markup import escape
from rich.progress import (
    BarColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)

from dbmeta.cli.common.output import console
from dbmeta.core.pipeline import (
    StatementExecutor,
    StatementResult,
    build_database,
    iter_statements,
    update_database,
)
from dbmeta.core.scripts import ScriptInfo

_MAX_STATEMENT_WIDTH = 72


def _truncate(text: str, max_len: int) -> str:
    """Return text capped at max_len characters using an ASCII ellipsis."""
    if max_len <= 3 or len(text) <= max_len:
        return text[:max_len]
    return f"{text[: max_len - 3]}..."


def _statement_label(statement: str, max_len: int = _MAX_STATEMENT_WIDTH) -> str:
    """
    Render a statement for one progress line.

    - Only the first non-blank line is shown.
    - Long lines are truncated with an ASCII ellipsis.
    """
    first = next((line.strip() for line in statement.splitlines() if line.strip()), "")
    return _truncate(first, max_len)


def _overall_progress(label: str) -> Progress:
    return Progress(
        TextColumn(f"[bold]{label}[/]"),
        BarColumn(),
        TaskProgressColumn(),
        TextColumn("failures=[bold red]{task.fields[failures]}[/]"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )


def build_with_progress(executor: StatementExecutor, scripts: list[ScriptInfo]) -> int:
    """
    Execute all statements of a build while showing an overall progress bar.

    Each executed statement is echoed above the bar. The first failure
    propagates unchanged.

    Returns the number of executed statements.
    """
    total = sum(1 for _ in iter_statements(scripts))
    progress = _overall_progress("Build")

    with progress:
        task_id = progress.add_task("build", total=max(total, 1), failures=0)

        def _report(script: ScriptInfo, statement: str) -> None:
            progress.console.print(
                f"[ok]✓[/] [meta]{script.display_name}[/] {escape(_statement_label(statement))}",
                highlight=False,
            )
            progress.advance(task_id, 1)

        return build_database(executor, scripts, on_statement=_report)


def update_with_progress(
    executor: StatementExecutor, scripts: list[ScriptInfo]
) -> list[StatementResult]:
    """
    Apply all statements of an update, reporting each outcome as it happens.

    Returns one StatementResult per statement, failures included.
    """
    total = sum(1 for _ in iter_statements(scripts))
    progress = _overall_progress("Update")
    failures = 0

    with progress:
        task_id = progress.add_task("update", total=max(total, 1), failures=0)

        def _report(result: StatementResult) -> None:
            nonlocal failures
            label = escape(_statement_label(result.statement))
            if result.ok:
                progress.console.print(
                    f"[ok]✓[/] [meta]{result.script}[/] {label}", highlight=False
                )
            else:
                failures += 1
                progress.update(task_id, failures=failures)
                progress.console.print(
                    f"[err]✗[/] [meta]{result.script}[/] {label}\n    [err]{escape(result.error or '')}[/]",
                    highlight=False,
                )
            progress.advance(task_id, 1)

        return update_database(executor, scripts, on_result=_report)

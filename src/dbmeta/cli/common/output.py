"""Console rendering for dbmeta commands."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence

import questionary
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

from dbmeta.cli.common.tui_style import QUESTIONARY_STYLE_CONFIRM

_THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "title": "bold cyan",
        "meta": "dim",
        "kind.domain": "magenta",
        "kind.table": "blue",
        "kind.procedure": "cyan",
        "kind.unknown": "dim",
    }
)

console = Console(theme=_THEME)


def kind_markup(structure_type: Any) -> str:
    """Render a structure type (enum or plain string) with its theme color."""
    value = str(getattr(structure_type, "value", structure_type) or "UNKNOWN")
    return f"[kind.{value.lower()}]{value}[/]"


@dataclass(frozen=True)
class Out:
    """Thin wrapper over the shared rich console."""

    prefix: str = "[DBMETA]"

    def info(self, msg: str) -> None:
        console.print(f"[title]›[/] {msg}")

    def success(self, msg: str) -> None:
        console.print(f"[ok]✓[/] {msg}")

    def warn(self, msg: str) -> None:
        console.print(f"[warn]⚠[/] {msg}")

    def error(self, msg: str) -> None:
        console.print(f"[err]✗[/] {msg}", highlight=False)

    def header(self, title: str) -> None:
        console.rule(f"[title]{title}[/]", align="left")

    def kv(self, items: Mapping[str, Any]) -> None:
        width = max((len(k) for k in items), default=0)
        for key, value in items.items():
            console.print(f"  [meta]{key.ljust(width)}[/]  {escape(str(value))}")

    @contextmanager
    def status(self, msg: str):
        """Spinner shown while a blocking database call runs."""
        with console.status(msg, spinner="dots"):
            yield

    def confirm(self, message: str, *, default: bool = False) -> bool:
        """
        Ask a yes/no question before a destructive step.

        Returns False when the prompt is cancelled (Ctrl+C / EOF).
        """
        answer = questionary.confirm(
            f"{self.prefix} {message}",
            default=default,
            style=QUESTIONARY_STYLE_CONFIRM,
            qmark="✦",
            auto_enter=False,
        ).ask()
        return bool(answer)

    def scripts_table(
        self, scripts: Iterable[Any], title: str = "Scripts"
    ) -> None:
        """
        Render scripts in execution order.

        Items are ScriptInfo-like objects (display_name, structure_type), or
        (script, statement_count) pairs.
        """
        table = Table(title=title, title_justify="left")
        table.add_column("#", style="meta", justify="right", no_wrap=True)
        table.add_column("Script", no_wrap=True)
        table.add_column("Type")
        table.add_column("Statements", justify="right")

        total = 0
        for position, item in enumerate(scripts, 1):
            script, count = item if isinstance(item, tuple) else (item, None)
            total += count or 0
            table.add_row(
                str(position),
                escape(str(getattr(script, "display_name", script))),
                kind_markup(getattr(script, "structure_type", None)),
                "" if count is None else str(count),
            )

        if total:
            table.caption = f"{total} statement(s)"
        console.print(table)

    def statement_results_table(
        self, results: Sequence[Any], title: str = "Statement results"
    ) -> None:
        """
        Render per-statement outcomes; failed rows carry the database message.

        Items are StatementResult-like objects (script, summary, ok, error).
        """
        table = Table(title=title, title_justify="left")
        table.add_column("Script", style="meta", no_wrap=True)
        table.add_column("Statement", overflow="ellipsis")
        table.add_column("Result")

        for result in results:
            if result.ok:
                verdict = "[ok]OK[/]"
            else:
                verdict = f"[err]FAIL[/] {escape(str(result.error or ''))}"
            table.add_row(escape(str(result.script)), escape(result.summary), verdict)

        failed = sum(1 for r in results if not r.ok)
        table.caption = f"{len(results) - failed} ok, {failed} failed"
        console.print(table)


out = Out()

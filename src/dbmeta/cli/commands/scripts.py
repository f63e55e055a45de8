"""Commands that execute script directories against a database."""

from pathlib import Path

from dbmeta.cli.common.context import build_db_context, build_new_db_context
from dbmeta.cli.common.exits import exit_from_exc, ok_exit, warn_exit
from dbmeta.cli.common.options import (
    ConnectionStringOpt,
    DbDirOpt,
    DryRunOpt,
    PickOpt,
    ScriptsDirOpt,
    YesOpt,
)
from dbmeta.cli.common.output import out
from dbmeta.cli.common.progress import build_with_progress, update_with_progress
from dbmeta.cli.tui import select_scripts
from dbmeta.core.adapters.firebird import database_path
from dbmeta.core.errors import ValidationError
from dbmeta.core.scripts import ScriptInfo, load_scripts
from dbmeta.core.statements import split_sql_statements


def _load_scripts_or_exit(scripts_dir: Path) -> list[ScriptInfo]:
    """Load ordered scripts, converting validation problems into exit code 1."""
    try:
        scripts = load_scripts(scripts_dir)
    except ValidationError as exc:
        exit_from_exc(exc, message=str(exc), code=1)
    out.info(f"Scripts to process: {len(scripts)}")
    return scripts


def _show_plan(scripts: list[ScriptInfo], title: str) -> None:
    out.header(title)
    out.scripts_table(
        [(s, len(split_sql_statements(s.source_text))) for s in scripts], title=title
    )


def build_db(
    db_dir: Path = DbDirOpt,
    scripts_dir: Path = ScriptsDirOpt,
    dry_run: bool = DryRunOpt,
    yes: bool = YesOpt,
):
    """
    Create a new database and execute all scripts (domains, tables, procedures).
    """
    scripts = _load_scripts_or_exit(scripts_dir)
    _show_plan(scripts, "Execution plan")

    if dry_run:
        warn_exit("Dry-run enabled: no database was created", code=0)

    target = database_path(db_dir)
    overwrite = False
    if target.exists():
        if not yes and not out.confirm(f"{target} already exists. Overwrite it?"):
            ok_exit("Cancelled")
        overwrite = True

    if not db_dir.exists():
        out.info(f"Database directory does not exist, creating: {db_dir}")

    with out.status("Creating database..."):
        appctx = build_new_db_context(db_dir, overwrite=overwrite)
    out.success(f"Database created: {target}")

    with appctx.adapter:
        executed = build_with_progress(appctx.adapter, scripts)

    out.success(f"Database built successfully ({executed} statement(s)).")


def update_db(
    connection_string: str = ConnectionStringOpt,
    scripts_dir: Path = ScriptsDirOpt,
    pick: bool = PickOpt,
    dry_run: bool = DryRunOpt,
):
    """
    Apply scripts to an existing database, one transaction per statement.
    """
    scripts = _load_scripts_or_exit(scripts_dir)

    if pick:
        scripts = select_scripts(scripts)
        if not scripts:
            warn_exit("No scripts selected", code=0)

    _show_plan(scripts, "Update plan")

    if dry_run:
        warn_exit("Dry-run enabled: no statements were executed", code=0)

    appctx = build_db_context(connection_string)
    with appctx.adapter:
        results = update_with_progress(appctx.adapter, scripts)

    out.statement_results_table(results, title="Update results")

    failed = [r for r in results if not r.ok]
    if failed:
        out.warn(f"{len(failed)} of {len(results)} statement(s) failed and were rolled back.")
        return

    out.success(f"Database updated successfully ({len(results)} statement(s)).")

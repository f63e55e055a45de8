"""Common CLI options for the CLI."""

import typer

ConnectionStringOpt = typer.Option(
    ...,
    "--connection-string",
    help="Connection string (User=...;Password=...;Database=...;DataSource=...) or DSN",
)

ScriptsDirOpt = typer.Option(
    ...,
    "--scripts-dir",
    help="Directory with .sql scripts",
)

DbDirOpt = typer.Option(
    ...,
    "--db-dir",
    help="Directory in which new_database.fdb is created",
)

OutputDirOpt = typer.Option(
    ...,
    "--output-dir",
    help="Directory for domains.sql, tables.sql and procedures.sql",
)

PickOpt = typer.Option(
    False,
    "--pick",
    help="Choose which scripts to apply",
)

YesOpt = typer.Option(
    False,
    "--yes",
    "-y",
    help="Skip confirmation prompts",
)

DryRunOpt = typer.Option(
    False,
    "--dry-run",
    help="Show which statements would run, but don't execute anything",
)

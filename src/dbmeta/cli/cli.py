"""CLI application for Firebird schema script tooling."""

import sys

import typer
from rich.markup import escape

from dbmeta.cli.commands.export import export_scripts_cmd
from dbmeta.cli.commands.scripts import build_db, update_db
from dbmeta.cli.common.output import out

# click reports usage errors (unknown command, missing option) with status 2.
_CLICK_USAGE_EXIT = 2

app = typer.Typer(
    help="dbmeta - build, export and update Firebird schemas from SQL scripts",
    no_args_is_help=True,
)

app.command("build-db")(build_db)
app.command("export-scripts")(export_scripts_cmd)
app.command("update-db")(update_db)


def main(argv: list[str] | None = None) -> int:
    """
    Run the CLI and return the process exit code.

    0 on success, 1 for usage and validation errors, -1 for any unhandled error.
    """
    try:
        app(args=argv, prog_name="dbmeta")
    except SystemExit as exc:
        code = exc.code if isinstance(exc.code, int) else int(exc.code is not None)
        return 1 if code == _CLICK_USAGE_EXIT else code
    except Exception as exc:  # noqa: BLE001
        out.error(f"Error: {escape(str(exc))}")
        return -1
    return 0


if __name__ == "__main__":
    sys.exit(main())

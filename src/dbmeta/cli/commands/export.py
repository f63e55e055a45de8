"""Command for exporting database metadata as SQL scripts."""

from pathlib import Path

from dbmeta.cli.common.context import build_db_context
from dbmeta.cli.common.options import ConnectionStringOpt, OutputDirOpt
from dbmeta.cli.common.output import out
from dbmeta.core.pipeline import export_scripts


def export_scripts_cmd(
    connection_string: str = ConnectionStringOpt,
    output_dir: Path = OutputDirOpt,
):
    """
    Export domains, tables and procedures into domains.sql, tables.sql and procedures.sql.
    """
    if not output_dir.exists():
        out.info(f"Output directory does not exist, creating: {output_dir}")

    appctx = build_db_context(connection_string)
    with appctx.adapter:
        with out.status("Reading metadata..."):
            summary = export_scripts(appctx.reader, output_dir)

    out.header("Exported")
    out.kv(
        {
            "Domains": summary.domains,
            "Tables": summary.tables,
            "Procedures": summary.procedures,
            "Output": output_dir,
        }
    )
    out.success("Scripts exported successfully.")

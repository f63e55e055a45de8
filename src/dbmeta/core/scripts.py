"""Script discovery, classification and ordering.

Scripts are classified by the first DDL keyword found in their upper-cased
content and executed in dependency order: domains, then tables, then
procedures, then anything else.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable

from dbmeta.core.errors import ValidationError


class StructureType(str, Enum):
    """
    Structural category of a script.

    Values:
        DOMAIN: Script creates at least one domain.
        TABLE: Script creates tables (and no domains).
        PROCEDURE: Script creates procedures (and no domains or tables).
        UNKNOWN: Script contains none of the supported CREATE statements.
    """

    DOMAIN = "DOMAIN"
    TABLE = "TABLE"
    PROCEDURE = "PROCEDURE"
    UNKNOWN = "UNKNOWN"

    @property
    def rank(self) -> int:
        """Execution rank; lower runs first."""
        return _RANKS[self]


_RANKS = {
    StructureType.DOMAIN: 0,
    StructureType.TABLE: 1,
    StructureType.PROCEDURE: 2,
    StructureType.UNKNOWN: 3,
}

# Checked in order: a script with both domains and tables is a domain script.
_CLASSIFIERS: tuple[tuple[str, StructureType], ...] = (
    ("CREATE DOMAIN", StructureType.DOMAIN),
    ("CREATE TABLE", StructureType.TABLE),
    ("CREATE PROCEDURE", StructureType.PROCEDURE),
)


@dataclass(frozen=True)
class ScriptInfo:
    """
    A script file prepared for execution.

    Attributes:
        file_name: Path of the script file.
        file_content: Upper-cased full text, used for classification.
        structure_type: Category assigned by `classify_script`.
        source_text: Verbatim file text, used for execution.
    """

    file_name: str
    file_content: str
    structure_type: StructureType
    source_text: str = ""

    @property
    def display_name(self) -> str:
        return Path(self.file_name).name


def classify_script(content: str) -> StructureType:
    """Return the category of a script by ordered keyword search."""
    upper = content.upper()
    for keyword, structure_type in _CLASSIFIERS:
        if keyword in upper:
            return structure_type
    return StructureType.UNKNOWN


def read_script(path: Path) -> ScriptInfo:
    """
    Read and classify a single script file.

    Raises:
        ValidationError: If the file is not valid UTF-8.
    """
    try:
        text = path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ValidationError(
            f"Script is not valid UTF-8: {path} (byte {exc.start}: {exc.reason})"
        ) from exc
    content = text.upper()
    return ScriptInfo(
        file_name=str(path),
        file_content=content,
        structure_type=classify_script(content),
        source_text=text,
    )


def order_scripts(scripts: Iterable[ScriptInfo]) -> list[ScriptInfo]:
    """Stable-sort scripts by category rank, keeping input order within a rank."""
    return sorted(scripts, key=lambda s: s.structure_type.rank)


def get_ordered_scripts(scripts_dir: Path) -> list[ScriptInfo]:
    """Read every `*.sql` file in a directory and return them in execution order."""
    paths = sorted(p for p in Path(scripts_dir).glob("*.sql") if p.is_file())
    return order_scripts(read_script(p) for p in paths)


def load_scripts(scripts_dir: Path) -> list[ScriptInfo]:
    """
    Validate a scripts directory and return its scripts in execution order.

    Raises:
        ValidationError: If the directory does not exist or has no `.sql` files.
    """
    scripts_dir = Path(scripts_dir)
    if not scripts_dir.is_dir():
        raise ValidationError(f"Scripts directory does not exist: {scripts_dir}")

    scripts = get_ordered_scripts(scripts_dir)
    if not scripts:
        raise ValidationError(f"No .sql scripts found in directory: {scripts_dir}")
    return scripts

"""Terminal UI utilities for dbmeta."""

from __future__ import annotations

import questionary

from dbmeta.cli.common.tui_style import QUESTIONARY_STYLE_SELECT
from dbmeta.core.scripts import ScriptInfo

_MAX_SCRIPT_NAME_WIDTH = 64


def _truncate(text: str, max_len: int) -> str:
    """Return text capped at max_len characters using an ASCII ellipsis."""
    if max_len <= 3 or len(text) <= max_len:
        return text[:max_len]
    return f"{text[: max_len - 3]}..."


def _script_choice_title(script: ScriptInfo, *, name_width: int) -> str:
    """Format one script choice as `<file name>  [<type>]` with aligned type column."""
    short_name = _truncate(script.display_name, _MAX_SCRIPT_NAME_WIDTH)
    return f"{short_name.ljust(name_width)}  [{script.structure_type.value}]"


def select_scripts(scripts: list[ScriptInfo]) -> list[ScriptInfo]:
    """Display a checkbox prompt to select scripts, all pre-checked.

    Args:
        scripts: Scripts in execution order.

    Returns:
        The selected scripts in execution order, or an empty list if none selected.
    """
    shown_names = [_truncate(s.display_name, _MAX_SCRIPT_NAME_WIDTH) for s in scripts]
    name_width = max((len(name) for name in shown_names), default=0)

    choices = [
        questionary.Choice(
            title=_script_choice_title(script, name_width=name_width),
            value=script,
            checked=True,
        )
        for script in scripts
    ]

    picked = (
        questionary.checkbox(
            "Select scripts to apply:",
            choices=choices,
            style=QUESTIONARY_STYLE_SELECT,
        ).ask()
        or []
    )
    # Keep execution order regardless of how the prompt returns selections.
    return [s for s in scripts if s in picked]

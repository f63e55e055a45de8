"""prompt_toolkit styles for the questionary prompts used by dbmeta.

The checkbox picker uses calm cyan/green; confirmations before overwriting a
database use red so they stand out.
"""

from __future__ import annotations

from prompt_toolkit.styles import Style

_MUTED = "ansibrightblack"

_BASE = {
    "separator": _MUTED,
    "instruction": _MUTED,
    "disabled": _MUTED,
    "error": "bold ansired",
}


def _style(accent: str, question: str, **extra: str) -> Style:
    rules = dict(_BASE)
    rules.update(
        {
            "question": question,
            "answer": accent,
            "pointer": accent,
            "highlighted": accent,
            "selected": accent,
        }
    )
    rules.update({key.replace("_", "-"): value for key, value in extra.items()})
    return Style.from_dict(rules)


QUESTIONARY_STYLE_SELECT = _style(
    "bold ansibrightgreen",
    "bold ansibrightcyan",
    checkbox=_MUTED,
    checkbox_selected="bold ansibrightgreen",
)

QUESTIONARY_STYLE_CONFIRM = _style("bold ansibrightred", "bold ansibrightred")

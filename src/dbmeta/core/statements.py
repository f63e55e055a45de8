"""Splitting of SQL scripts into standalone statements.

Procedural bodies legally contain `;` inside BEGIN...END blocks, so a plain
split on semicolons is not enough: only a terminator at nesting depth zero ends
a DDL statement.
"""

from __future__ import annotations

import re

_BLOCK_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)
_SQL_DIALECT_RE = re.compile(r"\bSET\s+SQL\s+DIALECT\s+\d+\s*;", re.IGNORECASE)
_TOKEN_RE = re.compile(r"(\bBEGIN\b|\bEND\b|;)", re.IGNORECASE)


def remove_block_comments(sql: str) -> str:
    """Strip `/* ... */` comments, including multi-line ones."""
    return _BLOCK_COMMENT_RE.sub("", sql)


def remove_sql_dialect(sql: str) -> str:
    """Strip `SET SQL DIALECT <n>;` directives."""
    return _SQL_DIALECT_RE.sub("", sql)


def split_sql_statements(sql: str) -> list[str]:
    """
    Split a script into executable statements.

    Each statement terminated at depth zero is returned with a trailing `;`.
    A non-blank remainder without a terminator is returned as-is. Unbalanced
    END keywords never raise; the nesting depth is floored at zero.

    Args:
        sql: Raw script text.

    Returns:
        Statements in script order, blank ones dropped.
    """
    sql = remove_block_comments(sql)
    sql = remove_sql_dialect(sql)

    statements: list[str] = []
    current: list[str] = []
    depth = 0

    for token in _TOKEN_RE.split(sql):
        word = token.upper()

        if word == "BEGIN":
            depth += 1
            current.append(token)
            continue

        if word == "END":
            depth = max(0, depth - 1)
            current.append(token)
            continue

        if token == ";":
            if depth > 0:
                current.append(token)
                continue

            statement = "".join(current).strip()
            if statement:
                statements.append(statement + ";")
            current = []
            continue

        current.append(token)

    tail = "".join(current).strip()
    if tail:
        statements.append(tail)

    return statements

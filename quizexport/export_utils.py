"""
Shared helpers used by several export renderers.
"""

import re
from typing import Callable, List

from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE

FORMULA_PREFIXES = ("=", "+", "-", "@", "\t", "\r")


def sanitize_cell(value):
    """Prevent spreadsheet formula injection by escaping dangerous prefixes.

    Spreadsheet applications can interpret cells starting with =, +, -, @,
    tab, or carriage return as formulas. Such text is prefixed with a
    single quote so it is stored as plain text.

    Args:
        value: The cell value. Non-string values are returned as-is.

    Returns:
        The sanitized cell value.
    """
    if not isinstance(value, str):
        return value
    if value and value[0] in FORMULA_PREFIXES:
        return "'" + value
    return value


def strip_control_chars(value):
    """Remove control characters that XML-based formats (XLSX, DOCX) reject.

    Non-string values are returned as-is.
    """
    if not isinstance(value, str):
        return value
    return ILLEGAL_CHARACTERS_RE.sub("", value)


def sanitize_filename(title: str, default: str = "export") -> str:
    """Sanitize a title or prefix for use as a filename.

    Args:
        title: The raw string.
        default: Fallback name if the sanitized result is empty.

    Returns:
        A safe filename stem (max 80 characters).
    """
    clean = re.sub(r"[^\w\s\-]", "", title or "")
    clean = re.sub(r"\s+", "_", clean.strip())
    return clean[:80] or default


def wrap_words(text: str, max_width: float, measure: Callable[[str], float]) -> List[str]:
    """Greedy word wrap against a width measured by ``measure``.

    A single word wider than ``max_width`` gets a line of its own.
    Embedded newlines start new lines; blank text yields no lines.
    """
    if not text or not text.strip():
        return []
    lines = []
    for paragraph in text.split("\n"):
        line = ""
        for word in paragraph.split():
            candidate = f"{line} {word}".strip()
            if not line or measure(candidate) <= max_width:
                line = candidate
            else:
                lines.append(line)
                line = word
        lines.append(line)
    return lines

"""Text output helpers for CLI commands."""
import sys
from typing import List, Optional, Sequence, TextIO

from secretctl.secrets.domains.models import Secret

MIN_WIDTH = 20
PADDING = 3


def format_table(headers: Sequence[str], rows: Sequence[Sequence[str]],
                 min_width: int = MIN_WIDTH, padding: int = PADDING) -> str:
    """
    Align rows into columns separated by spaces.

    Every column except the last is padded to the widest cell plus
    padding, and never narrower than min_width. The last column is
    written as-is, so lines carry no trailing spaces.
    """
    lines = [list(headers)] + [list(row) for row in rows]
    widths: List[int] = []
    for col in range(len(headers) - 1):
        widest = max(len(line[col]) for line in lines)
        widths.append(max(min_width, widest + padding))

    out = []
    for line in lines:
        cells = [cell.ljust(width) for cell, width in zip(line, widths)]
        cells.append(line[-1])
        out.append("".join(cells))
    return "\n".join(out) + "\n"


def print_list(secrets: Sequence[Secret], out: Optional[TextIO] = None) -> None:
    """Print secrets in the order given, one row each."""
    out = out or sys.stdout
    rows = [(secret.id, secret.name, secret.description) for secret in secrets]
    out.write(format_table(("ID", "NAME", "DESCRIPTION"), rows))

"""
Output formatting for availmap.

Renders month grids, heat legends and participant tables for the terminal.
All stdlib - no external dependencies.
"""

import os
import re
import sys
from datetime import date
from typing import Any, Collection, List, Mapping, Optional, Sequence

from availmap.engine.aggregation import LEGEND_LEVELS, heat_level
from availmap.engine.calendar import CalendarWindow

# Enable ANSI colors on Windows
if sys.platform == 'win32':
    os.system('')  # Triggers VT100 emulation


class Colors:
    """ANSI escape codes for terminal colors."""
    RESET = '\033[0m'
    BOLD = '\033[1m'
    DIM = '\033[2m'
    REVERSE = '\033[7m'

    # Foreground colors
    RED = '\033[91m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    BLUE = '\033[94m'
    CYAN = '\033[96m'
    GRAY = '\033[90m'


# 256-color backgrounds from pale to deep blue, one per heat level 0..12
HEAT_BACKGROUNDS = (
    255, 195, 159, 153, 123, 117, 111, 81, 75, 69, 33, 27, 21,
)


def colorize(text: str, color: str, enabled: bool = True) -> str:
    """Apply color if enabled."""
    if not enabled:
        return text
    return f"{color}{text}{Colors.RESET}"


def bold(text: str, enabled: bool = True) -> str:
    """Make text bold."""
    if not enabled:
        return text
    return f"{Colors.BOLD}{text}{Colors.RESET}"


def dim(text: str, enabled: bool = True) -> str:
    """Make text dim/gray."""
    if not enabled:
        return text
    return f"{Colors.DIM}{text}{Colors.RESET}"


def heat_background(level: int) -> str:
    """ANSI background escape for a heat level."""
    level = max(0, min(level, len(HEAT_BACKGROUNDS) - 1))
    return f"\033[48;5;{HEAT_BACKGROUNDS[level]}m"


def strip_ansi(text: str) -> str:
    """Remove ANSI escape codes from text."""
    ansi_escape = re.compile(r'\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])')
    return ansi_escape.sub('', text)


def format_day_cell(
    day: int,
    count: int,
    selectable: bool,
    selected: bool = False,
    color_enabled: bool = True,
) -> str:
    """
    Format one grid cell as 6 visible characters.

    Shows the day number and, when anyone is available, the count.
    Selected days get a trailing check mark.
    """
    if not selectable:
        return dim(f"{day:>2}    ", color_enabled)

    mark = '✓' if selected else ' '
    count_text = f"{count:>2}" if count > 0 else "  "
    text = f"{day:>2}{count_text}{mark} "
    if not color_enabled:
        return text
    if selected:
        return f"{Colors.REVERSE}{Colors.BOLD}{text}{Colors.RESET}"
    return f"{heat_background(heat_level(count))}\033[30m{text}{Colors.RESET}"


def render_month(
    window: CalendarWindow,
    heatmap: Mapping[date, int],
    weekday_labels: Sequence[str],
    selected: Collection[date] = (),
    color_enabled: bool = True,
) -> str:
    """Render one 6x7 month grid with counts."""
    lines = [bold(window.title.center(42), color_enabled)]

    header = []
    for index, label in enumerate(weekday_labels):
        cell = f"{label:<6}"
        if index == 0:
            cell = colorize(cell, Colors.RED, color_enabled)
        elif index == 6:
            cell = colorize(cell, Colors.BLUE, color_enabled)
        header.append(cell)
    lines.append(''.join(header))

    cells = window.cells
    for week in range(0, len(cells), 7):
        row = []
        for cell in cells[week:week + 7]:
            row.append(format_day_cell(
                cell.display_day,
                heatmap.get(cell.date, 0),
                cell.in_selectable_range,
                cell.date in selected,
                color_enabled,
            ))
        lines.append(''.join(row))

    return '\n'.join(lines)


def render_legend(color_enabled: bool = True) -> str:
    """Legend for the heat buckets shown in the original app (0, 3, 6, 9, 12+)."""
    parts = []
    for count in LEGEND_LEVELS:
        label = f"{count}+" if count == LEGEND_LEVELS[-1] else str(count)
        swatch = f"{heat_background(count)}  {Colors.RESET}" if color_enabled else "[]"
        parts.append(f"{swatch} {label}")
    return "Available: " + "  ".join(parts)


def format_table(
    headers: List[str],
    rows: List[List[Any]],
    alignments: Optional[List[str]] = None,
    color_enabled: bool = True
) -> str:
    """
    Format data as an ASCII table.

    Args:
        headers: Column headers
        rows: List of row tuples/lists
        alignments: List of 'l' or 'r' for each column
        color_enabled: Whether to apply colors to headers
    """
    if not rows:
        return "No data to display."

    str_rows = [[str(cell) for cell in row] for row in rows]

    col_widths = [len(h) for h in headers]
    for row in str_rows:
        for i, cell in enumerate(row):
            col_widths[i] = max(col_widths[i], len(strip_ansi(cell)))

    if alignments is None:
        alignments = ['l'] * len(headers)

    def align_cell(text: str, width: int, align: str) -> str:
        padding_needed = width - len(strip_ansi(text))
        if align == 'r':
            return ' ' * padding_needed + text
        return text + ' ' * padding_needed

    lines = []

    header_line = ' │ '.join(
        align_cell(h, col_widths[i], alignments[i]) for i, h in enumerate(headers)
    )
    lines.append(bold(header_line, color_enabled))
    lines.append('─┼─'.join('─' * w for w in col_widths))

    for row in str_rows:
        lines.append(' │ '.join(
            align_cell(cell, col_widths[i], alignments[i]) for i, cell in enumerate(row)
        ))

    return '\n'.join(lines)

"""
Schedule reports for availmap.

Generates the --heatmap and --participants views.
"""

from typing import Any, Dict, List

from availmap.engine.aggregation import aggregate, participant_dates
from availmap.engine.calendar import WEEKDAY_LABELS, CalendarUniverse
from availmap.output.formatter import bold, format_table, render_legend, render_month


def generate_heatmap(
    mapping: Dict[str, List[Any]],
    universe: CalendarUniverse,
    config: Dict[str, Any],
    color_enabled: bool = True,
    top: int = 5,
) -> str:
    """
    Generate the month grids with per-date participant counts.

    Args:
        mapping: Participant document
        universe: Calendar window
        config: Configuration dict
        color_enabled: Whether to apply colors
        top: How many of the best dates to list under the grids
    """
    locale = config.get("display", {}).get("weekday_labels", "en")
    labels = WEEKDAY_LABELS.get(locale, WEEKDAY_LABELS["en"])
    heatmap = aggregate(mapping, universe)

    lines = [bold("AVAILABILITY HEATMAP", color_enabled), ""]
    for window in universe.windows:
        lines.append(render_month(window, heatmap, labels, color_enabled=color_enabled))
        lines.append("")
    lines.append(render_legend(color_enabled))

    best = sorted(
        ((count, d) for d, count in heatmap.items() if count > 0),
        key=lambda item: (-item[0], item[1]),
    )[:top]
    if best:
        lines.append("")
        lines.append(bold("Best dates", color_enabled))
        for count, d in best:
            lines.append(f"  {d.isoformat()} ({labels[(d.weekday() + 1) % 7]})  {count} available")

    return '\n'.join(lines)


def generate_participants(
    mapping: Dict[str, List[Any]],
    universe: CalendarUniverse,
    color_enabled: bool = True,
) -> str:
    """Generate the participant list with how many days each picked."""
    title = bold(f"PARTICIPANTS ({len(mapping)})", color_enabled)
    if not mapping:
        return title + "\n\nNo participants yet."

    rows = []
    for name, values in mapping.items():
        dates = sorted(participant_dates(values, universe))
        first = dates[0].isoformat() if dates else "-"
        last = dates[-1].isoformat() if dates else "-"
        rows.append([name, len(dates), first, last])

    table = format_table(
        ["Name", "Days", "First", "Last"],
        rows,
        alignments=['l', 'r', 'l', 'l'],
        color_enabled=color_enabled,
    )
    return title + "\n\n" + table

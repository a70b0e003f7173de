"""
Availability aggregation.

Turns the participant document into per-date counts over the whole
universe. Recomputed wholesale on every document change.
"""

import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Set

from availmap.engine.calendar import CalendarUniverse

logger = logging.getLogger("availmap.engine")

# Counts above this share the top bucket
HEAT_CEILING = 12
LEGEND_LEVELS = (0, 3, 6, 9, 12)

ParticipantMapping = Mapping[str, Iterable[Any]]


def heat_level(count: int) -> int:
    """Saturating heat bucket for a participant count."""
    return min(count, HEAT_CEILING)


def participant_dates(values: Any, universe: CalendarUniverse) -> Set[date]:
    """
    Parse one participant's stored dates into a set.

    The store is semi-trusted: anything that is not a member of the
    universe (bad strings, dates outside the window) is dropped.
    """
    if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
        logger.debug("Ignoring non-list date value %r", values)
        return set()

    dates = set()
    for raw in values:
        d = universe.coerce(raw) if isinstance(raw, (date, str)) else None
        if d is None:
            logger.debug("Dropping date %r outside the calendar window", raw)
            continue
        dates.add(d)
    return dates


def aggregate(mapping: ParticipantMapping, universe: CalendarUniverse) -> Dict[date, int]:
    """
    Count participants per valid date.

    Every date of the universe is present, zero-count dates included.
    Duplicate entries in one participant's list count once.
    """
    heatmap = {d: 0 for d in universe.dates}
    for values in mapping.values():
        for d in participant_dates(values, universe):
            heatmap[d] += 1
    return heatmap


def heatmap_cells(heatmap: Mapping[date, int]) -> List[Dict[str, Any]]:
    """Flatten a heatmap for JSON: date, weekday (0=Sunday), count, level."""
    return [
        {
            "date": d.isoformat(),
            "weekday": (d.weekday() + 1) % 7,
            "count": count,
            "level": heat_level(count),
        }
        for d, count in sorted(heatmap.items())
    ]


def normalize_mapping(mapping: ParticipantMapping, universe: CalendarUniverse) -> Dict[str, List[str]]:
    """Wire form of a document: trimmed names, sorted unique ISO dates."""
    result: Dict[str, List[str]] = {}
    for name, values in mapping.items():
        key = str(name).strip()
        if not key:
            continue
        result[key] = sorted(d.isoformat() for d in participant_dates(values, universe))
    return result

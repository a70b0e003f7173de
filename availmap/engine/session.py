"""
Edit session: registration versus editing an existing record.

Typing a name that already exists in the shared document switches to
editing mode and seeds the selection from the stored dates. Submitting
writes the selection under the trimmed name, replacing any earlier value.
"""

from typing import Any, Dict, Iterable, List, Mapping

from availmap.engine.aggregation import participant_dates
from availmap.engine.calendar import CalendarUniverse, to_date
from availmap.engine.selector import RangeSelector
from availmap.errors import ValidationError


class EditSession:
    """Tracks the active participant's name and drives the selector."""

    def __init__(self, selector: RangeSelector):
        self.selector = selector
        self.name = ""
        self.editing = False

    def on_name_changed(self, name: str, mapping: Mapping[str, Any]) -> bool:
        """
        Record the typed name and reconcile it against the document.

        Returns True when an existing record was found (editing mode).
        In new-registration mode the current picks are left alone.
        """
        self.name = name
        trimmed = name.strip()
        if trimmed and trimmed in mapping:
            stored = participant_dates(mapping[trimmed], self.selector.universe)
            self.selector.replace(stored)
            self.editing = True
        else:
            self.editing = False
        return self.editing

    def cancel_edit(self) -> None:
        self.name = ""
        self.editing = False
        self.selector.clear()

    def submit(self, name: str, selection: Iterable[Any], mapping: Mapping[str, Any]) -> Dict[str, List]:
        """
        Produce the replacement document for a submission.

        The input mapping is not modified. Raises ValidationError for a
        blank name or for a selection that is empty or leaves the window.
        """
        return build_submission(name, selection, mapping, self.selector.universe)


def validate_dates(values: Iterable[Any], universe: CalendarUniverse) -> List[str]:
    """Sorted unique ISO dates. Raises ValidationError on any non-member."""
    dates = set()
    for raw in values:
        d = to_date(raw)
        if d is None:
            raise ValidationError(f"Invalid date: {raw!r}")
        if d not in universe:
            raise ValidationError(f"Date outside the calendar window: {d.isoformat()}")
        dates.add(d)
    return [d.isoformat() for d in sorted(dates)]


def build_submission(
    name: str,
    selection: Iterable[Any],
    mapping: Mapping[str, Any],
    universe: CalendarUniverse,
) -> Dict[str, List]:
    trimmed = (name or "").strip()
    if not trimmed:
        raise ValidationError("Please enter your name.")

    dates = validate_dates(selection, universe)
    if not dates:
        raise ValidationError("Please select at least one available date.")

    updated = dict(mapping)
    updated[trimmed] = dates
    return updated

"""
Gesture interpretation for date selection.

Turns a start/move/end pointer sequence into changes to a set of selected
dates. The date the gesture started on (the anchor) decides whether the
whole range is added or removed: starting on an unselected date paints,
starting on a selected one erases.
"""

import enum
from dataclasses import dataclass
from datetime import date
from typing import FrozenSet, Iterable, Optional, Set

from availmap.engine.calendar import CalendarUniverse, DateLike


class GestureState(enum.Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


@dataclass(frozen=True)
class Gesture:
    """Snapshot of the transient drag state."""
    state: GestureState = GestureState.IDLE
    anchor: Optional[date] = None
    cursor: Optional[date] = None

    @property
    def dragging(self) -> bool:
        return self.state is GestureState.DRAGGING


class RangeSelector:
    """Stateful start/move/end interpreter over a CalendarUniverse."""

    def __init__(self, universe: CalendarUniverse, selected: Iterable[DateLike] = ()):
        self.universe = universe
        self._selected: Set[date] = set()
        self._gesture = Gesture()
        # Date of a just-committed single-cell gesture; the click the platform
        # fires on that cell right after pointer-up must not toggle it again
        self._pending_click: Optional[date] = None
        self.replace(selected)

    @property
    def selected(self) -> FrozenSet[date]:
        return frozenset(self._selected)

    @property
    def gesture(self) -> Gesture:
        return self._gesture

    @property
    def dragging(self) -> bool:
        return self._gesture.dragging

    def is_selected(self, value: DateLike) -> bool:
        d = self.universe.coerce(value)
        return d is not None and d in self._selected

    def start(self, value: DateLike) -> bool:
        """Idle -> Dragging on a valid date. Returns True if a drag began."""
        if self.dragging:
            return False
        d = self.universe.coerce(value)
        if d is None:
            return False
        self._pending_click = None
        self._gesture = Gesture(GestureState.DRAGGING, anchor=d, cursor=d)
        return True

    def move(self, value: DateLike) -> bool:
        """Track the cursor; invalid dates and idle moves are ignored."""
        if not self.dragging:
            self._pending_click = None
            return False
        d = self.universe.coerce(value)
        if d is None:
            return False
        self._gesture = Gesture(GestureState.DRAGGING, anchor=self._gesture.anchor, cursor=d)
        return True

    def end(self) -> FrozenSet[date]:
        """
        Dragging -> Idle, committing the gesture.

        Returns the dates whose membership changed. A gesture that never
        left its anchor is a tap and toggles that single date.
        """
        if not self.dragging:
            return frozenset()

        anchor, cursor = self._gesture.anchor, self._gesture.cursor
        self._gesture = Gesture()

        if anchor == cursor:
            self._pending_click = anchor
            self._toggle(anchor)
            return frozenset([anchor])

        should_select = anchor not in self._selected
        changed = set()
        for d in self.universe.dates_between(anchor, cursor):
            if should_select and d not in self._selected:
                self._selected.add(d)
                changed.add(d)
            elif not should_select and d in self._selected:
                self._selected.discard(d)
                changed.add(d)
        return frozenset(changed)

    def cancel(self) -> FrozenSet[date]:
        """Externally triggered end (pointer left the surface); commits like end()."""
        changed = self.end()
        # No click follows a pointer that left the surface
        self._pending_click = None
        return changed

    def tap(self, value: DateLike) -> bool:
        """
        Direct click path. Toggles one date unless a drag is active or the
        tap is the click trailing a single-cell gesture on the same date.
        """
        if self.dragging:
            return False
        d = self.universe.coerce(value)
        pending, self._pending_click = self._pending_click, None
        if d is None or d == pending:
            return False
        self._toggle(d)
        return True

    def clear(self) -> None:
        """Empty the selection regardless of gesture state."""
        self._selected.clear()
        self._gesture = Gesture()
        self._pending_click = None

    def replace(self, values: Iterable[DateLike]) -> None:
        """Overwrite the selection; values outside the universe are dropped."""
        self._selected = {d for d in (self.universe.coerce(v) for v in values) if d is not None}

    def _toggle(self, d: date) -> None:
        if d in self._selected:
            self._selected.discard(d)
        else:
            self._selected.add(d)

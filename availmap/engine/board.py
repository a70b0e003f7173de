"""
Client-side schedule board.

Binds the calendar, selector, edit session and aggregation to a SyncStore.
A UI layer reads the exposed state and forwards pointer, name and button
events; nothing here knows how cells are painted.
"""

import asyncio
import logging
from datetime import date
from typing import Any, Callable, Dict, FrozenSet, List, Optional, Tuple

from availmap.engine.aggregation import aggregate, heat_level
from availmap.engine.calendar import CalendarUniverse, CalendarWindow, DateLike
from availmap.engine.selector import Gesture, RangeSelector
from availmap.engine.session import EditSession
from availmap.errors import StoreReadError, StoreWriteError, SubmissionInProgress
from availmap.models.entities import SubmitResult
from availmap.store.base import SyncStore

logger = logging.getLogger("availmap.board")

SUBMIT_LABEL_NEW = "Register"
SUBMIT_LABEL_EDIT = "Update"
SUBMIT_LABEL_BUSY = "Saving..."


class ScheduleBoard:
    """State and event intake for one participant's client."""

    def __init__(
        self,
        universe: CalendarUniverse,
        store: SyncStore,
        submit_timeout: Optional[float] = 10.0,
    ):
        self.universe = universe
        self.store = store
        self.submit_timeout = submit_timeout
        self.selector = RangeSelector(universe)
        self.session = EditSession(self.selector)

        self.mapping: Dict[str, List[Any]] = {}
        self.heatmap: Dict[date, int] = aggregate({}, universe)
        self.available = True
        self.last_error: Optional[Exception] = None
        self.busy = False
        self._unsubscribe: Optional[Callable[[], None]] = None

    # Read side

    @property
    def windows(self) -> Tuple[CalendarWindow, ...]:
        return self.universe.windows

    @property
    def selection(self) -> FrozenSet[date]:
        return self.selector.selected

    @property
    def gesture(self) -> Gesture:
        return self.selector.gesture

    @property
    def name(self) -> str:
        return self.session.name

    @property
    def editing(self) -> bool:
        return self.session.editing

    @property
    def participants(self) -> List[str]:
        return list(self.mapping)

    @property
    def submit_label(self) -> str:
        if self.busy:
            return SUBMIT_LABEL_BUSY
        return SUBMIT_LABEL_EDIT if self.editing else SUBMIT_LABEL_NEW

    def level_for(self, value: DateLike) -> int:
        d = self.universe.coerce(value)
        return heat_level(self.heatmap.get(d, 0)) if d else 0

    # Store feed

    async def attach(self) -> None:
        if self._unsubscribe is None:
            self._unsubscribe = await self.store.subscribe(self._on_mapping, self._on_error)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_mapping(self, mapping: Dict[str, List[Any]]) -> None:
        # May lag behind our own submit; the next delivery catches up
        self.mapping = mapping
        self.heatmap = aggregate(mapping, self.universe)
        self.available = True
        self.last_error = None

    def _on_error(self, exc: Exception) -> None:
        logger.warning("Schedule feed unavailable: %s", exc)
        self.available = False
        self.last_error = exc if isinstance(exc, StoreReadError) else StoreReadError(str(exc))

    # Write side

    def start(self, value: DateLike) -> bool:
        return self.selector.start(value)

    def move(self, value: DateLike) -> bool:
        return self.selector.move(value)

    def end(self) -> FrozenSet[date]:
        return self.selector.end()

    def cancel(self) -> FrozenSet[date]:
        return self.selector.cancel()

    def toggle(self, value: DateLike) -> bool:
        return self.selector.tap(value)

    def clear(self) -> None:
        self.selector.clear()

    def set_name(self, name: str) -> bool:
        return self.session.on_name_changed(name, self.mapping)

    def cancel_edit(self) -> None:
        self.session.cancel_edit()

    async def submit(self) -> SubmitResult:
        """
        Write the current selection under the current name.

        ValidationError leaves everything untouched. StoreWriteError (also
        raised on timeout) keeps name and selection so the user can retry.
        """
        if self.busy:
            raise SubmissionInProgress("a submission is already in progress")

        name = self.session.name.strip()
        selection = self.selector.selected
        updated = self.session.submit(name, selection, self.mapping)
        created = name not in self.mapping

        self.busy = True
        try:
            write = self.store.replace_all(updated)
            if self.submit_timeout:
                await asyncio.wait_for(write, timeout=self.submit_timeout)
            else:
                await write
        except asyncio.TimeoutError as exc:
            logger.error("Submission for %r timed out after %ss", name, self.submit_timeout)
            raise StoreWriteError("timed out writing the schedule") from exc
        finally:
            self.busy = False

        self._on_mapping(updated)
        self.session.cancel_edit()
        return SubmitResult(name=name, dates=tuple(sorted(selection)), created=created)

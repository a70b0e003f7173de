"""Tests for ScheduleBoard, the client-facing state holder.

Uses MemorySyncStore so every test runs without a database.
"""

import asyncio
from datetime import date

import pytest
import pytest_asyncio

from availmap.engine.board import SUBMIT_LABEL_EDIT, SUBMIT_LABEL_NEW, ScheduleBoard
from availmap.engine.calendar import CalendarUniverse
from availmap.errors import StoreReadError, StoreWriteError, SubmissionInProgress, ValidationError
from availmap.store.memory import MemorySyncStore


class FailingWriteStore(MemorySyncStore):
    async def replace_all(self, mapping):
        raise StoreWriteError("network down")


class SlowWriteStore(MemorySyncStore):
    def __init__(self, initial=None):
        super().__init__(initial)
        self.gate = asyncio.Event()

    async def replace_all(self, mapping):
        await self.gate.wait()
        await super().replace_all(mapping)


@pytest.fixture
def universe():
    return CalendarUniverse([(2025, 7), (2025, 8)])


@pytest.fixture
def store():
    return MemorySyncStore({
        "Kim": ["2025-07-04", "2025-07-05"],
        "Lee": ["2025-07-05"],
    })


@pytest_asyncio.fixture
async def board(universe, store):
    board = ScheduleBoard(universe, store, submit_timeout=1.0)
    await board.attach()
    yield board
    board.detach()


@pytest.mark.asyncio
class TestFeed:
    """Tests for reacting to the store's live feed."""

    async def test_attach_loads_mapping_and_heatmap(self, board):
        assert board.participants == ["Kim", "Lee"]
        assert board.heatmap[date(2025, 7, 4)] == 1
        assert board.heatmap[date(2025, 7, 5)] == 2
        assert board.available is True

    async def test_exposes_two_windows(self, board):
        assert [w.month for w in board.windows] == [7, 8]
        assert all(len(w.cells) == 42 for w in board.windows)

    async def test_external_write_recomputes_heatmap(self, board, store):
        await store.replace_all({"Park": ["2025-08-01"]})
        assert board.participants == ["Park"]
        assert board.heatmap[date(2025, 7, 5)] == 0
        assert board.level_for("2025-08-01") == 1

    async def test_read_error_keeps_last_known_mapping(self, board, store):
        await store.publish_error(StoreReadError("offline"))
        assert board.available is False
        assert isinstance(board.last_error, StoreReadError)
        assert board.participants == ["Kim", "Lee"]
        assert board.heatmap[date(2025, 7, 5)] == 2

    async def test_recovers_after_next_delivery(self, board, store):
        await store.publish_error(StoreReadError("offline"))
        await store.replace_all({"Kim": ["2025-07-04"]})
        assert board.available is True
        assert board.last_error is None

    async def test_detach_stops_updates(self, board, store):
        board.detach()
        await store.replace_all({})
        assert board.participants == ["Kim", "Lee"]


@pytest.mark.asyncio
class TestEvents:
    """Tests for gesture and name intake."""

    async def test_drag_through_board(self, board):
        board.start("2025-07-30")
        board.move("2025-08-02")
        assert board.gesture.dragging
        board.end()
        assert board.selection == {
            date(2025, 7, 30), date(2025, 7, 31), date(2025, 8, 1), date(2025, 8, 2),
        }

    async def test_set_existing_name_enters_editing(self, board):
        board.toggle("2025-08-20")
        assert board.set_name("Kim") is True
        assert board.editing
        assert board.submit_label == SUBMIT_LABEL_EDIT
        assert board.selection == {date(2025, 7, 4), date(2025, 7, 5)}

    async def test_new_name_label(self, board):
        board.set_name("Park")
        assert board.submit_label == SUBMIT_LABEL_NEW

    async def test_clear_keeps_name(self, board):
        board.set_name("Kim")
        board.clear()
        assert board.selection == frozenset()
        assert board.name == "Kim"

    async def test_cancel_edit(self, board):
        board.set_name("Kim")
        board.cancel_edit()
        assert board.name == ""
        assert not board.editing
        assert board.selection == frozenset()


@pytest.mark.asyncio
class TestSubmit:
    """Tests for ScheduleBoard.submit()."""

    async def test_new_registration(self, board, store):
        board.set_name("Park")
        board.toggle("2025-07-05")
        result = await board.submit()

        assert result.created is True
        assert result.status == "created"
        assert result.dates == (date(2025, 7, 5),)
        assert (await store.read())["Park"] == ["2025-07-05"]
        assert board.heatmap[date(2025, 7, 5)] == 3

    async def test_resets_after_success(self, board):
        board.set_name("Park")
        board.toggle("2025-07-05")
        await board.submit()
        assert board.name == ""
        assert board.selection == frozenset()
        assert not board.editing

    async def test_editing_replaces_record(self, board, store):
        board.set_name("Kim")
        board.toggle("2025-07-04")
        result = await board.submit()

        assert result.created is False
        assert "updated" in result.message
        assert (await store.read())["Kim"] == ["2025-07-05"]

    async def test_validation_error_mutates_nothing(self, board, store):
        board.toggle("2025-07-10")
        with pytest.raises(ValidationError):
            await board.submit()
        assert board.selection == {date(2025, 7, 10)}
        assert store.version == 0

    async def test_empty_selection_rejected(self, board):
        board.set_name("Park")
        with pytest.raises(ValidationError):
            await board.submit()

    async def test_write_failure_preserves_input(self, universe):
        board = ScheduleBoard(universe, FailingWriteStore({}))
        await board.attach()
        board.set_name("Park")
        board.toggle("2025-07-10")

        with pytest.raises(StoreWriteError):
            await board.submit()

        assert board.name == "Park"
        assert board.selection == {date(2025, 7, 10)}
        assert board.busy is False

    async def test_timeout_is_write_error(self, universe):
        board = ScheduleBoard(universe, SlowWriteStore({}), submit_timeout=0.05)
        await board.attach()
        board.set_name("Park")
        board.toggle("2025-07-10")

        with pytest.raises(StoreWriteError):
            await board.submit()
        assert board.selection == {date(2025, 7, 10)}

    async def test_second_submit_while_busy(self, universe):
        store = SlowWriteStore({})
        board = ScheduleBoard(universe, store)
        await board.attach()
        board.set_name("Park")
        board.toggle("2025-07-10")

        first = asyncio.create_task(board.submit())
        await asyncio.sleep(0)
        assert board.busy is True
        assert board.submit_label == "Saving..."
        with pytest.raises(SubmissionInProgress):
            await board.submit()

        store.gate.set()
        result = await first
        assert result.name == "Park"
        assert board.busy is False

    async def test_stale_feed_after_submit_is_tolerated(self, board, store):
        """A delivery that predates our write just shows the older document."""
        board.set_name("Park")
        board.toggle("2025-07-05")
        await board.submit()
        await store.publish({"Kim": ["2025-07-04"]})
        assert board.participants == ["Kim"]
        assert board.available is True

"""Schedule document queries used by the API routes."""

from typing import Any, Dict, List, Tuple

from availmap.engine.aggregation import aggregate, heatmap_cells, normalize_mapping, participant_dates
from availmap.engine.calendar import CalendarUniverse, to_date
from availmap.engine.session import build_submission, validate_dates
from availmap.errors import ValidationError
from availmap.models.entities import SubmitResult
from availmap.store.sqlite import SqliteSyncStore


async def get_schedule(store: SqliteSyncStore, universe: CalendarUniverse) -> Dict[str, Any]:
    snapshot = await store.snapshot()
    participants = normalize_mapping(snapshot.participants, universe)
    return {
        "participants": participants,
        "names": list(participants),
        "count": len(participants),
        "version": snapshot.version,
        "updated_at": snapshot.updated_at,
    }


async def get_participant(store: SqliteSyncStore, universe: CalendarUniverse, name: str) -> Dict[str, Any]:
    mapping = await store.read()
    trimmed = name.strip()
    if trimmed and trimmed in mapping:
        dates = sorted(d.isoformat() for d in participant_dates(mapping[trimmed], universe))
        return {"name": trimmed, "exists": True, "dates": dates}
    return {"name": trimmed, "exists": False, "dates": []}


async def replace_schedule(
    store: SqliteSyncStore,
    universe: CalendarUniverse,
    participants: Dict[str, List[str]],
) -> Dict[str, List[str]]:
    """Validate and write a whole document. Later duplicate trimmed names win."""
    document: Dict[str, List[str]] = {}
    for name, values in participants.items():
        trimmed = name.strip()
        if not trimmed:
            raise ValidationError("Participant names must not be empty.")
        document[trimmed] = validate_dates(values, universe)
    await store.replace_all(document)
    return document


async def submit_availability(
    store: SqliteSyncStore,
    universe: CalendarUniverse,
    name: str,
    dates: List[str],
) -> SubmitResult:
    """Read-modify-write one participant's record (whole-document overwrite)."""
    mapping = await store.read()
    updated = build_submission(name, dates, mapping, universe)
    trimmed = name.strip()
    await store.replace_all(updated)
    return SubmitResult(
        name=trimmed,
        dates=tuple(to_date(d) for d in updated[trimmed]),
        created=trimmed not in mapping,
    )


def build_heatmap(mapping: Dict[str, List[Any]], universe: CalendarUniverse) -> Tuple[List[dict], int]:
    """Heatmap cells and the highest count."""
    heatmap = aggregate(mapping, universe)
    return heatmap_cells(heatmap), max(heatmap.values(), default=0)


def build_update_event(mapping: Dict[str, List[Any]], universe: CalendarUniverse) -> Dict[str, Any]:
    """Websocket payload sent on every document change."""
    cells, max_count = build_heatmap(mapping, universe)
    return {
        "type": "schedule_update",
        "participants": normalize_mapping(mapping, universe),
        "heatmap": cells,
        "max_count": max_count,
    }

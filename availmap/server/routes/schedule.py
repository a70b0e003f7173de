"""Schedule document and submission endpoints."""

from fastapi import APIRouter, Depends, HTTPException

from availmap.engine.calendar import CalendarUniverse
from availmap.errors import ValidationError
from availmap.server.dependencies import get_store, get_universe
from availmap.server.models.schedule import (
    ParticipantResponse,
    ScheduleReplaceRequest,
    ScheduleResponse,
    SubmissionRequest,
    SubmissionResponse,
)
from availmap.server.queries.schedule_queries import (
    get_participant,
    get_schedule,
    replace_schedule,
    submit_availability,
)
from availmap.store.sqlite import SqliteSyncStore

router = APIRouter(prefix="/api", tags=["schedule"])


@router.get("/schedule", response_model=ScheduleResponse)
async def schedule(
    store: SqliteSyncStore = Depends(get_store),
    universe: CalendarUniverse = Depends(get_universe),
):
    data = await get_schedule(store, universe)
    return ScheduleResponse(**data)


@router.put("/schedule", response_model=ScheduleResponse)
async def replace_schedule_endpoint(
    request: ScheduleReplaceRequest,
    store: SqliteSyncStore = Depends(get_store),
    universe: CalendarUniverse = Depends(get_universe),
):
    """Replace the whole document. There is no per-participant patch."""
    try:
        await replace_schedule(store, universe, request.participants)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    data = await get_schedule(store, universe)
    return ScheduleResponse(**data)


@router.get("/participants/{name}", response_model=ParticipantResponse)
async def participant(
    name: str,
    store: SqliteSyncStore = Depends(get_store),
    universe: CalendarUniverse = Depends(get_universe),
):
    """Look up a participant to decide between registering and editing."""
    data = await get_participant(store, universe, name)
    return ParticipantResponse(**data)


@router.post("/submissions", response_model=SubmissionResponse)
async def submit(
    request: SubmissionRequest,
    store: SqliteSyncStore = Depends(get_store),
    universe: CalendarUniverse = Depends(get_universe),
):
    try:
        result = await submit_availability(store, universe, request.name, request.dates)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return SubmissionResponse(
        name=result.name,
        dates=list(result.dates),
        status=result.status,
        message=result.message,
    )

"""Heatmap API endpoint."""

from fastapi import APIRouter, Depends

from availmap.engine.aggregation import LEGEND_LEVELS, normalize_mapping
from availmap.engine.calendar import CalendarUniverse
from availmap.server.dependencies import get_store, get_universe
from availmap.server.models.heatmap import HeatmapCell, HeatmapResponse
from availmap.server.queries.schedule_queries import build_heatmap
from availmap.store.sqlite import SqliteSyncStore

router = APIRouter(prefix="/api", tags=["heatmap"])


@router.get("/heatmap", response_model=HeatmapResponse)
async def heatmap(
    store: SqliteSyncStore = Depends(get_store),
    universe: CalendarUniverse = Depends(get_universe),
):
    """Participant count for every selectable date."""
    mapping = await store.read()
    cells_data, max_count = build_heatmap(mapping, universe)
    return HeatmapResponse(
        cells=[HeatmapCell(**c) for c in cells_data],
        max_count=max_count,
        total_participants=len(normalize_mapping(mapping, universe)),
        legend=list(LEGEND_LEVELS),
    )

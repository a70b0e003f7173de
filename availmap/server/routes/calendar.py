"""Calendar grid endpoint."""

from fastapi import APIRouter, Depends

from availmap.engine.calendar import WEEKDAY_LABELS, CalendarUniverse
from availmap.server.dependencies import get_config, get_universe
from availmap.server.models.calendar import CalendarResponse, DayCellModel, MonthWindow

router = APIRouter(prefix="/api", tags=["calendar"])


@router.get("/calendar", response_model=CalendarResponse)
async def calendar_windows(
    universe: CalendarUniverse = Depends(get_universe),
    config: dict = Depends(get_config),
):
    """Both month grids, 42 cells each."""
    locale = config.get("display", {}).get("weekday_labels", "en")
    weekdays = list(WEEKDAY_LABELS.get(locale, WEEKDAY_LABELS["en"]))
    months = [
        MonthWindow(
            year=window.year,
            month=window.month,
            title=window.title,
            weekdays=weekdays,
            cells=[DayCellModel(**cell.to_dict()) for cell in window.cells],
        )
        for window in universe.windows
    ]
    return CalendarResponse(
        months=months,
        first_date=universe.dates[0],
        last_date=universe.dates[-1],
    )

"""API routes for trip conditions."""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query

from backend.schemas.conditions import ConditionsReport
from backend.services.conditions_service import ConditionsService
from backend.api.dependencies import get_conditions_service

router = APIRouter(prefix="/conditions", tags=["conditions"])


@router.get("", response_model=ConditionsReport)
def get_conditions(
    lat: float = Query(..., ge=-90, le=90, description="Latitude in degrees"),
    lon: float = Query(..., ge=-180, le=180, description="Longitude in degrees"),
    date: str = Query(..., pattern=r"^\d{4}-\d{2}-\d{2}$", description="Trip date (YYYY-MM-DD)"),
    time: str = Query("09:00", pattern=r"^\d{2}:\d{2}$", description="Start time (HH:MM, local)"),
    activities: List[str] = Query([], description="Hazardous activities to include in the grade"),
    source: Optional[str] = Query(
        None,
        pattern=r"^(sg|noaa|meto|smhi|fcoo)$",
        description="Preferred Stormglass forecast model",
    ),
    name: Optional[str] = Query(None, description="Display name for the location"),
    conditions_service: ConditionsService = Depends(get_conditions_service),
) -> ConditionsReport:
    """
    Get tides, marine and weather conditions with a risk grade for a trip.

    Uses the premium source when configured, falling back to the free
    providers. Tides always come from the dedicated tide provider.
    """
    return conditions_service.build_report(
        latitude=lat,
        longitude=lon,
        day=date,
        start_time=time,
        activities=activities,
        preferred_sub_source=source,
        name=name,
    )

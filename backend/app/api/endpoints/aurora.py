import math
import httpx
import logging
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from typing import Any, Optional

from app.api.deps import get_http_client
from app.core.errors import UpstreamDataError
from app.services.aurora import compose_aurora_report

logger = logging.getLogger(__name__)

router = APIRouter()

RETRY_MESSAGE = "Aurora data unavailable, please try again shortly"


class Timestamps(BaseModel):
    # Passed through as published by SWPC
    observation: Optional[Any] = None
    forecast: Optional[Any] = None

class CloudOut(BaseModel):
    cover: int
    status: str

class DarkOut(BaseModel):
    isNight: Optional[bool] = None
    sunrise: Optional[str] = None
    sunset: Optional[str] = None

class KpOut(BaseModel):
    value: float
    source: str

class AuroraOut(BaseModel):
    ok: bool = True
    lat: float
    lon: float
    probability: int
    timestamps: Timestamps
    source: str
    cloud: Optional[CloudOut] = None
    dark: Optional[DarkOut] = None
    visibility: Optional[int] = None
    kp: Optional[KpOut] = None


def parse_coordinate(raw: Optional[str]) -> Optional[float]:
    """Return the coordinate as a finite float, or None if missing or malformed."""
    if raw is None:
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


@router.get("", response_model=AuroraOut)
async def get_aurora(
    lat: Optional[str] = None,
    lon: Optional[str] = None,
    client: httpx.AsyncClient = Depends(get_http_client),
):
    """
    Aurora probability at a point from the NOAA OVATION nowcast, enriched
    with local cloud cover, day/night state, a visibility score and the
    current planetary Kp. Enrichment fields are null when their source fails.
    """
    lat_val = parse_coordinate(lat)
    lon_val = parse_coordinate(lon)
    if lat_val is None or lon_val is None:
        logger.info(f"Rejected aurora query lat={lat!r} lon={lon!r}")
        return JSONResponse(status_code=400, content={"ok": False, "error": "Invalid lat/lon"})

    try:
        return await compose_aurora_report(client, lat_val, lon_val)
    except UpstreamDataError as e:
        return JSONResponse(
            status_code=502,
            content={"ok": False, "error": str(e), "message": RETRY_MESSAGE},
        )

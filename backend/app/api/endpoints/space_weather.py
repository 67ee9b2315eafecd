import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from typing import Optional

from app.api.deps import get_http_client
from app.core.errors import UpstreamDataError
from app.services.noaa_space_weather import get_solar_wind_summary

router = APIRouter()


class SolarWindOut(BaseModel):
    ok: bool = True
    time: Optional[str] = None
    speed_km_s: Optional[float] = None
    density_p_cm3: Optional[float] = None
    temperature_K: Optional[float] = None
    bz_nT: Optional[float] = None
    bt_nT: Optional[float] = None


@router.get("", response_model=SolarWindOut)
async def get_space_weather(client: httpx.AsyncClient = Depends(get_http_client)):
    """
    Latest solar wind speed, density, temperature and IMF Bz/Bt from the
    NOAA SWPC 5-minute plasma and magnetometer products.
    """
    try:
        return await get_solar_wind_summary(client)
    except UpstreamDataError as e:
        return JSONResponse(status_code=502, content={"ok": False, "error": str(e)})

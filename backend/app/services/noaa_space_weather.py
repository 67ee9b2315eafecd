import httpx
import logging
import asyncio
from dataclasses import dataclass
from typing import Any, Dict

from app.core.config import settings
from app.core.errors import UpstreamDataError
from app.services.units import round_half_up, to_float
from app.services.upstream import fetch_json

logger = logging.getLogger(__name__)

KP_SOURCE_LABEL = "NOAA Planetary Kp (1m, estimated)"

# Column layout of the SWPC 5-minute solar wind products (row 0 is the header)
PLASMA_COLUMNS = ("time_tag", "density", "speed", "temperature")
MAG_COLUMNS = ("time_tag", "bx_gsm", "by_gsm", "bz_gsm", "lon_gsm", "lat_gsm", "bt")


@dataclass(frozen=True)
class KpIndex:
    value: float
    source: str = KP_SOURCE_LABEL


def parse_latest_kp(readings: Any) -> KpIndex:
    """
    Read the most recent Kp from the 1-minute planetary index feed.

    `estimated_kp` is preferred and may use a decimal comma ("1,67");
    `kp_index` is the integer fallback.
    """
    if not isinstance(readings, list) or not readings:
        raise UpstreamDataError("Kp feed is empty")

    latest = readings[-1]
    if not isinstance(latest, dict):
        raise UpstreamDataError("Kp reading is not an object")

    estimated = latest.get("estimated_kp")
    value = to_float(str(estimated).replace(",", ".")) if estimated is not None else None
    if value is None:
        value = to_float(latest.get("kp_index"))
    if value is None:
        raise UpstreamDataError("Kp value not numeric")

    return KpIndex(value=round_half_up(value * 10) / 10)


async def fetch_planetary_kp(client: httpx.AsyncClient) -> KpIndex:
    readings = await fetch_json(client, settings.KP_URL)
    return parse_latest_kp(readings)


def _latest_row(rows: Any, name: str) -> list:
    # A feed holding only its header row has no samples yet
    if not isinstance(rows, list) or len(rows) <= 1:
        raise UpstreamDataError(f"{name} data unavailable")
    row = rows[-1]
    if not isinstance(row, list):
        raise UpstreamDataError(f"{name} row malformed")
    return row


def _column(row: list, columns: tuple, name: str) -> Any:
    idx = columns.index(name)
    return row[idx] if idx < len(row) else None


def parse_solar_wind(plasma: Any, mag: Any) -> Dict[str, Any]:
    p_last = _latest_row(plasma, "Solar wind plasma")
    m_last = _latest_row(mag, "Solar wind magnetic field")

    return {
        "ok": True,
        "time": _column(p_last, PLASMA_COLUMNS, "time_tag") or _column(m_last, MAG_COLUMNS, "time_tag") or None,
        "speed_km_s": to_float(_column(p_last, PLASMA_COLUMNS, "speed")),
        "density_p_cm3": to_float(_column(p_last, PLASMA_COLUMNS, "density")),
        "temperature_K": to_float(_column(p_last, PLASMA_COLUMNS, "temperature")),
        "bz_nT": to_float(_column(m_last, MAG_COLUMNS, "bz_gsm")),
        "bt_nT": to_float(_column(m_last, MAG_COLUMNS, "bt")),
    }


async def get_solar_wind_summary(client: httpx.AsyncClient) -> Dict[str, Any]:
    # Fetch in parallel
    plasma, mag = await asyncio.gather(
        fetch_json(client, settings.PLASMA_URL),
        fetch_json(client, settings.MAG_URL),
        return_exceptions=True,
    )
    for result in (plasma, mag):
        if isinstance(result, BaseException):
            logger.error(f"Solar wind fetch failed: {result}")
            raise result
    summary = parse_solar_wind(plasma, mag)
    logger.debug(f"Solar wind at {summary['time']}: {summary['speed_km_s']} km/s, Bz {summary['bz_nT']} nT")
    return summary

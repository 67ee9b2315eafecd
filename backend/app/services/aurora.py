"""
Aurora Report Composer.

Combines the three aurora sources into one response:
- OVATION grid probability (mandatory, failure aborts the report)
- Open-Meteo cloud cover and day/night state (optional)
- NOAA 1-minute planetary Kp (optional)

All three fetches run concurrently. The visibility score depends on both the
probability and the sky conditions, so it is computed after the join.
"""

import httpx
import logging
import asyncio
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from app.services.aurora_grid import SOURCE_LABEL, fetch_aurora_probability
from app.services.noaa_space_weather import fetch_planetary_kp
from app.services.upstream import best_effort
from app.services.weather import fetch_environment, visibility_score

logger = logging.getLogger(__name__)


async def compose_aurora_report(
    client: httpx.AsyncClient,
    lat: float,
    lon: float,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Build the aurora report for a point.

    Raises UpstreamDataError when the OVATION grid cannot be resolved; the
    optional sources only ever null out their own fields.
    """
    now = now or datetime.now(timezone.utc)

    # return_exceptions so the optional fetches finish before a grid failure propagates
    grid, environment, kp = await asyncio.gather(
        fetch_aurora_probability(client, lat, lon),
        best_effort("Open-Meteo forecast", fetch_environment(client, lat, lon, now)),
        best_effort("Planetary Kp", fetch_planetary_kp(client)),
        return_exceptions=True,
    )
    if isinstance(grid, BaseException):
        logger.error(f"OVATION grid unavailable for ({lat}, {lon}): {grid}")
        raise grid

    cloud = None
    dark = None
    visibility = None
    if environment.available:
        env = environment.value
        if env.cloud_cover is not None:
            cloud = {"cover": env.cloud_cover, "status": env.cloud_status}
        dark = {
            "isNight": env.dark.is_night,
            "sunrise": env.dark.sunrise,
            "sunset": env.dark.sunset,
        }
        visibility = visibility_score(grid.probability, env.cloud_cover, env.dark.is_night)

    kp_out = None
    if kp.available:
        kp_out = {"value": kp.value.value, "source": kp.value.source}

    logger.info(
        f"Aurora report ({lat}, {lon}): probability={grid.probability} "
        f"visibility={visibility} kp={kp_out['value'] if kp_out else None}"
    )

    return {
        "ok": True,
        "lat": lat,
        "lon": lon,
        "probability": grid.probability,
        "timestamps": {
            "observation": grid.observation_time,
            "forecast": grid.forecast_time,
        },
        "source": SOURCE_LABEL,
        "cloud": cloud,
        "dark": dark,
        "visibility": visibility,
        "kp": kp_out,
    }

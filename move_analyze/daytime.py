"""Day/night labelling of relocations from solar elevation.

Coordinates are projected to WGS84 with pyproj and the sun's position comes
from astral; nothing here does astronomy itself.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta

from astral import Observer
from astral.sun import elevation
from pyproj import CRS, Transformer
from pyproj.exceptions import CRSError

from move_analyze.models import TOD_DAWN, TOD_DAY, TOD_DUSK, TOD_NIGHT, Relocation

logger = logging.getLogger(__name__)

# Solar elevation (degrees, geometric) at sunrise/sunset: refraction plus
# the sun's apparent radius. Same convention as the usual sunrise tables.
SUNRISE_ELEVATION_DEG = -0.833
# Civil twilight ends when the sun is 6 degrees below the horizon.
CIVIL_TWILIGHT_ELEVATION_DEG = -6.0

_TREND_STEP = timedelta(minutes=1)


class DaytimeClassifier:
    """Label fixes as day/night (optionally dawn/dusk).

    Args:
        crs: CRS of the input coordinates (anything pyproj accepts, e.g.
            "EPSG:32618").
        include_crepuscule: If False, only sunrise-to-sunset is "day" and
            everything else is "night". If True, civil twilight is labelled
            "dawn" or "dusk" depending on whether the sun is rising.

    Raises:
        ValueError: If the CRS is not recognised.
    """

    def __init__(self, crs: str, include_crepuscule: bool = False) -> None:
        try:
            src = CRS.from_user_input(crs)
        except CRSError as exc:
            raise ValueError(f"无法识别的坐标系：{crs!r}") from exc
        self.crs = crs
        self.include_crepuscule = include_crepuscule
        self._to_lonlat = Transformer.from_crs(src, CRS.from_epsg(4326), always_xy=True)

    def lonlat(self, x: float, y: float) -> tuple[float, float] | None:
        """Project (x, y) to (lon, lat) in degrees; None if not finite."""

        lon, lat = self._to_lonlat.transform(x, y)
        if not (math.isfinite(lon) and math.isfinite(lat)) or abs(lat) > 90.0:
            return None
        return lon, lat

    def classify(self, timestamp: datetime, x: float, y: float) -> str | None:
        """Day/night label for one fix, or None if it cannot be located."""

        ll = self.lonlat(x, y)
        if ll is None:
            logger.debug("无法投影坐标 (%s, %s)，tod 置空", x, y)
            return None
        observer = Observer(latitude=ll[1], longitude=ll[0])
        elev = elevation(observer, timestamp, with_refraction=False)

        if elev > SUNRISE_ELEVATION_DEG:
            return TOD_DAY
        if not self.include_crepuscule or elev <= CIVIL_TWILIGHT_ELEVATION_DEG:
            return TOD_NIGHT
        later = elevation(observer, timestamp + _TREND_STEP, with_refraction=False)
        return TOD_DAWN if later > elev else TOD_DUSK

    def __call__(self, relocation: Relocation) -> str | None:
        return self.classify(relocation.timestamp, relocation.x, relocation.y)

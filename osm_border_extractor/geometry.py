"""Line geometries for resolved ways, projected into the output SRS."""

import math
from typing import List, Tuple

from pyproj import Transformer
from shapely import wkb as shapely_wkb
from shapely.geometry import LineString

from .config import SUPPORTED_EPSG
from .errors import ConfigError, GeometryError
from .model import ResolvedWay

# Latitude at which the Web Mercator square ends
MERCATOR_MAX_LAT = 85.0511287798


class GeometryBuilder:
    """Builds LineStrings from way coordinates and serializes them."""

    def __init__(self, epsg: int = 3857):
        if epsg not in SUPPORTED_EPSG:
            raise ConfigError(f"Unsupported EPSG code {epsg}")
        self.epsg = SUPPORTED_EPSG[epsg]
        self._transformer = None
        if self.epsg != 4326:
            self._transformer = Transformer.from_crs("EPSG:4326", f"EPSG:{self.epsg}", always_xy=True)

    def build(self, way: ResolvedWay) -> LineString:
        """Return the way as a line in the output SRS.

        Consecutive duplicate points are removed first. Raises GeometryError
        if fewer than two distinct points remain or a coordinate does not
        project to a finite value.
        """
        coords = way.coordinates
        if self._transformer is not None:
            coords = [(lon, max(-MERCATOR_MAX_LAT, min(MERCATOR_MAX_LAT, lat))) for lon, lat in coords]

        coords = _unique_points(coords)
        if len(coords) < 2:
            raise GeometryError(way.id, "need at least two points for linestring")

        if self._transformer is not None:
            xs, ys = self._transformer.transform([lon for lon, _ in coords], [lat for _, lat in coords])
            coords = list(zip(xs, ys))

        if not all(math.isfinite(x) and math.isfinite(y) for x, y in coords):
            raise GeometryError(way.id, "coordinate could not be projected")

        return LineString(coords)


def _unique_points(coordinates) -> List[Tuple[float, float]]:
    unique = []
    for coord in coordinates:
        if not unique or unique[-1] != coord:
            unique.append(tuple(coord))
    return unique


def to_ewkb_hex(line: LineString, epsg: int) -> str:
    """EWKB (with embedded SRID) as an upper case hex string."""
    return shapely_wkb.dumps(line, hex=True, srid=SUPPORTED_EPSG[epsg])

# tracker_pkg/propagator.py
from skyfield.api import load, wgs84, EarthSatellite
from skyfield.timelib import Time


class SatellitePropagator:
    """
    Responsibility: turn a TLE into a sub-satellite point.
    All orbital math is delegated to Skyfield's SGP4.
    """
    def __init__(self, satellite: EarthSatellite):
        self.satellite = satellite
        self.ts = load.timescale()

    @classmethod
    def from_lines(cls, line1: str, line2: str, name: str = None):
        ts = load.timescale()
        return cls(EarthSatellite(line1, line2, name, ts))

    def ground_point(self, t: Time = None):
        """
        Returns (longitude, latitude) in degrees of the point directly
        below the satellite at time t (default: now).
        """
        if t is None:
            t = self.ts.now()
        geocentric = self.satellite.at(t)
        lat, lon = wgs84.latlon_of(geocentric)
        return lon.degrees, lat.degrees


def tle_to_geo(tle: str, t: Time = None):
    """
    Newline-joined two-line element set -> (longitude, latitude) in degrees.
    """
    line1, line2 = tle.strip().splitlines()[-2:]
    return SatellitePropagator.from_lines(line1.strip(), line2.strip()).ground_point(t)

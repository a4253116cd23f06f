# tracker_pkg/tle_manager.py
import logging
from dataclasses import dataclass

import requests

from .constants import HTTP_TIMEOUT, TLE_API_URL
from .errors import TLEFetchError
from .propagator import tle_to_geo

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SatelliteRecord:
    sat_id: str
    name: str
    longitude: float
    latitude: float


class TLEManager:
    """
    Module: TLEManager (Data Handling)
    Responsibility: Fetch TLE sets from the remote lookup API and turn
    them into sub-satellite positions.
    """
    def __init__(self, url: str = TLE_API_URL, timeout: float = HTTP_TIMEOUT, session: requests.Session = None):
        self.url = url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch_tle(self, sat_id: str) -> dict:
        """
        GET {url}/{sat_id}. Returns the decoded JSON body, which carries at
        least 'line1', 'line2' and 'name'.
        Raises TLEFetchError on transport errors and non-2xx responses.
        """
        try:
            response = self.session.get(f"{self.url}/{sat_id}", timeout=self.timeout)
        except requests.RequestException as e:
            raise TLEFetchError(sat_id, str(e)) from e

        if not response.ok:
            raise TLEFetchError(sat_id, response.reason, status_code=response.status_code)

        return response.json()

    def lookup(self, sat_id: str) -> SatelliteRecord:
        data = self.fetch_tle(sat_id)
        logger.info("Retrieved data for satellite ID %s: %s", sat_id, data["name"])

        tle = f"{data['line1']}\n{data['line2']}"
        longitude, latitude = tle_to_geo(tle)
        return SatelliteRecord(sat_id, data["name"], longitude, latitude)

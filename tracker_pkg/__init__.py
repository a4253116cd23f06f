# tracker_pkg/__init__.py
from .constants import TLE_API_URL, DEFAULT_SATELLITE_IDS, ROTATION_STEP, ZOOM_STEP
from .errors import TrackerError, TLEFetchError, DuplicateBodyError
from .projection import to_cartesian, to_angle, wrap_longitude, format_coordinates
from .celestial import BodyKind, BodySpec, CelestialObject, make_body, make_earth, make_satellite
from .registry import SceneRegistry
from .tle_manager import TLEManager, SatelliteRecord
from .propagator import SatellitePropagator, tle_to_geo
from .sync import SatelliteSync, BlockingFetcher, SyncListener
from .interaction import OrbitCamera, Ray, Interaction, RenderLoop, pick

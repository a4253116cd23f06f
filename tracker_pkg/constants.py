# tracker_pkg/constants.py

TLE_API_URL = "https://tle.ivanstanojevic.me/api/tle"
DEFAULT_SATELLITE_IDS = ("28654", "47966", "42828")
HTTP_TIMEOUT = None                                  # seconds, None = library default (wait)

# Body defaults (render-space units). A body centre sits at height + radius.
EARTH_NAME = "Earth"
EARTH_RADIUS = 5.0
EARTH_HEIGHT = -5.0
EARTH_SEGMENTS = 50
EARTH_COLOR = (0.18, 0.36, 0.72, 1.0)
EARTH_TEXTURE_FILE = "img/uvearth.jpeg"

SATELLITE_RADIUS = 0.1
SATELLITE_HEIGHT = 6.0                               # orbit shell above the origin
SATELLITE_SEGMENTS = 32
SATELLITE_COLOR = (1.0, 1.0, 1.0, 1.0)

# Camera
CAMERA_START = (0.0, 0.0, 20.0)
CAMERA_FOV = 75.0                                    # horizontal, degrees
ZOOM_STEP = 2.0
MIN_CAMERA_DISTANCE = 7.0
ROTATION_STEP = 0.05                                 # degrees of longitude per frame
FRAME_INTERVAL_MS = 16                               # ~60 fps

# Background
STAR_COUNT = 400
STAR_SHELL_RADIUS = 120.0
GRATICULE_STEP = 30                                  # degrees between grid lines

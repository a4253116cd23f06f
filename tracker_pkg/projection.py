# tracker_pkg/projection.py
import numpy as np


def to_cartesian(longitude: float, latitude: float, radius: float):
    """
    Geographic angles (degrees) and a radius to a y-up render-space point.

    Longitude is offset by -90 degrees before conversion so that the
    texture seam lands on the zero meridian.
    """
    azimuth = np.radians(90.0 - longitude)
    elevation = np.radians(latitude)

    x = radius * np.cos(elevation) * np.cos(azimuth)
    y = radius * np.sin(elevation)
    z = radius * np.cos(elevation) * np.sin(azimuth)
    return float(x), float(y), float(z)


def to_angle(x: float, y: float, z: float):
    """
    Exact inverse of to_cartesian.
    Returns (longitude, latitude, radius); longitude lies in (-180, 180].
    """
    radius = float(np.sqrt(x * x + y * y + z * z))
    if radius == 0.0:
        return 0.0, 0.0, 0.0

    longitude = np.degrees(np.arctan2(x, z))
    # clip guards asin against |y| creeping past r by an ulp
    latitude = np.degrees(np.arcsin(np.clip(y / radius, -1.0, 1.0)))
    return float(longitude), float(latitude), radius


def wrap_longitude(longitude: float) -> float:
    """Normalize a longitude into (-180, 180]."""
    wrapped = np.fmod(longitude + 180.0, 360.0)
    if wrapped <= 0.0:
        wrapped += 360.0
    longitude = float(wrapped - 180.0)
    # rounding can land a hair-above-zero `wrapped` on -180 exactly
    return 180.0 if longitude <= -180.0 else longitude


def to_view_axes(point):
    """y-up scene coordinates -> z-up GL view coordinates (+90 deg about x)."""
    x, y, z = point
    return x, -z, y


def from_view_axes(point):
    x, y, z = point
    return x, z, -y


def format_coordinates(longitude: float, latitude: float) -> str:
    """Hover readout text, one line per axis."""
    lon_text = f"Longitude: {abs(longitude):.3f} {'West' if longitude < 0 else 'East'}"
    lat_text = f"Latitude: {abs(latitude):.3f} {'South' if latitude < 0 else 'North'}"
    return f"{lon_text}\n{lat_text}"


def sample_equirectangular(image: np.ndarray, longitudes, latitudes) -> np.ndarray:
    """
    Look up pixels of an equirectangular (plate carree) image.

    Args:
        image: HxWxC array, row 0 at latitude +90, column 0 at longitude -180.
        longitudes, latitudes: arrays of degrees.

    Returns:
        N x C array of the sampled pixels.
    """
    height, width = image.shape[:2]
    lon = np.asarray(longitudes, dtype=float)
    lat = np.asarray(latitudes, dtype=float)

    cols = ((lon + 180.0) / 360.0 * width).astype(int) % width
    rows = np.clip(((90.0 - lat) / 180.0 * height).astype(int), 0, height - 1)
    return image[rows, cols]

# tracker_pkg/celestial.py
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Tuple

from .constants import (
    EARTH_COLOR, EARTH_HEIGHT, EARTH_NAME, EARTH_RADIUS, EARTH_SEGMENTS,
    SATELLITE_COLOR, SATELLITE_HEIGHT, SATELLITE_RADIUS, SATELLITE_SEGMENTS,
)
from .projection import to_cartesian


class BodyKind(Enum):
    PRIMARY = "primary"
    SATELLITE = "satellite"


@dataclass(frozen=True)
class BodySpec:
    kind: BodyKind
    radius: float
    height: float
    segments: int
    color: Tuple[float, float, float, float]

    @property
    def orbit_radius(self) -> float:
        """Distance from the origin to the body centre."""
        return self.height + self.radius


BODY_SPECS = {
    BodyKind.PRIMARY: BodySpec(BodyKind.PRIMARY, EARTH_RADIUS, EARTH_HEIGHT, EARTH_SEGMENTS, EARTH_COLOR),
    BodyKind.SATELLITE: BodySpec(BodyKind.SATELLITE, SATELLITE_RADIUS, SATELLITE_HEIGHT, SATELLITE_SEGMENTS, SATELLITE_COLOR),
}


@dataclass(eq=False)
class CelestialObject:
    """
    A sphere in the scene, anchored to a geographic position.
    The renderable handle comes from whatever mesh factory built it.
    """
    name: str
    longitude: float
    latitude: float
    spec: BodySpec
    renderable: Any = None
    position: Tuple[float, float, float] = field(default=(0.0, 0.0, 0.0))

    @property
    def kind(self) -> BodyKind:
        return self.spec.kind

    @property
    def radius(self) -> float:
        return self.spec.radius

    def get_self_location(self):
        return self.longitude, self.latitude


def make_body(kind: BodyKind, name: str, longitude: float, latitude: float, factory) -> CelestialObject:
    """
    Build a body and place it once.

    `factory` must provide create(spec) -> handle and place(handle, position).
    """
    spec = BODY_SPECS[kind]
    body = CelestialObject(name, longitude, latitude, spec)
    body.renderable = factory.create(spec)
    body.position = to_cartesian(longitude, latitude, spec.orbit_radius)
    factory.place(body.renderable, body.position)
    return body


def make_earth(factory, name: str = EARTH_NAME) -> CelestialObject:
    return make_body(BodyKind.PRIMARY, name, 0.0, 0.0, factory)


def make_satellite(name: str, longitude: float, latitude: float, factory) -> CelestialObject:
    return make_body(BodyKind.SATELLITE, name, longitude, latitude, factory)

# tracker_pkg/interaction.py
import logging
from dataclasses import dataclass

import numpy as np

from .celestial import BodyKind
from .constants import CAMERA_FOV, CAMERA_START, MIN_CAMERA_DISTANCE, ROTATION_STEP, ZOOM_STEP
from .projection import format_coordinates, to_angle, to_cartesian, wrap_longitude

logger = logging.getLogger(__name__)

ROTATE_LABEL = "stop rotating"
STOPPED_LABEL = "rotate"


class OrbitCamera:
    """
    Camera position and aim point in y-up scene coordinates.
    Moves on a sphere around the origin, the same way bodies are placed.
    """
    def __init__(self, position=CAMERA_START, target=(0.0, 0.0, 0.0), fov: float = CAMERA_FOV):
        self.position = tuple(float(v) for v in position)
        self.target = tuple(float(v) for v in target)
        self.fov = fov

    def angle(self):
        return to_angle(*self.position)

    def look_at(self, target):
        self.target = tuple(float(v) for v in target)

    def zoom(self, step: float, min_distance: float = MIN_CAMERA_DISTANCE):
        longitude, latitude, radius = self.angle()
        radius = max(radius + step, min_distance)
        self.position = to_cartesian(longitude, latitude, radius)

    def rotate(self, step: float = ROTATION_STEP):
        longitude, latitude, radius = self.angle()
        longitude = wrap_longitude(wrap_longitude(longitude) + step)
        self.position = to_cartesian(longitude, latitude, radius)


@dataclass
class Ray:
    origin: np.ndarray
    direction: np.ndarray           # unit length

    @classmethod
    def from_camera(cls, camera: OrbitCamera, ndc_x: float, ndc_y: float, aspect: float):
        """
        Ray through a point given in normalized device coordinates
        ([-1, 1] both axes, +y up). camera.fov is the horizontal angle.
        """
        eye = np.array(camera.position, dtype=float)
        forward = np.array(camera.target, dtype=float) - eye
        forward /= np.linalg.norm(forward)

        up = np.array([0.0, 1.0, 0.0])
        if abs(np.dot(forward, up)) > 0.999:
            up = np.array([0.0, 0.0, -1.0])
        right = np.cross(forward, up)
        right /= np.linalg.norm(right)
        true_up = np.cross(right, forward)

        half_width = np.tan(np.radians(camera.fov) / 2.0)
        half_height = half_width / aspect
        direction = forward + ndc_x * half_width * right + ndc_y * half_height * true_up
        return cls(eye, direction / np.linalg.norm(direction))

    def hit_sphere(self, center, radius: float):
        """Distance to the first intersection in front of the origin, or None."""
        oc = self.origin - np.asarray(center, dtype=float)
        b = np.dot(oc, self.direction)
        c = np.dot(oc, oc) - radius * radius
        disc = b * b - c
        if disc < 0:
            return None
        root = np.sqrt(disc)
        for t in (-b - root, -b + root):
            if t > 0:
                return float(t)
        return None

    def point_at(self, t: float) -> np.ndarray:
        return self.origin + t * self.direction


@dataclass
class Hit:
    name: str
    body: object
    point: np.ndarray
    distance: float


def pick(registry, ray: Ray):
    """Nearest registered body under the ray, resolved through the registry."""
    best = None
    for body in registry.bodies():
        t = ray.hit_sphere(body.position, body.radius)
        if t is not None and (best is None or t < best[0]):
            best = (t, body)
    if best is None:
        return None

    t, body = best
    name = registry.resolve(body.renderable)
    if name is None:
        return None
    return Hit(name, body, ray.point_at(t), t)


def hit_coordinates(hit: Hit):
    """(longitude, latitude) under the pointer for a hit."""
    if hit.body.kind is BodyKind.PRIMARY:
        x, y, z = hit.point - np.asarray(hit.body.position, dtype=float)
        longitude, latitude, _ = to_angle(x, y, z)
        return longitude, latitude
    return hit.body.get_self_location()


class Interaction:
    """
    Pointer, zoom and rotate handling. Holds the last hover readout so a
    miss leaves it unchanged.
    """
    def __init__(self, registry, camera: OrbitCamera, rotating: bool = True):
        self.registry = registry
        self.camera = camera
        self.rotating = rotating
        self.hover_name = ""
        self.hover_text = ""

    def pointer_moved(self, px: float, py: float, width: float, height: float) -> bool:
        """Pixel position (origin top-left). Returns True when the readout changed."""
        if width <= 0 or height <= 0:
            return False
        ndc_x = (px / width) * 2 - 1
        ndc_y = -(py / height) * 2 + 1

        hit = pick(self.registry, Ray.from_camera(self.camera, ndc_x, ndc_y, width / height))
        if hit is None:
            return False

        longitude, latitude = hit_coordinates(hit)
        self.hover_name = hit.name
        self.hover_text = format_coordinates(longitude, latitude)
        return True

    def _aim(self):
        primary = self.registry.primary
        if primary is not None:
            self.camera.look_at(primary.position)

    def zoom_in(self):
        self.camera.zoom(-ZOOM_STEP)
        self._aim()

    def zoom_out(self):
        self.camera.zoom(ZOOM_STEP)
        self._aim()

    def toggle_rotation(self) -> str:
        return self.set_rotating(not self.rotating)

    def set_rotating(self, enabled: bool) -> str:
        self.rotating = bool(enabled)
        logger.debug("Auto-rotate %s", "on" if self.rotating else "off")
        return self.rotation_label()

    def rotation_label(self) -> str:
        return ROTATE_LABEL if self.rotating else STOPPED_LABEL


class RenderLoop:
    """
    One frame of camera work. The host calls step() from its frame timer
    and issues the draw afterwards; frames are never skipped or batched.
    """
    def __init__(self, interaction: Interaction, step: float = ROTATION_STEP):
        self.interaction = interaction
        self.step_size = step
        self.frames = 0

    def step(self):
        interaction = self.interaction
        camera = interaction.camera
        primary = interaction.registry.primary

        if interaction.rotating:
            camera.rotate(self.step_size)
        if primary is not None:
            # orbit-control target follows the primary body
            camera.look_at(primary.position)
        self.frames += 1

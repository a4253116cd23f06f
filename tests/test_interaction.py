"""
Tests for camera control, pointer picking and the render loop.

Run with:
    python -m pytest tests/test_interaction.py -v
"""

import unittest

import numpy as np

from tracker_pkg.celestial import make_earth, make_satellite
from tracker_pkg.constants import MIN_CAMERA_DISTANCE
from tracker_pkg.interaction import (
    Interaction, OrbitCamera, Ray, RenderLoop, hit_coordinates, pick,
)
from tracker_pkg.projection import to_angle, to_cartesian
from tracker_pkg.registry import SceneRegistry
from tests.helpers import FakeMeshFactory, FakeView


class SceneTestCase(unittest.TestCase):

    def setUp(self):
        self.factory = FakeMeshFactory()
        self.registry = SceneRegistry(FakeView())
        self.earth = make_earth(self.factory)
        self.registry.register(self.earth)
        self.camera = OrbitCamera(position=(0.0, 0.0, 20.0))
        self.interaction = Interaction(self.registry, self.camera)


class TestZoom(SceneTestCase):

    def test_zoom_in_from_twenty(self):
        self.interaction.zoom_in()
        lon, lat, radius = self.camera.angle()
        self.assertAlmostEqual(radius, 18.0)
        self.assertAlmostEqual(lon, 0.0)
        self.assertAlmostEqual(lat, 0.0)
        self.assertEqual(self.camera.target, tuple(self.earth.position))

    def test_zoom_out_keeps_direction(self):
        self.camera.position = to_cartesian(40.0, 25.0, 20.0)
        self.interaction.zoom_out()
        lon, lat, radius = self.camera.angle()
        self.assertAlmostEqual(radius, 22.0)
        self.assertAlmostEqual(lon, 40.0)
        self.assertAlmostEqual(lat, 25.0)

    def test_zoom_in_is_clamped(self):
        for _ in range(20):
            self.interaction.zoom_in()
        self.assertAlmostEqual(self.camera.angle()[2], MIN_CAMERA_DISTANCE)


class TestRotation(SceneTestCase):

    def test_toggle_labels(self):
        self.assertTrue(self.interaction.rotating)
        self.assertEqual(self.interaction.rotation_label(), "stop rotating")
        self.assertEqual(self.interaction.toggle_rotation(), "rotate")
        self.assertFalse(self.interaction.rotating)
        self.assertEqual(self.interaction.toggle_rotation(), "stop rotating")

    def test_set_rotating_follows_requested_state(self):
        self.assertEqual(self.interaction.set_rotating(False), "rotate")
        self.assertEqual(self.interaction.set_rotating(False), "rotate")
        self.assertFalse(self.interaction.rotating)
        self.assertEqual(self.interaction.set_rotating(True), "stop rotating")
        self.assertEqual(self.interaction.set_rotating(True), "stop rotating")
        self.assertTrue(self.interaction.rotating)

    def test_render_loop_advances_longitude(self):
        loop = RenderLoop(self.interaction)
        loop.step()
        lon, lat, radius = self.camera.angle()
        self.assertAlmostEqual(lon, 0.05)
        self.assertAlmostEqual(radius, 20.0)
        self.assertEqual(self.camera.target, tuple(self.earth.position))
        self.assertEqual(loop.frames, 1)

    def test_render_loop_idle_when_stopped(self):
        self.interaction.toggle_rotation()
        loop = RenderLoop(self.interaction)
        before = self.camera.position
        loop.step()
        self.assertEqual(self.camera.position, before)
        self.assertEqual(loop.frames, 1)

    def test_long_rotation_wraps(self):
        self.camera.position = to_cartesian(179.0, 10.0, 20.0)
        loop = RenderLoop(self.interaction)
        for _ in range(8000):                       # 400 degrees
            loop.step()
            lon, lat, radius = self.camera.angle()
            self.assertGreater(lon, -180.0)
            self.assertLessEqual(lon, 180.0)
        self.assertAlmostEqual(lat, 10.0, places=6)
        self.assertAlmostEqual(radius, 20.0, places=6)
        self.assertAlmostEqual(lon, -141.0, places=4)


class TestRay(unittest.TestCase):

    def test_center_ray_points_at_target(self):
        camera = OrbitCamera(position=(0.0, 0.0, 20.0))
        ray = Ray.from_camera(camera, 0.0, 0.0, aspect=1.5)
        np.testing.assert_allclose(ray.direction, [0.0, 0.0, -1.0], atol=1e-12)

    def test_hit_sphere_distance(self):
        ray = Ray(np.array([0.0, 0.0, 20.0]), np.array([0.0, 0.0, -1.0]))
        self.assertAlmostEqual(ray.hit_sphere((0.0, 0.0, 0.0), 5.0), 15.0)
        self.assertIsNone(ray.hit_sphere((10.0, 0.0, 0.0), 5.0))

    def test_sphere_behind_origin_missed(self):
        ray = Ray(np.array([0.0, 0.0, 20.0]), np.array([0.0, 0.0, 1.0]))
        self.assertIsNone(ray.hit_sphere((0.0, 0.0, 0.0), 5.0))

    def test_screen_right_is_camera_right(self):
        camera = OrbitCamera(position=(0.0, 0.0, 20.0))
        ray = Ray.from_camera(camera, 1.0, 0.0, aspect=1.0)
        self.assertGreater(ray.direction[0], 0.0)
        ray = Ray.from_camera(camera, 0.0, 1.0, aspect=1.0)
        self.assertGreater(ray.direction[1], 0.0)


class TestPicking(SceneTestCase):

    def test_pointer_over_earth_reads_surface(self):
        changed = self.interaction.pointer_moved(400, 300, 800, 600)
        self.assertTrue(changed)
        self.assertEqual(self.interaction.hover_name, "Earth")
        self.assertEqual(self.interaction.hover_text, "Longitude: 0.000 East\nLatitude: 0.000 North")

    def test_earth_hit_uses_inverse_projection(self):
        target = np.array(to_cartesian(30.0, 15.0, 5.0))
        eye = target * 4.0
        ray = Ray(eye, -target / np.linalg.norm(target))
        hit = pick(self.registry, ray)
        self.assertEqual(hit.name, "Earth")
        lon, lat = hit_coordinates(hit)
        self.assertAlmostEqual(lon, 30.0)
        self.assertAlmostEqual(lat, 15.0)

    def test_satellite_in_front_wins(self):
        sat = make_satellite("ISS", 0.0, 0.0, self.factory)
        self.registry.register(sat)
        hit = pick(self.registry, Ray.from_camera(self.camera, 0.0, 0.0, aspect=1.0))
        self.assertEqual(hit.name, "ISS")
        self.assertEqual(hit_coordinates(hit), (0.0, 0.0))

    def test_satellite_readout_uses_stored_location(self):
        sat = make_satellite("NOAA 18", -75.5, 41.0, self.factory)
        self.registry.register(sat)
        position = np.array(sat.position)
        ray = Ray(position * 3.0, -position / np.linalg.norm(position))
        hit = pick(self.registry, ray)
        self.assertEqual(hit.name, "NOAA 18")
        self.assertEqual(hit_coordinates(hit), (-75.5, 41.0))

    def test_miss_keeps_last_readout(self):
        self.interaction.pointer_moved(400, 300, 800, 600)
        text = self.interaction.hover_text
        self.assertFalse(self.interaction.pointer_moved(0, 0, 800, 600))
        self.assertEqual(self.interaction.hover_text, text)
        self.assertEqual(self.interaction.hover_name, "Earth")

    def test_removed_body_not_pickable(self):
        sat = make_satellite("ISS", 0.0, 0.0, self.factory)
        self.registry.register(sat)
        self.registry.unregister("ISS")
        hit = pick(self.registry, Ray.from_camera(self.camera, 0.0, 0.0, aspect=1.0))
        self.assertEqual(hit.name, "Earth")


class TestCameraAngle(unittest.TestCase):

    def test_angle_matches_projector(self):
        camera = OrbitCamera(position=to_cartesian(-120.0, -30.0, 15.0))
        self.assertEqual(camera.angle(), to_angle(*camera.position))


if __name__ == "__main__":
    unittest.main()

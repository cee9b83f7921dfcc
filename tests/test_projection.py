"""Perspective projection and pointer hit-testing."""

import math

import numpy as np
import pytest

from solar_sim.core.camera import CameraFrame
from solar_sim.render.projection import ProjectedBody, Projector, hit_test


@pytest.fixture
def projector():
    projector = Projector((800, 600), 60.0)
    projector.look(CameraFrame(target=np.zeros(3), position=np.array([0.0, 0.0, 100.0])))
    return projector


class TestProjector:
    def test_target_lands_in_the_centre(self, projector):
        sx, sy, depth = projector.world_to_screen(np.zeros(3))
        assert (sx, sy) == pytest.approx((400.0, 300.0))
        assert depth == pytest.approx(100.0)

    def test_axes(self, projector):
        right = projector.world_to_screen(np.array([10.0, 0.0, 0.0]))
        up = projector.world_to_screen(np.array([0.0, 10.0, 0.0]))
        assert right[0] > 400.0
        assert up[1] < 300.0

    def test_behind_camera(self, projector):
        assert projector.world_to_screen(np.array([0.0, 0.0, 200.0])) is None

    def test_focal_length(self, projector):
        assert projector.focal_length == pytest.approx(300.0 / math.tan(math.radians(30.0)))

    def test_project_many_matches_single(self, projector):
        points = np.array([[5.0, 3.0, -20.0], [-40.0, 0.0, 10.0], [0.0, 0.0, 150.0]])
        screen, depth = projector.project_many(points)
        for idx in range(2):
            sx, sy, d = projector.world_to_screen(points[idx])
            assert screen[idx] == pytest.approx([sx, sy])
            assert depth[idx] == pytest.approx(d)
        assert depth[2] < 0.0
        assert np.isnan(screen[2]).all()

    def test_project_radius(self, projector):
        assert projector.project_radius(2.0, 100.0) == pytest.approx(2.0 * projector.focal_length / 100.0)
        assert projector.project_radius(2.0, -1.0) == 0.0

    def test_degenerate_frame_is_ignored(self, projector):
        projector.look(CameraFrame(target=np.ones(3), position=np.ones(3)))
        sx, sy, _ = projector.world_to_screen(np.zeros(3))
        assert (sx, sy) == pytest.approx((400.0, 300.0))


class TestHitTest:
    bodies = [
        ProjectedBody("Far", 100.0, 100.0, depth=500.0, radius=20.0),
        ProjectedBody("Near", 105.0, 100.0, depth=50.0, radius=10.0),
        ProjectedBody("Other", 300.0, 300.0, depth=80.0, radius=5.0),
    ]

    def test_nearest_body_wins(self):
        assert hit_test(self.bodies, (104.0, 101.0)) == "Near"

    def test_only_covering_body(self):
        assert hit_test(self.bodies, (85.0, 100.0)) == "Far"

    def test_miss(self):
        assert hit_test(self.bodies, (600.0, 10.0)) is None

    def test_tolerance(self):
        assert hit_test(self.bodies, (308.0, 300.0)) is None
        assert hit_test(self.bodies, (308.0, 300.0), tolerance=4.0) == "Other"

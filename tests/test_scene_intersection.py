"""Unit tests for scene storage and the nearest-hit resolver.

Tests cover:
- Adding and clearing spheres and lights
- Closest hit selection across multiple spheres
- Distance bound (draw distance and shadow distance)
- Hit point, outward normal and material id
- Tie-breaking by insertion order
"""

import pytest
import taichi as ti


def _query(origin, direction, max_distance):
    """Run intersect_scene in a kernel and return the hit record as Python values."""
    from whitted.core.ray import normalize, vec3
    from whitted.scene.intersection import intersect_scene

    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f32, shape=())
    point = ti.field(dtype=ti.math.vec3, shape=())
    normal = ti.field(dtype=ti.math.vec3, shape=())
    material_id = ti.field(dtype=ti.i32, shape=())

    @ti.kernel
    def test_kernel(
        ox: ti.f32, oy: ti.f32, oz: ti.f32,
        dx: ti.f32, dy: ti.f32, dz: ti.f32,
        bound: ti.f32,
    ):
        rec = intersect_scene(vec3(ox, oy, oz), normalize(vec3(dx, dy, dz)), bound)
        hit[None] = rec.hit
        t_val[None] = rec.t
        point[None] = rec.point
        normal[None] = rec.normal
        material_id[None] = rec.material_id

    test_kernel(*origin, *direction, max_distance)
    return {
        "hit": hit[None],
        "t": t_val[None],
        "point": point[None].to_numpy().tolist(),
        "normal": normal[None].to_numpy().tolist(),
        "material_id": material_id[None],
    }


class TestSceneStorage:
    """Tests for adding and clearing scene data."""

    def test_add_sphere_returns_index(self):
        """Test that add_sphere returns sequential indices."""
        from whitted.scene.intersection import add_sphere, get_sphere_count, vec3

        assert add_sphere(vec3(0, 0, -5), 1.0, 0) == 0
        assert add_sphere(vec3(2, 0, -5), 1.0, 0) == 1
        assert get_sphere_count() == 2

    def test_add_light_returns_index(self):
        """Test that add_light returns sequential indices."""
        from whitted.scene.intersection import add_light, get_light_count, vec3

        assert add_light(vec3(5, 5, 0), 1.0) == 0
        assert add_light(vec3(-5, 5, 0), 0.5) == 1
        assert get_light_count() == 2

    def test_clear_scene(self):
        """Test that clear_scene removes spheres and lights."""
        from whitted.scene.intersection import (
            add_light,
            add_sphere,
            clear_scene,
            get_light_count,
            get_sphere_count,
            vec3,
        )

        add_sphere(vec3(0, 0, -5), 1.0, 0)
        add_light(vec3(5, 5, 0), 1.0)
        clear_scene()
        assert get_sphere_count() == 0
        assert get_light_count() == 0

    def test_invalid_radius_raises(self):
        """Test that non-positive radii are rejected."""
        from whitted.scene.intersection import add_sphere, get_sphere_count, vec3

        with pytest.raises(ValueError):
            add_sphere(vec3(0, 0, -5), 0.0, 0)
        with pytest.raises(ValueError):
            add_sphere(vec3(0, 0, -5), -1.0, 0)
        assert get_sphere_count() == 0

    def test_negative_intensity_raises(self):
        """Test that negative light intensity is rejected."""
        from whitted.scene.intersection import add_light, vec3

        with pytest.raises(ValueError):
            add_light(vec3(0, 0, 0), -0.1)


class TestIntersectScene:
    """Tests for intersect_scene."""

    def test_empty_scene_misses(self):
        """Test that an empty scene always reports a miss."""
        rec = _query((0, 0, 0), (0, 0, -1), 1000.0)
        assert rec["hit"] == 0
        assert rec["material_id"] == -1

    def test_single_sphere_hit_record(self):
        """Test point, normal and material id for a direct hit."""
        from whitted.scene.intersection import add_sphere, vec3

        add_sphere(vec3(0, 0, -5), 1.0, 7)

        rec = _query((0, 0, 0), (0, 0, -1), 1000.0)
        assert rec["hit"] == 1
        assert abs(rec["t"] - 4.0) < 1e-5
        assert rec["point"] == pytest.approx([0.0, 0.0, -4.0], abs=1e-5)
        assert rec["normal"] == pytest.approx([0.0, 0.0, 1.0], abs=1e-5)
        assert rec["material_id"] == 7

    def test_closest_sphere_wins(self):
        """Test that the nearest sphere is reported regardless of order."""
        from whitted.scene.intersection import add_sphere, vec3

        add_sphere(vec3(0, 0, -10), 1.0, 0)  # far
        add_sphere(vec3(0, 0, -5), 1.0, 1)  # near

        rec = _query((0, 0, 0), (0, 0, -1), 1000.0)
        assert rec["hit"] == 1
        assert rec["material_id"] == 1
        assert abs(rec["t"] - 4.0) < 1e-5

    def test_max_distance_excludes_far_hits(self):
        """Test that hits at or beyond max_distance are ignored."""
        from whitted.scene.intersection import add_sphere, vec3

        add_sphere(vec3(0, 0, -5), 1.0, 0)

        assert _query((0, 0, 0), (0, 0, -1), 3.9)["hit"] == 0
        assert _query((0, 0, 0), (0, 0, -1), 4.1)["hit"] == 1

    def test_draw_distance_hides_distant_geometry(self):
        """Test that geometry beyond the draw distance is not visible."""
        from whitted.core.shading import DRAW_DISTANCE
        from whitted.scene.intersection import add_sphere, vec3

        add_sphere(vec3(0, 0, -2000), 1.0, 0)

        assert _query((0, 0, 0), (0, 0, -1), DRAW_DISTANCE)["hit"] == 0

    def test_normal_is_outward_from_inside(self):
        """Test that the normal points away from the center for inside hits."""
        from whitted.scene.intersection import add_sphere, vec3

        add_sphere(vec3(0, 0, 0), 2.0, 0)

        rec = _query((0, 0, 0), (1, 0, 0), 1000.0)
        assert rec["hit"] == 1
        assert abs(rec["t"] - 2.0) < 1e-5
        assert rec["normal"] == pytest.approx([1.0, 0.0, 0.0], abs=1e-5)

    def test_normal_is_unit_length(self):
        """Test that the normal is normalized for a large sphere."""
        from whitted.scene.intersection import add_sphere, vec3

        add_sphere(vec3(0, -1001, -5), 1000.0, 0)

        rec = _query((0, 0, 0), (0, -1, -1), 1000.0)
        assert rec["hit"] == 1
        length = sum(c * c for c in rec["normal"]) ** 0.5
        assert abs(length - 1.0) < 1e-4

    def test_equal_distance_keeps_first_sphere(self):
        """Test that exactly equal distances keep the earlier sphere."""
        from whitted.scene.intersection import add_sphere, vec3

        add_sphere(vec3(0, 0, -5), 1.0, 3)
        add_sphere(vec3(0, 0, -5), 1.0, 4)

        rec = _query((0, 0, 0), (0, 0, -1), 1000.0)
        assert rec["material_id"] == 3

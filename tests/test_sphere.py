"""Unit tests for sphere intersection.

Tests cover:
- Ray hitting sphere from outside
- Ray missing sphere
- Ray starting inside sphere
- Ray tangent to sphere (counts as a miss)
- Interval bounds and the any-hit variant
"""

import math

import pytest
import taichi as ti


def _vec(v):
    return (float(v[0]), float(v[1]), float(v[2]))


def _intersect(origin, direction, center, radius, min_t=0.0, max_t=math.inf):
    """Run intersect_sphere and intersect_sphere_any for one ray.

    Returns:
        Tuple (valid, distance, position, normal, color, any_hit).
    """
    from raycaster.core.ray import Ray, vec3
    from raycaster.geometry.intersection import is_valid
    from raycaster.geometry.sphere import Sphere, intersect_sphere, intersect_sphere_any

    valid = ti.field(dtype=ti.i32, shape=())
    any_hit = ti.field(dtype=ti.i32, shape=())
    distance = ti.field(dtype=ti.f32, shape=())
    position = ti.field(dtype=ti.math.vec3, shape=())
    normal = ti.field(dtype=ti.math.vec3, shape=())
    color = ti.field(dtype=ti.math.vec3, shape=())

    @ti.kernel
    def test_kernel(o: vec3, d: vec3, c: vec3, r: ti.f32, lo: ti.f32, hi: ti.f32):
        ray = Ray(origin=o, direction=d)
        sphere = Sphere(origin=c, radius=r, color=vec3(0.2, 0.4, 0.6))
        rec = intersect_sphere(ray, sphere, lo, hi)
        valid[None] = is_valid(rec)
        distance[None] = rec.distance
        position[None] = rec.position
        normal[None] = rec.normal
        color[None] = rec.color
        any_hit[None] = intersect_sphere_any(ray, sphere, lo, hi)

    test_kernel(
        vec3(*origin), vec3(*direction), vec3(*center), radius, min_t, max_t
    )
    return (
        valid[None],
        distance[None],
        _vec(position[None]),
        _vec(normal[None]),
        _vec(color[None]),
        any_hit[None],
    )


class TestSphereBasics:
    """Tests for Sphere dataclass and basic operations."""

    def test_make_sphere(self):
        """Test make_sphere convenience function."""
        from raycaster.geometry.sphere import make_sphere
        from raycaster.core.ray import vec3

        center_result = ti.field(dtype=ti.math.vec3, shape=())
        radius_result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            sphere = make_sphere(vec3(1.0, 2.0, 3.0), 0.5, vec3(1.0, 1.0, 1.0))
            center_result[None] = sphere.origin
            radius_result[None] = sphere.radius

        test_kernel()
        c = center_result[None]
        assert abs(c[0] - 1.0) < 1e-6
        assert abs(c[1] - 2.0) < 1e-6
        assert abs(c[2] - 3.0) < 1e-6
        assert abs(radius_result[None] - 0.5) < 1e-6

    def test_sphere_normal_is_unit_and_outward(self):
        """Test the normal at a surface point points away from the center."""
        from raycaster.core.ray import vec3
        from raycaster.geometry.sphere import Sphere, sphere_normal

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            sphere = Sphere(origin=vec3(1.0, 0.0, 0.0), radius=2.0, color=vec3(1.0, 1.0, 1.0))
            result[None] = sphere_normal(sphere, vec3(1.0, 2.0, 0.0))

        test_kernel()
        n = result[None]
        assert abs(n[0]) < 1e-6
        assert abs(n[1] - 1.0) < 1e-6
        assert abs(n[2]) < 1e-6


class TestSphereIntersection:
    """Tests for ray-sphere intersection."""

    def test_direct_hit_from_outside(self):
        """Test ray toward the center hits at distance d - r."""
        valid, t, p, n, color, any_hit = _intersect(
            (0.0, 0.0, 0.0), (0.0, 0.0, 1.0), (0.0, 0.0, 4.0), 1.0
        )
        assert valid == 1
        assert any_hit == 1
        assert t == pytest.approx(3.0, abs=1e-5)
        assert p == pytest.approx((0.0, 0.0, 3.0), abs=1e-5)
        assert n == pytest.approx((0.0, 0.0, -1.0), abs=1e-5)
        assert color == pytest.approx((0.2, 0.4, 0.6), abs=1e-6)

    def test_miss(self):
        """Test ray passing beside the sphere misses."""
        valid, t, _, _, color, any_hit = _intersect(
            (0.0, 0.0, 0.0), (0.0, 0.0, 1.0), (0.0, 3.0, 4.0), 1.0
        )
        assert valid == 0
        assert any_hit == 0
        assert math.isinf(t)
        assert color == pytest.approx((0.0, 0.0, 0.0))

    def test_sphere_behind_ray_misses(self):
        """Test sphere behind the origin is not hit."""
        valid, _, _, _, _, any_hit = _intersect(
            (0.0, 0.0, 0.0), (0.0, 0.0, 1.0), (0.0, 0.0, -4.0), 1.0
        )
        assert valid == 0
        assert any_hit == 0

    def test_tangent_ray_is_a_miss(self):
        """Test a ray grazing the sphere (zero discriminant) is not a hit."""
        valid, _, _, _, _, any_hit = _intersect(
            (0.0, 1.0, 0.0), (0.0, 0.0, 1.0), (0.0, 0.0, 4.0), 1.0
        )
        assert valid == 0
        assert any_hit == 0

    def test_origin_inside_sphere_hits_far_side(self):
        """Test ray starting at the center exits at distance r."""
        valid, t, p, n, _, any_hit = _intersect(
            (0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 0.0, 0.0), 2.0
        )
        assert valid == 1
        assert any_hit == 1
        assert t == pytest.approx(2.0, abs=1e-5)
        assert p == pytest.approx((2.0, 0.0, 0.0), abs=1e-5)
        # Outward normal, same side as the ray direction
        assert n == pytest.approx((1.0, 0.0, 0.0), abs=1e-5)

    def test_near_root_outside_interval_uses_far_root(self):
        """Test min_t past the near root selects the far root."""
        valid, t, _, _, _, any_hit = _intersect(
            (0.0, 0.0, 0.0), (0.0, 0.0, 1.0), (0.0, 0.0, 4.0), 1.0, min_t=3.5
        )
        assert valid == 1
        assert any_hit == 1
        assert t == pytest.approx(5.0, abs=1e-5)

    def test_max_t_before_sphere_misses(self):
        """Test the interval upper bound excludes farther hits."""
        valid, _, _, _, _, any_hit = _intersect(
            (0.0, 0.0, 0.0), (0.0, 0.0, 1.0), (0.0, 0.0, 4.0), 1.0, max_t=2.0
        )
        assert valid == 0
        assert any_hit == 0

    def test_bounds_are_exclusive(self):
        """Test a root exactly at max_t is not reported."""
        valid, _, _, _, _, any_hit = _intersect(
            (0.0, 0.0, 0.0), (0.0, 0.0, 1.0), (0.0, 0.0, 4.0), 1.0, max_t=3.0
        )
        assert valid == 0
        assert any_hit == 0

    @pytest.mark.parametrize(
        "direction",
        [
            (0.0, 0.0, 1.0),
            (0.1, 0.05, 0.99373),
            (-0.2, 0.1, 0.97468),
        ],
    )
    def test_hit_point_lies_on_sphere(self, direction):
        """Test the reported position is on the surface and normal is unit."""
        norm = math.sqrt(sum(c * c for c in direction))
        unit = tuple(c / norm for c in direction)
        valid, t, p, n, _, _ = _intersect((0.0, 0.0, 0.0), unit, (0.0, 0.0, 4.0), 1.0)
        assert valid == 1
        dist_to_center = math.sqrt(p[0] ** 2 + p[1] ** 2 + (p[2] - 4.0) ** 2)
        assert dist_to_center == pytest.approx(1.0, abs=1e-4)
        assert math.sqrt(sum(c * c for c in n)) == pytest.approx(1.0, abs=1e-4)
        assert p == pytest.approx(tuple(t * c for c in unit), abs=1e-4)

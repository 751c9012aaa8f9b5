"""Unit tests for light sources.

Tests cover:
- Sampling of each light type (radiance, direction, distance)
- Inverse-square falloff of point lights
- Cone and cylinder attenuation and ripple texture
- Host-side registries: validation, normalization, capacity, clearing
"""

import math

import pytest
import taichi as ti


def _vec(v):
    return (float(v[0]), float(v[1]), float(v[2]))


class _SampleResult:
    """Host copy of a LightSample."""

    def __init__(self):
        self.radiance = ti.field(dtype=ti.math.vec3, shape=())
        self.direction = ti.field(dtype=ti.math.vec3, shape=())
        self.distance = ti.field(dtype=ti.f32, shape=())

    def store(self):
        return self.radiance, self.direction, self.distance

    def read(self):
        return _vec(self.radiance[None]), _vec(self.direction[None]), float(self.distance[None])


class TestAmbientLight:
    """Tests for the ambient light."""

    def test_sample_ambient_light(self):
        """Test ambient sample carries the radiance with no direction."""
        from raycaster.core.ray import vec3
        from raycaster.lights.ambient import AmbientLight, sample_ambient_light

        out = _SampleResult()
        radiance, direction, distance = out.store()

        @ti.kernel
        def test_kernel():
            light = AmbientLight(radiance=vec3(0.1, 0.2, 0.3))
            sample = sample_ambient_light(light, vec3(5.0, 6.0, 7.0))
            radiance[None] = sample.radiance
            direction[None] = sample.direction
            distance[None] = sample.distance_to_light

        test_kernel()
        r, d, dist = out.read()
        assert r == pytest.approx((0.1, 0.2, 0.3))
        assert d == pytest.approx((0.0, 0.0, 0.0))
        assert dist == 0.0

    def test_set_and_clear_ambient_light(self):
        """Test the single ambient light can be set and reset."""
        from raycaster.lights import clear_ambient_light, get_ambient_radiance, set_ambient_light

        assert get_ambient_radiance() == (0.0, 0.0, 0.0)
        set_ambient_light((0.01, 0.02, 0.03))
        assert get_ambient_radiance() == pytest.approx((0.01, 0.02, 0.03))
        clear_ambient_light()
        assert get_ambient_radiance() == (0.0, 0.0, 0.0)

    def test_negative_ambient_rejected(self):
        """Test negative ambient radiance is rejected."""
        from raycaster.lights import set_ambient_light

        with pytest.raises(ValueError, match="negative"):
            set_ambient_light((0.1, -0.1, 0.1))


class TestPointLight:
    """Tests for point lights."""

    @pytest.mark.parametrize("distance", [1.0, 2.0, 5.0])
    def test_inverse_square_falloff(self, distance):
        """Test radiance equals intensity / d^2 and direction points to light."""
        from raycaster.core.ray import vec3
        from raycaster.lights.point import PointLight, sample_point_light

        out = _SampleResult()
        radiance, direction, dist_field = out.store()

        @ti.kernel
        def test_kernel(d: ti.f32):
            light = PointLight(intensity=vec3(30.0, 15.0, 3.0), origin=vec3(0.0, d, 0.0))
            sample = sample_point_light(light, vec3(0.0, 0.0, 0.0))
            radiance[None] = sample.radiance
            direction[None] = sample.direction
            dist_field[None] = sample.distance_to_light

        test_kernel(distance)
        r, d, dist = out.read()
        scale = 1.0 / (distance * distance)
        assert r == pytest.approx((30.0 * scale, 15.0 * scale, 3.0 * scale), rel=1e-5)
        assert d == pytest.approx((0.0, 1.0, 0.0), abs=1e-6)
        assert dist == pytest.approx(distance, rel=1e-6)

    def test_registry_round_trip(self):
        """Test a registered point light is read back in a kernel."""
        from raycaster.lights import add_point_light, get_point_light, get_point_light_count

        assert add_point_light((30.0, 30.0, 30.0), (2.0, 2.0, 2.0)) == 0
        assert add_point_light((1.0, 1.0, 1.0), (0.0, 5.0, 0.0)) == 1
        assert get_point_light_count() == 2

        origin = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            origin[None] = get_point_light(1).origin

        test_kernel()
        assert _vec(origin[None]) == pytest.approx((0.0, 5.0, 0.0))

    def test_negative_intensity_rejected(self):
        """Test negative intensity is rejected."""
        from raycaster.lights import add_point_light

        with pytest.raises(ValueError, match="negative"):
            add_point_light((-1.0, 0.0, 0.0), (0.0, 0.0, 0.0))

    def test_capacity_exceeded(self):
        """Test adding past MAX_POINT_LIGHTS raises RuntimeError."""
        from raycaster.lights import point

        point.num_point_lights[None] = point.MAX_POINT_LIGHTS
        with pytest.raises(RuntimeError, match="Maximum number of point lights"):
            point.add_point_light((1.0, 1.0, 1.0), (0.0, 0.0, 0.0))


class TestDirectionalLight:
    """Tests for directional lights."""

    def test_sample_directional_light(self):
        """Test sample points against the travel direction at infinite distance."""
        from raycaster.core.ray import vec3
        from raycaster.lights.directional import DirectionalLight, sample_directional_light

        out = _SampleResult()
        radiance, direction, distance = out.store()

        @ti.kernel
        def test_kernel():
            light = DirectionalLight(radiosity=vec3(3.0, 2.0, 1.0), direction=vec3(0.0, -1.0, 0.0))
            sample = sample_directional_light(light, vec3(10.0, -4.0, 7.0))
            radiance[None] = sample.radiance
            direction[None] = sample.direction
            distance[None] = sample.distance_to_light

        test_kernel()
        r, d, dist = out.read()
        assert r == pytest.approx((3.0, 2.0, 1.0))
        assert d == pytest.approx((0.0, 1.0, 0.0))
        assert math.isinf(dist)

    def test_direction_normalized_on_insert(self):
        """Test the stored direction has unit length."""
        from raycaster.lights import add_directional_light, get_directional_light

        add_directional_light((3.0, 3.0, 3.0), (0.0, -2.0, 0.0))
        direction = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            direction[None] = get_directional_light(0).direction

        test_kernel()
        assert _vec(direction[None]) == pytest.approx((0.0, -1.0, 0.0))

    def test_zero_direction_rejected(self):
        """Test a zero-length direction is rejected."""
        from raycaster.lights import add_directional_light

        with pytest.raises(ValueError, match="zero length"):
            add_directional_light((1.0, 1.0, 1.0), (0.0, 0.0, 0.0))

    def test_normalize_direction(self):
        """Test host-side normalization."""
        from raycaster.lights import normalize_direction

        assert normalize_direction((3.0, 0.0, 4.0)) == pytest.approx((0.6, 0.0, 0.8))


class TestConeLight:
    """Tests for cone lights."""

    def _sample(self, point, cos_half_angle=math.cos(0.25 * math.pi)):
        from raycaster.core.ray import vec3
        from raycaster.lights.cone import ConeLight, sample_cone_light

        out = _SampleResult()
        radiance, direction, distance = out.store()

        @ti.kernel
        def test_kernel(p: vec3, cos_half: ti.f32):
            light = ConeLight(
                intensity=vec3(30.0, 30.0, 30.0),
                origin=vec3(0.0, 0.0, 0.0),
                direction=vec3(0.0, 0.0, 1.0),
                cos_half_angle=cos_half,
            )
            sample = sample_cone_light(light, p)
            radiance[None] = sample.radiance
            direction[None] = sample.direction
            distance[None] = sample.distance_to_light

        test_kernel(vec3(*point), cos_half_angle)
        return out.read()

    def test_on_axis_matches_point_light_times_ripple(self):
        """Test on the axis only the ripple texture scales the point light radiance."""
        from raycaster.lights.cone import CONE_RIPPLE_FREQUENCY

        r, d, dist = self._sample((0.0, 0.0, 2.0))
        texture = 0.5 + 0.5 * math.sin(CONE_RIPPLE_FREQUENCY * 1.0)
        expected = 30.0 / 4.0 * texture
        assert r[0] == pytest.approx(expected, rel=1e-3)
        assert d == pytest.approx((0.0, 0.0, -1.0), abs=1e-6)
        assert dist == pytest.approx(2.0, rel=1e-6)

    def test_outside_cone_is_dark(self):
        """Test points beyond the half angle receive nothing."""
        r, d, dist = self._sample((2.0, 0.0, 1.0))
        assert r == pytest.approx((0.0, 0.0, 0.0), abs=1e-7)
        # Geometry still comes from the point light
        assert dist == pytest.approx(math.sqrt(5.0), rel=1e-5)

    def test_behind_apex_is_dark(self):
        """Test points behind the cone apex receive nothing."""
        r, _, _ = self._sample((0.0, 0.0, -3.0))
        assert r == pytest.approx((0.0, 0.0, 0.0), abs=1e-7)

    def test_never_exceeds_point_light(self):
        """Test cone radiance is bounded by the matching point light radiance."""
        for point in [(0.1, 0.0, 1.0), (0.3, 0.2, 2.0), (0.5, 0.5, 1.0), (0.0, 0.7, 1.0)]:
            r, _, dist = self._sample(point)
            assert 0.0 <= r[0] <= 30.0 / (dist * dist) + 1e-5

    def test_validation(self):
        """Test cos_half_angle range and direction are validated."""
        from raycaster.lights import add_cone_light

        with pytest.raises(ValueError, match="cos_half_angle"):
            add_cone_light((1.0, 1.0, 1.0), (0.0, 0.0, 0.0), (0.0, 0.0, 1.0), 1.0)
        with pytest.raises(ValueError, match="cos_half_angle"):
            add_cone_light((1.0, 1.0, 1.0), (0.0, 0.0, 0.0), (0.0, 0.0, 1.0), -1.5)
        with pytest.raises(ValueError, match="zero length"):
            add_cone_light((1.0, 1.0, 1.0), (0.0, 0.0, 0.0), (0.0, 0.0, 0.0), 0.5)

    def test_registry(self):
        """Test a registered cone light is stored with a unit axis."""
        from raycaster.lights import add_cone_light, get_cone_light, get_cone_light_count

        add_cone_light((30.0, 30.0, 30.0), (2.0, 2.0, 2.0), (0.0, 0.0, 5.0), 0.5)
        assert get_cone_light_count() == 1

        direction = ti.field(dtype=ti.math.vec3, shape=())
        cos_half = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            light = get_cone_light(0)
            direction[None] = light.direction
            cos_half[None] = light.cos_half_angle

        test_kernel()
        assert _vec(direction[None]) == pytest.approx((0.0, 0.0, 1.0))
        assert cos_half[None] == pytest.approx(0.5)


class TestCylinderLight:
    """Tests for cylinder lights."""

    def _sample(self, point):
        from raycaster.core.ray import vec3
        from raycaster.lights.cylinder import CylinderLight, sample_cylinder_light

        out = _SampleResult()
        radiance, direction, distance = out.store()

        @ti.kernel
        def test_kernel(p: vec3):
            light = CylinderLight(
                radiosity=vec3(3.0, 3.0, 3.0),
                origin=vec3(0.0, 0.0, 0.0),
                direction=vec3(0.0, 0.0, 1.0),
                radius=3.0,
            )
            sample = sample_cylinder_light(light, p)
            radiance[None] = sample.radiance
            direction[None] = sample.direction
            distance[None] = sample.distance_to_light

        test_kernel(vec3(*point))
        return out.read()

    def test_on_axis(self):
        """Test on the axis the ripple is at half strength."""
        r, d, dist = self._sample((0.0, 0.0, 5.0))
        assert r == pytest.approx((1.5, 1.5, 1.5), rel=1e-5)
        assert d == pytest.approx((0.0, 0.0, -1.0))
        assert math.isinf(dist)

    def test_beyond_radius_is_dark(self):
        """Test points farther from the axis than the radius receive nothing."""
        r, _, _ = self._sample((4.0, 0.0, 5.0))
        assert r == pytest.approx((0.0, 0.0, 0.0), abs=1e-7)

    def test_soft_edge(self):
        """Test attenuation and ripple half a unit inside the edge."""
        from raycaster.lights.cylinder import CYLINDER_RIPPLE_FREQUENCY

        r, _, _ = self._sample((0.0, 2.5, -1.0))
        texture = 0.5 + 0.5 * math.sin(CYLINDER_RIPPLE_FREQUENCY * 2.5)
        assert r[0] == pytest.approx(3.0 * 0.5 * texture, rel=1e-3, abs=1e-6)

    def test_axis_offset(self):
        """Test the distance to the axis ignores the position along it."""
        from raycaster.core.ray import vec3
        from raycaster.lights.cylinder import CylinderLight, axis_offset

        out = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            light = CylinderLight(
                radiosity=vec3(1.0, 1.0, 1.0),
                origin=vec3(1.0, 0.0, 0.0),
                direction=vec3(0.0, 1.0, 0.0),
                radius=1.0,
            )
            out[None] = axis_offset(light, vec3(4.0, 100.0, 4.0))

        test_kernel()
        assert out[None] == pytest.approx(5.0, rel=1e-5)

    def test_non_positive_radius_rejected(self):
        """Test cylinder radius must be positive."""
        from raycaster.lights import add_cylinder_light

        with pytest.raises(ValueError, match="radius"):
            add_cylinder_light((1.0, 1.0, 1.0), (0.0, 0.0, 0.0), (0.0, 0.0, 1.0), 0.0)


class TestClearAllLights:
    """Tests for clearing every registry at once."""

    def test_clear_all_lights(self):
        """Test clear_all_lights empties every registry and the ambient light."""
        from raycaster.lights import (
            add_cone_light,
            add_cylinder_light,
            add_directional_light,
            add_point_light,
            clear_all_lights,
            get_ambient_radiance,
            get_cone_light_count,
            get_cylinder_light_count,
            get_directional_light_count,
            get_point_light_count,
            set_ambient_light,
        )

        set_ambient_light((0.5, 0.5, 0.5))
        add_point_light((1.0, 1.0, 1.0), (0.0, 0.0, 0.0))
        add_directional_light((1.0, 1.0, 1.0), (0.0, -1.0, 0.0))
        add_cone_light((1.0, 1.0, 1.0), (0.0, 0.0, 0.0), (0.0, 0.0, 1.0), 0.5)
        add_cylinder_light((1.0, 1.0, 1.0), (0.0, 0.0, 0.0), (0.0, 0.0, 1.0), 1.0)

        clear_all_lights()

        assert get_ambient_radiance() == (0.0, 0.0, 0.0)
        assert get_point_light_count() == 0
        assert get_directional_light_count() == 0
        assert get_cone_light_count() == 0
        assert get_cylinder_light_count() == 0

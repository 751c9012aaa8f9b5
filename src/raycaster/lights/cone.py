"""Cone light: a point light restricted to a cone around its axis.

The cone light relaxes the isotropy of the point light. It only emits inside
a cone of half angle phi around its axis. A smoothstep fades the light from
the axis out to the cone boundary, and a concentric ripple texture modulates
it:

    attenuation = smoothstep(cos(phi), 1, cos_angle)
    texture     = 0.5 + 0.5 * sin(CONE_RIPPLE_FREQUENCY * cos_angle)

where cos_angle is the cosine between the axis and the light-to-point
direction.
"""

import taichi as ti
import taichi.math as tm

from raycaster.core.ray import smoothstep, vec3
from raycaster.lights.directional import normalize_direction
from raycaster.lights.point import PointLight, sample_point_light
from raycaster.lights.sample import LightSample

# Frequency of the concentric ripples, in radians per unit of cosine
CONE_RIPPLE_FREQUENCY = 200.0


@ti.dataclass
class ConeLight:
    """Cone light properties.

    Attributes:
        intensity: The color and strength of the light (RGB).
        origin: The apex of the cone (position of the light).
        direction: Unit axis of the cone.
        cos_half_angle: Cosine of the half angle beyond which nothing is emitted.
    """

    intensity: vec3
    origin: vec3
    direction: vec3
    cos_half_angle: ti.f32


@ti.func
def sample_cone_light(light: ConeLight, point: vec3) -> LightSample:
    """Sample a cone light from a shading point.

    Direction, distance and inverse-square falloff come from the point light
    formula; the radiance is then attenuated and textured by angle.
    """
    sample = sample_point_light(PointLight(intensity=light.intensity, origin=light.origin), point)
    cos_angle = -tm.dot(sample.direction, light.direction)
    attenuation = smoothstep(light.cos_half_angle, 1.0, cos_angle)
    texture = 0.5 + 0.5 * ti.sin(CONE_RIPPLE_FREQUENCY * cos_angle)
    return LightSample(
        radiance=sample.radiance * attenuation * texture,
        direction=sample.direction,
        distance_to_light=sample.distance_to_light,
    )


# =============================================================================
# Light Field Storage
# =============================================================================

MAX_CONE_LIGHTS = 64

cone_light_intensities = ti.Vector.field(3, dtype=ti.f32, shape=MAX_CONE_LIGHTS)
cone_light_origins = ti.Vector.field(3, dtype=ti.f32, shape=MAX_CONE_LIGHTS)
cone_light_directions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_CONE_LIGHTS)
cone_light_cos_half_angles = ti.field(dtype=ti.f32, shape=MAX_CONE_LIGHTS)
num_cone_lights = ti.field(dtype=ti.i32, shape=())


def clear_cone_lights() -> None:
    """Remove all cone lights from the registry."""
    num_cone_lights[None] = 0


def add_cone_light(
    intensity: tuple[float, float, float],
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    cos_half_angle: float,
) -> int:
    """Add a cone light to the registry.

    Args:
        intensity: The light intensity as (R, G, B), each component >= 0.
        origin: The apex of the cone.
        direction: The cone axis. Normalized on insert.
        cos_half_angle: Cosine of the half angle, in [-1, 1).

    Returns:
        The index of the added light.

    Raises:
        ValueError: If an argument is out of range.
        RuntimeError: If the maximum number of cone lights is exceeded.
    """
    for i, component in enumerate(intensity):
        if component < 0.0:
            raise ValueError(f"Intensity component {i} = {component} is negative")
    if not -1.0 <= cos_half_angle < 1.0:
        raise ValueError(f"cos_half_angle = {cos_half_angle} is outside [-1, 1)")
    unit = normalize_direction(direction)

    idx = num_cone_lights[None]
    if idx >= MAX_CONE_LIGHTS:
        raise RuntimeError(f"Maximum number of cone lights ({MAX_CONE_LIGHTS}) exceeded")

    cone_light_intensities[idx] = [intensity[0], intensity[1], intensity[2]]
    cone_light_origins[idx] = [origin[0], origin[1], origin[2]]
    cone_light_directions[idx] = list(unit)
    cone_light_cos_half_angles[idx] = cos_half_angle
    num_cone_lights[None] = idx + 1
    return idx


def get_cone_light_count() -> int:
    """Get the number of cone lights in the registry."""
    return int(num_cone_lights[None])


@ti.func
def get_cone_light(idx: ti.i32) -> ConeLight:
    """Get a registered cone light by index within a kernel."""
    return ConeLight(
        intensity=cone_light_intensities[idx],
        origin=cone_light_origins[idx],
        direction=cone_light_directions[idx],
        cos_half_angle=cone_light_cos_half_angles[idx],
    )

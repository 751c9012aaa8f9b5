"""Cylinder light: a directional light limited to a cylinder of rays.

The cylinder light relaxes the homogeneity of the directional light: only
points within ``radius`` of the central axis are lit, with a smoothstep
falloff over the last unit of distance and a concentric ripple texture:

    attenuation = smoothstep(0, 1, radius - offset)
    texture     = 0.5 + 0.5 * sin(CYLINDER_RIPPLE_FREQUENCY * offset)

where offset is the distance from the shading point to the axis. The origin
only positions the axis; the light itself still sits at infinity.
"""

import taichi as ti
import taichi.math as tm

from raycaster.core.ray import smoothstep, vec3
from raycaster.lights.directional import (
    DirectionalLight,
    normalize_direction,
    sample_directional_light,
)
from raycaster.lights.sample import LightSample

# Frequency of the concentric ripples, in radians per unit of distance
CYLINDER_RIPPLE_FREQUENCY = 15.0


@ti.dataclass
class CylinderLight:
    """Cylinder light properties.

    Attributes:
        radiosity: The color and strength of the light (RGB).
        origin: A point on the central axis of the cylinder.
        direction: Unit direction in which the light travels (the axis).
        radius: Radius of the lit cylinder.
    """

    radiosity: vec3
    origin: vec3
    direction: vec3
    radius: ti.f32


@ti.func
def axis_offset(light: CylinderLight, point: vec3) -> ti.f32:
    """Distance from a point to the cylinder's central axis."""
    light_to_point = point - light.origin
    along_axis = tm.dot(light_to_point, light.direction) * light.direction
    return tm.length(light_to_point - along_axis)


@ti.func
def sample_cylinder_light(light: CylinderLight, point: vec3) -> LightSample:
    """Sample a cylinder light from a shading point."""
    sample = sample_directional_light(
        DirectionalLight(radiosity=light.radiosity, direction=light.direction), point
    )
    offset = axis_offset(light, point)
    attenuation = smoothstep(0.0, 1.0, light.radius - offset)
    texture = 0.5 + 0.5 * ti.sin(CYLINDER_RIPPLE_FREQUENCY * offset)
    return LightSample(
        radiance=sample.radiance * attenuation * texture,
        direction=sample.direction,
        distance_to_light=sample.distance_to_light,
    )


# =============================================================================
# Light Field Storage
# =============================================================================

MAX_CYLINDER_LIGHTS = 64

cylinder_light_radiosities = ti.Vector.field(3, dtype=ti.f32, shape=MAX_CYLINDER_LIGHTS)
cylinder_light_origins = ti.Vector.field(3, dtype=ti.f32, shape=MAX_CYLINDER_LIGHTS)
cylinder_light_directions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_CYLINDER_LIGHTS)
cylinder_light_radii = ti.field(dtype=ti.f32, shape=MAX_CYLINDER_LIGHTS)
num_cylinder_lights = ti.field(dtype=ti.i32, shape=())


def clear_cylinder_lights() -> None:
    """Remove all cylinder lights from the registry."""
    num_cylinder_lights[None] = 0


def add_cylinder_light(
    radiosity: tuple[float, float, float],
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    radius: float,
) -> int:
    """Add a cylinder light to the registry.

    Args:
        radiosity: The light strength as (R, G, B), each component >= 0.
        origin: A point on the central axis.
        direction: Direction in which the light travels. Normalized on insert.
        radius: Radius of the lit cylinder (positive).

    Returns:
        The index of the added light.

    Raises:
        ValueError: If an argument is out of range.
        RuntimeError: If the maximum number of cylinder lights is exceeded.
    """
    for i, component in enumerate(radiosity):
        if component < 0.0:
            raise ValueError(f"Radiosity component {i} = {component} is negative")
    if radius <= 0.0:
        raise ValueError(f"Cylinder radius must be positive, got {radius}")
    unit = normalize_direction(direction)

    idx = num_cylinder_lights[None]
    if idx >= MAX_CYLINDER_LIGHTS:
        raise RuntimeError(f"Maximum number of cylinder lights ({MAX_CYLINDER_LIGHTS}) exceeded")

    cylinder_light_radiosities[idx] = [radiosity[0], radiosity[1], radiosity[2]]
    cylinder_light_origins[idx] = [origin[0], origin[1], origin[2]]
    cylinder_light_directions[idx] = list(unit)
    cylinder_light_radii[idx] = radius
    num_cylinder_lights[None] = idx + 1
    return idx


def get_cylinder_light_count() -> int:
    """Get the number of cylinder lights in the registry."""
    return int(num_cylinder_lights[None])


@ti.func
def get_cylinder_light(idx: ti.i32) -> CylinderLight:
    """Get a registered cylinder light by index within a kernel."""
    return CylinderLight(
        radiosity=cylinder_light_radiosities[idx],
        origin=cylinder_light_origins[idx],
        direction=cylinder_light_directions[idx],
        radius=cylinder_light_radii[idx],
    )

"""Point light: isotropic emitter without area.

A point light concentrates its energy in a single position and obeys the
inverse-square law: radiance reaching a point falls off with the square of
the distance to the light. It casts hard shadows since nothing needs to be
sampled over an area.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycaster.lights.point import add_point_light
    >>> add_point_light(intensity=(30.0, 30.0, 30.0), origin=(2.0, 2.0, 2.0))
    0
"""

import taichi as ti
import taichi.math as tm

from raycaster.core.ray import vec3
from raycaster.lights.sample import LightSample


@ti.dataclass
class PointLight:
    """Point light properties.

    Attributes:
        intensity: The color and strength of the light (RGB).
        origin: The position of the light.
    """

    intensity: vec3
    origin: vec3


@ti.func
def sample_point_light(light: PointLight, point: vec3) -> LightSample:
    """Sample a point light from a shading point.

    The shading point must not coincide with the light position.

    Args:
        light: The point light.
        point: The position being shaded.

    Returns:
        LightSample with radiance = intensity / distance^2, the unit direction
        toward the light and the distance to it.
    """
    to_light = light.origin - point
    distance = tm.length(to_light)
    return LightSample(
        radiance=light.intensity / (distance * distance),
        direction=to_light / distance,
        distance_to_light=distance,
    )


# =============================================================================
# Light Field Storage
# =============================================================================

MAX_POINT_LIGHTS = 64

point_light_intensities = ti.Vector.field(3, dtype=ti.f32, shape=MAX_POINT_LIGHTS)
point_light_origins = ti.Vector.field(3, dtype=ti.f32, shape=MAX_POINT_LIGHTS)
num_point_lights = ti.field(dtype=ti.i32, shape=())


def clear_point_lights() -> None:
    """Remove all point lights from the registry."""
    num_point_lights[None] = 0


def add_point_light(
    intensity: tuple[float, float, float],
    origin: tuple[float, float, float],
) -> int:
    """Add a point light to the registry.

    Args:
        intensity: The light intensity as (R, G, B), each component >= 0.
        origin: The light position.

    Returns:
        The index of the added light.

    Raises:
        ValueError: If any intensity component is negative.
        RuntimeError: If the maximum number of point lights is exceeded.
    """
    for i, component in enumerate(intensity):
        if component < 0.0:
            raise ValueError(f"Intensity component {i} = {component} is negative")

    idx = num_point_lights[None]
    if idx >= MAX_POINT_LIGHTS:
        raise RuntimeError(f"Maximum number of point lights ({MAX_POINT_LIGHTS}) exceeded")

    point_light_intensities[idx] = [intensity[0], intensity[1], intensity[2]]
    point_light_origins[idx] = [origin[0], origin[1], origin[2]]
    num_point_lights[None] = idx + 1
    return idx


def get_point_light_count() -> int:
    """Get the number of point lights in the registry."""
    return int(num_point_lights[None])


@ti.func
def get_point_light(idx: ti.i32) -> PointLight:
    """Get a registered point light by index within a kernel."""
    return PointLight(intensity=point_light_intensities[idx], origin=point_light_origins[idx])

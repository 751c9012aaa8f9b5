"""Directional light: parallel rays from an infinitely distant source.

Models far away emitters such as the sun. Every point receives the same
radiance from the same direction, and the light counts as infinitely far
away, so any occluder along the shadow ray blocks it.
"""

import math

import taichi as ti

from raycaster.core.ray import INF, vec3
from raycaster.lights.sample import LightSample


@ti.dataclass
class DirectionalLight:
    """Directional light properties.

    Attributes:
        radiosity: The color and strength of the light (RGB).
        direction: Unit direction in which the light travels.
    """

    radiosity: vec3
    direction: vec3


@ti.func
def sample_directional_light(light: DirectionalLight, point: vec3) -> LightSample:
    """Sample a directional light; independent of the shading point."""
    return LightSample(
        radiance=light.radiosity,
        direction=-light.direction,
        distance_to_light=INF,
    )


def normalize_direction(direction: tuple[float, float, float]) -> tuple[float, float, float]:
    """Normalize a direction on the host side.

    Raises:
        ValueError: If the direction has zero length.
    """
    norm = math.sqrt(sum(c * c for c in direction))
    if norm < 1e-8:
        raise ValueError(f"Light direction {tuple(direction)} has zero length")
    return (direction[0] / norm, direction[1] / norm, direction[2] / norm)


# =============================================================================
# Light Field Storage
# =============================================================================

MAX_DIRECTIONAL_LIGHTS = 64

directional_light_radiosities = ti.Vector.field(3, dtype=ti.f32, shape=MAX_DIRECTIONAL_LIGHTS)
directional_light_directions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_DIRECTIONAL_LIGHTS)
num_directional_lights = ti.field(dtype=ti.i32, shape=())


def clear_directional_lights() -> None:
    """Remove all directional lights from the registry."""
    num_directional_lights[None] = 0


def add_directional_light(
    radiosity: tuple[float, float, float],
    direction: tuple[float, float, float],
) -> int:
    """Add a directional light to the registry.

    Args:
        radiosity: The light strength as (R, G, B), each component >= 0.
        direction: Direction in which the light travels. Normalized on insert.

    Returns:
        The index of the added light.

    Raises:
        ValueError: If radiosity is negative or direction has zero length.
        RuntimeError: If the maximum number of directional lights is exceeded.
    """
    for i, component in enumerate(radiosity):
        if component < 0.0:
            raise ValueError(f"Radiosity component {i} = {component} is negative")
    unit = normalize_direction(direction)

    idx = num_directional_lights[None]
    if idx >= MAX_DIRECTIONAL_LIGHTS:
        raise RuntimeError(
            f"Maximum number of directional lights ({MAX_DIRECTIONAL_LIGHTS}) exceeded"
        )

    directional_light_radiosities[idx] = [radiosity[0], radiosity[1], radiosity[2]]
    directional_light_directions[idx] = list(unit)
    num_directional_lights[None] = idx + 1
    return idx


def get_directional_light_count() -> int:
    """Get the number of directional lights in the registry."""
    return int(num_directional_lights[None])


@ti.func
def get_directional_light(idx: ti.i32) -> DirectionalLight:
    """Get a registered directional light by index within a kernel."""
    return DirectionalLight(
        radiosity=directional_light_radiosities[idx],
        direction=directional_light_directions[idx],
    )

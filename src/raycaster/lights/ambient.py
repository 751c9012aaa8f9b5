"""Ambient light: constant radiance arriving at every point.

The ambient term stands in for the indirect illumination a local shading
model does not compute. It brightens every shaded point by the same amount.
A scene has exactly one ambient light; its default radiance is black.
"""

import taichi as ti

from raycaster.core.ray import vec3
from raycaster.lights.sample import LightSample


@ti.dataclass
class AmbientLight:
    """Ambient light properties.

    Attributes:
        radiance: The color and strength of the light.
    """

    radiance: vec3


@ti.func
def sample_ambient_light(light: AmbientLight, point: vec3) -> LightSample:
    """Sample the ambient light; the shading point does not matter."""
    return LightSample(
        radiance=light.radiance,
        direction=vec3(0.0, 0.0, 0.0),
        distance_to_light=0.0,
    )


# =============================================================================
# Light Field Storage
# =============================================================================

ambient_radiance = ti.Vector.field(3, dtype=ti.f32, shape=())


def clear_ambient_light() -> None:
    """Reset the ambient light to black."""
    ambient_radiance[None] = [0.0, 0.0, 0.0]


def set_ambient_light(radiance: tuple[float, float, float]) -> None:
    """Set the radiance of the scene's ambient light.

    Args:
        radiance: The ambient radiance as (R, G, B), each component >= 0.

    Raises:
        ValueError: If any component is negative.
    """
    for i, component in enumerate(radiance):
        if component < 0.0:
            raise ValueError(f"Ambient radiance component {i} = {component} is negative")
    ambient_radiance[None] = [radiance[0], radiance[1], radiance[2]]


def get_ambient_radiance() -> tuple[float, float, float]:
    """Get the current ambient radiance as a Python tuple."""
    r = ambient_radiance[None]
    return (float(r[0]), float(r[1]), float(r[2]))


@ti.func
def get_ambient_light() -> AmbientLight:
    """Get the scene's ambient light within a kernel."""
    return AmbientLight(radiance=ambient_radiance[None])

"""Demo scene configuration.

This module provides a factory function to create the demo scene used by the
command line renderer: two small spheres resting above a huge ground sphere,
lit by a faint ambient light and one configurable light preset.

The camera sits at the origin looking down +z with a 90 degree vertical field
of view, so the image plane spans [-1, 1] vertically at unit distance.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycaster.scene.demo import LightPreset, create_demo_scene
    >>> from raycaster.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_demo_scene(LightPreset.POINT)
    >>> setup_camera(camera)
"""

import math
from enum import IntEnum

from raycaster.camera.pinhole import PinholeCamera
from raycaster.scene.manager import Scene

# =============================================================================
# Demo Scene Constants
# =============================================================================

AMBIENT_RADIANCE = (0.01, 0.01, 0.01)

# (origin, radius, color)
DEMO_SPHERES = (
    ((0.0, 0.0, 4.0), 1.0, (1.0, 0.5, 0.1)),
    ((-1.0, 0.0, 2.5), 1.0, (0.3, 1.0, 0.3)),
    ((0.0, -1001.0, 0.0), 1000.0, (0.1, 0.5, 1.0)),
)

# All presets share a source position and aim point
LIGHT_ORIGIN = (2.0, 2.0, 2.0)
LIGHT_TARGET = (1.0, 0.0, 3.0)
LIGHT_INTENSITY = (30.0, 30.0, 30.0)
LIGHT_RADIOSITY = (3.0, 3.0, 3.0)
CYLINDER_RADIUS = 3.0
CONE_COS_HALF_ANGLE = math.cos(0.25 * math.pi)


class LightPreset(IntEnum):
    """Light configurations available for the demo scene."""

    POINT = 0
    DIRECTIONAL = 1
    CYLINDER = 2
    CONE = 3

    @classmethod
    def from_name(cls, name: str) -> "LightPreset":
        """Look up a preset by case-insensitive name.

        Raises:
            ValueError: If no preset has that name.
        """
        try:
            return cls[name.strip().upper()]
        except KeyError:
            choices = ", ".join(p.name.lower() for p in cls)
            raise ValueError(f"Unknown light preset: {name!r} (choose from {choices})") from None


def _light_direction() -> tuple[float, float, float]:
    d = tuple(t - o for t, o in zip(LIGHT_TARGET, LIGHT_ORIGIN))
    norm = math.sqrt(sum(c * c for c in d))
    return (d[0] / norm, d[1] / norm, d[2] / norm)


def add_light_preset(scene: Scene, preset: LightPreset) -> int:
    """Add the light described by preset to scene.

    Returns:
        The index of the light within its kind.
    """
    direction = _light_direction()

    if preset == LightPreset.POINT:
        return scene.add_point_light(LIGHT_INTENSITY, LIGHT_ORIGIN)
    if preset == LightPreset.DIRECTIONAL:
        return scene.add_directional_light(LIGHT_RADIOSITY, direction)
    if preset == LightPreset.CYLINDER:
        return scene.add_cylinder_light(LIGHT_RADIOSITY, LIGHT_ORIGIN, direction, CYLINDER_RADIUS)
    if preset == LightPreset.CONE:
        return scene.add_cone_light(LIGHT_INTENSITY, LIGHT_ORIGIN, direction, CONE_COS_HALF_ANGLE)
    raise ValueError(f"Unsupported light preset: {preset!r}")


def create_demo_scene(
    light: LightPreset = LightPreset.CONE,
) -> tuple[Scene, PinholeCamera]:
    """Create the demo scene with the chosen light preset.

    Args:
        light: Which light to add besides the ambient light.

    Returns:
        A tuple of (Scene, PinholeCamera). The camera still has to be passed
        to setup_camera() before rendering.

    Example:
        >>> scene, camera = create_demo_scene()
        >>> scene.get_sphere_count()
        3
    """
    scene = Scene()
    scene.set_ambient_light(AMBIENT_RADIANCE)

    for origin, radius, color in DEMO_SPHERES:
        scene.add_sphere(origin, radius, color)

    add_light_preset(scene, LightPreset(light))

    camera = PinholeCamera(
        lookfrom=(0.0, 0.0, 0.0),
        lookat=(0.0, 0.0, 1.0),
        vup=(0.0, 1.0, 0.0),
        vfov=90.0,
    )
    return scene, camera

"""Lights module for light source sampling.

This module implements the light sources available to the integrators:

Components:
    sample: LightSample record shared by all lights
    ambient: Constant radiance approximating missing indirect light
    point: Isotropic point light with inverse-square falloff
    directional: Parallel light from an infinitely distant source
    cone: Point light restricted to a textured cone
    cylinder: Directional light restricted to a textured cylinder

Each light provides:
    - A Taichi dataclass describing the light
    - sample_*_light(light, point): radiance, direction and distance to the light
    - A field-backed registry (add_*, clear_*, get_*_count, get_* in kernels)

Lights are stored per type in separate ordered collections; the integrators
iterate each collection in turn.
"""

from .ambient import (
    AmbientLight,
    clear_ambient_light,
    get_ambient_light,
    get_ambient_radiance,
    sample_ambient_light,
    set_ambient_light,
)
from .cone import (
    CONE_RIPPLE_FREQUENCY,
    MAX_CONE_LIGHTS,
    ConeLight,
    add_cone_light,
    clear_cone_lights,
    get_cone_light,
    get_cone_light_count,
    sample_cone_light,
)
from .cylinder import (
    CYLINDER_RIPPLE_FREQUENCY,
    MAX_CYLINDER_LIGHTS,
    CylinderLight,
    add_cylinder_light,
    axis_offset,
    clear_cylinder_lights,
    get_cylinder_light,
    get_cylinder_light_count,
    sample_cylinder_light,
)
from .directional import (
    MAX_DIRECTIONAL_LIGHTS,
    DirectionalLight,
    add_directional_light,
    clear_directional_lights,
    get_directional_light,
    get_directional_light_count,
    normalize_direction,
    sample_directional_light,
)
from .point import (
    MAX_POINT_LIGHTS,
    PointLight,
    add_point_light,
    clear_point_lights,
    get_point_light,
    get_point_light_count,
    sample_point_light,
)
from .sample import LightSample


def clear_all_lights() -> None:
    """Reset every light registry and set the ambient light to black."""
    clear_ambient_light()
    clear_point_lights()
    clear_directional_lights()
    clear_cone_lights()
    clear_cylinder_lights()


__all__ = [
    "LightSample",
    "clear_all_lights",
    # Ambient
    "AmbientLight",
    "sample_ambient_light",
    "set_ambient_light",
    "clear_ambient_light",
    "get_ambient_radiance",
    "get_ambient_light",
    # Point
    "PointLight",
    "sample_point_light",
    "add_point_light",
    "clear_point_lights",
    "get_point_light_count",
    "get_point_light",
    "MAX_POINT_LIGHTS",
    # Directional
    "DirectionalLight",
    "sample_directional_light",
    "add_directional_light",
    "clear_directional_lights",
    "get_directional_light_count",
    "get_directional_light",
    "normalize_direction",
    "MAX_DIRECTIONAL_LIGHTS",
    # Cone
    "ConeLight",
    "sample_cone_light",
    "add_cone_light",
    "clear_cone_lights",
    "get_cone_light_count",
    "get_cone_light",
    "CONE_RIPPLE_FREQUENCY",
    "MAX_CONE_LIGHTS",
    # Cylinder
    "CylinderLight",
    "sample_cylinder_light",
    "axis_offset",
    "add_cylinder_light",
    "clear_cylinder_lights",
    "get_cylinder_light_count",
    "get_cylinder_light",
    "CYLINDER_RIPPLE_FREQUENCY",
    "MAX_CYLINDER_LIGHTS",
]

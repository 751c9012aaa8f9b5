"""Light sample record returned by every light's sampling function.

A LightSample is the result of querying a light from one shading point. It is
consumed immediately by the integrator and never stored.
"""

import taichi as ti

from raycaster.core.ray import vec3


@ti.dataclass
class LightSample:
    """Data needed to shade a point with one light.

    Attributes:
        radiance: Radiance traveling from the light toward the shading point.
        direction: Unit direction from the shading point toward the light.
            Zero for the ambient light.
        distance_to_light: Distance from the shading point to the light along
            direction. Bounds the shadow ray; INF for lights at infinity.
    """

    radiance: vec3
    direction: vec3
    distance_to_light: ti.f32

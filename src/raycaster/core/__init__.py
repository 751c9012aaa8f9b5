"""Core rendering module.

This module contains the fundamental building blocks for ray casting:

Components:
    ray: Ray data structure, constants and vector utilities
    integrator: Radiance estimators and the render target
    renderer: Host-side render loop with progress reporting

Integrators trace one primary ray per pixel. Only the transparency
integrator follows a ray past its first hit.

All compute-intensive operations use Taichi kernels.
"""

from .ray import (
    EPSILON,
    INF,
    INV_PI,
    PI,
    Ray,
    clamp,
    cross,
    dot,
    length,
    length_squared,
    make_ray,
    normalize,
    ray_at,
    smoothstep,
    smoothstep_cubic,
    smoothstep_quintic,
    vec2,
    vec3,
)

# Note: integrator and renderer are NOT imported here to avoid circular imports.
# Import directly from raycaster.core.integrator or raycaster.core.renderer when needed.

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec2",
    "vec3",
    "EPSILON",
    "INF",
    "PI",
    "INV_PI",
    "length",
    "length_squared",
    "normalize",
    "dot",
    "cross",
    "clamp",
    "smoothstep",
    "smoothstep_cubic",
    "smoothstep_quintic",
]

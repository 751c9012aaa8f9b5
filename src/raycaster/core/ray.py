"""Ray data structure and vector utilities for the ray caster.

This module provides the fundamental Ray dataclass together with the scalar
and vector helpers used by the primitives, the lights and the integrators.
All operations are designed to work within Taichi kernels.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, 1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

import math

import taichi as ti
import taichi.math as tm

# Type aliases for 2D/3D vectors using Taichi's math module
vec2 = tm.vec2
vec3 = tm.vec3

# =============================================================================
# Constants
# =============================================================================

# Offset used to push shading points off a surface
EPSILON = 1e-4

# Distance of the "no intersection" sentinel and of infinitely far lights
INF = math.inf

PI = math.pi
INV_PI = 1.0 / math.pi


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Expected to be unit
            length; the sphere intersection relies on it, but it is not
            enforced.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction.

    Args:
        origin: The starting point of the ray.
        direction: The direction vector (should be normalized).

    Returns:
        A new Ray instance.
    """
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def length(v: vec3) -> ti.f32:
    """Compute the Euclidean length of a vector."""
    return tm.length(v)


@ti.func
def length_squared(v: vec3) -> ti.f32:
    """Compute the squared length of a vector.

    Cheaper than length() when only comparing magnitudes.
    """
    return tm.dot(v, v)


@ti.func
def normalize(v: vec3) -> vec3:
    """Normalize a vector to unit length.

    The zero vector has no direction; callers must not pass it.

    Args:
        v: The input vector, with non-zero length.

    Returns:
        A unit vector in the same direction as v.
    """
    return v / tm.length(v)


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product a . b."""
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the cross product a x b."""
    return tm.cross(a, b)


# =============================================================================
# Scalar Utility Functions
# =============================================================================


@ti.func
def clamp(x: ti.f32, lo: ti.f32, hi: ti.f32) -> ti.f32:
    """Clamp x to the closed interval [lo, hi]."""
    return ti.max(ti.min(x, hi), lo)


@ti.func
def smoothstep_cubic(x: ti.f32) -> ti.f32:
    """Cubic Hermite smoothing 3x^2 - 2x^3 of x in [0, 1]."""
    return x * x * (3.0 - 2.0 * x)


@ti.func
def smoothstep_quintic(x: ti.f32) -> ti.f32:
    """Quintic smoothing 6x^5 - 15x^4 + 10x^3 of x in [0, 1].

    Has zero first and second derivatives at both ends, unlike the cubic.
    """
    return x * x * x * (x * (6.0 * x - 15.0) + 10.0)


@ti.func
def smoothstep(edge0: ti.f32, edge1: ti.f32, x: ti.f32) -> ti.f32:
    """Smooth Hermite interpolation between two edges.

    Maps x linearly so that edge0 -> 0 and edge1 -> 1, clamps the result to
    [0, 1] and applies the cubic smoothing 3y^2 - 2y^3.

    Args:
        edge0: Value of x at which the result starts rising from 0.
        edge1: Value of x at which the result reaches 1 (must differ from edge0).
        x: The input value.

    Returns:
        The smoothed value in [0, 1].
    """
    y = clamp((x - edge0) / (edge1 - edge0), 0.0, 1.0)
    return smoothstep_cubic(y)

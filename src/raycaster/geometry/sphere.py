"""Sphere primitive with closed-form ray-sphere intersection.

Rays are expected to carry a unit-length direction, so the quadratic

    |o + t*d - O|^2 = r^2

reduces to ``t^2 - 2*b*t + c = 0`` with

    b = dot(d, O - o)
    c = |O - o|^2 - r^2

and discriminant ``b^2 - c``. The roots are ``b -/+ sqrt(b^2 - c)``.

Grazing hits (zero discriminant) are reported as misses. A tangent ray only
touches the silhouette in a single point, and at that point the result is
dominated by round-off, so the simpler rule is kept on purpose.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycaster.geometry.sphere import Sphere, intersect_sphere
    >>> sphere = Sphere(origin=ti.math.vec3(0, 0, 4), radius=1.0,
    ...                 color=ti.math.vec3(1, 0.5, 0.1))
    >>> # Use intersect_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from raycaster.core.ray import Ray, ray_at, vec3
from raycaster.geometry.intersection import Intersection, no_intersection


@ti.dataclass
class Sphere:
    """A sphere defined by its center, radius and surface color.

    Attributes:
        origin: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
        color: The diffuse color of the sphere, each component in [0, 1].
    """

    origin: vec3
    radius: ti.f32
    color: vec3


@ti.func
def sphere_normal(sphere: Sphere, point: vec3) -> vec3:
    """Outward unit normal of the sphere at a point on its surface."""
    return (point - sphere.origin) / sphere.radius


@ti.func
def intersect_sphere(ray: Ray, sphere: Sphere, min_t: ti.f32, max_t: ti.f32) -> Intersection:
    """Find the closest intersection of a ray with a sphere in (min_t, max_t).

    The nearer root is tried first, then the farther one; a root only counts
    when it lies strictly inside the interval.

    Args:
        ray: The ray to test (unit-length direction).
        sphere: The sphere to intersect.
        min_t: Exclusive lower bound on the ray parameter.
        max_t: Exclusive upper bound on the ray parameter.

    Returns:
        The intersection record, or the no-intersection sentinel on a miss.
    """
    result = no_intersection()

    origin_to_center = sphere.origin - ray.origin
    b = tm.dot(ray.direction, origin_to_center)
    c = tm.dot(origin_to_center, origin_to_center) - sphere.radius * sphere.radius
    disc = b * b - c

    if disc > 0.0:
        sqrt_disc = ti.sqrt(disc)

        # Nearer root first
        t = b - sqrt_disc
        valid = (t > min_t) and (t < max_t)

        if not valid:
            t = b + sqrt_disc
            valid = (t > min_t) and (t < max_t)

        if valid:
            position = ray_at(ray, t)
            result = Intersection(
                distance=t,
                position=position,
                normal=sphere_normal(sphere, position),
                color=sphere.color,
            )

    return result


@ti.func
def intersect_sphere_any(ray: Ray, sphere: Sphere, min_t: ti.f32, max_t: ti.f32) -> ti.i32:
    """Test whether a ray hits a sphere anywhere in (min_t, max_t).

    Same algebra as intersect_sphere() without building a record. Used for
    shadow rays.

    Returns:
        1 if either root lies strictly inside the interval, 0 otherwise.
    """
    origin_to_center = sphere.origin - ray.origin
    b = tm.dot(ray.direction, origin_to_center)
    c = tm.dot(origin_to_center, origin_to_center) - sphere.radius * sphere.radius
    disc = b * b - c

    hit = 0
    if disc > 0.0:
        sqrt_disc = ti.sqrt(disc)
        t1 = b - sqrt_disc
        t2 = b + sqrt_disc
        if (t1 > min_t and t1 < max_t) or (t2 > min_t and t2 < max_t):
            hit = 1
    return hit


@ti.func
def make_sphere(origin: vec3, radius: ti.f32, color: vec3) -> Sphere:
    """Create a sphere within a Taichi kernel."""
    return Sphere(origin=origin, radius=radius, color=color)

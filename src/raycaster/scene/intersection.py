"""Scene-level primitive intersection testing.

This module stores the scene's spheres in Taichi fields and answers the two
ray queries used by the integrators:

- intersect_scene: the nearest hit in (min_t, max_t)
- intersect_scene_any: whether anything is hit in (min_t, max_t)

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycaster.scene.intersection import add_sphere, clear_scene
    >>> clear_scene()
    >>> add_sphere((0.0, 0.0, 4.0), 1.0, color=(1.0, 0.5, 0.1))
    0
    >>> # Use intersect_scene within a Taichi kernel
"""

from dataclasses import dataclass

import taichi as ti

from raycaster.core.ray import Ray, vec3
from raycaster.geometry.intersection import Intersection, is_valid, no_intersection
from raycaster.geometry.sphere import Sphere, intersect_sphere, intersect_sphere_any

# Maximum number of spheres supported in the scene
MAX_SPHERES = 1024

# Sphere storage: Structure of Arrays layout
sphere_origins = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all primitives from the scene.

    Resets the sphere count to zero. The field data is overwritten when new
    spheres are added.
    """
    num_spheres[None] = 0


def add_sphere(
    origin: tuple[float, float, float],
    radius: float,
    color: tuple[float, float, float] = (1.0, 1.0, 1.0),
) -> int:
    """Add a sphere to the scene.

    Args:
        origin: The center of the sphere.
        radius: The radius of the sphere (positive).
        color: The surface color, each component in [0, 1]. Defaults to white.

    Returns:
        The index of the added sphere.

    Raises:
        ValueError: If the radius is not positive or a color component is
            outside [0, 1].
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    if radius <= 0.0:
        raise ValueError(f"Sphere radius must be positive, got {radius}")
    for i, component in enumerate(color):
        if component < 0.0 or component > 1.0:
            raise ValueError(
                f"Color component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )

    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_origins[idx] = [origin[0], origin[1], origin[2]]
    sphere_radii[idx] = radius
    sphere_colors[idx] = [color[0], color[1], color[2]]
    num_spheres[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


@ti.func
def get_sphere(idx: ti.i32) -> Sphere:
    """Get a sphere of the scene by index within a kernel."""
    return Sphere(origin=sphere_origins[idx], radius=sphere_radii[idx], color=sphere_colors[idx])


@ti.func
def intersect_scene(ray: Ray, min_t: ti.f32, max_t: ti.f32) -> Intersection:
    """Find the nearest intersection of a ray with the scene.

    Each sphere is tested against the interval (min_t, closest_so_far), so a
    sphere farther than the current best cannot win. A sphere at exactly the
    same distance as the current best does not replace it, which keeps the
    earlier sphere on ties.

    Args:
        ray: The ray to test (unit-length direction).
        min_t: Exclusive lower bound on the ray parameter.
        max_t: Exclusive upper bound on the ray parameter.

    Returns:
        The nearest intersection, or the no-intersection sentinel.
    """
    closest_t = max_t
    result = no_intersection()

    for i in range(num_spheres[None]):
        rec = intersect_sphere(ray, get_sphere(i), min_t, closest_t)
        if is_valid(rec):
            closest_t = rec.distance
            result = rec

    return result


@ti.func
def intersect_scene_any(ray: Ray, min_t: ti.f32, max_t: ti.f32) -> ti.i32:
    """Test if a ray hits any primitive in (min_t, max_t) (shadow ray query).

    Stops testing spheres after the first hit.

    Returns:
        1 if any primitive was hit, 0 otherwise.
    """
    hit_any = 0

    for i in range(num_spheres[None]):
        if hit_any == 0:
            if intersect_sphere_any(ray, get_sphere(i), min_t, max_t):
                hit_any = 1

    return hit_any


# =============================================================================
# Host-side queries
# =============================================================================

_query_hit = ti.field(dtype=ti.i32, shape=())
_query_distance = ti.field(dtype=ti.f32, shape=())
_query_position = ti.Vector.field(3, dtype=ti.f32, shape=())
_query_normal = ti.Vector.field(3, dtype=ti.f32, shape=())
_query_color = ti.Vector.field(3, dtype=ti.f32, shape=())


@ti.kernel
def _intersect_kernel(origin: vec3, direction: vec3, min_t: ti.f32, max_t: ti.f32):
    """Run intersect_scene for one ray and store the record."""
    # Single iteration keeps the sphere loop serial
    for _ in range(1):
        rec = intersect_scene(Ray(origin=origin, direction=direction), min_t, max_t)
        _query_hit[None] = is_valid(rec)
        _query_distance[None] = rec.distance
        _query_position[None] = rec.position
        _query_normal[None] = rec.normal
        _query_color[None] = rec.color


@ti.kernel
def _intersect_any_kernel(origin: vec3, direction: vec3, min_t: ti.f32, max_t: ti.f32):
    """Run intersect_scene_any for one ray and store the result."""
    for _ in range(1):
        _query_hit[None] = intersect_scene_any(
            Ray(origin=origin, direction=direction), min_t, max_t
        )


@dataclass
class HitInfo:
    """Host-side copy of an intersection record.

    Attributes:
        distance: Ray parameter of the hit.
        position: The hit point.
        normal: The outward surface normal at the hit point.
        color: The surface color of the hit sphere.
    """

    distance: float
    position: tuple[float, float, float]
    normal: tuple[float, float, float]
    color: tuple[float, float, float]


def _to_tuple(v) -> tuple[float, float, float]:
    return (float(v[0]), float(v[1]), float(v[2]))


def query_intersection(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    min_t: float,
    max_t: float,
) -> HitInfo | None:
    """Host-side nearest-hit query.

    Runs intersect_scene() for a single ray. Useful for tests and debugging.

    Args:
        origin: The ray origin.
        direction: The ray direction (should be unit length).
        min_t: Exclusive lower bound on the ray parameter.
        max_t: Exclusive upper bound on the ray parameter.

    Returns:
        The nearest hit, or None if the ray hits nothing in (min_t, max_t).
    """
    _intersect_kernel(
        vec3(origin[0], origin[1], origin[2]),
        vec3(direction[0], direction[1], direction[2]),
        min_t,
        max_t,
    )
    if _query_hit[None] == 0:
        return None

    return HitInfo(
        distance=float(_query_distance[None]),
        position=_to_tuple(_query_position[None]),
        normal=_to_tuple(_query_normal[None]),
        color=_to_tuple(_query_color[None]),
    )


def query_any_intersection(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    min_t: float,
    max_t: float,
) -> bool:
    """Host-side any-hit query; True if anything lies in (min_t, max_t)."""
    _intersect_any_kernel(
        vec3(origin[0], origin[1], origin[2]),
        vec3(direction[0], direction[1], direction[2]),
        min_t,
        max_t,
    )
    return bool(_query_hit[None])

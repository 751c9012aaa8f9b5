"""Intersection record shared by primitives, scene queries and integrators.

An intersection with ``distance = INF`` is the "no intersection" sentinel;
validity is simply ``distance < INF``. Records are built fresh by every
intersection test and consumed immediately by the caller.
"""

import taichi as ti

from raycaster.core.ray import INF, vec3


@ti.dataclass
class Intersection:
    """Record of a ray-surface intersection.

    Attributes:
        distance: Ray parameter of the hit. INF when nothing was hit.
        position: The 3D point where the ray met the surface.
        normal: The outward surface normal at the hit point (unit length).
            Integrators flip it toward the incoming ray when shading.
        color: The surface color (diffuse reflectance) at the hit point.
    """

    distance: ti.f32
    position: vec3
    normal: vec3
    color: vec3


@ti.func
def no_intersection() -> Intersection:
    """Create the sentinel record meaning "no intersection"."""
    return Intersection(
        distance=INF,
        position=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        color=vec3(0.0, 0.0, 0.0),
    )


@ti.func
def is_valid(rec: Intersection) -> ti.i32:
    """Return 1 if the record describes an actual hit, 0 for the sentinel."""
    return rec.distance < INF

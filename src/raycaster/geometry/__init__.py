"""Geometry module for shape primitives.

Components:
    intersection: Intersection record and the no-hit sentinel
    sphere: Sphere primitive with ray-sphere intersection

All intersection routines are Taichi functions (@ti.func) and support both
nearest-hit and any-hit queries over an open interval (min_t, max_t).
"""

from .intersection import Intersection, is_valid, no_intersection
from .sphere import Sphere, intersect_sphere, intersect_sphere_any, make_sphere, sphere_normal

__all__ = [
    "Intersection",
    "no_intersection",
    "is_valid",
    "Sphere",
    "intersect_sphere",
    "intersect_sphere_any",
    "make_sphere",
    "sphere_normal",
]

"""Pinhole camera model for perspective projection ray generation.

This module implements a pinhole camera that generates primary rays for
rendering. The camera supports:
- Look-at positioning (lookfrom, lookat, vup)
- Vertical field of view in degrees

The camera builds an orthonormal basis from the view parameters:
- forward: points from lookfrom toward lookat
- right: points right in the image plane
- up: points up in the image plane

Ray generation takes normalized screen coordinates (u, v) where v spans
[-1, 1] from the bottom to the top of the image and u spans
[-aspect, aspect] from left to right. Pixels therefore stay square whatever
the aspect ratio.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycaster.camera.pinhole import PinholeCamera, setup_camera, get_ray
    >>>
    >>> # Camera at the origin looking down +z
    >>> setup_camera(PinholeCamera())
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(0.0, 0.0)  # Ray through image center
"""

import math
from dataclasses import dataclass

import numpy as np
import taichi as ti

from raycaster.core.ray import Ray, make_ray, normalize, vec3

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class PinholeCamera:
    """Configuration for a pinhole (perspective) camera.

    Attributes:
        lookfrom: Camera position in world space (x, y, z).
        lookat: Point the camera is looking at in world space (x, y, z).
        vup: Up direction vector for camera orientation (typically (0, 1, 0)).
        vfov: Vertical field of view in degrees. With the default of 90
            degrees the image plane sits at unit distance and spans [-1, 1]
            vertically.
    """

    lookfrom: tuple[float, float, float] = (0.0, 0.0, 0.0)
    lookat: tuple[float, float, float] = (0.0, 0.0, 1.0)
    vup: tuple[float, float, float] = (0.0, 1.0, 0.0)
    vfov: float = 90.0


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f32, shape=())

# Orthonormal basis vectors
_camera_right = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_up = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_forward = ti.Vector.field(3, dtype=ti.f32, shape=())

# tan(vfov / 2): half height of the image plane at unit distance
_camera_half_height = ti.field(dtype=ti.f32, shape=())


# =============================================================================
# Camera Setup (Python-side, called once per camera configuration)
# =============================================================================


def setup_camera(camera: PinholeCamera) -> None:
    """Initialize camera state from configuration.

    Computes the camera's orthonormal basis with NumPy and stores it in
    Taichi fields. Must be called before rendering.

    Args:
        camera: Camera configuration with position, orientation, and FOV.

    Raises:
        ValueError: If the view direction is degenerate, vup is parallel to
            it, or vfov is outside (0, 180).
    """
    if not 0.0 < camera.vfov < 180.0:
        raise ValueError(f"vfov must be in (0, 180) degrees, got {camera.vfov}")

    lookfrom = np.array(camera.lookfrom, dtype=np.float64)
    lookat = np.array(camera.lookat, dtype=np.float64)
    vup = np.array(camera.vup, dtype=np.float64)

    forward = lookat - lookfrom
    forward_norm = np.linalg.norm(forward)
    if forward_norm < 1e-8:
        raise ValueError("lookfrom and lookat must be distinct points")
    forward = forward / forward_norm

    right = np.cross(vup, forward)
    right_norm = np.linalg.norm(right)
    if right_norm < 1e-8:
        raise ValueError("vup must not be parallel to the view direction")
    right = right / right_norm

    up = np.cross(forward, right)

    _camera_origin[None] = lookfrom.tolist()
    _camera_right[None] = right.tolist()
    _camera_up[None] = up.tolist()
    _camera_forward[None] = forward.tolist()
    _camera_half_height[None] = math.tan(math.radians(camera.vfov) / 2.0)


# =============================================================================
# Ray Generation (Taichi-compatible)
# =============================================================================


@ti.func
def get_ray(u: ti.f32, v: ti.f32) -> Ray:
    """Generate a ray through normalized screen coordinates (u, v).

    Args:
        u: Horizontal coordinate, -aspect at the left edge, aspect at the right.
        v: Vertical coordinate, -1 at the bottom edge, 1 at the top.

    Returns:
        A Ray from the camera position with a unit-length direction.
    """
    offset = u * _camera_right[None] + v * _camera_up[None]
    direction = normalize(_camera_forward[None] + _camera_half_height[None] * offset)
    return make_ray(_camera_origin[None], direction)


@ti.func
def get_camera_origin() -> vec3:
    """Get the camera position in world space."""
    return _camera_origin[None]


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with origin, right, up and forward vectors.
    """
    origin_vec = _camera_origin[None]
    right_vec = _camera_right[None]
    up_vec = _camera_up[None]
    forward_vec = _camera_forward[None]

    return {
        "origin": (float(origin_vec[0]), float(origin_vec[1]), float(origin_vec[2])),
        "right": (float(right_vec[0]), float(right_vec[1]), float(right_vec[2])),
        "up": (float(up_vec[0]), float(up_vec[1]), float(up_vec[2])),
        "forward": (float(forward_vec[0]), float(forward_vec[1]), float(forward_vec[2])),
    }

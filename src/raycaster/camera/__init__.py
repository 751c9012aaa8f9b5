"""Camera module for view and ray generation.

Components:
    pinhole: Simple pinhole (perspective) camera model

Camera responsibilities:
    - Transform (u, v) screen coordinates to world-space rays
    - Support look-at positioning with up vector

Ray generation uses aspect-corrected screen coordinates:
    u in [-aspect, aspect]: left to right across image
    v in [-1, 1]: bottom to top across image
"""

from .pinhole import (
    PinholeCamera,
    get_camera_info,
    get_camera_origin,
    get_ray,
    setup_camera,
)

__all__ = [
    "PinholeCamera",
    "setup_camera",
    "get_ray",
    "get_camera_origin",
    "get_camera_info",
]

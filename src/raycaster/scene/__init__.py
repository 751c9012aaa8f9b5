"""Scene module for scene management and ray-scene queries.

Components:
    intersection: Sphere storage and nearest-hit / any-hit queries
    manager: Scene container coordinating spheres and lights
    demo: The demo scene with selectable light presets

Scene data is organized for efficient Taichi access:
    - Structure-of-Arrays layout for sphere data
    - One registry per light kind (see raycaster.lights)
"""

from .demo import LightPreset, add_light_preset, create_demo_scene
from .intersection import (
    MAX_SPHERES,
    HitInfo,
    add_sphere,
    clear_scene,
    get_sphere,
    get_sphere_count,
    intersect_scene,
    intersect_scene_any,
    query_any_intersection,
    query_intersection,
)
from .manager import (
    ConeLightInfo,
    CylinderLightInfo,
    DirectionalLightInfo,
    PointLightInfo,
    Scene,
    SceneConfig,
    SphereInfo,
)

__all__ = [
    # Intersection module
    "HitInfo",
    "add_sphere",
    "clear_scene",
    "get_sphere",
    "get_sphere_count",
    "intersect_scene",
    "intersect_scene_any",
    "query_intersection",
    "query_any_intersection",
    "MAX_SPHERES",
    # Manager module
    "Scene",
    "SceneConfig",
    "SphereInfo",
    "PointLightInfo",
    "DirectionalLightInfo",
    "ConeLightInfo",
    "CylinderLightInfo",
    # Demo module
    "LightPreset",
    "add_light_preset",
    "create_demo_scene",
]

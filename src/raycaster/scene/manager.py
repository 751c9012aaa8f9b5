"""Scene container coordinating spheres and light sources.

This module provides the high-level scene API. A Scene owns every primitive
and light added to it. It writes them into the Taichi field registries that
the integrators read, and it keeps a Python-side record of each one for
inspection and serialization.

The Scene maintains:
- An ordered collection of spheres
- A single ambient light
- One ordered collection per light kind (point, directional, cone, cylinder)
- Scene serialization to and from plain dictionaries

The field registries are global, so only one Scene is live at a time.
Creating a Scene (or calling clear()) resets them; an older Scene keeps its
Python-side records but no longer describes what the integrators see.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycaster.scene.manager import Scene
    >>> scene = Scene()
    >>> scene.add_sphere(origin=(0, 0, 4), radius=1.0, color=(1.0, 0.5, 0.1))
    0
    >>> scene.add_point_light(intensity=(30, 30, 30), origin=(2, 2, 2))
    0
"""

from dataclasses import asdict, dataclass, field
from typing import Any

from raycaster.lights import (
    add_cone_light,
    add_cylinder_light,
    add_directional_light,
    add_point_light,
    clear_all_lights,
    normalize_direction,
    set_ambient_light,
)
from raycaster.scene.intersection import (
    HitInfo,
    add_sphere,
    clear_scene,
    query_any_intersection,
    query_intersection,
)

Vec3Tuple = tuple[float, float, float]


def _vec(values: Any) -> Vec3Tuple:
    """Convert a 3-sequence to a tuple of floats."""
    x, y, z = values
    return (float(x), float(y), float(z))


@dataclass
class SphereInfo:
    """Information about a sphere in the scene.

    Attributes:
        sphere_index: The index in the sphere storage arrays.
        origin: The center of the sphere.
        radius: The radius of the sphere.
        color: The surface color of the sphere.
    """

    sphere_index: int
    origin: Vec3Tuple
    radius: float
    color: Vec3Tuple


@dataclass
class PointLightInfo:
    """Information about a point light in the scene."""

    light_index: int
    intensity: Vec3Tuple
    origin: Vec3Tuple


@dataclass
class DirectionalLightInfo:
    """Information about a directional light; direction is stored normalized."""

    light_index: int
    radiosity: Vec3Tuple
    direction: Vec3Tuple


@dataclass
class ConeLightInfo:
    """Information about a cone light; direction is stored normalized."""

    light_index: int
    intensity: Vec3Tuple
    origin: Vec3Tuple
    direction: Vec3Tuple
    cos_half_angle: float


@dataclass
class CylinderLightInfo:
    """Information about a cylinder light; direction is stored normalized."""

    light_index: int
    radiosity: Vec3Tuple
    origin: Vec3Tuple
    direction: Vec3Tuple
    radius: float


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        ambient: Radiance of the ambient light.
        spheres: List of sphere configurations.
        point_lights: List of point light configurations.
        directional_lights: List of directional light configurations.
        cone_lights: List of cone light configurations.
        cylinder_lights: List of cylinder light configurations.
    """

    ambient: Vec3Tuple = (0.0, 0.0, 0.0)
    spheres: list[dict[str, Any]] = field(default_factory=list)
    point_lights: list[dict[str, Any]] = field(default_factory=list)
    directional_lights: list[dict[str, Any]] = field(default_factory=list)
    cone_lights: list[dict[str, Any]] = field(default_factory=list)
    cylinder_lights: list[dict[str, Any]] = field(default_factory=list)


class Scene:
    """Scene of spheres and light sources.

    Built once before rendering and treated as read-only while rendering.
    Creating another Scene resets the shared registries, which leaves this
    instance stale: its records and to_dict() no longer match what is rendered.

    Attributes:
        spheres: List of SphereInfo for all spheres, in insertion order.
        ambient: Radiance of the ambient light.
        point_lights: List of PointLightInfo.
        directional_lights: List of DirectionalLightInfo.
        cone_lights: List of ConeLightInfo.
        cylinder_lights: List of CylinderLightInfo.

    Example:
        >>> scene = Scene()
        >>> scene.set_ambient_light((0.01, 0.01, 0.01))
        >>> scene.add_sphere((0, 0, 4), 1.0, (1.0, 0.5, 0.1))
        >>> scene.add_sphere((0, -1001, 0), 1000.0, (0.1, 0.5, 1.0))
        >>> scene.add_directional_light((3, 3, 3), (-1, -2, 1))
    """

    def __init__(self) -> None:
        """Initialize an empty scene with a black ambient light."""
        self.spheres: list[SphereInfo] = []
        self.ambient: Vec3Tuple = (0.0, 0.0, 0.0)
        self.point_lights: list[PointLightInfo] = []
        self.directional_lights: list[DirectionalLightInfo] = []
        self.cone_lights: list[ConeLightInfo] = []
        self.cylinder_lights: list[CylinderLightInfo] = []
        self._clear_all()

    def _clear_all(self) -> None:
        """Clear all scene data including Taichi fields."""
        clear_scene()
        clear_all_lights()
        self.spheres.clear()
        self.ambient = (0.0, 0.0, 0.0)
        self.point_lights.clear()
        self.directional_lights.clear()
        self.cone_lights.clear()
        self.cylinder_lights.clear()

    def clear(self) -> None:
        """Remove every sphere and light and reset the ambient light to black."""
        self._clear_all()

    # =========================================================================
    # Primitives
    # =========================================================================

    def add_sphere(
        self,
        origin: Vec3Tuple,
        radius: float,
        color: Vec3Tuple = (1.0, 1.0, 1.0),
    ) -> int:
        """Add a sphere to the scene.

        Args:
            origin: The center of the sphere.
            radius: The radius of the sphere (positive).
            color: The surface color, each component in [0, 1].

        Returns:
            The index of the sphere.

        Raises:
            ValueError: If the radius or color is invalid.
            RuntimeError: If the maximum number of spheres is exceeded.
        """
        idx = add_sphere(origin, radius, color)
        self.spheres.append(
            SphereInfo(
                sphere_index=idx,
                origin=_vec(origin),
                radius=float(radius),
                color=_vec(color),
            )
        )
        return idx

    # =========================================================================
    # Lights
    # =========================================================================

    def set_ambient_light(self, radiance: Vec3Tuple) -> None:
        """Set the radiance of the ambient light.

        Raises:
            ValueError: If any component is negative.
        """
        set_ambient_light(radiance)
        self.ambient = _vec(radiance)

    def add_point_light(self, intensity: Vec3Tuple, origin: Vec3Tuple) -> int:
        """Add a point light.

        Returns:
            The index of the light among the point lights.

        Raises:
            ValueError: If the intensity is negative.
            RuntimeError: If the maximum number of point lights is exceeded.
        """
        idx = add_point_light(intensity, origin)
        self.point_lights.append(
            PointLightInfo(light_index=idx, intensity=_vec(intensity), origin=_vec(origin))
        )
        return idx

    def add_directional_light(self, radiosity: Vec3Tuple, direction: Vec3Tuple) -> int:
        """Add a directional light shining along direction.

        Returns:
            The index of the light among the directional lights.

        Raises:
            ValueError: If radiosity is negative or direction has zero length.
            RuntimeError: If the maximum number of directional lights is exceeded.
        """
        idx = add_directional_light(radiosity, direction)
        self.directional_lights.append(
            DirectionalLightInfo(
                light_index=idx,
                radiosity=_vec(radiosity),
                direction=normalize_direction(direction),
            )
        )
        return idx

    def add_cone_light(
        self,
        intensity: Vec3Tuple,
        origin: Vec3Tuple,
        direction: Vec3Tuple,
        cos_half_angle: float,
    ) -> int:
        """Add a cone light with apex origin, axis direction and half angle.

        Returns:
            The index of the light among the cone lights.

        Raises:
            ValueError: If an argument is out of range.
            RuntimeError: If the maximum number of cone lights is exceeded.
        """
        idx = add_cone_light(intensity, origin, direction, cos_half_angle)
        self.cone_lights.append(
            ConeLightInfo(
                light_index=idx,
                intensity=_vec(intensity),
                origin=_vec(origin),
                direction=normalize_direction(direction),
                cos_half_angle=float(cos_half_angle),
            )
        )
        return idx

    def add_cylinder_light(
        self,
        radiosity: Vec3Tuple,
        origin: Vec3Tuple,
        direction: Vec3Tuple,
        radius: float,
    ) -> int:
        """Add a cylinder light whose axis passes through origin.

        Returns:
            The index of the light among the cylinder lights.

        Raises:
            ValueError: If an argument is out of range.
            RuntimeError: If the maximum number of cylinder lights is exceeded.
        """
        idx = add_cylinder_light(radiosity, origin, direction, radius)
        self.cylinder_lights.append(
            CylinderLightInfo(
                light_index=idx,
                radiosity=_vec(radiosity),
                origin=_vec(origin),
                direction=normalize_direction(direction),
                radius=float(radius),
            )
        )
        return idx

    # =========================================================================
    # Queries
    # =========================================================================

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the scene."""
        return len(self.spheres)

    def get_light_count(self) -> int:
        """Get the number of non-ambient lights in the scene."""
        return (
            len(self.point_lights)
            + len(self.directional_lights)
            + len(self.cone_lights)
            + len(self.cylinder_lights)
        )

    def intersect(
        self,
        origin: Vec3Tuple,
        direction: Vec3Tuple,
        min_t: float = 0.0,
        max_t: float = float("inf"),
    ) -> HitInfo | None:
        """Find the nearest sphere hit by a ray in (min_t, max_t).

        Returns:
            The nearest hit, or None if the ray hits nothing.
        """
        return query_intersection(origin, direction, min_t, max_t)

    def intersect_any(
        self,
        origin: Vec3Tuple,
        direction: Vec3Tuple,
        min_t: float = 0.0,
        max_t: float = float("inf"),
    ) -> bool:
        """Check whether a ray hits any sphere in (min_t, max_t)."""
        return query_any_intersection(origin, direction, min_t, max_t)

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a SceneConfig."""
        return SceneConfig(
            ambient=self.ambient,
            spheres=[
                {"origin": s.origin, "radius": s.radius, "color": s.color} for s in self.spheres
            ],
            point_lights=[
                {"intensity": p.intensity, "origin": p.origin} for p in self.point_lights
            ],
            directional_lights=[
                {"radiosity": d.radiosity, "direction": d.direction}
                for d in self.directional_lights
            ],
            cone_lights=[
                {
                    "intensity": c.intensity,
                    "origin": c.origin,
                    "direction": c.direction,
                    "cos_half_angle": c.cos_half_angle,
                }
                for c in self.cone_lights
            ],
            cylinder_lights=[
                {
                    "radiosity": c.radiosity,
                    "origin": c.origin,
                    "direction": c.direction,
                    "radius": c.radius,
                }
                for c in self.cylinder_lights
            ],
        )

    def from_config(self, config: SceneConfig) -> None:
        """Replace the scene contents with a SceneConfig.

        Raises:
            ValueError: If an entry is invalid or misses a key.
        """
        self.clear()
        try:
            self.set_ambient_light(_vec(config.ambient))
            for s in config.spheres:
                self.add_sphere(_vec(s["origin"]), s["radius"], _vec(s.get("color", (1, 1, 1))))
            for p in config.point_lights:
                self.add_point_light(_vec(p["intensity"]), _vec(p["origin"]))
            for d in config.directional_lights:
                self.add_directional_light(_vec(d["radiosity"]), _vec(d["direction"]))
            for c in config.cone_lights:
                self.add_cone_light(
                    _vec(c["intensity"]),
                    _vec(c["origin"]),
                    _vec(c["direction"]),
                    c["cos_half_angle"],
                )
            for c in config.cylinder_lights:
                self.add_cylinder_light(
                    _vec(c["radiosity"]),
                    _vec(c["origin"]),
                    _vec(c["direction"]),
                    c["radius"],
                )
        except KeyError as e:
            raise ValueError(f"Missing key in scene configuration: {e}") from e

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a plain dictionary."""
        return asdict(self.to_config())

    def from_dict(self, data: dict[str, Any]) -> None:
        """Replace the scene contents with a dictionary produced by to_dict()."""
        config = SceneConfig(
            ambient=_vec(data.get("ambient", (0.0, 0.0, 0.0))),
            spheres=list(data.get("spheres", [])),
            point_lights=list(data.get("point_lights", [])),
            directional_lights=list(data.get("directional_lights", [])),
            cone_lights=list(data.get("cone_lights", [])),
            cylinder_lights=list(data.get("cylinder_lights", [])),
        )
        self.from_config(config)

    def __repr__(self) -> str:
        """Return a string representation of the scene contents."""
        return (
            f"Scene(spheres={len(self.spheres)}, point_lights={len(self.point_lights)}, "
            f"directional_lights={len(self.directional_lights)}, "
            f"cone_lights={len(self.cone_lights)}, "
            f"cylinder_lights={len(self.cylinder_lights)})"
        )

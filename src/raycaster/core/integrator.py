"""Integrators and the render loop of the ray caster.

An integrator turns a camera ray into the radiance arriving along it. All
integrators are stateless Taichi functions over the global scene, selected
by an IntegratorType value:

    BINARY            white on any hit, black otherwise
    COLOR             surface color of the nearest hit
    INVERSE_DISTANCE  1 / distance to the nearest hit
    NORMAL            facing normal mapped from [-1, 1]^3 to [0, 1]^3
    TRANSPARENCY      every surface filters the ray by its color
    DIFFUSE_LOCAL     Lambertian direct lighting, no shadows
    DIFFUSE_DIRECT    Lambertian direct lighting with shadow rays

Shading always uses the facing normal: the surface normal flipped, if needed,
so that it opposes the incoming ray. Surfaces are therefore two-sided, and a
camera inside a sphere still sees a lit interior.

The render loop maps pixel (x, y) of a W x H image to the screen coordinates

    u = (W / H) * (2 * (x + 0.5) / W - 1)
    v = -2 * (y + 0.5) / H + 1

so row 0 is the top of the image, asks the camera for a ray and stores the
integrator's result in the render target.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycaster.camera.pinhole import setup_camera
    >>> from raycaster.core.integrator import (
    ...     IntegratorType, render_image, setup_render_target
    ... )
    >>> from raycaster.scene.demo import create_demo_scene
    >>>
    >>> scene, camera = create_demo_scene()
    >>> setup_camera(camera)
    >>> setup_render_target(640, 480)
    >>> render_image(IntegratorType.DIFFUSE_DIRECT)
"""

from enum import IntEnum

import taichi as ti
import taichi.math as tm

from raycaster.camera.pinhole import get_ray
from raycaster.core.ray import EPSILON, INF, INV_PI, PI, Ray, vec3
from raycaster.geometry.intersection import is_valid
from raycaster.lights.ambient import get_ambient_light, sample_ambient_light
from raycaster.lights.cone import get_cone_light, num_cone_lights, sample_cone_light
from raycaster.lights.cylinder import (
    get_cylinder_light,
    num_cylinder_lights,
    sample_cylinder_light,
)
from raycaster.lights.directional import (
    get_directional_light,
    num_directional_lights,
    sample_directional_light,
)
from raycaster.lights.point import get_point_light, num_point_lights, sample_point_light
from raycaster.lights.sample import LightSample
from raycaster.scene.intersection import intersect_scene, intersect_scene_any


class IntegratorType(IntEnum):
    """Enumeration of the available integrators.

    Used for integrator dispatch in the render kernel.
    """

    BINARY = 0
    COLOR = 1
    INVERSE_DISTANCE = 2
    NORMAL = 3
    TRANSPARENCY = 4
    DIFFUSE_LOCAL = 5
    DIFFUSE_DIRECT = 6

    @classmethod
    def from_name(cls, name: str) -> "IntegratorType":
        """Resolve an integrator from a name such as "diffuse-direct".

        Case is ignored and dashes are accepted in place of underscores.

        Raises:
            ValueError: If no integrator has that name.
        """
        key = name.strip().upper().replace("-", "_")
        try:
            return cls[key]
        except KeyError:
            choices = ", ".join(member.name.lower().replace("_", "-") for member in cls)
            raise ValueError(f"Unknown integrator: {name!r} (choose from {choices})") from None


# =============================================================================
# Rendering Constants
# =============================================================================

# Interval searched by primary rays
PRIMARY_MIN_T = 0.0
PRIMARY_MAX_T = INF

# Enough for five spheres (two crossings each) plus the final escape
MAX_TRANSPARENCY_ITERATIONS = 11


# =============================================================================
# Shared Shading Helpers
# =============================================================================


@ti.func
def facing_normal(direction: vec3, normal: vec3) -> vec3:
    """Flip a surface normal so that it opposes the incoming ray direction."""
    result = -normal
    if tm.dot(direction, normal) < 0.0:
        result = normal
    return result


@ti.func
def _lambert_contribution(
    sample: LightSample,
    albedo: vec3,
    normal: vec3,
    shading_point: vec3,
    cast_shadows: ti.i32,
) -> vec3:
    """Contribution of one light sample to a Lambertian surface.

    Lambert's cosine law is clamped at zero: light from below the surface
    does not count. With cast_shadows set, a shadow ray from the shading
    point toward the light up to its distance decides the visibility.
    """
    cos_lambert = ti.max(0.0, tm.dot(normal, sample.direction))
    visibility = 1.0
    if cast_shadows:
        shadow_ray = Ray(origin=shading_point, direction=sample.direction)
        if intersect_scene_any(shadow_ray, 0.0, sample.distance_to_light):
            visibility = 0.0
    return albedo * sample.radiance * cos_lambert * visibility


@ti.func
def _diffuse_illumination(ray: Ray, cast_shadows: ti.i32) -> vec3:
    """Direct illumination of the nearest hit, treating surfaces as diffuse.

    The ambient term is pi * albedo * ambient radiance, the integral of a
    constant radiance over the hemisphere. Every other light adds its
    Lambert term. When shadows are cast, the shading point is pushed off the
    surface along the facing normal so that shadow rays do not hit the
    surface they start from.
    """
    color = vec3(0.0, 0.0, 0.0)
    rec = intersect_scene(ray, PRIMARY_MIN_T, PRIMARY_MAX_T)

    if is_valid(rec):
        # Surface color in [0, 1] scaled to an energy-conserving BRDF
        albedo = rec.color * INV_PI
        normal = facing_normal(ray.direction, rec.normal)

        shading_point = rec.position
        if cast_shadows:
            shading_point = rec.position + EPSILON * normal

        ambient = sample_ambient_light(get_ambient_light(), rec.position)
        color += PI * albedo * ambient.radiance

        for i in range(num_point_lights[None]):
            sample = sample_point_light(get_point_light(i), shading_point)
            color += _lambert_contribution(sample, albedo, normal, shading_point, cast_shadows)

        for i in range(num_directional_lights[None]):
            sample = sample_directional_light(get_directional_light(i), shading_point)
            color += _lambert_contribution(sample, albedo, normal, shading_point, cast_shadows)

        for i in range(num_cone_lights[None]):
            sample = sample_cone_light(get_cone_light(i), shading_point)
            color += _lambert_contribution(sample, albedo, normal, shading_point, cast_shadows)

        for i in range(num_cylinder_lights[None]):
            sample = sample_cylinder_light(get_cylinder_light(i), shading_point)
            color += _lambert_contribution(sample, albedo, normal, shading_point, cast_shadows)

    return color


# =============================================================================
# Integrators
# =============================================================================


@ti.func
def radiance_binary(ray: Ray) -> vec3:
    """White if the ray hits anything, black otherwise."""
    rec = intersect_scene(ray, PRIMARY_MIN_T, PRIMARY_MAX_T)
    value = ti.cast(is_valid(rec), ti.f32)
    return vec3(value, value, value)


@ti.func
def radiance_color(ray: Ray) -> vec3:
    """Surface color of the nearest hit; the miss sentinel carries black."""
    rec = intersect_scene(ray, PRIMARY_MIN_T, PRIMARY_MAX_T)
    return rec.color


@ti.func
def radiance_inverse_distance(ray: Ray) -> vec3:
    """Grayscale 1 / distance of the nearest hit.

    No special case for misses: the sentinel distance is fed to the division
    as-is. Closer surfaces are brighter.
    """
    rec = intersect_scene(ray, PRIMARY_MIN_T, PRIMARY_MAX_T)
    value = 1.0 / rec.distance
    return vec3(value, value, value)


@ti.func
def radiance_normal(ray: Ray) -> vec3:
    """Facing normal mapped from [-1, 1]^3 to [0, 1]^3, black on a miss.

    With a camera looking down +z: right-facing normals are pink, up-facing
    light green, and normals facing the camera yellow/orange.
    """
    color = vec3(0.0, 0.0, 0.0)
    rec = intersect_scene(ray, PRIMARY_MIN_T, PRIMARY_MAX_T)
    if is_valid(rec):
        normal = facing_normal(ray.direction, rec.normal)
        color = 0.5 * normal + vec3(0.5, 0.5, 0.5)
    return color


@ti.func
def radiance_transparency(ray: Ray) -> vec3:
    """Treat every surface as a color filter over a white background.

    The ray is chased through the scene: each hit multiplies the carried
    color by the surface color, and the ray continues from just behind the
    surface in the same direction. Once the ray escapes, the carried color
    is returned. If it is still inside geometry after
    MAX_TRANSPARENCY_ITERATIONS hits, the result is black. This is naive
    unconditional transparency, not refraction.
    """
    color = vec3(1.0, 1.0, 1.0)
    result = vec3(0.0, 0.0, 0.0)
    origin = ray.origin
    direction = ray.direction

    # Active flag instead of break
    active = 1
    for _ in range(MAX_TRANSPARENCY_ITERATIONS):
        if active == 1:
            rec = intersect_scene(
                Ray(origin=origin, direction=direction), PRIMARY_MIN_T, PRIMARY_MAX_T
            )
            if not is_valid(rec):
                result = color
                active = 0
            else:
                normal = facing_normal(direction, rec.normal)
                color *= rec.color
                # Continue on the far side of the surface
                origin = rec.position - EPSILON * normal

    return result


@ti.func
def radiance_diffuse_local(ray: Ray) -> vec3:
    """Lambertian direct lighting where every light is always visible."""
    return _diffuse_illumination(ray, 0)


@ti.func
def radiance_diffuse_direct(ray: Ray) -> vec3:
    """Lambertian direct lighting with a shadow ray per light."""
    return _diffuse_illumination(ray, 1)


@ti.func
def radiance(mode: ti.i32, ray: Ray) -> vec3:
    """Dispatch to the integrator selected by mode (an IntegratorType value).

    Unknown modes yield black.
    """
    color = vec3(0.0, 0.0, 0.0)

    if mode == int(IntegratorType.BINARY):
        color = radiance_binary(ray)
    elif mode == int(IntegratorType.COLOR):
        color = radiance_color(ray)
    elif mode == int(IntegratorType.INVERSE_DISTANCE):
        color = radiance_inverse_distance(ray)
    elif mode == int(IntegratorType.NORMAL):
        color = radiance_normal(ray)
    elif mode == int(IntegratorType.TRANSPARENCY):
        color = radiance_transparency(ray)
    elif mode == int(IntegratorType.DIFFUSE_LOCAL):
        color = radiance_diffuse_local(ray)
    elif mode == int(IntegratorType.DIFFUSE_DIRECT):
        color = radiance_diffuse_direct(ray)

    return color


# =============================================================================
# Render Target (Image Sink)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Image dimensions (actual active size)
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Color buffer indexed by (x, y), y = 0 is the top row
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Flag to track if render target is initialized
_render_target_initialized = ti.field(dtype=ti.i32, shape=())

# Result slot for single-ray kernels
_trace_result = ti.Vector.field(3, dtype=ti.f32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target.

    Sets the active image dimensions and clears the buffer. The buffer is
    preallocated to MAX_IMAGE_WIDTH x MAX_IMAGE_HEIGHT.

    Args:
        width: Image width in pixels (1 to MAX_IMAGE_WIDTH).
        height: Image height in pixels (1 to MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If a dimension is not positive or exceeds the maximum.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the render target buffer to black."""
    _color_buffer.fill(0.0)


def reset_render_target() -> None:
    """Forget the render target dimensions; setup is required again."""
    _render_target_initialized[None] = 0
    _image_width[None] = 0
    _image_height[None] = 0


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


def write_pixel(x: int, y: int, color: tuple[float, float, float]) -> None:
    """Store a color at pixel (x, y) of the render target.

    Raises:
        RuntimeError: If render target has not been set up.
        IndexError: If (x, y) lies outside the image.
    """
    _check_render_target_initialized()
    width, height = get_image_dimensions()
    if not (0 <= x < width and 0 <= y < height):
        raise IndexError(f"Pixel ({x}, {y}) is outside the {width}x{height} image")
    _color_buffer[x, y] = [color[0], color[1], color[2]]


def read_pixel(x: int, y: int) -> tuple[float, float, float]:
    """Read the color stored at pixel (x, y).

    Raises:
        RuntimeError: If render target has not been set up.
        IndexError: If (x, y) lies outside the image.
    """
    _check_render_target_initialized()
    width, height = get_image_dimensions()
    if not (0 <= x < width and 0 <= y < height):
        raise IndexError(f"Pixel ({x}, {y}) is outside the {width}x{height} image")
    color = _color_buffer[x, y]
    return (float(color[0]), float(color[1]), float(color[2]))


def get_image_numpy():
    """Get the rendered image as a NumPy array.

    Values are returned as computed: no clamping, and non-finite values are
    kept. The array shape is (height, width, 3) with dtype float32, row 0
    being the top of the image.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    import numpy as np

    _check_render_target_initialized()

    width, height = get_image_dimensions()

    full_image = _color_buffer.to_numpy()

    # (width, height, 3) -> (height, width, 3)
    image = np.transpose(full_image[:width, :height, :], (1, 0, 2))

    return np.ascontiguousarray(image, dtype=np.float32)


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.func
def screen_coordinates(x: ti.i32, y: ti.i32, width: ti.i32, height: ti.i32) -> tm.vec2:
    """Map pixel (x, y) to aspect-corrected screen coordinates (u, v)."""
    w = ti.cast(width, ti.f32)
    h = ti.cast(height, ti.f32)
    aspect_ratio = w / h
    u = aspect_ratio * (2.0 * (ti.cast(x, ti.f32) + 0.5) / w - 1.0)
    v = -2.0 * (ti.cast(y, ti.f32) + 0.5) / h + 1.0
    return tm.vec2(u, v)


@ti.func
def render_pixel_impl(mode: ti.i32, x: ti.i32, y: ti.i32, width: ti.i32, height: ti.i32) -> vec3:
    """Compute the color of one pixel."""
    uv = screen_coordinates(x, y, width, height)
    ray = get_ray(uv.x, uv.y)
    return radiance(mode, ray)


@ti.kernel
def _render_rows(mode: ti.i32, width: ti.i32, height: ti.i32, row_begin: ti.i32, row_end: ti.i32):
    """Render rows [row_begin, row_end) of the image into the color buffer.

    Pixels are independent, so the loop runs in parallel.
    """
    for x, y in ti.ndrange(width, (row_begin, row_end)):
        _color_buffer[x, y] = render_pixel_impl(mode, x, y, width, height)


@ti.kernel
def _render_single_pixel(mode: ti.i32, x: ti.i32, y: ti.i32, width: ti.i32, height: ti.i32):
    """Render one pixel into the result slot, for testing and debugging."""
    for _ in range(1):
        _trace_result[None] = render_pixel_impl(mode, x, y, width, height)


@ti.kernel
def _trace_single_ray(mode: ti.i32, origin: vec3, direction: vec3):
    """Evaluate an integrator for one explicit ray into the result slot."""
    for _ in range(1):
        _trace_result[None] = radiance(mode, Ray(origin=origin, direction=direction))


# =============================================================================
# Public Rendering API
# =============================================================================


def render_rows(integrator: IntegratorType, row_begin: int, row_end: int) -> None:
    """Render a band of rows of the image.

    Args:
        integrator: The integrator to use.
        row_begin: First row to render (0 is the top row).
        row_end: One past the last row to render.

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If the row range is outside the image.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    if not 0 <= row_begin <= row_end <= height:
        raise ValueError(f"Row range [{row_begin}, {row_end}) is outside [0, {height})")
    if row_begin == row_end:
        return

    _render_rows(int(integrator), width, height, row_begin, row_end)


def render_image(integrator: IntegratorType) -> None:
    """Render every pixel of the image with the given integrator.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    _, height = get_image_dimensions()
    render_rows(integrator, 0, height)


def render_pixel(integrator: IntegratorType, x: int, y: int) -> tuple[float, float, float]:
    """Compute the color of a single pixel without touching the buffer.

    Raises:
        RuntimeError: If render target has not been set up.
        IndexError: If (x, y) lies outside the image.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    if not (0 <= x < width and 0 <= y < height):
        raise IndexError(f"Pixel ({x}, {y}) is outside the {width}x{height} image")

    _render_single_pixel(int(integrator), x, y, width, height)
    color = _trace_result[None]
    return (float(color[0]), float(color[1]), float(color[2]))


def trace_ray(
    integrator: IntegratorType,
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
) -> tuple[float, float, float]:
    """Evaluate an integrator for a single ray.

    The camera is bypassed; direction should be unit length.

    Returns:
        Tuple of (R, G, B) radiance values.
    """
    _trace_single_ray(
        int(integrator),
        vec3(origin[0], origin[1], origin[2]),
        vec3(direction[0], direction[1], direction[2]),
    )
    color = _trace_result[None]
    return (float(color[0]), float(color[1]), float(color[2]))

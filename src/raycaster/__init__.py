"""Taichi-based offline ray caster.

This package renders scenes of spheres lit by analytic light sources, with
support for:
- Nearest-hit and any-hit scene queries
- Ambient, point, directional, cone and cylinder lights
- Debug integrators (binary, color, inverse distance, normal)
- Transparency and Lambertian direct lighting with or without shadows

Subpackages:
    core: Ray utilities, integrators and the render loop
    geometry: Sphere primitive and intersection records
    lights: Light sources and their registries
    scene: Scene management and the demo scene
    camera: Pinhole camera with ray generation
    preview: Image export and preview utilities
"""

__version__ = "0.1.0"

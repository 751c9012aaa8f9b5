"""Command line renderer for the demo scene.

Usage:
    raycaster-render [options]
    python -m raycaster.cli [options]

Options:
    --width WIDTH           Image width in pixels (default: 640)
    --height HEIGHT         Image height in pixels (default: 480)
    --integrator NAME       Integrator name (default: diffuse-direct)
    --light NAME            Light preset: point, directional, cylinder, cone
    --output OUTPUT         Output file path, .png or .ppm (default: out.png)
    --gamma GAMMA           Gamma correction on export (default: 1.0)
    --tone-map METHOD       none, reinhard or exposure (default: none)
    --show                  Show the result in a Matplotlib window
    --quiet                 Suppress progress output

Example:
    raycaster-render --width 320 --height 240 --integrator normal --output normals.ppm
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

import taichi as ti

from raycaster.config import RenderConfig, build_arg_parser

# Rows rendered between two progress updates
ROWS_PER_BATCH = 16


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    return build_arg_parser().parse_args(argv)


def init_taichi(quiet: bool = False) -> None:
    """Initialize Taichi, preferring a GPU backend."""
    try:
        ti.init(arch=ti.gpu)
        if not quiet:
            print("Using GPU backend")
    except RuntimeError:
        ti.init(arch=ti.cpu)
        if not quiet:
            print("Using CPU backend")


def render_demo(config: RenderConfig) -> Path:
    """Render the demo scene as described by config and save it.

    Taichi must be initialized before calling this function.

    Args:
        config: The render configuration.

    Returns:
        Path to the saved image file.

    Raises:
        ValueError: If the configuration is invalid.
    """
    # Lazy imports to allow Taichi initialization first
    from raycaster.camera.pinhole import setup_camera
    from raycaster.core.renderer import Renderer
    from raycaster.scene.demo import create_demo_scene

    config.validate()
    integrator = config.integrator_type()
    light = config.light_preset()
    quiet = config.quiet

    if not quiet:
        print(
            f"Creating demo scene with {light.name.lower()} light "
            f"({config.width}x{config.height})..."
        )

    _, camera = create_demo_scene(light)
    setup_camera(camera)

    renderer = Renderer(config.width, config.height)

    if not quiet:
        print(f"Rendering with the {integrator.name.lower()} integrator...")

    start_time = time.time()

    def progress_callback(current: int, target: int) -> None:
        if not quiet:
            progress_pct = (current / target) * 100 if target > 0 else 0
            print(
                f"\r  Progress: {current}/{target} rows ({progress_pct:.1f}%)",
                end="",
                flush=True,
            )

    renderer.render(integrator, rows_per_batch=ROWS_PER_BATCH, callback=progress_callback)

    if not quiet:
        print()  # Newline after progress

    from raycaster.preview.export import save_image_array

    output_file = Path(config.output)
    image = renderer.get_image_numpy()
    save_image_array(image, str(output_file), tone_map=config.tone_map, gamma=config.gamma)

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    if config.show:
        from raycaster.preview.display import show_preview

        show_preview(image, tone_map=config.tone_map, gamma=config.gamma)

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        0 on success, 1 if the configuration is invalid or rendering failed.
    """
    args = parse_args(argv)
    config = RenderConfig.from_args(args)

    try:
        config.validate()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    init_taichi(quiet=config.quiet)

    try:
        render_demo(config)
        return 0
    except (ValueError, RuntimeError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

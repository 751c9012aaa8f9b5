"""Render configuration.

RenderConfig collects everything a command line render needs: image size,
integrator, light preset, output path and display settings. It can be built
directly or from parsed command line arguments.

This module does not import any module that declares Taichi fields, so it can
be used before ti.init(). Integrator and light names are resolved to their
enums on demand.

Example:
    >>> from raycaster.config import RenderConfig
    >>> config = RenderConfig(width=320, height=240, integrator="normal")
    >>> config.validate()
"""

import argparse
from dataclasses import dataclass

from raycaster.preview.display import TONE_MAP_METHODS, ToneMapMethod

DEFAULT_WIDTH = 640
DEFAULT_HEIGHT = 480
DEFAULT_INTEGRATOR = "diffuse-direct"
DEFAULT_LIGHT = "cone"
DEFAULT_OUTPUT = "out.png"

INTEGRATOR_NAMES = (
    "binary",
    "color",
    "inverse-distance",
    "normal",
    "transparency",
    "diffuse-local",
    "diffuse-direct",
)
LIGHT_NAMES = ("point", "directional", "cylinder", "cone")


@dataclass
class RenderConfig:
    """Settings for a single render.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        integrator: Integrator name, e.g. "diffuse-direct".
        light: Light preset name of the demo scene, e.g. "cone".
        output: Output file path; a .ppm extension selects the PPM writer.
        gamma: Gamma applied before quantization.
        tone_map: Tone mapping method applied before gamma.
        show: Open a Matplotlib preview window after rendering.
        quiet: Suppress progress output.
    """

    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    integrator: str = DEFAULT_INTEGRATOR
    light: str = DEFAULT_LIGHT
    output: str = DEFAULT_OUTPUT
    gamma: float = 1.0
    tone_map: ToneMapMethod = "none"
    show: bool = False
    quiet: bool = False

    def validate(self) -> None:
        """Check the configuration.

        Raises:
            ValueError: If a setting is out of range or a name is unknown.
        """
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image size must be positive, got {self.width}x{self.height}")
        if self.gamma <= 0.0:
            raise ValueError(f"Gamma must be positive, got {self.gamma}")
        if self.tone_map not in TONE_MAP_METHODS:
            raise ValueError(f"Unknown tone mapping method: {self.tone_map!r}")
        if not self.output:
            raise ValueError("Output path must not be empty")
        if _normalize_name(self.integrator) not in INTEGRATOR_NAMES:
            raise ValueError(
                f"Unknown integrator: {self.integrator!r} "
                f"(choose from {', '.join(INTEGRATOR_NAMES)})"
            )
        if _normalize_name(self.light) not in LIGHT_NAMES:
            raise ValueError(
                f"Unknown light preset: {self.light!r} (choose from {', '.join(LIGHT_NAMES)})"
            )

    def integrator_type(self):
        """Resolve the integrator name to an IntegratorType.

        Requires Taichi to be initialized.
        """
        from raycaster.core.integrator import IntegratorType

        return IntegratorType.from_name(self.integrator)

    def light_preset(self):
        """Resolve the light name to a LightPreset.

        Requires Taichi to be initialized.
        """
        from raycaster.scene.demo import LightPreset

        return LightPreset.from_name(self.light)

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "RenderConfig":
        """Build a configuration from arguments parsed by build_arg_parser()."""
        return cls(
            width=args.width,
            height=args.height,
            integrator=args.integrator,
            light=args.light,
            output=args.output,
            gamma=args.gamma,
            tone_map=args.tone_map,
            show=args.show,
            quiet=args.quiet,
        )


def _normalize_name(name: str) -> str:
    return name.strip().lower().replace("_", "-")


def build_arg_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the command line renderer."""
    parser = argparse.ArgumentParser(
        description="Render the demo sphere scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=DEFAULT_WIDTH,
        help=f"Image width in pixels (default: {DEFAULT_WIDTH})",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=DEFAULT_HEIGHT,
        help=f"Image height in pixels (default: {DEFAULT_HEIGHT})",
    )
    parser.add_argument(
        "--integrator",
        type=str,
        default=DEFAULT_INTEGRATOR,
        help=f"One of: {', '.join(INTEGRATOR_NAMES)} (default: {DEFAULT_INTEGRATOR})",
    )
    parser.add_argument(
        "--light",
        type=str,
        default=DEFAULT_LIGHT,
        help=f"One of: {', '.join(LIGHT_NAMES)} (default: {DEFAULT_LIGHT})",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=DEFAULT_OUTPUT,
        help=f"Output file path, .png or .ppm (default: {DEFAULT_OUTPUT})",
    )
    parser.add_argument(
        "--gamma",
        type=float,
        default=1.0,
        help="Gamma correction applied on export (default: 1.0)",
    )
    parser.add_argument(
        "--tone-map",
        type=str,
        choices=TONE_MAP_METHODS,
        default="none",
        help="Tone mapping applied on export (default: none)",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Show the result in a Matplotlib window",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser

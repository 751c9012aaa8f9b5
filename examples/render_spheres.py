#!/usr/bin/env python3
"""Render the demo sphere scene.

This script renders the three-sphere demo scene with a chosen integrator and
light preset and writes the result as PNG or PPM.

Usage:
    python examples/render_spheres.py [options]

Example:
    python examples/render_spheres.py --integrator diffuse-local --light point --output out.ppm
    python examples/render_spheres.py --width 320 --height 240 --integrator normal --show

Run with --help for the full list of options.
"""

import sys

from raycaster.cli import main

if __name__ == "__main__":
    sys.exit(main())

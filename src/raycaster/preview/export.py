"""Image export utilities for rendered images.

This module provides functions for saving rendered images to files with
support for tone mapping and gamma correction.

Supported formats:
    - PNG and other Pillow formats (8-bit RGB)
    - PPM, ASCII (P3) or binary (P6)

Example:
    >>> from raycaster.preview.export import save_png_from_array
    >>> save_png_from_array(renderer.get_image_numpy(), "out.png")
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from raycaster.preview.display import ToneMapMethod, process_image_for_display


def image_to_uint8(
    image: npt.NDArray[np.float32],
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 1.0,
    exposure: float = 1.0,
) -> npt.NDArray[np.uint8]:
    """Convert a linear float32 image to uint8 for display/export.

    Args:
        image: Linear image array of shape (H, W, 3).
        tone_map: Tone mapping method ("none", "reinhard", or "exposure").
        gamma: Gamma correction value (default 1.0).
        exposure: Exposure value for exposure tone mapping (default 1.0).

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.
    """
    processed = process_image_for_display(
        image,
        tone_map=tone_map,
        gamma=gamma,
        exposure=exposure,
    )
    # Round to nearest; 1.0 maps to 255
    return np.rint(processed * 255.0).astype(np.uint8)


def save_png_from_array(
    image: npt.NDArray[np.float32],
    filepath: str,
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 1.0,
    exposure: float = 1.0,
) -> None:
    """Save a NumPy array as a PNG file (or any format Pillow infers).

    Args:
        image: Linear image array of shape (H, W, 3).
        filepath: Output file path.
        tone_map: Tone mapping method ("none", "reinhard", or "exposure").
        gamma: Gamma correction value (default 1.0).
        exposure: Exposure value for exposure tone mapping (default 1.0).
    """
    image_uint8 = image_to_uint8(image, tone_map=tone_map, gamma=gamma, exposure=exposure)
    pil_image = PILImage.fromarray(image_uint8)
    pil_image.save(filepath)


def save_ppm(
    image: npt.NDArray[np.float32],
    filepath: str,
    *,
    binary: bool = False,
    tone_map: ToneMapMethod = "none",
    gamma: float = 1.0,
    exposure: float = 1.0,
) -> None:
    """Save a NumPy array as a PPM file.

    The ASCII variant (P3) writes one pixel per line and is human readable;
    the binary variant (P6) is compact and written by Pillow.

    Args:
        image: Linear image array of shape (H, W, 3), row 0 at the top.
        filepath: Output file path.
        binary: Write P6 instead of P3.
        tone_map: Tone mapping method ("none", "reinhard", or "exposure").
        gamma: Gamma correction value (default 1.0).
        exposure: Exposure value for exposure tone mapping (default 1.0).
    """
    image_uint8 = image_to_uint8(image, tone_map=tone_map, gamma=gamma, exposure=exposure)
    height, width = image_uint8.shape[:2]

    if binary:
        PILImage.fromarray(image_uint8).save(filepath, format="PPM")
        return

    lines = [f"P3\n{width} {height}\n255"]
    lines.extend(" ".join(str(int(c)) for c in pixel) for pixel in image_uint8.reshape(-1, 3))
    Path(filepath).write_text("\n".join(lines) + "\n", encoding="ascii")


def save_image_array(
    image: npt.NDArray[np.float32],
    filepath: str,
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 1.0,
    exposure: float = 1.0,
) -> None:
    """Save an image, choosing PPM or a Pillow format from the file extension."""
    if Path(filepath).suffix.lower() == ".ppm":
        save_ppm(image, filepath, tone_map=tone_map, gamma=gamma, exposure=exposure)
    else:
        save_png_from_array(image, filepath, tone_map=tone_map, gamma=gamma, exposure=exposure)


def compute_rmse(
    image_a: npt.NDArray[np.floating],
    image_b: npt.NDArray[np.floating],
) -> float:
    """Compute root mean squared error between two images.

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))

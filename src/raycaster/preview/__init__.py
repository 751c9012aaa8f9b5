"""Preview module for displaying and exporting rendered images.

Components:
    display: Display pipeline (tone mapping, gamma) and Matplotlib preview
    export: PNG (Pillow) and PPM writers

The render target stores raw radiance, including non-finite values; the
display pipeline makes it finite and clamps it before quantization.
"""

from .display import (
    TONE_MAP_METHODS,
    ToneMapMethod,
    apply_gamma,
    process_image_for_display,
    sanitize_image,
    show_preview,
    tone_map_exposure,
    tone_map_reinhard,
)
from .export import (
    compute_rmse,
    image_to_uint8,
    save_image_array,
    save_png_from_array,
    save_ppm,
)

__all__ = [
    # Display
    "ToneMapMethod",
    "TONE_MAP_METHODS",
    "sanitize_image",
    "tone_map_reinhard",
    "tone_map_exposure",
    "apply_gamma",
    "process_image_for_display",
    "show_preview",
    # Export
    "image_to_uint8",
    "save_png_from_array",
    "save_ppm",
    "save_image_array",
    "compute_rmse",
]

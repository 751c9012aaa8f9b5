"""Renderer wrapper around the render target and the render loop.

This module provides a convenient interface over the core integrator
functions that supports:
- Rendering the whole image with a chosen integrator
- Rendering in bands of rows with progress callbacks
- Generator-based progress for iterative processing
- Access to the image as NumPy arrays and saving to disk

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycaster.camera.pinhole import setup_camera
    >>> from raycaster.core.integrator import IntegratorType
    >>> from raycaster.core.renderer import Renderer
    >>> from raycaster.scene.demo import create_demo_scene
    >>>
    >>> scene, camera = create_demo_scene()
    >>> setup_camera(camera)
    >>>
    >>> renderer = Renderer(640, 480)
    >>> renderer.render(IntegratorType.NORMAL)
    >>> image = renderer.get_image_numpy()
"""

from collections.abc import Callable, Generator

import numpy as np
import numpy.typing as npt

from raycaster.core.integrator import (
    IntegratorType,
    clear_render_target,
    get_image_numpy,
    render_rows,
    setup_render_target,
    write_pixel,
)

# Type alias for progress callback
# Callback receives (rows_done, total_rows)
ProgressCallback = Callable[[int, int], None]


class Renderer:
    """Renders the current scene into the global render target.

    The renderer keeps track of the image size and delegates to the render
    target fields of the integrator module. Rows are rendered in bands so
    that long renders can report progress.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
    """

    def __init__(self, width: int, height: int) -> None:
        """Initialize the renderer.

        Args:
            width: Image width in pixels (max 2048).
            height: Image height in pixels (max 2048).

        Raises:
            ValueError: If dimensions are not positive or exceed the maximum.
        """
        self._width = width
        self._height = height
        self._rows_done = 0
        setup_render_target(width, height)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def aspect_ratio(self) -> float:
        """Width divided by height."""
        return self._width / self._height

    @property
    def rows_done(self) -> int:
        """Number of rows rendered since the last reset."""
        return self._rows_done

    def reset(self) -> None:
        """Clear the image to black without changing its size."""
        clear_render_target()
        self._rows_done = 0

    def resize(self, width: int, height: int) -> None:
        """Resize the render target and clear it.

        Raises:
            ValueError: If dimensions are not positive or exceed the maximum.
        """
        setup_render_target(width, height)
        self._width = width
        self._height = height
        self._rows_done = 0

    def write(self, x: int, y: int, color: tuple[float, float, float]) -> None:
        """Store a color at pixel (x, y), row 0 being the top row."""
        write_pixel(x, y, color)

    def render(
        self,
        integrator: IntegratorType,
        rows_per_batch: int | None = None,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Render the full image with an integrator.

        Args:
            integrator: The integrator to evaluate for every pixel.
            rows_per_batch: Number of rows rendered before each callback.
                Defaults to the whole image in one batch.
            callback: Optional callback function called after each batch.
                Receives (rows_done, total_rows).

        Raises:
            ValueError: If rows_per_batch is not positive.

        Example:
            >>> def progress(done, total):
            ...     print(f"Progress: {done}/{total} rows")
            >>> renderer.render(IntegratorType.COLOR, rows_per_batch=60, callback=progress)
        """
        for done, total in self.render_progressive(integrator, rows_per_batch):
            if callback is not None:
                callback(done, total)

    def render_progressive(
        self,
        integrator: IntegratorType,
        rows_per_batch: int | None = None,
    ) -> Generator[tuple[int, int], None, None]:
        """Render the full image, yielding progress after each band of rows.

        Generator-based alternative to render() with callbacks.

        Yields:
            Tuple of (rows_done, total_rows).

        Raises:
            ValueError: If rows_per_batch is not positive.
        """
        batch = self._height if rows_per_batch is None else rows_per_batch
        if batch <= 0:
            raise ValueError(f"rows_per_batch must be positive, got {batch}")

        self._rows_done = 0
        while self._rows_done < self._height:
            row_end = min(self._rows_done + batch, self._height)
            render_rows(integrator, self._rows_done, row_end)
            self._rows_done = row_end
            yield (self._rows_done, self._height)

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the raw rendered image, shape (height, width, 3), row 0 at the top.

        Values are not clamped and may be non-finite.
        """
        return get_image_numpy()

    def get_image_uint8(self, gamma: float = 1.0) -> npt.NDArray[np.uint8]:
        """Get the rendered image as an 8-bit NumPy array.

        Non-finite values are replaced, values are clamped to [0, 1] and
        gamma corrected.
        """
        from raycaster.preview.export import image_to_uint8

        return image_to_uint8(self.get_image_numpy(), gamma=gamma)

    def save_image(self, filepath: str, gamma: float = 1.0) -> None:
        """Save the rendered image, as PPM for a .ppm path, otherwise via Pillow."""
        from raycaster.preview.export import save_image_array

        save_image_array(self.get_image_numpy(), filepath, gamma=gamma)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"rows_done={self.rows_done})"
        )

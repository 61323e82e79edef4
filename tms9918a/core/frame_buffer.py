"""
FrameBuffer -- video output buffer for the TMS9918A emulator.

Each render produces packed ``0xRRGGBB`` pixels in a numpy ``uint32``
array laid out in scanline order: ``pixels[y, x]``.  The array is always
sized for the largest raster the VDP produces (256 x 196); the logical
``width`` says how many columns the active mode actually uses.

Standard dimensions
-------------------

===============  =====  ======
Mode             width  height
===============  =====  ======
Graphics I       256    196
Text             240    196
Display blanked  256    196
===============  =====  ======

Rows 192..195 are never drawn by any mode and stay black.
"""

from __future__ import annotations

import numpy as np

from tms9918a.core.vdp_tables import FRAME_HEIGHT, FRAME_WIDTH


class FrameBuffer:
    """Holds one frame of video output.

    Parameters
    ----------
    width:
        Logical width of the frame in pixels (<= 256).
    height:
        Logical height of the frame in pixels (<= 196).
    """

    WIDTH: int = FRAME_WIDTH
    HEIGHT: int = FRAME_HEIGHT

    def __init__(self, width: int = FRAME_WIDTH, height: int = FRAME_HEIGHT) -> None:
        self.pixels: np.ndarray = np.zeros((self.HEIGHT, self.WIDTH), dtype=np.uint32)
        self.width: int = FRAME_WIDTH
        self.height: int = FRAME_HEIGHT
        self.set_size(width, height)

    def set_size(self, width: int, height: int) -> None:
        """Change the logical raster size without touching the pixels."""
        if not 0 < width <= self.WIDTH:
            raise ValueError(f"width must be in (0, {self.WIDTH}], got {width}")
        if not 0 < height <= self.HEIGHT:
            raise ValueError(f"height must be in (0, {self.HEIGHT}], got {height}")
        self.width = width
        self.height = height

    @property
    def active(self) -> np.ndarray:
        """View of the pixels inside the logical raster."""
        return self.pixels[: self.height, : self.width]

    def write_pixel(self, y: int, x: int, color: int) -> None:
        self.pixels[y, x] = color & 0xFFFFFF

    def read_pixel(self, y: int, x: int) -> int:
        return int(self.pixels[y, x])

    def clear(self) -> None:
        """Zero the whole buffer."""
        self.pixels.fill(0)

    def fill(self, color: int) -> None:
        """Set every pixel of the buffer to *color*."""
        self.pixels.fill(color & 0xFFFFFF)

    def copy(self) -> FrameBuffer:
        """Return an independent copy of this frame."""
        other = FrameBuffer(self.width, self.height)
        other.pixels[:] = self.pixels
        return other

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FrameBuffer):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and np.array_equal(self.pixels, other.pixels)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"FrameBuffer(width={self.width}, height={self.height})"

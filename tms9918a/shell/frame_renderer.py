"""
Frame renderer for the TMS9918A emulator.
Converts a rendered :class:`FrameBuffer` of packed ``0xRRGGBB`` pixels into
an RGB pygame Surface.

The VDP produces frames of different logical widths (256 for Graphics I,
240 for Text), so the output surface is re-created whenever the width
of the incoming frame changes.

The conversion uses **numpy** to split packed pixels into channels in
bulk and :func:`pygame.surfarray.blit_array` to copy them to the surface.
"""

from __future__ import annotations

import logging

import numpy as np
import pygame

from tms9918a.core.frame_buffer import FrameBuffer

logger = logging.getLogger(__name__)


def unpack_rgb(pixels: np.ndarray) -> np.ndarray:
    """Split packed ``0xRRGGBB`` values of shape (H, W) into (H, W, 3) bytes."""
    rgb = np.empty(pixels.shape + (3,), dtype=np.uint8)
    rgb[..., 0] = (pixels >> 16) & 0xFF
    rgb[..., 1] = (pixels >> 8) & 0xFF
    rgb[..., 2] = pixels & 0xFF
    return rgb


class FrameRenderer:
    """Convert VDP frames into a :class:`pygame.Surface`.

    Parameters
    ----------
    width, height:
        Initial surface size; normally the 256 x 196 maximum raster.
    """

    def __init__(
        self,
        width: int = FrameBuffer.WIDTH,
        height: int = FrameBuffer.HEIGHT,
    ) -> None:
        self._surface: pygame.Surface = pygame.Surface((width, height))
        logger.info("FrameRenderer: %dx%d", width, height)

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    @property
    def width(self) -> int:
        return self._surface.get_width()

    @property
    def height(self) -> int:
        return self._surface.get_height()

    @property
    def surface(self) -> pygame.Surface:
        """The internal pygame Surface (updated on each :meth:`render` call)."""
        return self._surface

    def render(self, frame: FrameBuffer) -> pygame.Surface:
        """Copy the logical area of *frame* into the surface and return it.

        The same surface object is reused between frames of equal size.
        """
        if (frame.width, frame.height) != self._surface.get_size():
            logger.debug(
                "FrameRenderer: resizing %dx%d -> %dx%d",
                self.width,
                self.height,
                frame.width,
                frame.height,
            )
            self._surface = pygame.Surface((frame.width, frame.height))

        rgb = unpack_rgb(frame.active)

        # pygame surfarray expects (W, H, 3) -- transpose width and height.
        pygame.surfarray.blit_array(self._surface, rgb.transpose(1, 0, 2))
        return self._surface

"""
Display window for the TMS9918A emulator.
Uses pygame to show the frames rendered by a VDP and to pace the host's
main loop.

Typical usage::

    from tms9918a import TMS9918A
    from tms9918a.platform.window import Window

    vdp = TMS9918A()
    ...                                  # set up tables
    window = Window(vdp, title="Text mode demo")
    while window.is_open:
        window.update()

or, with a per-frame callback that updates the VDP::

    window.run(lambda vdp: vdp.write_name_table(0, counter()))
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

import pygame

from tms9918a.core.frame_buffer import FrameBuffer
from tms9918a.core.vdp import TMS9918A
from tms9918a.shell.frame_renderer import FrameRenderer

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_WINDOW_TITLE: str = "TMS9918A"

# Minimum / maximum allowed display scale factors.
_MIN_SCALE: int = 1
_MAX_SCALE: int = 8

# Update rate limit, about one frame every 16.6 ms.
_DEFAULT_HZ: int = 60


class Window:
    """Pygame window presenting a :class:`TMS9918A`.

    Parameters
    ----------
    vdp:
        The chip whose frames are shown.
    title:
        Window caption.
    scale:
        Integer scale factor applied to the 256 x 196 native resolution.
    frame_hz:
        Maximum number of :meth:`update` calls per second.
    vsync:
        When ``True``, request vertical sync from the display driver.
        Pygame only honours the request for ``SCALED`` windows, so the
        flag is added as well.
    """

    def __init__(
        self,
        vdp: TMS9918A,
        title: str = _WINDOW_TITLE,
        scale: int = 4,
        *,
        frame_hz: int = _DEFAULT_HZ,
        vsync: bool = False,
    ) -> None:
        self._vdp: TMS9918A = vdp
        self._title: str = title
        self._scale: int = max(_MIN_SCALE, min(_MAX_SCALE, scale))
        self._frame_hz: int = max(1, frame_hz)
        self._open: bool = False

        if not pygame.get_init():
            pygame.init()

        self._display_width: int = FrameBuffer.WIDTH * self._scale
        self._display_height: int = FrameBuffer.HEIGHT * self._scale

        flags = pygame.RESIZABLE
        if vsync:
            flags |= pygame.SCALED

        self._screen: pygame.Surface = pygame.display.set_mode(
            (self._display_width, self._display_height),
            flags,
            vsync=int(vsync),
        )
        pygame.display.set_caption(title)

        self._clock: pygame.time.Clock = pygame.time.Clock()
        self._frame_renderer: FrameRenderer = FrameRenderer()
        self._open = True

        # ---- performance counters ----------------------------------------
        self._frame_count: int = 0
        self._fps_update_time: float = time.monotonic()
        self._fps_display: float = 0.0

        logger.info(
            "Window: %dx%d display (scale=%d, %d Hz)",
            self._display_width,
            self._display_height,
            self._scale,
            self._frame_hz,
        )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def scale(self) -> int:
        return self._scale

    @property
    def fps(self) -> float:
        """The measured frames-per-second (updated once per second)."""
        return self._fps_display

    # ------------------------------------------------------------------
    # Frame presentation
    # ------------------------------------------------------------------

    def update(self) -> None:
        """Process window events, render the VDP and show the frame.

        Closing the window or pressing Escape shuts pygame down and makes
        :attr:`is_open` false.
        """
        if not self._open:
            return

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.close()
                return
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                self.close()
                return

        surface = self._frame_renderer.render(self._vdp.render())

        # Stretch to the window size, whatever the mode's native width.
        current_size = self._screen.get_size()
        if surface.get_size() != current_size:
            scaled = pygame.transform.scale(surface, current_size)
        else:
            scaled = surface
        self._screen.blit(scaled, (0, 0))
        pygame.display.flip()

        self._clock.tick(self._frame_hz)
        self._update_fps()

    def run(self, step: Optional[Callable[[TMS9918A], None]] = None) -> None:
        """Loop until the window is closed.

        *step*, if given, is called with the VDP before every frame so the
        host can update tables or registers.
        """
        logger.info("Entering main loop (target %d fps)", self._frame_hz)
        try:
            while self._open:
                if step is not None:
                    step(self._vdp)
                self.update()
        except KeyboardInterrupt:
            logger.info("Interrupted by user")
        finally:
            self.close()

    def close(self) -> None:
        """Close the window and shut pygame down."""
        if not self._open:
            return
        self._open = False
        logger.info("Shutting down")
        pygame.quit()

    # ------------------------------------------------------------------
    # FPS tracking
    # ------------------------------------------------------------------

    def _update_fps(self) -> None:
        """Update the displayed FPS counter roughly once per second."""
        self._frame_count += 1
        now = time.monotonic()
        elapsed = now - self._fps_update_time
        if elapsed >= 1.0:
            self._fps_display = self._frame_count / elapsed
            self._frame_count = 0
            self._fps_update_time = now
            pygame.display.set_caption(
                f"{self._title}  [{self._fps_display:.1f} fps]"
            )

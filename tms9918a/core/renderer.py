"""
Renderer -- turns VDP video memory into pixels.

One call draws a whole frame.  The tile modes are rendered with numpy in
a handful of array operations instead of a per-pixel loop:

1. gather the name table for the screen as a (rows, columns) array,
2. gather the 8 pattern bytes for every tile: (rows, columns, 8),
3. expand each byte into pixel bits, MSB first: (rows, columns, 8, w),
4. choose foreground/background colours and interleave tile rows with
   pixel rows into a (rows * 8, columns * w) image.

Graphics I
    32x24 tiles of 8x8.  Colour comes from the colour table entry shared
    by each group of 8 pattern codes (``name // 8``): high nibble is the
    foreground, low nibble the background.

Text
    40x24 tiles of 6x8 on a 240-pixel raster.  Only bits 7..2 of each
    pattern byte are shown.  Colours come from register 7 for the whole
    screen.

Graphics II and Multicolor are not rendered.  They produce a frame
filled with the backdrop colour (register 7, low nibble) so that a
wrongly configured program is visible but never shows a misleading
Graphics I layout.

All video memory addresses are wrapped to 14 bits.
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from tms9918a.core.frame_buffer import FrameBuffer
from tms9918a.core.registers import RegisterFile
from tms9918a.core.types import VideoMode
from tms9918a.core.vdp_tables import (
    ACTIVE_HEIGHT,
    BLACK,
    FRAME_HEIGHT,
    FRAME_WIDTH,
    GFX1_COLUMNS,
    GFX1_ROWS,
    GFX1_TILE_WIDTH,
    PALETTE_ARRAY,
    TEXT_COLUMNS,
    TEXT_FRAME_WIDTH,
    TEXT_ROWS,
    TEXT_TILE_WIDTH,
    TILE_HEIGHT,
    VRAM_MASK,
)

logger = logging.getLogger(__name__)

# Shift amounts that put pattern bit (7 - column) into bit 0.
_GFX1_SHIFTS = np.arange(7, 7 - GFX1_TILE_WIDTH, -1)
_TEXT_SHIFTS = np.arange(7, 7 - TEXT_TILE_WIDTH, -1)
_TILE_LINES = np.arange(TILE_HEIGHT)


class Renderer:
    """Draws frames from a video memory array and a register file.

    Parameters
    ----------
    vram:
        The numpy ``uint8`` array backing video memory (read only).
    registers:
        The VDP register file.
    """

    def __init__(self, vram: np.ndarray, registers: RegisterFile) -> None:
        self._vram: np.ndarray = vram
        self._registers: RegisterFile = registers
        self._placeholder_logged: Optional[VideoMode] = None

    def render(self, frame: FrameBuffer) -> FrameBuffer:
        """Draw the current screen into *frame* and return it."""
        regs = self._registers

        if regs.consume_mode_changed():
            frame.clear()
            self._placeholder_logged = None

        if not regs.display_enabled:
            frame.set_size(FRAME_WIDTH, FRAME_HEIGHT)
            frame.fill(BLACK)
            return frame

        mode = regs.mode
        if not VideoMode.is_supported(mode):
            self._render_placeholder(frame, mode)
        elif mode == VideoMode.Text:
            self._render_text(frame)
        else:
            self._render_graphics1(frame)
        return frame

    # ------------------------------------------------------------------
    # Tile helpers
    # ------------------------------------------------------------------

    def _gather(self, base: int, offsets: np.ndarray) -> np.ndarray:
        return self._vram[(base + offsets) & VRAM_MASK]

    def _tile_names(self, columns: int, rows: int) -> np.ndarray:
        cells = np.arange(columns * rows)
        names = self._gather(self._registers.name_table_offset, cells)
        return names.astype(np.intp).reshape(rows, columns)

    def _tile_patterns(self, names: np.ndarray) -> np.ndarray:
        offsets = names[..., np.newaxis] * TILE_HEIGHT + _TILE_LINES
        return self._gather(self._registers.pattern_table_offset, offsets)

    @staticmethod
    def _expand_bits(patterns: np.ndarray, shifts: np.ndarray) -> np.ndarray:
        return ((patterns[..., np.newaxis] >> shifts) & 1).astype(bool)

    @staticmethod
    def _to_image(tiles: np.ndarray) -> np.ndarray:
        rows, columns, lines, width = tiles.shape
        return tiles.transpose(0, 2, 1, 3).reshape(rows * lines, columns * width)

    # ------------------------------------------------------------------
    # Modes
    # ------------------------------------------------------------------

    def _render_graphics1(self, frame: FrameBuffer) -> None:
        names = self._tile_names(GFX1_COLUMNS, GFX1_ROWS)
        colors = self._gather(self._registers.color_table_offset, names // 8)
        foreground = PALETTE_ARRAY[(colors >> 4) & 0x0F]
        background = PALETTE_ARRAY[colors & 0x0F]

        bits = self._expand_bits(self._tile_patterns(names), _GFX1_SHIFTS)
        tiles = np.where(
            bits,
            foreground[:, :, np.newaxis, np.newaxis],
            background[:, :, np.newaxis, np.newaxis],
        )

        frame.set_size(FRAME_WIDTH, FRAME_HEIGHT)
        frame.pixels[:ACTIVE_HEIGHT, :FRAME_WIDTH] = self._to_image(tiles)

    def _render_text(self, frame: FrameBuffer) -> None:
        names = self._tile_names(TEXT_COLUMNS, TEXT_ROWS)
        foreground = PALETTE_ARRAY[self._registers.text_color]
        background = PALETTE_ARRAY[self._registers.backdrop_color]

        bits = self._expand_bits(self._tile_patterns(names), _TEXT_SHIFTS)
        tiles = np.where(bits, foreground, background).astype(np.uint32)

        frame.set_size(TEXT_FRAME_WIDTH, FRAME_HEIGHT)
        frame.pixels[:ACTIVE_HEIGHT, :TEXT_FRAME_WIDTH] = self._to_image(tiles)

    def _render_placeholder(self, frame: FrameBuffer, mode: VideoMode) -> None:
        if self._placeholder_logged != mode:
            logger.warning("%s mode is not rendered; showing backdrop colour", mode.name)
            self._placeholder_logged = mode
        frame.set_size(FRAME_WIDTH, FRAME_HEIGHT)
        frame.pixels[:ACTIVE_HEIGHT, :] = PALETTE_ARRAY[self._registers.backdrop_color]

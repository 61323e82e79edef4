"""
TMS9918A palette and screen geometry tables.

The VDP has a fixed 16-entry palette selected by 4-bit colour codes.
Colour 0 is "transparent"; with no external backdrop composited it
collapses to black, the same value as colour 1.

Values are packed 0xRRGGBB integers.  :data:`PALETTE_ARRAY` holds the same
table as a numpy ``uint32`` array for vectorised look-up in the renderer.
"""

from __future__ import annotations

from typing import List

import numpy as np

# fmt: off
PALETTE: List[int] = [
    0x000000,  # 0  transparent
    0x000000,  # 1  black
    0x21C942,  # 2  medium green
    0x5EDC78,  # 3  light green
    0x5455ED,  # 4  dark blue
    0x7D75FC,  # 5  light blue
    0xD3524D,  # 6  dark red
    0x43EBF6,  # 7  cyan
    0xFD5554,  # 8  medium red
    0xFF7978,  # 9  light red
    0xD3C153,  # 10 dark yellow
    0xE5CE80,  # 11 light yellow
    0x21B03C,  # 12 dark green
    0xC95BBA,  # 13 magenta
    0xCCCCCC,  # 14 gray
    0xFFFFFF,  # 15 white
]
# fmt: on

assert len(PALETTE) == 16, f"palette must have 16 entries, got {len(PALETTE)}"

PALETTE_ARRAY: np.ndarray = np.array(PALETTE, dtype=np.uint32)
PALETTE_ARRAY.setflags(write=False)

BLACK: int = PALETTE[1]

# ---------------------------------------------------------------------------
# Memory geometry
# ---------------------------------------------------------------------------

VRAM_SIZE: int = 0x4000          # 16 KB
VRAM_MASK: int = VRAM_SIZE - 1   # 14-bit address space

NAME_TABLE_STEP: int = 0x0400    # register 2 multiplier
COLOR_TABLE_STEP: int = 0x0040   # register 3 multiplier
PATTERN_TABLE_STEP: int = 0x0800  # register 4 multiplier

NAME_TABLE_MAX_MULTIPLIER: int = 15
PATTERN_TABLE_MAX_MULTIPLIER: int = 7

# ---------------------------------------------------------------------------
# Raster geometry
# ---------------------------------------------------------------------------

FRAME_WIDTH: int = 256
FRAME_HEIGHT: int = 196
ACTIVE_HEIGHT: int = 192

GFX1_COLUMNS: int = 32
GFX1_ROWS: int = 24
GFX1_TILE_WIDTH: int = 8

TEXT_COLUMNS: int = 40
TEXT_ROWS: int = 24
TEXT_TILE_WIDTH: int = 6
TEXT_FRAME_WIDTH: int = TEXT_COLUMNS * TEXT_TILE_WIDTH  # 240

TILE_HEIGHT: int = 8

"""
Core enumerations for the TMS9918A emulator.
"""

from enum import IntEnum


class VideoMode(IntEnum):
    """Display modes selectable through the M1/M2/M3 register bits.

    Graphics1 -- 256x192 pixels, 32x24 tiles of 8x8, one character set.
                 Each group of 8 pattern codes shares a 2-colour entry.
    Graphics2 -- 256x192 pixels, three character sets (not rendered).
    Text      -- 240x192 pixels, 40x24 tiles of 6x8, two colours for the
                 whole screen taken from register 7.
    Multicolor -- 64x48 virtual pixels (not rendered).
    """

    Graphics1 = 0
    Graphics2 = 1
    Text = 2
    Multicolor = 3

    @staticmethod
    def is_supported(mode):
        return mode in (VideoMode.Graphics1, VideoMode.Text)

    @staticmethod
    def name_table_size(mode):
        """Number of name table entries the mode displays."""
        return 960 if mode == VideoMode.Text else 768

"""
RegisterFile -- the eight VDP write-only registers and the mode decoder.

Register map:

    0  bit 6 M3 (bitmap enable), bit 0 external video
    1  bit 7 16K, bit 6 BLANK (display enable), bit 5 IE,
       bit 4 M1 (text), bit 3 M2 (multicolor), bit 1 SIZE, bit 0 MAG
    2  name table base       = value * 0x0400
    3  color table base      = value * 0x0040
    4  pattern table base    = value * 0x0800
    5  sprite attribute base (stored, unused)
    6  sprite pattern base   (stored, unused)
    7  text colour (high nibble) / backdrop colour (low nibble)

TI numbers bits MSB-first in its data manual; the bit numbers above are
the conventional LSB-first ones.
"""

from __future__ import annotations

import logging

from tms9918a.core.errors import ConfigurationError
from tms9918a.core.types import VideoMode
from tms9918a.core.vdp_tables import (
    COLOR_TABLE_STEP,
    NAME_TABLE_STEP,
    PATTERN_TABLE_STEP,
)

logger = logging.getLogger(__name__)

REGISTER_COUNT = 8

R0_M3 = 1 << 6
R1_BLANK = 1 << 6
R1_M1 = 1 << 4
R1_M2 = 1 << 3

_MODES = {
    (False, False, False): VideoMode.Graphics1,
    (False, False, True): VideoMode.Graphics2,
    (False, True, False): VideoMode.Multicolor,
    (True, False, False): VideoMode.Text,
}


def decode_video_mode(r0: int, r1: int) -> VideoMode:
    """Derive the video mode from the contents of registers 0 and 1.

    Raises:
        ConfigurationError: If more than one of M1, M2, M3 is set.
    """
    m3 = (r0 & R0_M3) != 0
    m1 = (r1 & R1_M1) != 0
    m2 = (r1 & R1_M2) != 0
    try:
        return _MODES[(m1, m2, m3)]
    except KeyError:
        raise ConfigurationError(m1, m2, m3) from None


class RegisterFile:
    """The VDP register file plus the values derived from it.

    The table offsets are recomputed on every write, so they are never
    stale.  Writes to registers 0 and 1 also re-derive :attr:`mode` and
    raise :attr:`mode_changed`, which the renderer consumes to clear the
    frame.
    """

    def __init__(self) -> None:
        self._registers: bytearray = bytearray(REGISTER_COUNT)
        self.name_table_offset: int = 0
        self.color_table_offset: int = 0
        self.pattern_table_offset: int = 0
        self.mode: VideoMode = VideoMode.Graphics1
        self.mode_changed: bool = False

    def _check(self, index: int) -> int:
        if not 0 <= index < REGISTER_COUNT:
            raise IndexError(f"register {index} out of range [0, {REGISTER_COUNT})")
        return index

    def read(self, index: int) -> int:
        return self._registers[self._check(index)]

    def write(self, index: int, value: int) -> None:
        """Write *value* to register *index*.

        A write that would select an unsupported mode combination is
        rejected before anything is stored.

        Raises:
            IndexError: If *index* is not 0..7.
            ConfigurationError: If the write selects an invalid mode.
        """
        self._check(index)
        value &= 0xFF

        mode = None
        if index in (0, 1):
            r0 = value if index == 0 else self._registers[0]
            r1 = value if index == 1 else self._registers[1]
            mode = decode_video_mode(r0, r1)

        self._registers[index] = value
        self._update_offsets()

        if mode is not None:
            self.mode = mode
            self.mode_changed = True
            logger.debug("R%d <- 0x%02X, mode %s", index, value, mode.name)
        else:
            logger.debug("R%d <- 0x%02X", index, value)

    def _update_offsets(self) -> None:
        self.name_table_offset = self._registers[2] * NAME_TABLE_STEP
        self.color_table_offset = self._registers[3] * COLOR_TABLE_STEP
        self.pattern_table_offset = self._registers[4] * PATTERN_TABLE_STEP

    def consume_mode_changed(self) -> bool:
        """Return and clear the mode-changed flag."""
        changed = self.mode_changed
        self.mode_changed = False
        return changed

    @property
    def display_enabled(self) -> bool:
        """State of the blanking bit (register 1, bit 6)."""
        return (self._registers[1] & R1_BLANK) != 0

    @property
    def text_color(self) -> int:
        """Foreground colour code from register 7 (high nibble)."""
        return (self._registers[7] >> 4) & 0x0F

    @property
    def backdrop_color(self) -> int:
        """Background colour code from register 7 (low nibble)."""
        return self._registers[7] & 0x0F

    def __getitem__(self, index: int) -> int:
        return self.read(index)

    def __len__(self) -> int:
        return REGISTER_COUNT

    # ------------------------------------------------------------------
    # Serialisation support
    # ------------------------------------------------------------------

    def get_snapshot(self) -> bytes:
        """Return the raw register bytes."""
        return bytes(self._registers)

    @staticmethod
    def check_snapshot(data: bytes) -> VideoMode:
        """Validate raw register bytes and return the mode they select.

        Raises:
            ValueError: If *data* is not 8 bytes long.
            ConfigurationError: If registers 0/1 hold an invalid mode.
        """
        if len(data) != REGISTER_COUNT:
            raise ValueError(
                f"Snapshot size mismatch: expected {REGISTER_COUNT}, got {len(data)}"
            )
        return decode_video_mode(data[0], data[1])

    def restore_snapshot(self, data: bytes) -> None:
        """Restore raw register bytes and recompute derived state."""
        self.mode = self.check_snapshot(data)
        self._registers[:] = data
        self._update_offsets()
        self.mode_changed = True

    def __repr__(self) -> str:
        regs = " ".join(f"{r:02X}" for r in self._registers)
        return f"RegisterFile([{regs}], mode={self.mode.name})"

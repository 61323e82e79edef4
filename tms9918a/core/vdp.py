"""
TMS9918A -- Texas Instruments TMS9918A Video Display Processor.

The VDP owns 16 KB of video memory and eight write-only registers, and
turns the tables held in memory into a picture.  A host can drive it in
two ways:

* **Low level**, exactly like real software: byte writes to the control
  port (register writes and address setup) and byte reads/writes on the
  data port, which auto-increments the internal address pointer.

* **High level**, through the accessors below (set table base
  multipliers, fill or clear tables, pick a video mode, enable the
  display).  These only ever write registers and memory, so both styles
  can be mixed freely.

Example::

    vdp = TMS9918A()
    vdp.set_name_table_multiplier(0)
    vdp.set_pattern_table_multiplier(1)
    vdp.set_video_mode(VideoMode.Text)
    vdp.write_register(7, 0x91)          # light red on black
    vdp.fill_pattern_table(font)
    vdp.clear_name_table()
    vdp.write_name_table(0, ord("A"))
    vdp.enable_video(True)
    frame = vdp.render()

Only Graphics I and Text modes are rendered; sprites, Graphics II,
Multicolor and interrupts are not emulated.  Registers 0 and 1 are
cleared on reset, which leaves the display blanked, as on real hardware.

The chip is not thread-safe; the caller must serialise all access.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np

from tms9918a.core.devices import VideoRAM
from tms9918a.core.frame_buffer import FrameBuffer
from tms9918a.core.ports import PortProtocol
from tms9918a.core.registers import R0_M3, R1_BLANK, R1_M1, R1_M2, RegisterFile
from tms9918a.core.renderer import Renderer
from tms9918a.core.types import VideoMode
from tms9918a.core.vdp_tables import (
    NAME_TABLE_MAX_MULTIPLIER,
    PATTERN_TABLE_MAX_MULTIPLIER,
    VRAM_MASK,
)

logger = logging.getLogger(__name__)

# Register 1 mode bits (M1, M2) to set for each mode; register 0 M3 flag.
_MODE_BITS = {
    VideoMode.Graphics1: (0, False),
    VideoMode.Graphics2: (0, True),
    VideoMode.Multicolor: (R1_M2, False),
    VideoMode.Text: (R1_M1, False),
}


class TMS9918A:
    """An emulated TMS9918A VDP.

    Parameters
    ----------
    rng:
        numpy random generator used for the power-on memory contents.
    seed:
        Seed for a fresh generator when *rng* is not given.
    """

    def __init__(
        self,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
    ) -> None:
        self._vram: VideoRAM = VideoRAM(rng=rng, seed=seed)
        self._registers: RegisterFile = RegisterFile()
        self._ports: PortProtocol = PortProtocol(self._vram, self._registers)
        self._renderer: Renderer = Renderer(self._vram.array, self._registers)
        self._frame: FrameBuffer = FrameBuffer()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self) -> FrameBuffer:
        """Draw the screen from the current memory and register contents.

        The chip keeps its own frame between calls; the caller gets an
        independent copy it may hold on to or hand to a display.
        """
        return self._renderer.render(self._frame).copy()

    # ------------------------------------------------------------------
    # Registers and mode
    # ------------------------------------------------------------------

    def write_register(self, register: int, data: int) -> None:
        """Write a register value.

        Raises:
            IndexError: If *register* is not 0..7.
            ConfigurationError: If the write selects an unsupported mode
                combination; the register keeps its old value.
        """
        self._registers.write(register, data)

    def read_register(self, register: int) -> int:
        return self._registers.read(register)

    @property
    def registers(self) -> bytes:
        """Copy of all eight register values."""
        return self._registers.get_snapshot()

    @property
    def video_mode(self) -> VideoMode:
        return self._registers.mode

    def set_video_mode(self, mode: VideoMode) -> None:
        """Select a video mode by rewriting the mode bits of registers 0 and 1.

        Graphics II and Multicolor can be selected, but are not rendered.
        Combined modes (M3 together with M1 or M2) are not supported.
        """
        r1_bits, m3 = _MODE_BITS[VideoMode(mode)]
        r0 = (self._registers[0] & ~R0_M3) | (R0_M3 if m3 else 0)
        r1 = (self._registers[1] & ~(R1_M1 | R1_M2)) | r1_bits

        # Clear the old mode bits before setting new ones so that no
        # intermediate register state selects a combined mode.
        if m3:
            self.write_register(1, r1)
            self.write_register(0, r0)
        else:
            self.write_register(0, r0)
            self.write_register(1, r1)

    @property
    def video_enabled(self) -> bool:
        return self._registers.display_enabled

    def enable_video(self, enable: bool) -> None:
        """Set or clear the blanking bit in register 1.

        The display is disabled after reset because registers 0 and 1 are
        cleared, giving a black screen like a real TMS9918A.
        """
        r1 = self._registers[1]
        if enable:
            r1 |= R1_BLANK
        else:
            r1 &= ~R1_BLANK
        self.write_register(1, r1)

    @property
    def name_table_offset(self) -> int:
        return self._registers.name_table_offset

    @property
    def color_table_offset(self) -> int:
        return self._registers.color_table_offset

    @property
    def pattern_table_offset(self) -> int:
        return self._registers.pattern_table_offset

    # ------------------------------------------------------------------
    # Reset
    # ------------------------------------------------------------------

    def warm_reset(self) -> None:
        """Reset the VDP to its initial state without touching video memory."""
        self.write_register(0, 0)
        self.write_register(1, 0)
        self._ports.reset()
        logger.info("VDP warm reset")

    def cold_reset(self) -> None:
        """Reset the VDP and randomise video memory contents."""
        self.warm_reset()
        self._vram.reset()
        logger.info("VDP cold reset, video memory randomised")

    # ------------------------------------------------------------------
    # Raw memory access
    # ------------------------------------------------------------------

    def write_ram(self, address: int, data: int) -> None:
        """Write one byte of video memory.

        Raises:
            IndexError: If *address* is outside 0..16383.
        """
        self._vram[address] = data

    def read_ram(self, address: int) -> int:
        """Read one byte of video memory.

        Raises:
            IndexError: If *address* is outside 0..16383.
        """
        return self._vram[address]

    def load_ram(self, address: int, data: bytes) -> None:
        """Copy a block of bytes (font, tile set, screen) into video memory."""
        self._vram.load(address, data)

    # ------------------------------------------------------------------
    # Name table
    # ------------------------------------------------------------------

    def set_name_table_multiplier(self, multiplier: int) -> None:
        """Set the name table address multiplier in register 2.

        Name table base address is ``multiplier * 0x0400``; values are
        clamped to 0..15.  Equivalent to writing register 2 directly.
        """
        self.write_register(2, max(0, min(multiplier, NAME_TABLE_MAX_MULTIPLIER)))

    def write_name_table(self, offset: int, data: int) -> None:
        self._write_table(self._registers.name_table_offset, offset, data)

    def read_name_table(self, offset: int) -> int:
        return self._read_table(self._registers.name_table_offset, offset)

    def fill_name_table(
        self, array: Sequence[int], offset: int = 0, length: Optional[int] = None
    ) -> None:
        """Fill name table entries from *array*.

        ``array[i]`` is written to entry ``i`` for ``i`` in
        ``offset .. offset + length``; *length* defaults to the rest of
        the array.  The name table multiplier must be set first.
        """
        for i in self._fill_range(array, offset, length):
            self.write_name_table(i, array[i])

    def clear_name_table(self) -> None:
        """Clear the screen by zeroing the name table.

        Text mode's name table is 960 bytes; all other modes use 768.
        """
        for i in range(VideoMode.name_table_size(self._registers.mode)):
            self.write_name_table(i, 0)

    # ------------------------------------------------------------------
    # Color table
    # ------------------------------------------------------------------

    def set_color_table_multiplier(self, multiplier: int) -> None:
        """Set the color table address multiplier in register 3.

        Color table base address is ``multiplier * 0x0040``.
        """
        self.write_register(3, multiplier)

    def write_color_table(self, offset: int, data: int) -> None:
        self._write_table(self._registers.color_table_offset, offset, data)

    def read_color_table(self, offset: int) -> int:
        return self._read_table(self._registers.color_table_offset, offset)

    def fill_color_table(
        self, array: Sequence[int], offset: int = 0, length: Optional[int] = None
    ) -> None:
        """Fill color table entries from *array*.

        Each entry is a foreground (high nibble) / background (low nibble)
        pair, e.g. ``0x1F`` is black on white.
        """
        for i in self._fill_range(array, offset, length):
            self.write_color_table(i, array[i])

    # ------------------------------------------------------------------
    # Pattern table
    # ------------------------------------------------------------------

    def set_pattern_table_multiplier(self, multiplier: int) -> None:
        """Set the pattern table address multiplier in register 4.

        Pattern table base address is ``multiplier * 0x0800``; values are
        clamped to 0..7.
        """
        self.write_register(4, max(0, min(multiplier, PATTERN_TABLE_MAX_MULTIPLIER)))

    def write_pattern_table(self, offset: int, data: int) -> None:
        self._write_table(self._registers.pattern_table_offset, offset, data)

    def read_pattern_table(self, offset: int) -> int:
        return self._read_table(self._registers.pattern_table_offset, offset)

    def fill_pattern_table(
        self, array: Sequence[int], offset: int = 0, length: Optional[int] = None
    ) -> None:
        """Fill pattern table bytes from *array*.

        Eight consecutive bytes make one tile, so tile ``n`` starts at
        offset ``n * 8``.
        """
        for i in self._fill_range(array, offset, length):
            self.write_pattern_table(i, array[i])

    # ------------------------------------------------------------------
    # Table helpers
    # ------------------------------------------------------------------

    def _write_table(self, base: int, offset: int, data: int) -> None:
        self._vram[(base + offset) & VRAM_MASK] = data

    def _read_table(self, base: int, offset: int) -> int:
        return self._vram[(base + offset) & VRAM_MASK]

    @staticmethod
    def _fill_range(array: Sequence[int], offset: int, length: Optional[int]) -> range:
        if length is None:
            length = len(array) - offset
        if offset < 0 or offset + length > len(array):
            raise IndexError(
                f"fill range {offset}..{offset + length} exceeds source of {len(array)} bytes"
            )
        return range(offset, offset + length)

    # ------------------------------------------------------------------
    # Ports
    # ------------------------------------------------------------------

    def write_control_port(self, data: int) -> None:
        """Write to the control port.

        Expects standard two-byte TMS9918A commands: a data byte followed
        by ``0x80 | register`` to write a register, or an address low byte
        followed by ``0x40 | high`` (write) / ``high`` (read) to set the
        address pointer.
        """
        self._ports.write_control(data)

    def write_data_port(self, data: int) -> None:
        """Write to the data port; the address pointer increments after each write."""
        self._ports.write_data(data)

    def read_data_port(self) -> int:
        """Read from the data port; the address pointer increments after each read."""
        return self._ports.read_data()

    @property
    def address_pointer(self) -> int:
        return self._ports.address_pointer

    # ------------------------------------------------------------------
    # Serialisation support
    # ------------------------------------------------------------------

    def get_snapshot(self) -> dict:
        """Return a serialisable snapshot of the whole chip state."""
        return {
            "vram": self._vram.get_snapshot(),
            "registers": self._registers.get_snapshot(),
            "ports": self._ports.get_snapshot(),
        }

    def restore_snapshot(self, snap: dict) -> None:
        """Restore chip state from a previous :meth:`get_snapshot` result.

        Every part of *snap* is checked before any state changes, so a
        rejected snapshot leaves the chip untouched.

        Raises:
            KeyError: If a section or port field is missing.
            ValueError: If the memory or register image has the wrong size.
            ConfigurationError: If registers 0/1 hold an invalid mode.
        """
        registers, vram, ports = snap["registers"], snap["vram"], snap["ports"]
        self._vram.check_snapshot(vram)
        self._registers.check_snapshot(registers)
        self._ports.check_snapshot(ports)

        self._registers.restore_snapshot(registers)
        self._vram.restore_snapshot(vram)
        self._ports.restore_snapshot(ports)

    # ------------------------------------------------------------------
    # Dunder helpers
    # ------------------------------------------------------------------

    def __repr__(self) -> str:
        return (
            f"TMS9918A("
            f"mode={self._registers.mode.name}, "
            f"video={'on' if self.video_enabled else 'off'}, "
            f"addr=0x{self._ports.address_pointer:04X})"
        )

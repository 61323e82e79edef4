"""
PortProtocol -- the VDP control and data port state machine.

The CPU talks to the VDP through two ports:

* **Control port** (MODE=1).  Commands are two bytes long.  The first
  byte is latched; the second byte selects the operation by its top two
  bits:

      10rrr rrr   write latched byte to register (low 3 bits)
      01aa aaaa   set address pointer for writing (latched = low byte)
      00aa aaaa   set address pointer for reading, pre-fetch read-ahead
      11xx xxxx   undefined, ignored

* **Data port** (MODE=0).  Reads and writes video memory at the address
  pointer, which auto-increments after each access.  Reads return the
  read-ahead latch and refill it from the new address.

Any data port access aborts a half-written control command.  The address
pointer is 14 bits wide and wraps from 0x3FFF to 0x0000.
"""

from __future__ import annotations

import logging

from tms9918a.core.devices import VideoRAM
from tms9918a.core.registers import RegisterFile
from tms9918a.core.vdp_tables import VRAM_MASK

logger = logging.getLogger(__name__)

CMD_MASK = 0xC0
CMD_REGISTER_WRITE = 0x80
CMD_MEMORY_WRITE = 0x40
CMD_MEMORY_READ = 0x00

REGISTER_SELECT_MASK = 0x07
ADDRESS_HIGH_MASK = 0x3F

_SNAPSHOT_KEYS = frozenset(
    ("pending_byte", "awaiting_second_byte", "address_pointer", "read_ahead")
)


class PortProtocol:
    """Control/data port decoder bound to a video memory and register file."""

    def __init__(self, vram: VideoRAM, registers: RegisterFile) -> None:
        self._vram: VideoRAM = vram
        self._registers: RegisterFile = registers

        self._pending_byte: int = 0
        self._awaiting_second_byte: bool = False
        self._address_pointer: int = 0
        self._read_ahead: int = 0

    def reset(self) -> None:
        self._pending_byte = 0
        self._awaiting_second_byte = False
        self._address_pointer = 0
        self._read_ahead = 0

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    @property
    def pending_byte(self) -> int:
        return self._pending_byte

    @property
    def awaiting_second_byte(self) -> bool:
        return self._awaiting_second_byte

    @property
    def address_pointer(self) -> int:
        return self._address_pointer

    @property
    def read_ahead(self) -> int:
        return self._read_ahead

    # ------------------------------------------------------------------
    # Control port
    # ------------------------------------------------------------------

    def write_control(self, data: int) -> None:
        """Handle one byte written to the control port."""
        data &= 0xFF

        if not self._awaiting_second_byte:
            self._pending_byte = data
            self._awaiting_second_byte = True
            return

        # Second byte: the command completes whatever happens below.
        self._awaiting_second_byte = False
        command = data & CMD_MASK

        if command == CMD_REGISTER_WRITE:
            self._registers.write(data & REGISTER_SELECT_MASK, self._pending_byte)

        elif command == CMD_MEMORY_WRITE:
            self._address_pointer = self._latched_address(data)

        elif command == CMD_MEMORY_READ:
            self._address_pointer = self._latched_address(data)
            self._read_ahead = self._vram[self._address_pointer]

        else:
            logger.warning(
                "Ignoring undefined control command 0x%02X 0x%02X",
                self._pending_byte,
                data,
            )

    def _latched_address(self, data: int) -> int:
        return ((data & ADDRESS_HIGH_MASK) << 8) | self._pending_byte

    # ------------------------------------------------------------------
    # Data port
    # ------------------------------------------------------------------

    def write_data(self, data: int) -> None:
        """Write *data* at the address pointer and advance it."""
        self._awaiting_second_byte = False
        self._vram[self._address_pointer] = data & 0xFF
        self._address_pointer = (self._address_pointer + 1) & VRAM_MASK

    def read_data(self) -> int:
        """Return the read-ahead byte, advance, and pre-fetch the next one."""
        self._awaiting_second_byte = False
        data = self._read_ahead
        self._address_pointer = (self._address_pointer + 1) & VRAM_MASK
        self._read_ahead = self._vram[self._address_pointer]
        return data

    # ------------------------------------------------------------------
    # Serialisation support
    # ------------------------------------------------------------------

    def get_snapshot(self) -> dict:
        return {
            "pending_byte": self._pending_byte,
            "awaiting_second_byte": self._awaiting_second_byte,
            "address_pointer": self._address_pointer,
            "read_ahead": self._read_ahead,
        }

    @staticmethod
    def check_snapshot(snap: dict) -> None:
        """Raise KeyError if *snap* lacks any port state field."""
        missing = _SNAPSHOT_KEYS.difference(snap)
        if missing:
            raise KeyError(f"port snapshot is missing {sorted(missing)}")

    def restore_snapshot(self, snap: dict) -> None:
        self.check_snapshot(snap)
        self._pending_byte = snap["pending_byte"] & 0xFF
        self._awaiting_second_byte = bool(snap["awaiting_second_byte"])
        self._address_pointer = snap["address_pointer"] & VRAM_MASK
        self._read_ahead = snap["read_ahead"] & 0xFF

    def __repr__(self) -> str:
        return (
            f"PortProtocol("
            f"addr=0x{self._address_pointer:04X}, "
            f"read_ahead=0x{self._read_ahead:02X}, "
            f"awaiting={self._awaiting_second_byte})"
        )

"""
Memory device abstractions for the TMS9918A emulator.

VideoRAM is the 16 KB video memory attached to the VDP.  Real DRAM holds
garbage at power-on, so the contents are filled with pseudo-random bytes
on construction and on :meth:`VideoRAM.reset`.
"""

from __future__ import annotations

from typing import Iterable, Optional

import numpy as np

from tms9918a.core.vdp_tables import VRAM_SIZE


class VideoRAM:
    """16 KB (16384-byte) video memory.

    Unlike the wrapping RAM chips on a CPU bus, raw accesses here are
    checked: an address outside 0..16383 is a caller error and raises
    :class:`IndexError`.  Address arithmetic that must wrap (the port
    protocol, table accessors, the renderer) masks with ``VRAM_MASK``
    before it gets here.

    Parameters
    ----------
    rng:
        A numpy :class:`~numpy.random.Generator` used for the power-on
        contents.  Takes precedence over *seed*.
    seed:
        Seed for a fresh generator when *rng* is not given.  ``None``
        draws entropy from the OS.
    """

    RAM_SIZE: int = VRAM_SIZE

    def __init__(
        self,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
    ) -> None:
        self._rng: np.random.Generator = (
            rng if rng is not None else np.random.default_rng(seed)
        )
        self._data: np.ndarray = np.zeros(self.RAM_SIZE, dtype=np.uint8)
        self.randomize()

    def reset(self) -> None:
        """Power-cycle the memory, leaving undefined (random) contents."""
        self.randomize()

    def randomize(self) -> None:
        """Fill the whole memory with pseudo-random bytes."""
        self._data[:] = self._rng.integers(
            0, 256, size=self.RAM_SIZE, dtype=np.uint8
        )

    def _check(self, addr: int) -> int:
        if not 0 <= addr < self.RAM_SIZE:
            raise IndexError(
                f"video memory address {addr} out of range [0, {self.RAM_SIZE})"
            )
        return addr

    def __getitem__(self, addr: int) -> int:
        return int(self._data[self._check(addr)])

    def __setitem__(self, addr: int, value: int) -> None:
        self._data[self._check(addr)] = value & 0xFF

    def __len__(self) -> int:
        return self.RAM_SIZE

    def load(self, addr: int, data: Iterable[int]) -> None:
        """Copy *data* verbatim into memory starting at *addr*.

        Raises:
            IndexError: If the block does not fit below the end of memory.
        """
        block = np.frombuffer(bytes(data), dtype=np.uint8)
        self._check(addr)
        end = addr + len(block)
        if end > self.RAM_SIZE:
            raise IndexError(
                f"block of {len(block)} bytes at {addr} overruns video memory"
            )
        self._data[addr:end] = block

    @property
    def array(self) -> np.ndarray:
        """Read-only numpy view of the whole memory, used by the renderer."""
        view = self._data.view()
        view.setflags(write=False)
        return view

    # ------------------------------------------------------------------
    # Serialisation helpers (for save-state support)
    # ------------------------------------------------------------------

    def get_snapshot(self) -> bytes:
        """Return an immutable copy of the memory contents."""
        return self._data.tobytes()

    def check_snapshot(self, data: bytes) -> None:
        """Raise ValueError if *data* is not the expected length."""
        if len(data) != self.RAM_SIZE:
            raise ValueError(
                f"Snapshot size mismatch: expected {self.RAM_SIZE}, got {len(data)}"
            )

    def restore_snapshot(self, data: bytes) -> None:
        """Restore memory contents from a previous snapshot.

        Raises:
            ValueError: If *data* is not the expected length.
        """
        self.check_snapshot(data)
        self._data[:] = np.frombuffer(data, dtype=np.uint8)

    def __repr__(self) -> str:
        return f"VideoRAM(size={self.RAM_SIZE})"

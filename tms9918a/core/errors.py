"""
Exception hierarchy for the TMS9918A emulator.
"""

from __future__ import annotations


class VDPError(Exception):
    """Base class for all errors raised by the emulated VDP."""


class ConfigurationError(VDPError, ValueError):
    """Registers 0 and 1 select a mode bit combination that is not supported.

    Only one of M1 (text), M2 (multicolor) and M3 (bitmap) may be set at a
    time.  The offending bit values are kept on the exception so that the
    host can report them.
    """

    def __init__(self, m1: bool, m2: bool, m3: bool) -> None:
        self.m1: bool = m1
        self.m2: bool = m2
        self.m3: bool = m3
        super().__init__(
            f"unsupported video mode combination: M1: {m1}, M2: {m2}, M3: {m3}"
        )

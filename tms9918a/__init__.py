# TMS9918A VDP emulator
"""
Texas Instruments TMS9918A Video Display Processor emulator.

Use :class:`TMS9918A <core.vdp.TMS9918A>` to create a chip, drive it
through its ports or accessors, and call ``render()`` for a frame.
"""

from tms9918a.core.errors import ConfigurationError, VDPError
from tms9918a.core.frame_buffer import FrameBuffer
from tms9918a.core.types import VideoMode
from tms9918a.core.vdp import TMS9918A

__all__ = [
    "ConfigurationError",
    "FrameBuffer",
    "TMS9918A",
    "VDPError",
    "VideoMode",
]

__version__ = "1.0.0"

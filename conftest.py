"""Shared fixtures for the TMS9918A tests."""

import os

# pygame must not try to open a real display while testing.
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pytest

from tms9918a.core.vdp import TMS9918A


@pytest.fixture
def make_vdp():
    """Factory fixture: returns a function that creates a seeded VDP."""
    def _make(seed: int = 1234) -> TMS9918A:
        return TMS9918A(seed=seed)
    return _make


@pytest.fixture
def vdp(make_vdp) -> TMS9918A:
    return make_vdp()

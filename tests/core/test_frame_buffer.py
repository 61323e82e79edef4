"""Tests for the frame buffer."""

import pytest

from tms9918a.core.frame_buffer import FrameBuffer


class TestFrameBuffer:
    def test_default_size(self) -> None:
        frame = FrameBuffer()
        assert (frame.width, frame.height) == (256, 196)
        assert frame.pixels.shape == (196, 256)

    def test_starts_black(self) -> None:
        assert not FrameBuffer().pixels.any()

    def test_active_view_follows_width(self) -> None:
        frame = FrameBuffer(240, 196)
        assert frame.active.shape == (196, 240)
        assert frame.pixels.shape == (196, 256)

    @pytest.mark.parametrize("width, height", [(0, 196), (257, 196), (256, 0), (256, 197)])
    def test_invalid_size(self, width: int, height: int) -> None:
        with pytest.raises(ValueError):
            FrameBuffer(width, height)

    def test_write_read_pixel(self) -> None:
        frame = FrameBuffer()
        frame.write_pixel(10, 20, 0xFF7978)
        assert frame.read_pixel(10, 20) == 0xFF7978
        assert frame.pixels[10, 20] == 0xFF7978

    def test_fill_and_clear(self) -> None:
        frame = FrameBuffer()
        frame.fill(0x21C942)
        assert (frame.pixels == 0x21C942).all()
        frame.clear()
        assert not frame.pixels.any()

    def test_copy_is_independent(self) -> None:
        frame = FrameBuffer(240, 196)
        frame.write_pixel(0, 0, 0x123456)
        other = frame.copy()
        assert other == frame
        other.write_pixel(0, 0, 0)
        assert frame.read_pixel(0, 0) == 0x123456
        assert other != frame

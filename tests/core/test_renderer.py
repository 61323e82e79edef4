"""Tests for Graphics I / Text rendering."""

import numpy as np
import pytest

from tms9918a.core.types import VideoMode
from tms9918a.core.vdp import TMS9918A
from tms9918a.core.vdp_tables import PALETTE

# 5x7 'A' in the top five bits of each row, as in a 6-pixel-wide text font.
GLYPH_A = [0x20, 0x50, 0x88, 0x88, 0xF8, 0x88, 0x88, 0x00]


def _font_with_a() -> bytearray:
    font = bytearray(256 * 8)
    base = ord("A") * 8
    font[base:base + 8] = bytes(GLYPH_A)
    return font


def _text_screen(vdp: TMS9918A, color: int) -> None:
    vdp.set_name_table_multiplier(0)
    vdp.set_pattern_table_multiplier(1)
    vdp.set_video_mode(VideoMode.Text)
    vdp.write_register(7, color)
    vdp.fill_pattern_table(_font_with_a())
    vdp.clear_name_table()
    vdp.write_name_table(0, ord("A"))
    vdp.enable_video(True)


def _graphics1_screen(vdp: TMS9918A) -> None:
    """Tile (1, 2) shows pattern 9 in white on dark red, all else blue."""
    vdp.set_video_mode(VideoMode.Graphics1)
    vdp.set_name_table_multiplier(0)
    vdp.set_color_table_multiplier(0x80)
    vdp.set_pattern_table_multiplier(1)

    vdp.fill_name_table(bytes(768))
    vdp.write_name_table(2 * 32 + 1, 9)

    patterns = bytearray(256 * 8)
    patterns[9 * 8:9 * 8 + 8] = bytes([0x81, 0x40, 0x20, 0x10, 0x08, 0x04, 0x02, 0xFF])
    vdp.fill_pattern_table(patterns)

    colors = bytearray([0x14] * 32)
    colors[1] = 0xF6
    vdp.fill_color_table(colors)
    vdp.enable_video(True)


class TestTextMode:
    def test_glyph_in_top_left_cell(self, vdp: TMS9918A) -> None:
        _text_screen(vdp, 0x91)
        frame = vdp.render()
        assert frame.width == 240
        for y, row in enumerate(GLYPH_A):
            for x in range(6):
                lit = row & (1 << (7 - x))
                expected = PALETTE[9] if lit else PALETTE[1]
                assert frame.read_pixel(y, x) == expected, (y, x)

    def test_other_cells_show_background(self, vdp: TMS9918A) -> None:
        _text_screen(vdp, 0x9F)
        frame = vdp.render()
        active = frame.pixels[:192, :240].copy()
        active[:8, :6] = PALETTE[15]
        assert (active == PALETTE[15]).all()

    def test_unused_columns_and_rows_stay_cleared(self, vdp: TMS9918A) -> None:
        _text_screen(vdp, 0x9F)
        frame = vdp.render()
        assert not frame.pixels[:, 240:].any()
        assert not frame.pixels[192:, :].any()

    def test_low_two_bits_not_displayed(self, vdp: TMS9918A) -> None:
        _text_screen(vdp, 0xF4)
        vdp.fill_pattern_table(bytes([0x03, 0x04, 0x80, 0, 0, 0, 0, 0]))
        vdp.write_name_table(0, 0)
        frame = vdp.render()
        fg, bg = PALETTE[15], PALETTE[4]
        assert [frame.read_pixel(0, x) for x in range(6)] == [bg] * 6
        assert [frame.read_pixel(1, x) for x in range(6)] == [bg] * 5 + [fg]
        assert [frame.read_pixel(2, x) for x in range(6)] == [fg] + [bg] * 5

    def test_cell_layout_uses_forty_columns(self, vdp: TMS9918A) -> None:
        _text_screen(vdp, 0xF4)
        vdp.write_name_table(0, 0)
        vdp.write_name_table(41, ord("A"))  # row 1, column 1
        frame = vdp.render()
        # Row 4 of the glyph is solid across the top five pixels.
        assert [frame.read_pixel(8 + 4, 6 + x) for x in range(6)] == (
            [PALETTE[15]] * 5 + [PALETTE[4]]
        )


class TestGraphics1Mode:
    def test_background_tiles_use_colour_group_zero(self, vdp: TMS9918A) -> None:
        _graphics1_screen(vdp)
        frame = vdp.render()
        assert frame.width == 256
        assert (frame.pixels[:8, :8] == PALETTE[4]).all()

    def test_pattern_bit_order(self, vdp: TMS9918A) -> None:
        _graphics1_screen(vdp)
        frame = vdp.render()
        top, left = 2 * 8, 1 * 8
        fg, bg = PALETTE[15], PALETTE[6]
        tile = frame.pixels[top:top + 8, left:left + 8]
        assert list(tile[0]) == [fg] + [bg] * 6 + [fg]
        assert list(tile[1]) == [bg, fg] + [bg] * 6
        assert list(tile[6]) == [bg] * 6 + [fg, bg]
        assert list(tile[7]) == [fg] * 8

    def test_colour_group_is_shared_by_eight_codes(self, vdp: TMS9918A) -> None:
        _graphics1_screen(vdp)
        vdp.write_name_table(0, 15)  # same group as 9, empty pattern
        vdp.write_name_table(1, 16)  # group 2
        frame = vdp.render()
        assert (frame.pixels[:8, :8] == PALETTE[6]).all()
        assert (frame.pixels[:8, 8:16] == PALETTE[4]).all()

    def test_bottom_rows_stay_cleared(self, vdp: TMS9918A) -> None:
        _graphics1_screen(vdp)
        frame = vdp.render()
        assert not frame.pixels[192:, :].any()

    def test_matches_reference_loop(self, make_vdp) -> None:
        vdp = make_vdp(seed=99)
        vdp.write_register(3, 0x2C)
        vdp.write_register(4, 0x03)
        vdp.enable_video(True)
        frame = vdp.render()

        expected = np.zeros((192, 256), dtype=np.uint32)
        for ty in range(24):
            for tx in range(32):
                name = vdp.read_ram(vdp.name_table_offset + ty * 32 + tx)
                color = vdp.read_ram(vdp.color_table_offset + name // 8)
                for r in range(8):
                    pattern = vdp.read_ram(vdp.pattern_table_offset + name * 8 + r)
                    for b in range(8):
                        pixel = PALETTE[color >> 4] if pattern & (1 << b) else PALETTE[color & 0x0F]
                        expected[ty * 8 + r, tx * 8 + 7 - b] = pixel
        assert np.array_equal(frame.pixels[:192], expected)


class TestRenderPipeline:
    def test_disabled_display_is_black(self, vdp: TMS9918A) -> None:
        _graphics1_screen(vdp)
        vdp.enable_video(False)
        frame = vdp.render()
        assert frame.width == 256
        assert (frame.pixels == PALETTE[1]).all()

    def test_disabled_text_mode_is_black_and_full_width(self, vdp: TMS9918A) -> None:
        _text_screen(vdp, 0xFF)
        vdp.enable_video(False)
        frame = vdp.render()
        assert frame.width == 256
        assert not frame.pixels.any()

    def test_render_is_idempotent(self, vdp: TMS9918A) -> None:
        vdp.enable_video(True)
        assert vdp.render() == vdp.render()

    def test_render_returns_a_copy(self, vdp: TMS9918A) -> None:
        vdp.enable_video(True)
        first = vdp.render()
        first.fill(0x123456)
        assert vdp.render() != first

    def test_mode_change_clears_frame(self, vdp: TMS9918A) -> None:
        vdp.write_register(7, 0xFF)
        vdp.enable_video(True)
        vdp.render()
        vdp.set_video_mode(VideoMode.Text)
        frame = vdp.render()
        assert not frame.pixels[:, 240:].any()
        assert not frame.pixels[192:, :].any()

    def test_text_mode_never_draws_past_column_240(self, vdp: TMS9918A) -> None:
        vdp.set_pattern_table_multiplier(1)
        vdp.fill_pattern_table(bytes([0xFF] * 2048))
        vdp.fill_color_table(bytes([0xFF] * 32))
        vdp.enable_video(True)
        vdp.render()
        vdp.write_register(1, 0x50)  # Text, mode_changed -> cleared
        vdp.render()
        vdp.write_register(7, 0x11)  # no mode change
        frame = vdp.render()
        assert not frame.pixels[:, 240:].any()

    @pytest.mark.parametrize("mode", [VideoMode.Graphics2, VideoMode.Multicolor])
    def test_unsupported_modes_show_backdrop(self, vdp: TMS9918A, mode: VideoMode) -> None:
        vdp.set_video_mode(mode)
        vdp.write_register(7, 0x05)
        vdp.enable_video(True)
        frame = vdp.render()
        assert frame.width == 256
        assert (frame.pixels[:192] == PALETTE[5]).all()
        assert not frame.pixels[192:].any()

    def test_table_addresses_wrap(self, vdp: TMS9918A) -> None:
        vdp.write_register(2, 0xFF)
        vdp.write_register(3, 0xFF)
        vdp.write_register(4, 0xFF)
        vdp.enable_video(True)
        frame = vdp.render()
        assert frame.width == 256

    def test_wrapped_name_table_reads_low_memory(self, vdp: TMS9918A) -> None:
        vdp.write_register(2, 0x10)  # 0x4000 wraps to 0x0000
        vdp.set_pattern_table_multiplier(1)
        vdp.set_color_table_multiplier(0x80)
        vdp.fill_pattern_table(bytes(2048))
        vdp.fill_color_table(bytes([0x0D] * 32))
        vdp.enable_video(True)
        frame = vdp.render()
        assert (frame.pixels[:192] == PALETTE[13]).all()

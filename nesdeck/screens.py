"""Composition of the four display buffers into one double-size frame."""

from __future__ import annotations

from typing import Protocol

from nesdeck.display import BYTES_PER_PIXEL, DISPLAY_HEIGHT, DISPLAY_WIDTH

ROW_SIZE = DISPLAY_WIDTH * BYTES_PER_PIXEL
DUAL_WIDTH = DISPLAY_WIDTH * 2
DUAL_HEIGHT = DISPLAY_HEIGHT * 2
DUAL_SCREEN_SIZE = DUAL_WIDTH * DUAL_HEIGHT * BYTES_PER_PIXEL


class _Screens(Protocol):
    def screen(self, buf_num: int) -> bytes: ...


def _rows(buffer: bytes) -> list[bytes]:
    if len(buffer) < ROW_SIZE * DISPLAY_HEIGHT:
        raise ValueError("Screen buffer is too small")
    return [buffer[y * ROW_SIZE:(y + 1) * ROW_SIZE] for y in range(DISPLAY_HEIGHT)]


def compose_dual_screen(display: _Screens) -> bytes:
    """Lay the four screens out as a 2x2 grid of packed RGB rows.

    Screens 0 and 1 (game and pattern tables) form the top half, screens
    2 and 3 (the two nametables) the bottom half.
    """
    out = bytearray()
    for left_num, right_num in ((0, 1), (2, 3)):
        left = _rows(display.screen(left_num))
        right = _rows(display.screen(right_num))
        for left_row, right_row in zip(left, right):
            out += left_row
            out += right_row
    return bytes(out)
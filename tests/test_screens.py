import pytest

from nesdeck.display import (
    BYTES_PER_PIXEL,
    DISPLAY_HEIGHT,
    DISPLAY_WIDTH,
    NESDisplay,
    PPUState,
    SCREEN_BUFFER_SIZE,
)
from nesdeck.screens import DUAL_SCREEN_SIZE, ROW_SIZE, compose_dual_screen


class FilledScreens:
    """Four screens, each filled with its own byte value."""

    def __init__(self, values=(10, 20, 30, 40)):
        self.values = values

    def screen(self, buf_num):
        return bytes([self.values[buf_num]]) * SCREEN_BUFFER_SIZE


class RowScreens:
    """Screens whose every row is filled with a byte naming screen and row."""

    def screen(self, buf_num):
        return b"".join(
            bytes([(buf_num * 64 + y) % 256]) * ROW_SIZE for y in range(DISPLAY_HEIGHT)
        )


class ShortScreens:
    def screen(self, buf_num):
        return bytes(10)


def _pixel(frame, x, y):
    start = (y * DISPLAY_WIDTH * 2 + x) * BYTES_PER_PIXEL
    return frame[start:start + BYTES_PER_PIXEL]


def test_frame_size():
    frame = compose_dual_screen(FilledScreens())
    assert len(frame) == DUAL_SCREEN_SIZE
    assert len(frame) == DISPLAY_WIDTH * 2 * DISPLAY_HEIGHT * 2 * BYTES_PER_PIXEL


@pytest.mark.parametrize(
    "x, y, expected",
    [
        (0, 0, 10),
        (DISPLAY_WIDTH - 1, DISPLAY_HEIGHT - 1, 10),
        (DISPLAY_WIDTH, 0, 20),
        (DISPLAY_WIDTH * 2 - 1, DISPLAY_HEIGHT - 1, 20),
        (0, DISPLAY_HEIGHT, 30),
        (DISPLAY_WIDTH - 1, DISPLAY_HEIGHT * 2 - 1, 30),
        (DISPLAY_WIDTH, DISPLAY_HEIGHT, 40),
        (DISPLAY_WIDTH * 2 - 1, DISPLAY_HEIGHT * 2 - 1, 40),
    ],
)
def test_quadrants(x, y, expected):
    frame = compose_dual_screen(FilledScreens())
    assert _pixel(frame, x, y) == bytes([expected]) * BYTES_PER_PIXEL


def test_rows_keep_their_order():
    screens = RowScreens()
    frame = compose_dual_screen(screens)
    for y in (0, 1, 100, DISPLAY_HEIGHT - 1):
        for buf_num, (x, base_y) in enumerate(
            [(0, 0), (DISPLAY_WIDTH, 0), (0, DISPLAY_HEIGHT), (DISPLAY_WIDTH, DISPLAY_HEIGHT)]
        ):
            source_row = screens.screen(buf_num)[y * ROW_SIZE:(y + 1) * ROW_SIZE]
            start = ((base_y + y) * DISPLAY_WIDTH * 2 + x) * BYTES_PER_PIXEL
            assert frame[start:start + ROW_SIZE] == source_row


def test_real_display_matches_its_screens():
    ppu = PPUState()
    ppu.palette_ram[0] = 5
    palette = [(i, i + 1, i + 2) for i in range(64)]
    display = NESDisplay(ppu, palette)
    display.draw_screen()
    frame = compose_dual_screen(display)

    assert len(frame) == DUAL_SCREEN_SIZE
    for buf_num, (x, base_y) in enumerate(
        [(0, 0), (DISPLAY_WIDTH, 0), (0, DISPLAY_HEIGHT), (DISPLAY_WIDTH, DISPLAY_HEIGHT)]
    ):
        screen = display.screen(buf_num)
        for y in (0, 57, DISPLAY_HEIGHT - 1):
            start = ((base_y + y) * DISPLAY_WIDTH * 2 + x) * BYTES_PER_PIXEL
            assert frame[start:start + ROW_SIZE] == screen[y * ROW_SIZE:(y + 1) * ROW_SIZE]
    assert _pixel(frame, 10, 10) == bytes(palette[5])


def test_short_screen_rejected():
    with pytest.raises(ValueError):
        compose_dual_screen(ShortScreens())
"""Rendering of NES background, sprites and debug views into RGB buffers."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

logger = logging.getLogger(__name__)

DISPLAY_WIDTH = 256
DISPLAY_HEIGHT = 240
BYTES_PER_PIXEL = 3
SCREEN_BUFFER_SIZE = DISPLAY_WIDTH * DISPLAY_HEIGHT * BYTES_PER_PIXEL
SCREEN_COUNT = 4

TILE_SIZE = 16
SPRITE_SIZE = 4
ATTRIBUTE_TABLE_BEGIN = 0x3C0
SPRITE_PALETTE_OFFSET = 0x10

# OAM attribute bits of a sprite.
OAM_PALETTE = 0x03
OAM_PRIORITY = 0x20
OAM_FLIP_HORIZONTALLY = 0x40
OAM_FLIP_VERTICALLY = 0x80

RGB = tuple[int, int, int]
Point = tuple[int, int]

_RED: RGB = (255, 0, 0)
_BLACK: RGB = (0, 0, 0)


def _default_nametables() -> list[bytearray]:
    return [bytearray(1024), bytearray(1024)]


@dataclass
class PPUState:
    """The parts of the picture processing unit the display reads."""

    chr_rom: bytes | bytearray = field(default_factory=lambda: bytes(0x2000))
    nametable_ram: list[bytearray] = field(default_factory=_default_nametables)
    palette_ram: bytearray = field(default_factory=lambda: bytearray(32))
    oam: bytearray = field(default_factory=lambda: bytearray(256))
    nametable_index: int = 0
    scroll_x: int = 0
    scroll_y: int = 0
    background_pattern_addr: int = 0
    sprite_pattern_addr: int = 0


class NESDisplay:
    """Draws the PPU state into four screen buffers.

    Buffer 0 is the game picture, buffer 1 shows the pattern tables and
    buffers 2 and 3 show the two nametables with the scroll boundary.
    """

    def __init__(self, ppu: PPUState, palette: Sequence[RGB]) -> None:
        self._ppu = ppu
        self._palette = palette
        self._buffers = [bytearray(SCREEN_BUFFER_SIZE) for _ in range(SCREEN_COUNT)]

    def screen(self, buf_num: int) -> bytes:
        """A copy of one screen buffer as packed RGB rows."""
        if not 0 <= buf_num < SCREEN_COUNT:
            raise IndexError(f"no screen buffer {buf_num}")
        return bytes(self._buffers[buf_num])

    def draw_screen(self) -> None:
        """Redraw every buffer from the current PPU state."""
        ppu = self._ppu
        use_first = not ppu.nametable_index
        primary = ppu.nametable_ram[0 if use_first else 1]
        secondary = ppu.nametable_ram[1 if use_first else 0]
        sx, sy = ppu.scroll_x, ppu.scroll_y

        self._draw_nametable(primary, 0, (sx, sy), (DISPLAY_WIDTH, DISPLAY_HEIGHT), (-sx, -sy))
        if sx:
            self._draw_nametable(
                secondary, 0, (0, 0), (sx, DISPLAY_HEIGHT), (DISPLAY_WIDTH - sx, 0)
            )
        elif sy:
            self._draw_nametable(
                secondary, 0, (0, 0), (DISPLAY_WIDTH, sy), (0, DISPLAY_HEIGHT - sy)
            )

        self.draw_tiles(ppu.chr_rom, 0, 1, (0, 64), 16)
        self.draw_tiles(ppu.chr_rom, 1, 1, (128, 64), 16)
        self._draw_nametable(primary, 2)
        self._draw_nametable(secondary, 3)

        for y in range(DISPLAY_HEIGHT):
            if sx > 0:
                self._set_pixel(_RED, (sx - 1, y), _BLACK, False, 2)
            if sx < 255:
                self._set_pixel(_RED, (sx, y), _BLACK, False, 3)
        for x in range(DISPLAY_WIDTH):
            buf = 2 if sx <= x else 3
            self._set_pixel(_RED, (x, DISPLAY_HEIGHT - 1), _BLACK, False, buf)
            self._set_pixel(_RED, (x, 0), _BLACK, False, buf)

        self._draw_sprites()

    def draw_tiles(
        self,
        chr_rom: bytes | bytearray,
        bank: int,
        buf_num: int = 0,
        start: Point = (0, 0),
        line_length: int = 16,
    ) -> None:
        """Draw the 256 tiles of a pattern table bank, line_length per row."""
        if bank > 2:
            raise ValueError("Invalid bank!")
        nametable = self._ppu.nametable_ram[0]
        tiles_start = bank * 0x1000
        x, y = start
        for tile_no in range(256):
            offset = tiles_start + tile_no * TILE_SIZE
            if tile_no and tile_no % line_length == 0:
                y += 8
                x = start[0]
            if offset + TILE_SIZE > len(chr_rom):
                raise IndexError("Tile lies outside of CHR ROM")
            tile = chr_rom[offset:offset + TILE_SIZE]
            palette = self._bg_tile_palette(nametable, (tile_no % 32, tile_no // 32))
            self._draw_tile(tile, (x, y), palette, buf_num)
            x += 8

    def _set_pixel(
        self, colour: RGB, pos: Point, transparent: RGB, behind_bg: bool, buf_num: int = 0
    ) -> bool:
        start = pos[0] * BYTES_PER_PIXEL + pos[1] * BYTES_PER_PIXEL * DISPLAY_WIDTH
        if start < 0 or start + BYTES_PER_PIXEL > SCREEN_BUFFER_SIZE:
            return False
        if buf_num >= SCREEN_COUNT:
            buf_num = 0
        buf = self._buffers[buf_num]
        if behind_bg and tuple(buf[start:start + BYTES_PER_PIXEL]) != tuple(transparent):
            return False
        buf[start:start + BYTES_PER_PIXEL] = bytes(colour)
        return True

    def _draw_tile(
        self,
        tile: bytes | bytearray,
        tile_pos: Point,
        palette_indexes: Sequence[int],
        buf_num: int = 0,
        start: Point = (0, 0),
        end: Point = (DISPLAY_WIDTH, DISPLAY_HEIGHT),
        shift: Point = (0, 0),
        is_sprite: bool = False,
        flip_y: bool = False,
        flip_x: bool = False,
        behind_bg: bool = False,
    ) -> None:
        colours = [self._palette[index] for index in palette_indexes]
        transparent = colours[0]
        for row in range(8):
            left, right = tile[row], tile[8 + row]
            for bit in range(8):
                nibble = (((right >> bit) & 1) << 1) | ((left >> bit) & 1)
                if is_sprite and not nibble:
                    continue
                px = tile_pos[0] + (bit if flip_x else 7 - bit)
                py = tile_pos[1] + (7 - row if flip_y else row)
                if px < start[0] or py < start[1] or px >= end[0] or py >= end[1]:
                    continue
                tx, ty = px + shift[0], py + shift[1]
                if tx < 0 or ty < 0 or tx > DISPLAY_WIDTH or ty > DISPLAY_HEIGHT:
                    continue
                self._set_pixel(colours[nibble], (tx, ty), transparent, behind_bg, buf_num)

    def _bg_tile_palette(self, nametable: Sequence[int], tile_no: Point) -> list[int]:
        tx, ty = tile_no
        palette_byte = nametable[ATTRIBUTE_TABLE_BEGIN + tx // 4 + (ty // 4) * 8]
        block = (((ty % 4) // 2) << 1) | ((tx % 4) // 2)
        palette_index = (palette_byte >> (2 * block)) & 0b11
        ram = self._ppu.palette_ram
        base = palette_index * 4
        return [ram[0]] + [ram[base + i] for i in range(1, 4)]

    def _sprite_tile_palette(self, palette_index: int) -> list[int]:
        ram = self._ppu.palette_ram
        base = SPRITE_PALETTE_OFFSET + palette_index * 4
        return [ram[0]] + [ram[base + i] for i in range(1, 4)]

    def _draw_nametable(
        self,
        nametable: Sequence[int],
        buf_num: int = 0,
        start: Point = (0, 0),
        end: Point = (DISPLAY_WIDTH, DISPLAY_HEIGHT),
        shift: Point = (0, 0),
    ) -> None:
        bank = self._ppu.background_pattern_addr
        chr_rom = self._ppu.chr_rom
        for tile_no in range(32 * 30):
            tx, ty = tile_no % 32, tile_no // 32
            if tx * 8 > end[0] or (tx + 1) * 8 < start[0] or ty * 8 > end[1] or (ty + 1) * 8 < start[1]:
                continue
            if tile_no >= len(nametable):
                logger.warning("Attempted to access tile outside of nametable!")
                break
            index = bank + nametable[tile_no] * TILE_SIZE
            if index + TILE_SIZE > len(chr_rom):
                logger.warning("Attempted to access nametable tile outside of CHR_ROM!")
                continue
            tile = chr_rom[index:index + TILE_SIZE]
            palette = self._bg_tile_palette(nametable, (tx, ty))
            self._draw_tile(tile, (tx * 8, ty * 8), palette, buf_num, start, end, shift)

    def _draw_sprites(self) -> None:
        bank = self._ppu.sprite_pattern_addr
        chr_rom = self._ppu.chr_rom
        oam = self._ppu.oam
        # Lower OAM entries are drawn last so that they end up in front.
        for offset in range(len(oam) - SPRITE_SIZE, -1, -SPRITE_SIZE):
            y, tile_index, props, x = oam[offset:offset + SPRITE_SIZE]
            index = bank + tile_index * TILE_SIZE
            if index + TILE_SIZE > len(chr_rom):
                logger.warning("Attempted to access sprite tile outside of CHR_ROM!")
                continue
            tile = chr_rom[index:index + TILE_SIZE]
            palette = self._sprite_tile_palette(props & OAM_PALETTE)
            # Sprite data is delayed by one scanline.
            self._draw_tile(
                tile,
                (x, y + 1),
                palette,
                0,
                (0, 0),
                (DISPLAY_WIDTH, DISPLAY_HEIGHT),
                (0, 0),
                True,
                bool(props & OAM_FLIP_VERTICALLY),
                bool(props & OAM_FLIP_HORIZONTALLY),
                bool(props & OAM_PRIORITY),
            )
"""Game Genie code decoding and encoding for the NES."""

from __future__ import annotations

from dataclasses import dataclass, field

# In the Game Genie alphabet each letter stands for one nibble.
HEX_TABLE: dict[str, int] = {
    "A": 0x0, "P": 0x1, "Z": 0x2, "L": 0x3, "G": 0x4, "I": 0x5, "T": 0x6, "Y": 0x7,
    "E": 0x8, "O": 0x9, "X": 0xA, "U": 0xB, "K": 0xC, "S": 0xD, "V": 0xE, "N": 0xF,
}
_LETTERS: dict[int, str] = {value: letter for letter, value in HEX_TABLE.items()}

# For each encoded bit (counted from the left), the position (counted from the
# left) it takes in the decoded bit string; -1 marks the spare address bit.
_POSITION_MAP_6 = (
    0, 5, 6, 7, 16, 1, 2, 3, -1, 17, 18, 19, 20, 9, 10, 11, 12,
    21, 22, 23, 4, 13, 14, 15,
)
_POSITION_MAP_8 = (
    0, 5, 6, 7, 16, 1, 2, 3, -1, 17, 18, 19, 20, 9, 10, 11, 12,
    21, 22, 23, 28, 13, 14, 15, 24, 29, 30, 31, 4, 25, 26, 27,
)


@dataclass(frozen=True)
class DecodedCode:
    """The memory patch a Game Genie code describes."""

    addr: int = 0
    val: int = 0
    compare: int | None = None


@dataclass
class GameGenieCode:
    """A cheat made of one or more codes, with its decoded patches."""

    code: list[str]
    description: str = ""
    is_active: bool = False
    decoded: list[DecodedCode] = field(init=False)

    def __post_init__(self) -> None:
        self.decoded = [decode(c) for c in self.code]


def _letters_to_int(code: str) -> int:
    if not code:
        raise ValueError("String length must be greater than 0!")
    value = 0
    for char in code:
        try:
            nibble = HEX_TABLE[char]
        except KeyError:
            raise ValueError("Not a valid Game Genie code!") from None
        value = (value << 4) | nibble
    return value


def _int_to_letters(value: int, num_bits: int) -> str:
    if num_bits == 0 or num_bits % 4:
        raise ValueError("Bit length must be a multiple of 4!")
    return "".join(
        _LETTERS[(value >> shift) & 0xF] for shift in range(num_bits - 4, -1, -4)
    )


def _position_map(num_bits: int) -> tuple[int, ...] | None:
    return {24: _POSITION_MAP_6, 32: _POSITION_MAP_8}.get(num_bits)


def decode(code: str) -> DecodedCode:
    """Decode a 6 or 8 letter code; other lengths give an empty DecodedCode."""
    num_bits = len(code) * 4
    position_map = _position_map(num_bits)
    if position_map is None:
        return DecodedCode()

    encoded = _letters_to_int(code.upper())
    decoded = 0
    for source, target in enumerate(position_map):
        if target == -1:
            continue
        if (encoded >> (num_bits - 1 - source)) & 1:
            decoded |= 1 << (num_bits - 1 - target)

    val = (decoded >> (num_bits - 8)) & 0xFF
    addr = (decoded >> (num_bits - 24)) & 0x7FFF
    compare = decoded & 0xFF if num_bits == 32 else None
    return DecodedCode(addr=addr, val=val, compare=compare)


def encode(decoded: DecodedCode) -> str:
    """Encode a patch as a code: 8 letters with a compare value, else 6."""
    has_compare = decoded.compare is not None
    num_bits = 32 if has_compare else 24
    position_map = _position_map(num_bits)

    plain = ((decoded.val & 0xFF) << (num_bits - 8)) | (
        (decoded.addr & 0x7FFF) << (num_bits - 24)
    )
    if has_compare:
        plain |= decoded.compare & 0xFF

    encoded = 0
    for source, target in enumerate(position_map):
        if target == -1:
            # The spare address bit; official codes set it when a compare is present.
            bit = 1 if has_compare else 0
        else:
            bit = (plain >> (num_bits - 1 - target)) & 1
        encoded |= bit << (num_bits - 1 - source)

    return _int_to_letters(encoded, num_bits)


def extract_codes(codes: str, delimiter: str) -> list[str]:
    """Split a delimited list of codes, trimming spaces and tabs and dropping blanks."""
    return [token.strip(" \t") for token in codes.split(delimiter) if token.strip(" \t")]


def concatenate_codes(codes: list[str], delimiter: str) -> str:
    """Join codes with the delimiter between them."""
    return delimiter.join(codes)


def is_valid_char(char: str) -> bool:
    """Whether a single character belongs to the Game Genie alphabet."""
    return len(char) == 1 and char.upper() in HEX_TABLE


def encode_fields(address: str, value: str, compare: str) -> str | None:
    """Encode hexadecimal field strings; None when address or value is empty."""
    if not address or not value:
        return None
    patch = DecodedCode(
        addr=int(address, 16) & 0xFFFF,
        val=int(value, 16) & 0xFF,
        compare=int(compare, 16) & 0xFF if compare else None,
    )
    return encode(patch)


def decode_fields(code: str) -> tuple[str, str, str] | None:
    """Decode a code into upper-case hex strings (address, value, compare).

    The compare string is empty for 6 letter codes. Returns None unless the
    code has 6 or 8 letters.
    """
    if len(code) not in (6, 8):
        return None
    patch = decode(code)
    compare = f"{patch.compare:X}" if patch.compare is not None else ""
    return f"{patch.addr:X}", f"{patch.val:X}", compare
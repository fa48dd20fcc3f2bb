"""Reading and writing INI files with case-insensitive, order-preserving keys.

Sections and keys are trimmed and lower-cased (ASCII only). Comments are
lines starting with a semicolon; trailing comments are allowed on section
lines. :meth:`IniFile.write` updates an existing file in place, keeping its
comments and formatting. :meth:`IniFile.generate` overwrites it.
"""

from __future__ import annotations

import os
import string
from enum import Enum
from pathlib import Path
from typing import Callable, Generic, Iterator, NamedTuple, TypeVar

_WHITESPACE = " \t\n\r\f\v"
_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)
_EOL = "\r\n" if os.name == "nt" else "\n"
_BOM = b"\xef\xbb\xbf"
_ENCODING = "utf-8"
_ERRORS = "surrogateescape"

V = TypeVar("V")


def _trim(text: str) -> str:
    return text.strip(_WHITESPACE)


def _normalize(key: str) -> str:
    return _trim(key).translate(_LOWER)


def _escape_key(key: str) -> str:
    return key.replace("=", "\\=")


class LineKind(Enum):
    """What a single line of an INI file holds."""

    NONE = "none"
    COMMENT = "comment"
    SECTION = "section"
    KEYVALUE = "keyvalue"
    UNKNOWN = "unknown"


class ParsedLine(NamedTuple):
    kind: LineKind
    key: str = ""
    value: str = ""


def parse_line(line: str) -> ParsedLine:
    """Classify a line; a section name or key/value pair comes with it."""
    line = _trim(line)
    if not line:
        return ParsedLine(LineKind.NONE)
    if line[0] == ";":
        return ParsedLine(LineKind.COMMENT)
    if line[0] == "[":
        comment_at = line.find(";")
        if comment_at != -1:
            line = line[:comment_at]
        closing_at = line.rfind("]")
        if closing_at != -1:
            return ParsedLine(LineKind.SECTION, _trim(line[1:closing_at]))
    equals_at = line.replace("\\=", "  ").find("=")
    if equals_at != -1:
        key = _trim(line[:equals_at]).replace("\\=", "=")
        value = _trim(line[equals_at + 1:])
        return ParsedLine(LineKind.KEYVALUE, key, value)
    return ParsedLine(LineKind.UNKNOWN)


class IniMap(Generic[V]):
    """An insertion-ordered mapping whose keys are trimmed and lower-cased.

    Looking up a missing key with ``[]`` inserts an empty value, so nested
    assignments such as ``ini["section"]["key"] = "value"`` just work.
    """

    def __init__(self, factory: Callable[[], V]) -> None:
        self._factory = factory
        self._data: dict[str, V] = {}

    def __getitem__(self, key: str) -> V:
        norm = _normalize(key)
        if norm not in self._data:
            self._data[norm] = self._factory()
        return self._data[norm]

    def __setitem__(self, key: str, value: V) -> None:
        self._data[_normalize(key)] = value

    def __delitem__(self, key: str) -> None:
        """Remove key; the order of the remaining keys is kept."""
        norm = _normalize(key)
        if norm not in self._data:
            raise KeyError(key)
        self._data.pop(norm)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and _normalize(key) in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def get(self, key: str, default: V | None = None) -> V | None:
        """Return the value for key, or default, without inserting anything."""
        return self._data.get(_normalize(key), default)

    def items(self):
        """The (key, value) pairs in insertion order."""
        return self._data.items()

    def clear(self) -> None:
        self._data.clear()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._data!r})"


class IniSection(IniMap[str]):
    """The keys and values of one section."""

    def __init__(self) -> None:
        super().__init__(str)


class IniStructure(IniMap[IniSection]):
    """All sections of an INI file."""

    def __init__(self) -> None:
        super().__init__(IniSection)


def _read_raw(path: Path) -> tuple[list[str], bool]:
    raw = path.read_bytes()
    has_bom = len(raw) >= 3 and raw[:3] == _BOM
    if not raw:
        return [], has_bom
    if has_bom:
        raw = raw[3:]
    text = raw.decode(_ENCODING, _ERRORS).replace("\0", "").replace("\r", "")
    return text.split("\n"), has_bom


def _load(path: Path) -> tuple[IniStructure, list[str], bool]:
    """Parse a file, returning its data, the lines worth keeping and its BOM flag."""
    raw_lines, has_bom = _read_raw(path)
    data = IniStructure()
    kept: list[str] = []
    section = ""
    in_section = False
    for line in raw_lines:
        parsed = parse_line(line)
        if parsed.kind is LineKind.SECTION:
            in_section = True
            section = parsed.key
            data[section]
        elif in_section and parsed.kind is LineKind.KEYVALUE:
            data[section][parsed.key] = parsed.value
        if parsed.kind is LineKind.UNKNOWN:
            continue
        if parsed.kind is LineKind.KEYVALUE and not in_section:
            continue
        kept.append(line)
    return data, kept, has_bom


def _key_line(key: str, value: str, pretty: bool) -> str:
    return _escape_key(key) + (" = " if pretty else "=") + _trim(value)


def _replace_value(line: str, new_value: str, pretty: bool) -> str:
    norm = line.replace("\\=", "  ")
    equals_at = norm.find("=")
    value_at = next(
        (pos for pos in range(equals_at + 1, len(norm)) if norm[pos] not in _WHITESPACE),
        None,
    )
    out = line if value_at is None else line[:value_at]
    if pretty and value_at == equals_at + 1:
        out += " "
    return out + _trim(new_value)


def _lazy_output(
    lines: list[str], data: IniStructure, original: IniStructure, pretty: bool
) -> list[str]:
    output: list[str] = []
    current = ""
    parsing_section = False
    skip_section = False
    discard_next_empty = False
    write_new_keys = False
    last_key_line = 0

    # Lines may be visited again after a section ends, hence the explicit cursor.
    i = 0
    while i < len(lines):
        line = lines[i]
        if not write_new_keys:
            parsed = parse_line(line)
            if parsed.kind is LineKind.SECTION:
                if parsing_section:
                    write_new_keys = True
                    parsing_section = False
                    continue
                current = parsed.key
                if current in data:
                    parsing_section = True
                    skip_section = False
                    discard_next_empty = False
                    output.append(line)
                    last_key_line = len(output)
                else:
                    skip_section = True
                    discard_next_empty = True
                    i += 1
                    continue
            elif parsed.kind is LineKind.KEYVALUE:
                if skip_section:
                    i += 1
                    continue
                if current in data:
                    collection = data[current]
                    if parsed.key in collection:
                        new_value = collection[parsed.key]
                        if parsed.value == new_value:
                            output.append(line)
                        else:
                            output.append(_replace_value(line, new_value, pretty))
                        last_key_line = len(output)
            else:
                if discard_next_empty and not line:
                    discard_next_empty = False
                elif parsed.kind is not LineKind.UNKNOWN:
                    output.append(line)

        if write_new_keys or i == len(lines) - 1:
            if current in data and current in original:
                known = original[current]
                additions = [
                    _key_line(key, value, pretty)
                    for key, value in data[current].items()
                    if key not in known
                ]
                output[last_key_line:last_key_line] = additions
            if write_new_keys:
                write_new_keys = False
                continue
        i += 1

    for section, collection in data.items():
        if section in original:
            continue
        if pretty and output and output[-1]:
            output.append("")
        output.append(f"[{section}]")
        output.extend(_key_line(key, value, pretty) for key, value in collection.items())
    return output


def _render(data: IniStructure, pretty: bool) -> str:
    separator = _EOL * 2 if pretty else _EOL
    blocks = []
    for section, collection in data.items():
        block = f"[{section}]"
        if len(collection):
            block += _EOL + _EOL.join(
                _key_line(key, value, pretty) for key, value in collection.items()
            )
        blocks.append(block)
    return separator.join(blocks)


class IniFile:
    """An INI file on disk."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        if not os.fspath(path):
            raise ValueError("INI file path must not be empty")
        self.path = Path(path)

    def read(self) -> IniStructure:
        """Parse the file. Raises OSError if it cannot be read."""
        data, _, _ = _load(self.path)
        return data

    def generate(self, data: IniStructure, pretty: bool = False) -> None:
        """Overwrite the file with data."""
        self.path.write_bytes(_render(data, pretty).encode(_ENCODING, _ERRORS))

    def write(self, data: IniStructure, pretty: bool = False) -> None:
        """Update the file with data, keeping existing comments and layout.

        A file that does not exist yet is generated.
        """
        if not self.path.exists():
            self.generate(data, pretty)
            return
        original, lines, has_bom = _load(self.path)
        output = _lazy_output(lines, data, original, pretty)
        payload = _EOL.join(output).encode(_ENCODING, _ERRORS)
        self.path.write_bytes((_BOM if has_bom else b"") + payload)
# nesdeck

Parts of an NES emulator front end, written in pure Python with no
third-party dependencies.

## Modules

- `nesdeck.gamegenie` handles Game Genie codes.
  - `decode` turns a six- or eight-letter code into a `DecodedCode`, which holds `addr`, `val` and an optional `compare`. A code of any other length gives an empty `DecodedCode`.
  - `encode` does the reverse. A patch with a compare value gives eight letters; one without gives six.
  - `encode_fields` and `decode_fields` work with upper-case hexadecimal text fields.
  - `is_valid_char` checks that a single character belongs to the Game Genie alphabet.
  - `extract_codes` and `concatenate_codes` split and join delimited lists of codes.
  - `GameGenieCode` holds a named cheat together with its decoded patches.
- `nesdeck.ini` reads and writes INI files.
  - Section and key names are trimmed and lower-cased, and their order is kept.
  - `IniFile.read` returns an `IniStructure` of `IniSection`s.
  - `IniFile.write` updates an existing file in place and keeps its comments and layout. If the file does not exist, it is created.
  - `IniFile.generate` overwrites the file.
  - `parse_line` classifies one line as a `LineKind`.
- `nesdeck.config_queue` provides `ConfigQueue`. It is a bounded list that puts the most recent entry first, such as a list of recent files. The list is stored in an INI section under the keys `file1` to `file<size>`.
- `nesdeck.controllers` assigns game controllers to numbered ports.
  - `Controller` describes one connected controller.
  - `Ports` holds the slots, numbered from 1.
  - `ControllerHandler` saves each port's controller GUID to the `ports` section of an INI file. When controllers are attached, it reconnects the saved ones.
- `nesdeck.display` provides `NESDisplay`. It renders a `PPUState` into four RGB screen buffers:
  - buffer 0 holds the game picture with its background and sprites;
  - buffer 1 holds both pattern tables;
  - buffers 2 and 3 hold the two nametables, with the scroll boundary marked in red.
- `nesdeck.screens` provides `compose_dual_screen`. It lays those four buffers out as one 512x480 frame of packed RGB rows.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Examples

```python
from nesdeck.gamegenie import decode, encode

patch = decode("SXIOPO")
print(hex(patch.addr), hex(patch.val))  # 0x11d9 0xad
assert encode(patch) == "SXIOPO"
```

```python
from nesdeck.ini import IniFile
from nesdeck.config_queue import ConfigQueue

recent = ConfigQueue(IniFile("settings.ini"), "recentfiles", 10)
recent.push("game.nes")
print(list(recent))
```

## What it does not do

This package is a set of components and not a complete emulator.

- It has no CPU, no bus and no ROM loader. `PPUState` must be filled in by the caller.
- It opens no window, reads no keyboard or gamepad input and plays no sound. `Controller` objects are supplied by the caller.
- It provides no command-line program.
[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nesdeck"
version = "0.1.0"
description = "Building blocks for an NES emulator front end: Game Genie codes, INI config, controller ports and PPU screen rendering"
requires-python = ">=3.10"
dependencies = []
keywords = ["nes", "emulator", "game genie", "ini", "ppu"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: System :: Emulators",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["nesdeck"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

"""NES emulator front-end components: Game Genie codes, INI configuration, controller ports and screen rendering."""

__version__ = "0.1.0"
__all__ = ["config_queue", "controllers", "display", "gamegenie", "ini", "screens"]
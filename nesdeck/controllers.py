"""Game controllers and the emulator ports they are plugged into."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from nesdeck.ini import IniFile, IniStructure

NULL_GUID = "0" * 32
_PORTS_SECTION = "ports"


@dataclass(frozen=True)
class Controller:
    """A connected game controller."""

    name: str
    instance_id: int
    guid: str


class Ports:
    """Controller slots, numbered from 1."""

    def __init__(self, count: int) -> None:
        self._slots: list[Controller | None] = [None] * count

    def _check(self, port: int) -> None:
        if port < 1 or port > len(self._slots):
            raise IndexError("Invalid port number")

    def connect(self, controller: Controller | None, port: int) -> bool:
        """Plug controller into port; False if the port does not exist."""
        if port < 1 or port > len(self._slots):
            return False
        self._slots[port - 1] = controller
        return True

    def disconnect(self, port: int) -> None:
        """Empty the port."""
        self._check(port)
        self._slots[port - 1] = None

    def retrieve(self, port: int) -> Controller | None:
        """The controller at port, or None. Raises IndexError for a bad port."""
        self._check(port)
        return self._slots[port - 1]

    def joystick_id(self, port: int) -> int:
        """Instance id of the controller at port, or -1 when empty."""
        controller = self.retrieve(port)
        return -1 if controller is None else controller.instance_id

    def joystick_guid(self, port: int) -> str:
        """GUID of the controller at port, or the all-zero GUID when empty."""
        controller = self.retrieve(port)
        return NULL_GUID if controller is None else controller.guid

    def __len__(self) -> int:
        return len(self._slots)


class ControllerHandler:
    """Which controllers are attached, and which port each one uses.

    The chosen controller of each port is remembered by GUID in the
    ``ports`` section of the INI file.
    """

    def __init__(
        self,
        ini_file: IniFile,
        controllers: Iterable[Controller] = (),
        port_count: int = 2,
    ) -> None:
        self._ini_file = ini_file
        self.ports = Ports(port_count)
        self._controllers: list[Controller] = []
        self.update_controllers(controllers)

    def update_controllers(self, controllers: Iterable[Controller]) -> None:
        """Replace the attached controllers and reconnect saved defaults."""
        self._controllers = list(controllers)
        self.load_from_config()

    def save_to_config(self) -> bool:
        """Store each port's controller GUID; True if the file was written."""
        try:
            data = self._ini_file.read()
            read_ok = True
        except OSError:
            data = IniStructure()
            read_ok = False

        section = data[_PORTS_SECTION]
        for port in range(1, len(self.ports) + 1):
            guid = self.ports.joystick_guid(port)
            if all(char == "0" for char in guid):
                guid = ""
            section[f"port{port}"] = guid

        try:
            if read_ok:
                self._ini_file.write(data, pretty=True)
            else:
                self._ini_file.generate(data, pretty=True)
        except OSError:
            return False
        return True

    def load_from_config(self) -> bool:
        """Connect attached controllers whose GUID matches a saved port.

        Returns False when nothing could be read from the file.
        """
        try:
            data = self._ini_file.read()
        except OSError:
            return False
        if _PORTS_SECTION not in data:
            return False

        section = data[_PORTS_SECTION]
        for port, (_, value) in enumerate(list(section.items()), start=1):
            if port > len(self.ports):
                break
            if not value:
                continue
            saved = section[f"port{port}"]
            match = next((c for c in self._controllers if c.guid == saved), None)
            if match is not None:
                self.ports.connect(match, port)
        return True

    def controllers(self) -> tuple[Controller, ...]:
        """The attached controllers."""
        return tuple(self._controllers)
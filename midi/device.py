from __future__ import annotations
import rtmidi
from core.logger import AppLogger
from midi.sysex import SYSEX_START, encode_config, format_message

DEVICE_NAME_FRAGMENT = "EWI-USB"


def list_midi_ports() -> list[str]:
    midi_out = rtmidi.MidiOut()
    ports = midi_out.get_ports()
    midi_out.delete()
    return ports


def find_ewi_port(ports: list[str], fragment: str = DEVICE_NAME_FRAGMENT) -> int | None:
    for i, name in enumerate(ports):
        if fragment in name:
            return i
    return None


class MidiDevice:
    def __init__(self, logger: AppLogger | None = None,
                 name_fragment: str = DEVICE_NAME_FRAGMENT) -> None:
        self._midi_out = rtmidi.MidiOut()
        self._midi_in = rtmidi.MidiIn()
        self._connected = False
        self._port_name: str | None = None
        self._logger = logger or AppLogger()
        self._name_fragment = name_fragment
        self._sysex_callback = None

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def port_name(self) -> str | None:
        return self._port_name

    def connect(self, port_index: int, port_name: str) -> None:
        if self._connected:
            self.disconnect()
        try:
            self._midi_out.open_port(port_index)
        except rtmidi.SystemError as exc:
            raise RuntimeError(
                f"Could not open MIDI output port '{port_name}'. "
                "It may be in use by another application."
            ) from exc
        self._logger.midi(f"OUT: {port_name} (index {port_index})")
        try:
            # Input and output port indices are independent on Windows, so
            # find the input port by name rather than assuming the same index.
            in_ports = self._midi_in.get_ports()
            in_index = find_ewi_port(in_ports, self._name_fragment)
            if in_index is None:
                raise RuntimeError(f"No MIDI input port found matching '{self._name_fragment}'")
            try:
                self._midi_in.open_port(in_index)
            except rtmidi.SystemError as exc:
                raise RuntimeError(
                    f"Could not open MIDI input port '{in_ports[in_index]}'. "
                    "It may be in use by another application."
                ) from exc
            self._logger.midi(f"IN:  {in_ports[in_index]} (index {in_index})")
            self._midi_in.ignore_types(sysex=False)
            self._midi_in.set_callback(self._dispatch_midi_input)
        except Exception:
            self._midi_out.close_port()
            raise
        self._connected = True
        self._port_name = port_name

    def disconnect(self) -> None:
        if self._connected:
            self._midi_out.close_port()
            self._midi_in.close_port()
        self._connected = False
        self._port_name = None

    def send(self, message: list[int]) -> None:
        if not self._connected:
            raise RuntimeError("Not connected to a MIDI device")
        self._midi_out.send_message(message)

    def send_config(self, table) -> None:
        """Send both bank dumps for *table* to the instrument."""
        for message in encode_config(table):
            self.send(message)
            self._logger.midi(f"TX: {format_message(message)}")

    def _dispatch_midi_input(self, event, _data=None) -> None:
        msg = event[0]
        if not msg:
            return
        if msg[0] == SYSEX_START:
            if self._sysex_callback is not None:
                self._sysex_callback(event, _data)
            else:
                self._logger.midi(f"RX sysex: {len(msg)} bytes")
        else:
            self._logger.midi(f"RX raw: {format_message(msg)}")

    def set_sysex_callback(self, callback) -> None:
        """Register a callback for incoming SysEx messages: callback(event, data)."""
        if not self._connected:
            raise RuntimeError("Not connected to a MIDI device")
        self._sysex_callback = callback

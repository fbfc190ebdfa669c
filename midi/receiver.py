from __future__ import annotations
import threading

from PyQt6.QtCore import QObject, pyqtSignal

from core.logger import AppLogger
from midi.sysex import SYSEX_START, decode_message, format_message
from model.errors import EwiConfigError
from model.parameter_table import ParameterTable


class ConfigReceiver(QObject):
    """Keeps a ParameterTable in step with SysEx arriving from the instrument.

    ``handle`` has the rtmidi callback signature, so it can be passed straight
    to ``MidiDevice.set_sysex_callback``.  rtmidi calls it from its own
    thread; decoding is serialized with a lock.  A message the table rejects
    is logged and reported through ``decode_failed`` without affecting
    messages that follow it.
    """

    config_changed = pyqtSignal()
    decode_failed = pyqtSignal(str)

    def __init__(self, table: ParameterTable, logger: AppLogger | None = None,
                 parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._table = table
        self._logger = logger or AppLogger()
        self._lock = threading.Lock()
        self._closed = False
        self._messages_processed = 0

    @property
    def table(self) -> ParameterTable:
        return self._table

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def messages_processed(self) -> int:
        return self._messages_processed

    def handle(self, event, _data=None) -> None:
        if self._closed:
            return
        message = event[0]
        if not message or message[0] != SYSEX_START:
            return
        with self._lock:
            self._messages_processed += 1
            try:
                applied = decode_message(self._table, message)
            except EwiConfigError as exc:
                self._logger.midi(f"RX rejected: {exc} ({format_message(message)})")
                self.decode_failed.emit(str(exc))
                return
        if applied:
            self._logger.midi(f"RX: {format_message(message)}")
            self.config_changed.emit()

    def close(self) -> None:
        """Stop applying messages; the MIDI port stays open."""
        self._closed = True

    def reopen(self) -> None:
        self._closed = False

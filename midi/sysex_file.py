from __future__ import annotations
from pathlib import Path

import mido

from core.logger import AppLogger
from midi.sysex import decode_messages, encode_config
from midi.sysex_scanner import scan_sysex
from model.errors import SysExFileError
from model.parameter_table import ParameterTable


def load_sysex_file(path: Path, table: ParameterTable,
                    logger: AppLogger | None = None) -> int:
    """Apply every EWI-USB bank dump found in a .syx file to *table*.

    The file may hold other data around the messages; anything that is not
    an EWI-USB message is skipped.  Returns the number of messages applied.
    Range errors in an EWI-USB message propagate.
    """
    path = Path(path)
    if not path.is_file():
        raise SysExFileError(f"Not a SysEx file: {path}")
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise SysExFileError(f"Could not read {path}: {exc}") from exc
    applied = decode_messages(table, scan_sysex(data))
    if logger is not None:
        logger.file(f"loaded {path.name}: {len(data)} bytes, {applied} message(s) applied")
    return applied


def read_sysex_file(path: Path, logger: AppLogger | None = None) -> ParameterTable:
    """Load a .syx file on top of factory defaults."""
    table = ParameterTable(logger=logger)
    load_sysex_file(path, table, logger=logger)
    return table


def save_sysex_file(path: Path, table: ParameterTable,
                    logger: AppLogger | None = None) -> None:
    """Write *table* as raw SysEx: both bank dumps back to back."""
    path = Path(path)
    messages = [mido.Message.from_bytes(m) for m in encode_config(table)]
    try:
        mido.write_syx_file(str(path), messages)
    except OSError as exc:
        raise SysExFileError(f"Could not write {path}: {exc}") from exc
    if logger is not None:
        logger.file(f"saved {path.name}: {len(messages)} message(s)")

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Sequence

from model.errors import MalformedFrameError

if TYPE_CHECKING:
    from model.parameter_table import ParameterTable

SYSEX_START = 0xF0
SYSEX_END = 0xF7

AKAI_ID = 0x47
DEVICE_ID = 0x7F   # "all devices"; not checked on receive
EWI_USB_ID = 0x6D

BANK_SETUP = 0
BANK_CONTROLLER = 2
BANK_SIZES = {BANK_SETUP: 6, BANK_CONTROLLER: 11}

# F0 47 7F 6D <bank> <offset> <len>
HEADER_LEN = 7
_MIN_FRAME_LEN = HEADER_LEN + 1


@dataclass(frozen=True)
class BankDump:
    """One parsed EWI-USB bank dump: values for consecutive offsets of a bank."""
    bank: int
    offset: int
    values: tuple[int, ...]


def format_message(message: Sequence[int]) -> str:
    return " ".join(f"{b:02X}" for b in message)


def build_bank_dump(bank: int, values: Sequence[int], offset: int = 0) -> list[int]:
    # Format: F0 47 7F 6D <bank> <offset> <len> [data] F7
    if any(not (0 <= v <= 0x7F) for v in values):
        raise ValueError("SysEx data bytes must all be 0-0x7F")
    if not (0 <= bank <= 0x7F and 0 <= offset <= 0x7F and len(values) <= 0x7F):
        raise ValueError(f"Bad bank dump header: bank={bank} offset={offset} len={len(values)}")
    return ([SYSEX_START, AKAI_ID, DEVICE_ID, EWI_USB_ID, bank, offset, len(values)]
            + list(values) + [SYSEX_END])


def encode_config(table: ParameterTable) -> list[list[int]]:
    """Return the two bank dumps (setup, then controller) describing *table*."""
    return [build_bank_dump(bank, table.bank_values(bank)) for bank in table.banks()]


def _reject(strict: bool, reason: str) -> None:
    if strict:
        raise MalformedFrameError(reason)
    return None


def parse_bank_dump(message: Sequence[int], strict: bool = False) -> BankDump | None:
    """Parse one EWI-USB bank dump.

    Messages for other devices, and truncated ones, give ``None`` so that
    foreign traffic on the same port is ignored.  With ``strict=True`` a
    MalformedFrameError carrying the reason is raised instead.  The model
    byte between the vendor and product IDs is not checked.
    """
    if len(message) < _MIN_FRAME_LEN:
        return _reject(strict, f"too short: {len(message)} bytes")
    if message[0] != SYSEX_START:
        return _reject(strict, f"does not start with F0 (0x{message[0]:02X})")
    if message[1] != AKAI_ID or message[3] != EWI_USB_ID:
        return _reject(strict, f"not an EWI-USB message (id {format_message(message[1:4])})")
    bank, offset, length = message[4], message[5], message[6]
    end = len(message) - 1 if message[-1] == SYSEX_END else len(message)
    if end - HEADER_LEN < length:
        return _reject(strict, f"declares {length} data bytes, has {end - HEADER_LEN}")
    values = tuple(message[HEADER_LEN:HEADER_LEN + length])
    return BankDump(bank=bank, offset=offset, values=values)


def decode_message(table: ParameterTable, message: Sequence[int]) -> bool:
    """Apply one message to *table*; return False if it was ignored.

    OutOfRangeError and AddressOutOfRangeError from the table propagate, and
    in that case none of the message's values are applied.
    """
    dump = parse_bank_dump(message)
    if dump is None:
        return False
    table.apply_block(dump.bank, dump.offset, dump.values)
    return True


def decode_messages(table: ParameterTable, messages: Iterable[Sequence[int]]) -> int:
    """Apply *messages* in order and return how many were applied.

    Stops at the first message the table rejects; earlier ones stay applied.
    """
    applied = 0
    for message in messages:
        if decode_message(table, message):
            applied += 1
    return applied

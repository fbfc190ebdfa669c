from __future__ import annotations
from typing import Iterator

from midi.sysex import SYSEX_END, SYSEX_START


def scan_sysex(data: bytes | bytearray) -> Iterator[bytes]:
    """Yield every F0 ... F7 span in *data*, markers included.

    Bytes outside a span are skipped.  An F0 seen before the open span is
    closed restarts the span there, dropping the unterminated fragment.
    Frames are not validated beyond their markers.
    """
    start = -1
    for i, b in enumerate(data):
        if b == SYSEX_END and start >= 0:
            yield bytes(data[start:i + 1])
            start = -1
        elif b == SYSEX_START:
            start = i


#!/usr/bin/env python3
"""Utility to diff two EWI-USB configuration .syx files.

Usage:
    python tools/sysex_diff.py before.syx after.syx

Loads both files on top of factory defaults and prints every parameter whose
value differs, with its address.  Useful for checking what an edit on the
instrument actually changed.
"""

from __future__ import annotations
import sys
from pathlib import Path

from core.logger import AppLogger
from midi.sysex_file import read_sysex_file
from model.errors import EwiConfigError


def diff_files(path_before: Path, path_after: Path) -> list[tuple[str, int, int, int, int]]:
    """Return ``(name, bank, offset, before, after)`` for differing params."""
    logger = AppLogger(echo=False)
    before = read_sysex_file(path_before, logger=logger)
    after = read_sysex_file(path_after, logger=logger)
    diffs = []
    for name, old, new in before.diff(after):
        bank, offset = before.param(name).address
        diffs.append((name, bank, offset, old, new))
    return diffs


def main() -> None:
    if len(sys.argv) != 3:
        print(__doc__)
        sys.exit(1)

    path_before = Path(sys.argv[1])
    path_after = Path(sys.argv[2])

    try:
        diffs = diff_files(path_before, path_after)
    except EwiConfigError as exc:
        print(f"Error: {exc}")
        sys.exit(1)

    if not diffs:
        print("No differences found.")
        return

    print(f"Found {len(diffs)} difference(s):")
    print(f"{'Name':<16}  {'Bank':>4}  {'Off':>3}  {'Before':>6}  {'After':>6}")
    print("-" * 44)
    for name, bank, offset, old, new in diffs:
        print(f"{name:<16}  {bank:>4}  {offset:>3}  {old:>6}  {new:>6}")


if __name__ == "__main__":
    main()

"""EWI-USB configuration tool.

Usage:
    python main.py show FILE
    python main.py frames FILE
    python main.py set FILE NAME=VALUE [NAME=VALUE ...] [-o OUT]
    python main.py defaults [OUT]
    python main.py ports
    python main.py send FILE [--port N]
    python main.py listen [--port N] [--seconds S] [-o OUT]
"""

from __future__ import annotations
import argparse
import sys
import threading
from pathlib import Path

from core.config import AppConfig
from core.logger import AppLogger
from midi.sysex import format_message, parse_bank_dump
from midi.sysex_file import load_sysex_file, read_sysex_file, save_sysex_file
from midi.sysex_scanner import scan_sysex
from model.errors import EwiConfigError, MalformedFrameError
from model.parameter_table import ParameterTable


def print_table(table: ParameterTable) -> None:
    print(f"{'Bank':>4}  {'Off':>3}  {'Name':<16}  {'Title':<13}  {'Value':<16}  Range")
    print("-" * 70)
    for bank, offset, value in table.snapshot():
        p = table.param((bank, offset))
        label = p.label(value)
        shown = f"{value}" if label == str(value) else f"{value} ({label})"
        print(f"{bank:>4}  {offset:>3}  {p.name:<16}  {p.title:<13}  {shown:<16}  "
              f"{p.min_val}-{p.max_val}")


def parse_assignment(text: str) -> tuple[str, int]:
    name, sep, value = text.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got '{text}'")
    try:
        return name.strip(), int(value, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"value for '{name}' is not an integer: '{value}'")


def cmd_show(args, config: AppConfig, logger: AppLogger) -> None:
    print_table(read_sysex_file(Path(args.file), logger=logger))


def cmd_frames(args, config: AppConfig, logger: AppLogger) -> None:
    data = Path(args.file).read_bytes()
    for i, frame in enumerate(scan_sysex(data)):
        try:
            dump = parse_bank_dump(frame, strict=True)
        except MalformedFrameError as exc:
            print(f"#{i}: skipped ({exc.reason}): {format_message(frame)}")
            continue
        print(f"#{i}: bank {dump.bank} offset {dump.offset}: {list(dump.values)}")


def cmd_set(args, config: AppConfig, logger: AppLogger) -> None:
    table = ParameterTable(logger=logger)
    src = Path(args.file)
    if src.exists():
        load_sysex_file(src, table, logger=logger)
    for name, value in args.assignments:
        if name not in table.names():
            raise EwiConfigError(f"Unknown parameter '{name}'. Known: {', '.join(table.names())}")
        table.set(name, value)
    save_sysex_file(Path(args.output) if args.output else src, table, logger=logger)


def cmd_defaults(args, config: AppConfig, logger: AppLogger) -> None:
    out = Path(args.output) if args.output else config.default_sysex_path()
    save_sysex_file(out, ParameterTable(logger=logger), logger=logger)
    print(out)


def cmd_ports(args, config: AppConfig, logger: AppLogger) -> None:
    from midi.device import list_midi_ports

    for i, name in enumerate(list_midi_ports()):
        print(f"{i}: {name}")


def _open_device(args, config: AppConfig, logger: AppLogger):
    from midi.device import MidiDevice, find_ewi_port, list_midi_ports

    ports = list_midi_ports()
    index = args.port
    if index is None and config.midi_port in ports:
        index = ports.index(config.midi_port)
    if index is None:
        index = find_ewi_port(ports, config.device_name_fragment)
    if index is None or not (0 <= index < len(ports)):
        raise RuntimeError(f"No MIDI port matching '{config.device_name_fragment}' found")
    device = MidiDevice(logger=logger, name_fragment=config.device_name_fragment)
    device.connect(index, ports[index])
    return device


def cmd_send(args, config: AppConfig, logger: AppLogger) -> None:
    table = read_sysex_file(Path(args.file), logger=logger)
    device = _open_device(args, config, logger)
    try:
        device.send_config(table)
    finally:
        device.disconnect()


def cmd_listen(args, config: AppConfig, logger: AppLogger) -> None:
    from midi.receiver import ConfigReceiver

    table = ParameterTable(logger=logger)
    receiver = ConfigReceiver(table, logger=logger)
    device = _open_device(args, config, logger)
    seconds = args.seconds if args.seconds is not None else config.listen_seconds
    try:
        device.set_sysex_callback(receiver.handle)
        logger.midi(f"listening for {seconds:g}s on {device.port_name}")
        threading.Event().wait(seconds)
    finally:
        receiver.close()
        device.disconnect()
    print(f"{receiver.messages_processed} SysEx message(s) received")
    print_table(table)
    if args.output:
        save_sysex_file(Path(args.output), table, logger=logger)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Edit Akai EWI-USB configuration SysEx")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("show", help="print the configuration stored in a .syx file")
    p.add_argument("file")
    p.set_defaults(func=cmd_show)

    p = sub.add_parser("frames", help="list the SysEx frames found in a file")
    p.add_argument("file")
    p.set_defaults(func=cmd_frames)

    p = sub.add_parser("set", help="change parameters and write the .syx file")
    p.add_argument("file")
    p.add_argument("assignments", nargs="+", type=parse_assignment, metavar="NAME=VALUE")
    p.add_argument("--output", "-o", default=None, help="write here instead of FILE")
    p.set_defaults(func=cmd_set)

    p = sub.add_parser("defaults", help="write the factory configuration")
    p.add_argument("output", nargs="?", default=None)
    p.set_defaults(func=cmd_defaults)

    p = sub.add_parser("ports", help="list MIDI output ports")
    p.set_defaults(func=cmd_ports)

    p = sub.add_parser("send", help="send a .syx configuration to the instrument")
    p.add_argument("file")
    p.add_argument("--port", type=int, default=None, help="MIDI port index")
    p.set_defaults(func=cmd_send)

    p = sub.add_parser("listen", help="apply configuration SysEx sent by the instrument")
    p.add_argument("--port", type=int, default=None, help="MIDI port index")
    p.add_argument("--seconds", type=float, default=None)
    p.add_argument("--output", "-o", default=None, help="save what was received")
    p.set_defaults(func=cmd_listen)
    return parser


def main(argv: list[str] | None = None, config: AppConfig | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = config or AppConfig()
    logger = AppLogger()
    try:
        args.func(args, config, logger)
    except (EwiConfigError, OSError, RuntimeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

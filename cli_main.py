import argparse
import json
import os
import sys

from rich.console import Console
from rich.table import Table
from rich.text import Text

from firmware_api import FirmwareAccessError, load_smbios, read_table_file
from inventory import COLLECTIONS, SINGLETONS, as_dict, decode
from log_config import setup_logging
from parsers import Version, iter_raw_structures
from structures import TYPE_NAMES, MemoryDevice

console = Console()

DEFAULT_FILE_VERSION = "3.3.0"


def is_admin():
    if sys.platform == "win32":
        import ctypes
        return bool(ctypes.windll.shell32.IsUserAnAdmin())
    return os.geteuid() == 0


def hex_rows(data, length=16):
    """Yields (offset, hex, ascii) text for each `length`-byte row of data."""
    for i in range(0, len(data), length):
        chunk = data[i:i+length]
        hex_part = ' '.join(f"{b:02X}" for b in chunk)
        ascii_part = ''.join(chr(b) if 32 <= b < 127 else '.' for b in chunk)
        yield f"{i:04X}", hex_part, ascii_part


def hex_dump(data, length=16):
    """Generates a hex dump of data."""
    return "\n".join(
        f"{offset}  {hex_part:<{length*3}}  {ascii_part}"
        for offset, hex_part, ascii_part in hex_rows(data, length)
    )


def print_hex_rich(title, data):
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Offset", style="dim", width=8)
    table.add_column("Hex", width=48, style="cyan")
    table.add_column("ASCII", width=16)

    for row in hex_rows(data):
        table.add_row(*row)

    console.print(table)


def format_value(value):
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if hasattr(value, '_asdict'):
        return ", ".join(f"{k}={format_value(v)}" for k, v in value._asdict().items())
    if isinstance(value, tuple):
        return "\n".join(format_value(v) for v in value)
    return str(value)


def record_rows(record):
    """(label, text) pairs for one decoded record."""
    rows = []
    for field, value in record._asdict().items():
        label = field.replace('_', ' ').title()
        if isinstance(record, MemoryDevice) and field == 'size':
            rows.append((label, record.size_text))
        else:
            rows.append((label, format_value(value)))
    return rows


def print_record(title, record):
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Field", style="green")
    table.add_column("Value")
    for label, text in record_rows(record):
        table.add_row(label, Text(text))
    console.print(table)


def cmd_smbios(inventory, as_json=False):
    if as_json:
        print(json.dumps(as_dict(inventory), indent=2))
        return

    console.print(f"[bold]SMBIOS {inventory.version}[/bold]")

    for type_code, field in SINGLETONS.items():
        print_record(TYPE_NAMES[type_code], getattr(inventory, field))

    for type_code, field in COLLECTIONS.items():
        records = getattr(inventory, field)
        for i, record in enumerate(records):
            print_record(f"{TYPE_NAMES[type_code]} #{i}", record)


def cmd_raw(data):
    structure_count = 0

    for structure in iter_raw_structures(data):
        structure_count += 1

        title = f"Type {structure.type_code} (Handle 0x{structure.handle:04X})"
        if structure.type_code in TYPE_NAMES:
            title += f" - {TYPE_NAMES[structure.type_code]}"

        print_hex_rich(title, structure.formatted)
        for i, s in enumerate(structure.strings):
            console.print(f"String {i+1}: {s}", markup=False)

    console.print(f"Finished. Parsed {structure_count} structures.")


def setup_parser():
    parser = argparse.ArgumentParser(description="SMBIOS Inventory Viewer Tool")
    parser.add_argument("--smbios", action="store_true", help="Show decoded SMBIOS inventory")
    parser.add_argument("--raw", action="store_true", help="Dump raw SMBIOS structures")
    parser.add_argument("--json", action="store_true", help="Print the inventory as JSON")
    parser.add_argument("--gui", action="store_true", help="Launch GUI mode")
    parser.add_argument("--file", type=str, help="Read a raw structure table dump instead of firmware")
    parser.add_argument("--smbios-version", type=str, default=DEFAULT_FILE_VERSION,
                        help="SMBIOS version of the --file dump (default: %(default)s)")
    parser.add_argument("--entry-point", type=str, help="Path of the SMBIOS entry point (Linux)")
    parser.add_argument("--table", type=str, help="Path of the DMI structure table (Linux)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", type=str, help="Also write the log to this file")
    return parser


def load_table(args):
    if args.file:
        return read_table_file(args.file, Version.parse(args.smbios_version))
    return load_smbios(args.entry_point, args.table)


def main(argv=None):
    parser = setup_parser()
    args = parser.parse_args(argv)

    setup_logging(verbose=args.verbose, log_file=args.log_file)

    if args.gui:
        # Launch GUI
        try:
            from gui_main import run_gui
        except ImportError as e:
            console.print(f"[bold red]GUI unavailable ({e}). Install the 'gui' extra.[/bold red]")
            return 1
        return run_gui(args)

    if not (args.smbios or args.raw or args.json):
        parser.print_help()
        return 1

    # Firmware tables need privileges; offline dumps do not
    if not args.file and not is_admin():
        console.print("[bold red]WARNING: Not running as Administrator/root. Firmware access will likely fail.[/bold red]")

    try:
        version, data = load_table(args)
    except ValueError as e:
        # Bad --smbios-version or unreadable entry point
        console.print(f"[bold red]{e}[/bold red]")
        return 1
    except FirmwareAccessError as e:
        console.print(f"[bold red]{e}[/bold red]")
        return 1

    if args.raw:
        cmd_raw(data)
    else:
        cmd_smbios(decode(iter_raw_structures(data), version), as_json=args.json)
    return 0


if __name__ == "__main__":
    sys.exit(main())

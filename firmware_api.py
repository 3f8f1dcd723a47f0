import ctypes
import logging
import os
import struct
import sys

from parsers import Version, parse_entry_point, parse_raw_smbios_data_header, TableFormatError

logger = logging.getLogger(__name__)

DEFAULT_ENTRY_POINT = "/sys/firmware/dmi/tables/smbios_entry_point"
DEFAULT_DMI_TABLE = "/sys/firmware/dmi/tables/DMI"


class FirmwareAccessError(OSError):
    """Raised when the firmware SMBIOS table cannot be read."""


def entry_point_path():
    return os.environ.get("SMBIOS_ENTRY_POINT", DEFAULT_ENTRY_POINT)


def dmi_table_path():
    return os.environ.get("SMBIOS_DMI_TABLE", DEFAULT_DMI_TABLE)


def _read_file(path):
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise FirmwareAccessError(f"Cannot read {path}: {e.strerror or e}") from e


def read_sysfs_tables(entry_point=None, table=None):
    """
    Reads the entry point and structure table that Linux exports under
    /sys/firmware/dmi/tables. Both files normally need root.
    Returns (Version, table_bytes).
    """
    entry_point = entry_point or entry_point_path()
    table = table or dmi_table_path()

    version = parse_entry_point(_read_file(entry_point))
    data = _read_file(table)
    logger.info("Read %d bytes of SMBIOS %s structures from %s", len(data), version, table)
    return version, data


def read_table_file(path, version):
    """Loads an offline raw structure table dump (e.g. a copy of the DMI file)."""
    data = _read_file(path)
    logger.info("Loaded %d bytes from %s, decoding as SMBIOS %s", len(data), path, version)
    return version, data


# --- Windows: GetSystemFirmwareTable('RSMB') ---

_kernel32 = None


def _get_kernel32():
    # Load kernel32 with use_last_error=True to capture error codes reliably
    global _kernel32
    if _kernel32 is None:
        kernel32 = ctypes.WinDLL('kernel32', use_last_error=True)

        # UINT GetSystemFirmwareTable(
        #   DWORD FirmwareTableProviderSignature,
        #   DWORD FirmwareTableID,
        #   PVOID pFirmwareTableBuffer,
        #   DWORD BufferSize
        # );
        kernel32.GetSystemFirmwareTable.argtypes = [ctypes.c_ulong, ctypes.c_ulong, ctypes.c_void_p, ctypes.c_ulong]
        kernel32.GetSystemFirmwareTable.restype = ctypes.c_uint
        _kernel32 = kernel32
    return _kernel32


def get_firmware_provider_signature(signature_str):
    # 'RSMB' must be 0x52534D42, i.e. the big endian reading of the string
    if len(signature_str) != 4:
        raise ValueError("Signature must be 4 characters.")

    return struct.unpack('>I', signature_str.encode('ascii'))[0]


def get_system_firmware_table(provider_signature, table_id):
    kernel32 = _get_kernel32()
    sig_int = get_firmware_provider_signature(provider_signature)

    ctypes.set_last_error(0)
    size = kernel32.GetSystemFirmwareTable(sig_int, table_id, None, 0)
    err = ctypes.get_last_error()
    logger.debug("GetSystemFirmwareTable(%s, %d): size=%d err=%d", provider_signature, table_id, size, err)

    if size == 0:
        if err != 0:
            raise FirmwareAccessError(
                err, f"GetSystemFirmwareTable({provider_signature}) failed: {ctypes.FormatError(err)}"
            )
        return b""

    buffer = (ctypes.c_char * size)()
    ctypes.set_last_error(0)
    ret = kernel32.GetSystemFirmwareTable(sig_int, table_id, buffer, size)
    err = ctypes.get_last_error()

    if ret == 0:
        raise FirmwareAccessError(
            err, f"GetSystemFirmwareTable({provider_signature}) 2nd call failed: {ctypes.FormatError(err)}"
        )

    return bytes(buffer)


def get_smbios_data():
    return get_system_firmware_table('RSMB', 0)


def read_windows_tables():
    """
    Fetches the RawSMBIOSData blob and splits off its header.
    Returns (Version, table_bytes).
    """
    data = get_smbios_data()
    header, offset = parse_raw_smbios_data_header(data)
    if header is None:
        raise TableFormatError("RawSMBIOSData header missing from RSMB table")

    version = Version(header.major_version, header.minor_version, header.dmi_revision)
    logger.info("Read %d bytes of SMBIOS %s structures via RSMB", header.length, version)
    return version, data[offset:offset + header.length]


def load_smbios(entry_point=None, table=None):
    """Reads the live SMBIOS table for this platform as (Version, table_bytes)."""
    if sys.platform == "win32":
        return read_windows_tables()
    return read_sysfs_tables(entry_point, table)

import logging
import struct
from collections import namedtuple

logger = logging.getLogger(__name__)

END_OF_TABLE = 127

# Named tuples for structured data
SmbiosStructureHeader = namedtuple('SmbiosStructureHeader', [
    'type', 'length', 'handle'
])

RawSMBIOSData = namedtuple('RawSMBIOSData', [
    'used_20_calling_method', 'major_version', 'minor_version',
    'dmi_revision', 'length'
])

# One framed structure: header-stripped formatted bytes plus its string table
RawStructure = namedtuple('RawStructure', [
    'type_code', 'formatted', 'strings', 'handle'
])


class Version(namedtuple('Version', ['major', 'minor', 'revision'])):
    __slots__ = ()

    def __str__(self):
        return f"{self.major}.{self.minor}.{self.revision}"

    @classmethod
    def parse(cls, text):
        """Builds a Version from "3.3" or "3.3.0"."""
        parts = [int(p) for p in text.split('.')]
        if not 2 <= len(parts) <= 3:
            raise ValueError(f"Bad SMBIOS version: {text!r}")
        if len(parts) == 2:
            parts.append(0)
        return cls(*parts)


class TableFormatError(ValueError):
    """Raised when an entry point or table header cannot be read."""


def parse_raw_smbios_data_header(data):
    """
    Parses the Windows RawSMBIOSData header.
    Returns (header_obj, data_offset).
    If data is too short, returns (None, 0).
    """
    if len(data) < 8:
        return None, 0

    # struct RawSMBIOSData {
    #   BYTE  Used20CallingMethod;
    #   BYTE  SMBIOSMajorVersion;
    #   BYTE  SMBIOSMinorVersion;
    #   BYTE  DmiRevision;
    #   DWORD Length;
    #   BYTE  SMBIOSTableData[];
    # };
    u20, maj, min_, dmi, length = struct.unpack('<BBBBI', data[:8])
    header = RawSMBIOSData(u20, maj, min_, dmi, length)
    # The actual SMBIOS data follows immediately
    return header, 8


def parse_entry_point(data):
    """
    Reads the SMBIOS version out of an entry point structure, as exposed
    by Linux in /sys/firmware/dmi/tables/smbios_entry_point.
    """
    if data[:5] == b'_SM3_' and len(data) >= 10:
        major, minor, docrev = struct.unpack('<BBB', data[7:10])
        return Version(major, minor, docrev)
    if data[:4] == b'_SM_' and len(data) >= 8:
        major, minor = struct.unpack('<BB', data[6:8])
        return Version(major, minor, 0)
    if data[:5] == b'_DMI_' and len(data) >= 15:
        # Legacy entry point: BCD revision, 0x21 is 2.1
        bcd = data[14]
        return Version(bcd >> 4, bcd & 0x0F, 0)
    raise TableFormatError(f"Unrecognized SMBIOS entry point anchor: {bytes(data[:5])!r}")


def parse_smbios_structure(data, offset):
    """
    Parses an SMBIOS structure header at the given offset.
    Returns (header, next_offset) or (None, None) if end.
    """
    if offset + 4 > len(data):
        return None, None

    type_, length, handle = struct.unpack('<BBH', data[offset:offset+4])

    # Valid SMBIOS structure must have length >= 4
    if length < 4:
        return None, None

    header = SmbiosStructureHeader(type=type_, length=length, handle=handle)

    # Calculate end of formatted section
    formatted_end = offset + length

    # Find double null terminator after formatted_end
    current = formatted_end
    while current + 1 < len(data):
        if data[current] == 0 and data[current+1] == 0:
            return header, current + 2
        current += 1

    return header, len(data)


def get_smbios_strings(data, offset, length):
    """
    Extracts strings from the unformatted section.
    """
    strings = []
    str_start = offset + length
    current_idx = str_start
    while current_idx < len(data):
        try:
            null_idx = data.index(b'\x00', current_idx)
        except ValueError:
            break

        if null_idx == current_idx:
            break

        s_bytes = data[current_idx:null_idx]
        strings.append(s_bytes.decode('utf-8', errors='ignore'))

        current_idx = null_idx + 1
        if current_idx < len(data) and data[current_idx] == 0:
            break

    return strings


def iter_raw_structures(data, offset=0):
    """
    Splits a raw structure table into RawStructure values.
    Stops at the end-of-table marker (type 127), which is not yielded.
    """
    current_off = offset
    while current_off < len(data):
        header, next_offset = parse_smbios_structure(data, current_off)
        if not header:
            # Bad header or end of buffer
            logger.debug("Stopping at offset 0x%X: no valid structure header", current_off)
            break

        if header.type == END_OF_TABLE:
            break

        formatted_end = min(current_off + header.length, len(data))
        formatted = bytes(data[current_off + 4:formatted_end])
        strings = get_smbios_strings(data, current_off, header.length)

        yield RawStructure(
            type_code=header.type,
            formatted=formatted,
            strings=tuple(strings),
            handle=header.handle,
        )

        current_off = next_offset

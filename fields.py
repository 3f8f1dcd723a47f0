"""
Offset-based field access for header-stripped SMBIOS structures.

Offsets passed to the readers are the absolute offsets published in the
SMBIOS reference specification, which count the 4-byte structure header.
The stored formatted block has that header removed, so every reader
subtracts HEADER_LENGTH before unpacking.
"""
import struct

HEADER_LENGTH = 4

OEM_PLACEHOLDER = "to be filled by o.e.m."


class InvalidStructureError(ValueError):
    """Raised when a raw structure cannot be decoded at all."""


def check_structure(structure):
    """
    Rejects elements that carry no integer type code, and raw structures
    whose formatted block is missing or not bytes.
    A missing string table is tolerated and read as empty.
    """
    if not isinstance(getattr(structure, 'type_code', None), int):
        raise InvalidStructureError(f"{type(structure).__name__} element has no type code")
    formatted = getattr(structure, 'formatted', None)
    if not isinstance(formatted, (bytes, bytearray, memoryview)):
        raise InvalidStructureError(
            f"type {structure.type_code} structure has no formatted block"
        )


def _unpack(structure, offset, fmt):
    index = offset - HEADER_LENGTH
    width = struct.calcsize(fmt)
    if index < 0 or index + width > len(structure.formatted):
        return 0
    return struct.unpack_from(fmt, structure.formatted, index)[0]


def get_byte(structure, offset):
    return _unpack(structure, offset, '<B')


def get_word(structure, offset):
    return _unpack(structure, offset, '<H')


def get_dword(structure, offset):
    return _unpack(structure, offset, '<I')


def get_qword(structure, offset):
    return _unpack(structure, offset, '<Q')


def get_bytes(structure, offset, length):
    """Returns `length` raw bytes at `offset`, or None if the block is too short."""
    index = offset - HEADER_LENGTH
    if index < 0 or index + length > len(structure.formatted):
        return None
    return bytes(structure.formatted[index:index + length])


def resolve_string(strings, index):
    """
    Maps a 1-based string number to its text.
    0 means "no string"; numbers past the end of the table are treated the
    same way. Values left as the OEM placeholder are blanked.
    """
    if not strings or index == 0 or index > len(strings):
        return ""
    value = strings[index - 1].strip()
    if value.lower() == OEM_PLACEHOLDER:
        return ""
    return value


def get_string(structure, offset):
    """Resolves the string whose number is stored in the byte at `offset`."""
    return resolve_string(structure.strings, get_byte(structure, offset))


def get_strings(structure):
    """Every entry of the string table, normalised like get_string."""
    strings = structure.strings or ()
    return tuple(resolve_string(strings, i) for i in range(1, len(strings) + 1))


def is_nth_bit_set(value, n):
    return value & (1 << n) != 0

import struct

import pytest

from parsers import RawStructure, Version


def build_structure(type_code, length, values=None, strings=(), handle=0):
    """
    Builds a RawStructure whose formatted block is `length` bytes long
    (header included, as in the SMBIOS tables). `values` maps absolute
    offsets to (struct format, value) pairs.
    """
    formatted = bytearray(length - 4)
    for offset, (fmt, value) in (values or {}).items():
        struct.pack_into('<' + fmt, formatted, offset - 4, value)
    return RawStructure(type_code, bytes(formatted), tuple(strings), handle)


def encode_table(structures):
    """Serialises RawStructures back into a raw table ending with type 127."""
    out = bytearray()
    for s in list(structures) + [RawStructure(127, b'', (), 0xFEFF)]:
        out += struct.pack('<BBH', s.type_code, len(s.formatted) + 4, s.handle)
        out += s.formatted
        if s.strings:
            for text in s.strings:
                out += text.encode('ascii') + b'\x00'
            out += b'\x00'
        else:
            out += b'\x00\x00'
    return bytes(out)


@pytest.fixture
def make_structure():
    return build_structure


@pytest.fixture
def make_table():
    return encode_table


@pytest.fixture
def version_3_3():
    return Version(3, 3, 0)


@pytest.fixture
def sample_structures():
    """A small but complete machine: every decoded type at least once."""
    return [
        build_structure(0, 0x1A, {
            0x04: ('B', 1), 0x05: ('B', 2), 0x06: ('H', 0xE800), 0x08: ('B', 3),
            0x09: ('B', 0xFF), 0x14: ('B', 5), 0x15: ('B', 17), 0x18: ('H', 0x0020),
        }, ["American Megatrends Inc.", "P3.40", "04/12/2021"], handle=0x0000),
        build_structure(1, 0x1B, {
            0x04: ('B', 1), 0x05: ('B', 2), 0x06: ('B', 3), 0x07: ('B', 4),
            0x08: ('16s', bytes.fromhex("33221100554477668899aabbccddeeff")),
            0x18: ('B', 6), 0x19: ('B', 5), 0x1A: ('B', 6),
        }, ["ASRock", "X570 Taichi", "To Be Filled By O.E.M.", "  SN-0001  ",
            "To be filled by O.E.M.", "Desktop"], handle=0x0001),
        build_structure(2, 0x0F, {
            0x04: ('B', 1), 0x05: ('B', 2), 0x0B: ('H', 0x0003), 0x0D: ('B', 0x0A),
        }, ["ASRock", "X570 Taichi"], handle=0x0002),
        build_structure(3, 0x16, {
            0x04: ('B', 1), 0x05: ('B', 0x03), 0x15: ('B', 2),
        }, ["Chassis Co", "SKU-42"], handle=0x0003),
        build_structure(4, 0x30, {
            0x04: ('B', 1), 0x05: ('B', 3), 0x07: ('B', 2), 0x10: ('B', 3),
            0x14: ('H', 4600), 0x16: ('H', 3800), 0x18: ('B', 0x41),
            0x23: ('B', 16), 0x24: ('B', 16), 0x25: ('B', 32),
        }, ["AM4", "Advanced Micro Devices, Inc.", "AMD Ryzen 9 5950X"], handle=0x0004),
        build_structure(5, 0x10, {}, ["obsolete"], handle=0x0005),
        build_structure(7, 0x1B, {
            0x04: ('B', 1), 0x05: ('H', 0x0181), 0x07: ('H', 0x0200), 0x09: ('H', 0x0200),
        }, ["L2 - Cache"], handle=0x0007),
        build_structure(8, 0x09, {0x04: ('B', 1), 0x06: ('B', 2)}, ["J1", "USB1"], handle=0x0008),
        build_structure(9, 0x11, {0x04: ('B', 1), 0x07: ('B', 4), 0x09: ('H', 1)}, ["PCIE1"], handle=0x0009),
        build_structure(11, 0x05, {0x04: ('B', 2)}, ["OEM one", "OEM two"], handle=0x000B),
        build_structure(12, 0x05, {0x04: ('B', 1)}, ["CMOS clear: JP1"], handle=0x000C),
        build_structure(13, 0x16, {0x04: ('B', 2), 0x15: ('B', 1)}, ["en|US|iso8859-1", "fr|FR|iso8859-1"],
                        handle=0x000D),
        build_structure(14, 0x0B, {
            0x04: ('B', 1), 0x05: ('B', 4), 0x06: ('H', 0x0004), 0x08: ('B', 7), 0x09: ('H', 0x0007),
        }, ["Cpu Module"], handle=0x000E),
        build_structure(16, 0x17, {
            0x04: ('B', 3), 0x05: ('B', 3), 0x06: ('B', 3), 0x07: ('I', 0x8000000),
            0x0B: ('H', 0xFFFE), 0x0D: ('H', 4),
        }, handle=0x0010),
        build_structure(17, 0x28, {
            0x04: ('H', 0x0010), 0x06: ('H', 0xFFFE), 0x08: ('H', 64), 0x0A: ('H', 64),
            0x0C: ('H', 0x4000), 0x0E: ('B', 0x09), 0x10: ('B', 1), 0x11: ('B', 2),
            0x12: ('B', 0x1A), 0x13: ('H', 0x0080), 0x15: ('H', 3200),
            0x17: ('B', 3), 0x1A: ('B', 4), 0x1B: ('B', 2), 0x20: ('H', 3200),
            0x22: ('H', 1200), 0x24: ('H', 1200), 0x26: ('H', 1200),
        }, ["DIMM 0", "P0 CHANNEL A", "Micron", "16ATF2G64AZ-3G2"], handle=0x0011),
        build_structure(17, 0x28, {
            0x04: ('H', 0x0010), 0x06: ('H', 0xFFFE), 0x0C: ('H', 0),
            0x10: ('B', 1), 0x11: ('B', 2),
        }, ["DIMM 1", "P0 CHANNEL B"], handle=0x0012),
        build_structure(0x7E, 0x08, {}, handle=0x0013),
    ]

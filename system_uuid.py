"""
System UUID decoding (System Information, type 1, offset 08h).

Since SMBIOS 2.6 the first three UUID fields (time-low, time-mid,
time-high) are stored little-endian while clock-seq and node stay in
network order. Older tables store the whole value big-endian.
"""
import uuid

from fields import get_bytes

UUID_OFFSET = 0x08
UUID_LENGTH = 16


class UUIDDecodeError(ValueError):
    """Raised when a structure is too short to hold a UUID."""


def uses_middle_endian(version):
    return version.major >= 3 or (version.major == 2 and version.minor >= 6)


def decode_uuid(structure, version):
    raw = get_bytes(structure, UUID_OFFSET, UUID_LENGTH)
    if raw is None:
        raise UUIDDecodeError(
            f"need {UUID_LENGTH} bytes at offset 0x{UUID_OFFSET:02X}, "
            f"structure has {len(structure.formatted)} formatted bytes"
        )

    if uses_middle_endian(version):
        # bytes_le swaps time-low, time-mid and time-high into network order
        return uuid.UUID(bytes_le=raw)
    return uuid.UUID(bytes=raw)

"""
Numeric SMBIOS fields whose raw value needs unit or sentinel handling.

The raw integer is always preserved; str() renders it for display and the
helper properties expose the magnitude in a fixed unit (None when the raw
value is a sentinel).
"""
from enums import Code, UNKNOWN

KB_PER_GB = 1024 * 1024
BYTES_PER_GB = 1024 * 1024 * 1024


class Handle(Code):
    def __str__(self):
        return f"0x{int(self):04X}"


class ErrorInformationHandle(Code):
    NOT_PROVIDED = 0xFFFE
    NO_ERROR = 0xFFFF

    def __str__(self):
        if self == self.NOT_PROVIDED:
            return "Not Provided"
        if self == self.NO_ERROR:
            return "No Error Detected"
        return f"0x{int(self):04X}"


class MemoryDeviceSize(Code):
    """
    Memory device (type 17) size, offset 0Ch.
    Bit 15 selects the granularity: set for KB, clear for MB.
    0x8100 is a 256 KB device, 0x0100 a 256 MB one.
    """

    UNKNOWN_SIZE = 0xFFFF
    SEE_EXTENDED = 0x7FFF

    @property
    def unknown(self):
        return self == self.UNKNOWN_SIZE

    @property
    def extended(self):
        return self == self.SEE_EXTENDED

    @property
    def kilobytes(self):
        return bool(self & 0x8000)

    @property
    def magnitude(self):
        return self & 0x7FFF

    @property
    def megabytes(self):
        if self.unknown or self.extended:
            return None
        if self.kilobytes:
            return self.magnitude / 1024
        return self.magnitude

    def __str__(self):
        if self.unknown:
            return UNKNOWN
        if self.extended:
            return "See Extended Size"
        if self == 0:
            return "No Module Installed"
        units = "KB" if self.kilobytes else "MB"
        return f"{self.magnitude} {units}"


class ExtendedSize(Code):
    """Memory device (type 17) extended size in MB, offset 1Ch. Bit 31 is reserved."""

    @property
    def megabytes(self):
        return self & 0x7FFFFFFF

    def __str__(self):
        if self.megabytes == 0:
            return ""
        return f"{self.megabytes} MB"


class MaximumCapacity(Code):
    """
    Physical memory array (type 16) maximum capacity in KB, offset 07h.
    8000 0000h means the value lives in Extended Maximum Capacity.
    """

    SEE_EXTENDED = 0x80000000

    @property
    def gigabytes(self):
        if self == self.SEE_EXTENDED:
            return None
        return self // KB_PER_GB

    def __str__(self):
        if self == self.SEE_EXTENDED:
            return ""
        if self < KB_PER_GB:
            return f"{self // 1024} MB"
        return f"{self.gigabytes} GB"


class ExtendedMaximumCapacity(Code):
    """Physical memory array (type 16) extended maximum capacity in bytes, offset 0Fh."""

    @property
    def gigabytes(self):
        if self == 0:
            return None
        return self // BYTES_PER_GB

    def __str__(self):
        if self == 0:
            return ""
        return f"{self.gigabytes} GB"


class Voltage(Code):
    """Millivolts; 0 means unknown."""

    def __str__(self):
        if self == 0:
            return UNKNOWN
        return f"{self / 1000:.2f} V"


class MemorySpeed(Code):
    """MT/s; 0 means unknown."""

    def __str__(self):
        if self == 0:
            return UNKNOWN
        return f"{int(self)} MT/s"


class DeviceSet(Code):
    def __str__(self):
        if self == 0:
            return "None"
        if self == 0xFF:
            return UNKNOWN
        return str(int(self))


class DeviceWidth(Code):
    def __str__(self):
        if self == 0xFFFF:
            return UNKNOWN
        return f"{int(self)} bits"


class BIOSROMSize(Code):
    """BIOS (type 0) ROM size byte, offset 09h: (n + 1) * 64K, FFh defers to offset 18h."""

    SEE_EXTENDED = 0xFF

    @property
    def kilobytes(self):
        if self == self.SEE_EXTENDED:
            return None
        return (self + 1) * 64

    def __str__(self):
        if self == self.SEE_EXTENDED:
            return "See Extended ROM Size"
        return f"{self.kilobytes} KB"


class ExtendedBIOSROMSize(Code):
    """BIOS (type 0) extended ROM size word, offset 18h: bits 15:14 unit, 13:0 size."""

    UNITS = ("MB", "GB")

    @property
    def size(self):
        return self & 0x3FFF

    def __str__(self):
        unit = (self >> 14) & 0x03
        if unit >= len(self.UNITS):
            return UNKNOWN
        return f"{self.size} {self.UNITS[unit]}"


class CacheSize(Code):
    """Cache (type 7) size word: bit 15 selects 64K granularity, bits 14:0 the count."""

    @property
    def kilobytes(self):
        granularity = 64 if self & 0x8000 else 1
        return (self & 0x7FFF) * granularity

    def __str__(self):
        return f"{self.kilobytes} KB"

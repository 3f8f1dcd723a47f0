"""
Enumerated and bit-packed SMBIOS field decoders.

Every decoder is an int subclass: the raw value is kept (and compares equal
to a plain int) while str() gives the label from the SMBIOS tables.
"""

UNKNOWN = "Unknown"
RESERVED = "Reserved"
OTHER = "Other"


class Code(int):
    """Raw SMBIOS code with a label lookup."""

    NAMES = {}

    def __str__(self):
        return self.NAMES.get(int(self), UNKNOWN)

    def __repr__(self):
        return f"{type(self).__name__}(0x{int(self):X})"


# Baseboard (type 2) board type, offset 0Dh
class BoardType(Code):
    NAMES = {
        0x01: UNKNOWN,
        0x02: OTHER,
        0x03: "Server Blade",
        0x04: "Connectivity Switch",
        0x05: "System Management Module",
        0x06: "Processor Module",
        0x07: "I/O Module",
        0x08: "Memory Module",
        0x09: "Daughter board",
        0x0A: "Motherboard",
        0x0B: "Processor/Memory Module",
        0x0C: "Processor/IO Module",
        0x0D: "Interconnect board",
    }


# System information (type 1) wake-up type, offset 18h
class WakeUpType(Code):
    NAMES = {
        0x00: RESERVED,
        0x01: OTHER,
        0x02: UNKNOWN,
        0x03: "APM Timer",
        0x04: "Modem Ring",
        0x05: "LAN Remote",
        0x06: "Power Switch",
        0x07: "PCI PME#",
        0x08: "AC Power Restored",
    }


# System enclosure (type 3) type, offset 05h bits 6:0
class ChassisType(Code):
    NAMES = {
        0x01: OTHER,
        0x02: UNKNOWN,
        0x03: "Desktop",
        0x04: "Low Profile Desktop",
        0x05: "Pizza Box",
        0x06: "Mini Tower",
        0x07: "Tower",
        0x08: "Portable",
        0x09: "Laptop",
        0x0A: "Notebook",
        0x0B: "Hand Held",
        0x0C: "Docking Station",
        0x0D: "All in One",
        0x0E: "Sub Notebook",
        0x0F: "Space-saving",
        0x10: "Lunch Box",
        0x11: "Main Server Chassis",
        0x12: "Expansion Chassis",
        0x13: "SubChassis",
        0x14: "Bus Expansion Chassis",
        0x15: "Peripheral Chassis",
        0x16: "RAID Chassis",
        0x17: "Rack Mount Chassis",
        0x18: "Sealed-case PC",
        0x19: "Multi-system chassis",
        0x1A: "Compact PCI",
        0x1B: "Advanced TCA",
        0x1C: "Blade",
        0x1D: "Blade Enclosure",
        0x1E: "Tablet",
        0x1F: "Convertible",
        0x20: "Detachable",
        0x21: "IoT Gateway",
        0x22: "Embedded PC",
        0x23: "Mini PC",
        0x24: "Stick PC",
    }


# Processor (type 4) type, offset 05h
class ProcessorType(Code):
    NAMES = {
        0x01: OTHER,
        0x02: UNKNOWN,
        0x03: "Central Processor",
        0x04: "Math Processor",
        0x05: "DSP Processor",
        0x06: "Video Processor",
    }


class ProcessorStatus(Code):
    """
    Processor (type 4) status byte, offset 18h.
    Bit 6 flags a populated socket, bits 2:0 carry the CPU state.
    """

    NAMES = {
        0x00: UNKNOWN,
        0x01: "Enabled",
        0x02: "Disabled By User",
        0x03: "Disabled By BIOS",
        0x04: "Idle",
        0x07: OTHER,
    }

    @property
    def socket_populated(self):
        return bool(self & 0x40)

    @property
    def cpu_status(self):
        return self.NAMES.get(self & 0x07, RESERVED)

    def __str__(self):
        if not self.socket_populated:
            return "Unpopulated"
        return f"Populated, {self.cpu_status}"


class CacheConfiguration(Code):
    """Cache (type 7) configuration word, offset 05h."""

    LOCATIONS = ("Internal", "External", RESERVED, UNKNOWN)
    MODES = ("Write Through", "Write Back", "Varies With Memory Address", UNKNOWN)

    @property
    def level(self):
        return (self & 0x07) + 1

    @property
    def socketed(self):
        return bool(self & 0x08)

    @property
    def location(self):
        return self.LOCATIONS[(self >> 5) & 0x03]

    @property
    def enabled(self):
        return bool(self & 0x80)

    @property
    def operational_mode(self):
        return self.MODES[(self >> 8) & 0x03]

    def __str__(self):
        state = "Enabled" if self.enabled else "Disabled"
        return f"L{self.level}, {state}, {self.location}, {self.operational_mode}"


# System slot (type 9) current usage, offset 07h
class SlotCurrentUsage(Code):
    NAMES = {
        0x01: OTHER,
        0x02: UNKNOWN,
        0x03: "Available",
        0x04: "In use",
        0x05: "Unavailable",
    }


# Physical memory array (type 16) location, offset 04h
class MemoryArrayLocation(Code):
    NAMES = {
        0x01: OTHER,
        0x02: UNKNOWN,
        0x03: "System board or motherboard",
        0x04: "ISA add-on card",
        0x05: "EISA add-on card",
        0x06: "PCI add-on card",
        0x07: "MCA add-on card",
        0x08: "PCMCIA add-on card",
        0x09: "Proprietary add-on card",
        0x0A: "NuBus",
        0xA0: "PC-98/C20 add-on card",
        0xA1: "PC-98/C24 add-on card",
        0xA2: "PC-98/E add-on card",
        0xA3: "PC-98/Local bus add-on card",
        0xA4: "CXL add-on card",
    }


# Physical memory array (type 16) use, offset 05h
class MemoryArrayUse(Code):
    NAMES = {
        0x01: OTHER,
        0x02: UNKNOWN,
        0x03: "System memory",
        0x04: "Video memory",
        0x05: "Flash memory",
        0x06: "Non-volatile RAM",
        0x07: "Cache memory",
    }


# Physical memory array (type 16) error correction, offset 06h
class MemoryArrayErrorCorrection(Code):
    NAMES = {
        0x01: OTHER,
        0x02: UNKNOWN,
        0x03: "None",
        0x04: "Parity",
        0x05: "Single-bit ECC",
        0x06: "Multi-bit ECC",
        0x07: "CRC",
    }


# Memory device (type 17) form factor, offset 0Eh
class FormFactor(Code):
    NAMES = {
        0x01: OTHER,
        0x02: UNKNOWN,
        0x03: "SIMM",
        0x04: "SIP",
        0x05: "Chip",
        0x06: "DIP",
        0x07: "ZIP",
        0x08: "Proprietary Card",
        0x09: "DIMM",
        0x0A: "TSOP",
        0x0B: "Row of chips",
        0x0C: "RIMM",
        0x0D: "SODIMM",
        0x0E: "SRIMM",
        0x0F: "FB-DIMM",
        0x10: "Die",
    }


# Memory device (type 17) memory type, offset 12h
class MemoryType(Code):
    NAMES = {
        0x01: OTHER,
        0x02: UNKNOWN,
        0x03: "DRAM",
        0x04: "EDRAM",
        0x05: "VRAM",
        0x06: "SRAM",
        0x07: "RAM",
        0x08: "ROM",
        0x09: "FLASH",
        0x0A: "EEPROM",
        0x0B: "FEPROM",
        0x0C: "EPROM",
        0x0D: "CDRAM",
        0x0E: "3DRAM",
        0x0F: "SDRAM",
        0x10: "SGRAM",
        0x11: "RDRAM",
        0x12: "DDR",
        0x13: "DDR2",
        0x14: "DDR2 FB-DIMM",
        0x15: RESERVED,
        0x16: RESERVED,
        0x17: RESERVED,
        0x18: "DDR3",
        0x19: "FBD2",
        0x1A: "DDR4",
        0x1B: "LPDDR",
        0x1C: "LPDDR2",
        0x1D: "LPDDR3",
        0x1E: "LPDDR4",
        0x1F: "Logical non-volatile device",
        0x20: "HBM (High Bandwidth Memory)",
        0x21: "HBM2 (High Bandwidth Memory Generation 2)",
        0x22: "DDR5",
        0x23: "LPDDR5",
    }


class TypeDetail(Code):
    """
    Memory device (type 17) type detail, offset 13h.
    A 16-bit mask; each set bit adds one attribute, listed from bit 15 down.
    """

    ATTRIBUTES = (
        "LRDIMM",                     # Bit 15
        "Unbuffered (Unregistered)",  # Bit 14
        "Registered (Buffered)",      # Bit 13
        "Non-volatile",               # Bit 12
        "Cache DRAM",                 # Bit 11
        "Window DRAM",                # Bit 10
        "EDO",                        # Bit 9
        "CMOS",                       # Bit 8
        "Synchronous",                # Bit 7
        "RAMBUS",                     # Bit 6
        "Pseudo-static",              # Bit 5
        "Static column",              # Bit 4
        "Fast-paged",                 # Bit 3
        UNKNOWN,                      # Bit 2
        OTHER,                        # Bit 1
        RESERVED,                     # Bit 0
    )

    @property
    def attributes(self):
        return tuple(
            name for bit, name in zip(range(15, -1, -1), self.ATTRIBUTES)
            if self & (1 << bit)
        )

    def __str__(self):
        return " ".join(self.attributes)

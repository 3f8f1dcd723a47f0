"""
Typed records for the SMBIOS structure types we understand, and the
parse_type_N decoders that build them from RawStructure values.

Offsets below are the absolute offsets from the SMBIOS reference
specification (DSP0134); the field readers take care of the stripped
header.
"""
import logging
from collections import namedtuple
from types import MappingProxyType

from enums import (
    BoardType, CacheConfiguration, ChassisType, FormFactor,
    MemoryArrayErrorCorrection, MemoryArrayLocation, MemoryArrayUse,
    MemoryType, ProcessorStatus, ProcessorType, SlotCurrentUsage,
    TypeDetail, WakeUpType,
)
from fields import (
    HEADER_LENGTH, get_byte, get_dword, get_qword, get_string, get_strings,
    get_word, is_nth_bit_set,
)
from system_uuid import UUIDDecodeError, decode_uuid
from units import (
    BIOSROMSize, CacheSize, DeviceSet, DeviceWidth, ErrorInformationHandle,
    ExtendedBIOSROMSize, ExtendedMaximumCapacity, ExtendedSize, Handle,
    MaximumCapacity, MemoryDeviceSize, MemorySpeed, Voltage,
)

logger = logging.getLogger(__name__)

TYPE_NAMES = {
    0: "BIOS Information",
    1: "System Information",
    2: "Baseboard Information",
    3: "System Enclosure",
    4: "Processor Information",
    5: "Memory Controller Information",
    6: "Memory Module Information",
    7: "Cache Information",
    8: "Port Connector Information",
    9: "System Slots",
    10: "On Board Devices Information",
    11: "OEM Strings",
    12: "System Configuration Options",
    13: "BIOS Language Information",
    14: "Group Associations",
    15: "System Event Log",
    16: "Physical Memory Array",
    17: "Memory Device",
}

# Obsolete (5, 6, 10) or not decoded (15)
IGNORED_TYPES = frozenset({5, 6, 10, 15})


BIOSInformation = namedtuple('BIOSInformation', [
    'vendor', 'version', 'starting_segment', 'release_date', 'rom_size',
    'system_bios_major_release', 'system_bios_minor_release',
    'ec_firmware_major_release', 'ec_firmware_minor_release',
    'extended_rom_size',
])

SystemInformation = namedtuple('SystemInformation', [
    'manufacturer', 'product_name', 'version', 'serial_number', 'uuid',
    'wake_up_type', 'sku_number', 'family',
])

BaseboardInformation = namedtuple('BaseboardInformation', [
    'manufacturer', 'product', 'version', 'serial_number', 'asset_tag',
    'location_in_chassis', 'chassis_handle', 'board_type',
])

SystemEnclosure = namedtuple('SystemEnclosure', [
    'manufacturer', 'chassis_type', 'chassis_lock', 'version',
    'serial_number', 'asset_tag_number', 'contained_element_count',
    'contained_element_record_length', 'sku_number',
])

ProcessorInformation = namedtuple('ProcessorInformation', [
    'socket_designation', 'processor_type', 'processor_manufacturer',
    'processor_id', 'processor_version', 'external_clock', 'max_speed',
    'current_speed', 'status', 'l1_cache_handle', 'l2_cache_handle',
    'l3_cache_handle', 'serial_number', 'asset_tag', 'part_number',
    'core_count', 'core_enabled', 'thread_count',
])

CacheInformation = namedtuple('CacheInformation', [
    'socket_designation', 'configuration', 'maximum_size', 'installed_size',
])

PortConnectorInformation = namedtuple('PortConnectorInformation', [
    'internal_reference_designator', 'external_reference_designator',
])

SystemSlot = namedtuple('SystemSlot', [
    'slot_designation', 'current_usage', 'slot_id',
])

OEMStrings = namedtuple('OEMStrings', ['count', 'strings'])

SystemConfigurationOptions = namedtuple('SystemConfigurationOptions', ['count', 'strings'])

BIOSLanguageInformation = namedtuple('BIOSLanguageInformation', [
    'installable_languages', 'current_language',
])

GroupItem = namedtuple('GroupItem', ['type_code', 'handle'])

GroupAssociations = namedtuple('GroupAssociations', ['group_name', 'items'])


class PhysicalMemoryArray(namedtuple('PhysicalMemoryArray', [
        'location', 'use', 'memory_error_correction', 'maximum_capacity',
        'memory_error_information_handle', 'number_of_memory_devices',
        'extended_maximum_capacity'])):
    __slots__ = ()

    @property
    def capacity_gigabytes(self):
        """Maximum capacity in GB, taken from whichever field carries it."""
        if self.maximum_capacity == MaximumCapacity.SEE_EXTENDED:
            return self.extended_maximum_capacity.gigabytes
        return self.maximum_capacity.gigabytes


class MemoryDevice(namedtuple('MemoryDevice', [
        'physical_memory_array_handle', 'memory_error_information_handle',
        'total_width', 'data_width', 'size', 'form_factor', 'device_set',
        'device_locator', 'bank_locator', 'memory_type', 'type_detail',
        'speed', 'manufacturer', 'serial_number', 'asset_tag', 'part_number',
        'rank', 'extended_size', 'configured_memory_speed', 'minimum_voltage',
        'maximum_voltage', 'configured_voltage'])):
    __slots__ = ()

    @property
    def size_megabytes(self):
        """Installed size in MB; None when unknown."""
        if self.size.extended:
            return self.extended_size.megabytes
        return self.size.megabytes

    @property
    def size_text(self):
        if self.size.extended:
            return str(self.extended_size)
        return str(self.size)


# --- Specific Parsers ---

def parse_type_0(structure):
    # BIOS Information
    return BIOSInformation(
        vendor=get_string(structure, 0x04),
        version=get_string(structure, 0x05),
        starting_segment=get_word(structure, 0x06),
        release_date=get_string(structure, 0x08),
        rom_size=BIOSROMSize(get_byte(structure, 0x09)),
        system_bios_major_release=get_byte(structure, 0x14),
        system_bios_minor_release=get_byte(structure, 0x15),
        ec_firmware_major_release=get_byte(structure, 0x16),
        ec_firmware_minor_release=get_byte(structure, 0x17),
        extended_rom_size=ExtendedBIOSROMSize(get_word(structure, 0x18)),
    )


def parse_type_1(structure, version):
    # System Information
    try:
        uuid_text = str(decode_uuid(structure, version))
    except UUIDDecodeError as e:
        logger.debug("System UUID unavailable: %s", e)
        uuid_text = ""

    return SystemInformation(
        manufacturer=get_string(structure, 0x04),
        product_name=get_string(structure, 0x05),
        version=get_string(structure, 0x06),
        serial_number=get_string(structure, 0x07),
        uuid=uuid_text,
        wake_up_type=WakeUpType(get_byte(structure, 0x18)),
        sku_number=get_string(structure, 0x19),
        family=get_string(structure, 0x1A),
    )


def parse_type_2(structure):
    # Baseboard
    return BaseboardInformation(
        manufacturer=get_string(structure, 0x04),
        product=get_string(structure, 0x05),
        version=get_string(structure, 0x06),
        serial_number=get_string(structure, 0x07),
        asset_tag=get_string(structure, 0x08),
        location_in_chassis=get_string(structure, 0x0A),
        chassis_handle=Handle(get_word(structure, 0x0B)),
        board_type=BoardType(get_byte(structure, 0x0D)),
    )


def parse_type_3(structure):
    # Chassis. The SKU number follows the contained element records, so its
    # offset depends on how many there are and how long each one is.
    type_code = get_byte(structure, 0x05)
    count = get_byte(structure, 0x13)
    record_length = get_byte(structure, 0x14)

    return SystemEnclosure(
        manufacturer=get_string(structure, 0x04),
        chassis_type=ChassisType(type_code & 0x7F),
        chassis_lock=is_nth_bit_set(type_code, 7),
        version=get_string(structure, 0x06),
        serial_number=get_string(structure, 0x07),
        asset_tag_number=get_string(structure, 0x08),
        contained_element_count=count,
        contained_element_record_length=record_length,
        sku_number=get_string(structure, 0x15 + count * record_length),
    )


def parse_type_4(structure):
    # Processor. Speeds are MHz, 0 meaning unknown; left raw.
    return ProcessorInformation(
        socket_designation=get_string(structure, 0x04),
        processor_type=ProcessorType(get_byte(structure, 0x05)),
        processor_manufacturer=get_string(structure, 0x07),
        processor_id=get_qword(structure, 0x08),
        processor_version=get_string(structure, 0x10),
        external_clock=get_word(structure, 0x12),
        max_speed=get_word(structure, 0x14),
        current_speed=get_word(structure, 0x16),
        status=ProcessorStatus(get_byte(structure, 0x18)),
        l1_cache_handle=Handle(get_word(structure, 0x1A)),
        l2_cache_handle=Handle(get_word(structure, 0x1C)),
        l3_cache_handle=Handle(get_word(structure, 0x1E)),
        serial_number=get_string(structure, 0x20),
        asset_tag=get_string(structure, 0x21),
        part_number=get_string(structure, 0x22),
        core_count=get_byte(structure, 0x23),
        core_enabled=get_byte(structure, 0x24),
        thread_count=get_byte(structure, 0x25),
    )


def parse_type_7(structure):
    # Cache
    return CacheInformation(
        socket_designation=get_string(structure, 0x04),
        configuration=CacheConfiguration(get_word(structure, 0x05)),
        maximum_size=CacheSize(get_word(structure, 0x07)),
        installed_size=CacheSize(get_word(structure, 0x09)),
    )


def parse_type_8(structure):
    # Port Connector
    return PortConnectorInformation(
        internal_reference_designator=get_string(structure, 0x04),
        external_reference_designator=get_string(structure, 0x06),
    )


def parse_type_9(structure):
    # System Slots
    return SystemSlot(
        slot_designation=get_string(structure, 0x04),
        current_usage=SlotCurrentUsage(get_byte(structure, 0x07)),
        slot_id=get_word(structure, 0x09),
    )


def parse_type_11(structure):
    # OEM Strings
    return OEMStrings(
        count=get_byte(structure, 0x04),
        strings=get_strings(structure),
    )


def parse_type_12(structure):
    # System Configuration Options
    return SystemConfigurationOptions(
        count=get_byte(structure, 0x04),
        strings=get_strings(structure),
    )


def parse_type_13(structure):
    # BIOS Language
    return BIOSLanguageInformation(
        installable_languages=get_strings(structure),
        current_language=get_string(structure, 0x15),
    )


def parse_type_14(structure):
    # Group Associations: 3-byte (type, handle) records from offset 05h
    total_length = len(structure.formatted) + HEADER_LENGTH
    items = []
    for offset in range(0x05, total_length - 2, 3):
        items.append(GroupItem(
            type_code=get_byte(structure, offset),
            handle=Handle(get_word(structure, offset + 1)),
        ))

    return GroupAssociations(
        group_name=get_string(structure, 0x04),
        items=tuple(items),
    )


def parse_type_16(structure):
    # Physical Memory Array
    return PhysicalMemoryArray(
        location=MemoryArrayLocation(get_byte(structure, 0x04)),
        use=MemoryArrayUse(get_byte(structure, 0x05)),
        memory_error_correction=MemoryArrayErrorCorrection(get_byte(structure, 0x06)),
        maximum_capacity=MaximumCapacity(get_dword(structure, 0x07)),
        memory_error_information_handle=ErrorInformationHandle(get_word(structure, 0x0B)),
        number_of_memory_devices=get_word(structure, 0x0D),
        extended_maximum_capacity=ExtendedMaximumCapacity(get_qword(structure, 0x0F)),
    )


def parse_type_17(structure):
    # Memory Device
    return MemoryDevice(
        physical_memory_array_handle=Handle(get_word(structure, 0x04)),
        memory_error_information_handle=ErrorInformationHandle(get_word(structure, 0x06)),
        total_width=DeviceWidth(get_word(structure, 0x08)),
        data_width=DeviceWidth(get_word(structure, 0x0A)),
        size=MemoryDeviceSize(get_word(structure, 0x0C)),
        form_factor=FormFactor(get_byte(structure, 0x0E)),
        device_set=DeviceSet(get_byte(structure, 0x0F)),
        device_locator=get_string(structure, 0x10),
        bank_locator=get_string(structure, 0x11),
        memory_type=MemoryType(get_byte(structure, 0x12)),
        type_detail=TypeDetail(get_word(structure, 0x13)),
        speed=MemorySpeed(get_word(structure, 0x15)),
        manufacturer=get_string(structure, 0x17),
        serial_number=get_string(structure, 0x18),
        asset_tag=get_string(structure, 0x19),
        part_number=get_string(structure, 0x1A),
        rank=get_byte(structure, 0x1B) & 0x0F,
        extended_size=ExtendedSize(get_dword(structure, 0x1C)),
        configured_memory_speed=MemorySpeed(get_word(structure, 0x20)),
        minimum_voltage=Voltage(get_word(structure, 0x22)),
        maximum_voltage=Voltage(get_word(structure, 0x24)),
        configured_voltage=Voltage(get_word(structure, 0x26)),
    )


# System Information (type 1) also needs the table version and is
# dispatched separately.
PARSERS = MappingProxyType({
    0: parse_type_0,
    2: parse_type_2,
    3: parse_type_3,
    4: parse_type_4,
    7: parse_type_7,
    8: parse_type_8,
    9: parse_type_9,
    11: parse_type_11,
    12: parse_type_12,
    13: parse_type_13,
    14: parse_type_14,
    16: parse_type_16,
    17: parse_type_17,
})

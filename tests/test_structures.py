"""
Tests for the per-type structure decoders.
"""

import pytest

from parsers import RawStructure, Version
from structures import (
    PARSERS, parse_type_0, parse_type_1, parse_type_2, parse_type_3,
    parse_type_4, parse_type_7, parse_type_8, parse_type_9, parse_type_11,
    parse_type_12, parse_type_13, parse_type_14, parse_type_16, parse_type_17,
)


@pytest.fixture
def by_type(sample_structures):
    """First sample structure of each type code."""
    found = {}
    for s in sample_structures:
        found.setdefault(s.type_code, s)
    return found


def test_bios_information(by_type):
    bios = parse_type_0(by_type[0])
    assert bios.vendor == "American Megatrends Inc."
    assert bios.version == "P3.40"
    assert bios.release_date == "04/12/2021"
    assert bios.starting_segment == 0xE800
    assert str(bios.rom_size) == "See Extended ROM Size"
    assert str(bios.extended_rom_size) == "32 MB"
    assert (bios.system_bios_major_release, bios.system_bios_minor_release) == (5, 17)


def test_system_information(by_type, version_3_3):
    system = parse_type_1(by_type[1], version_3_3)
    assert system.manufacturer == "ASRock"
    assert system.product_name == "X570 Taichi"
    assert system.version == ""
    assert system.serial_number == "SN-0001"
    assert system.uuid == "00112233-4455-6677-8899-aabbccddeeff"
    assert str(system.wake_up_type) == "Power Switch"
    assert system.sku_number == ""
    assert system.family == "Desktop"


def test_system_information_old_version(by_type):
    system = parse_type_1(by_type[1], Version(2, 4, 0))
    assert system.uuid == "33221100-5544-7766-8899-aabbccddeeff"


def test_system_information_truncated_uuid(make_structure, version_3_3):
    # SMBIOS 2.0 length: no room for the UUID
    system = parse_type_1(make_structure(1, 0x08, {0x04: ('B', 1)}, ["Acme"]), version_3_3)
    assert system.manufacturer == "Acme"
    assert system.uuid == ""
    assert str(system.wake_up_type) == "Reserved"


def test_baseboard_information(by_type):
    board = parse_type_2(by_type[2])
    assert board.manufacturer == "ASRock"
    assert board.product == "X570 Taichi"
    assert board.asset_tag == ""
    assert str(board.chassis_handle) == "0x0003"
    assert str(board.board_type) == "Motherboard"


def test_system_enclosure(by_type):
    enclosure = parse_type_3(by_type[3])
    assert enclosure.manufacturer == "Chassis Co"
    assert str(enclosure.chassis_type) == "Desktop"
    assert not enclosure.chassis_lock
    assert enclosure.sku_number == "SKU-42"


def test_system_enclosure_sku_follows_contained_elements(make_structure):
    # Two contained elements of three bytes each push the SKU index to 15h + 6
    structure = make_structure(3, 0x15 + 6 + 1, {
        0x04: ('B', 1), 0x05: ('B', 0x97), 0x08: ('B', 3),
        0x13: ('B', 2), 0x14: ('B', 3),
        0x15: ('B', 9),  # inside the element records, not the SKU
        0x1B: ('B', 2),
    }, ["Vendor", "SKU-OK", "TAG-1"])
    enclosure = parse_type_3(structure)
    assert enclosure.contained_element_count == 2
    assert enclosure.contained_element_record_length == 3
    assert enclosure.sku_number == "SKU-OK"
    assert enclosure.asset_tag_number == "TAG-1"
    assert str(enclosure.chassis_type) == "Rack Mount Chassis"
    assert enclosure.chassis_lock


def test_processor_information(by_type):
    cpu = parse_type_4(by_type[4])
    assert cpu.socket_designation == "AM4"
    assert str(cpu.processor_type) == "Central Processor"
    assert cpu.processor_manufacturer == "Advanced Micro Devices, Inc."
    assert cpu.processor_version == "AMD Ryzen 9 5950X"
    assert cpu.max_speed == 4600
    assert cpu.current_speed == 3800
    assert str(cpu.status) == "Populated, Enabled"
    assert (cpu.core_count, cpu.core_enabled, cpu.thread_count) == (16, 16, 32)


def test_processor_speed_zero_is_kept_raw(make_structure):
    cpu = parse_type_4(make_structure(4, 0x1A, {0x14: ('H', 0)}))
    assert cpu.max_speed == 0
    assert type(cpu.max_speed) is int


def test_cache_information(by_type):
    cache = parse_type_7(by_type[7])
    assert cache.socket_designation == "L2 - Cache"
    assert cache.configuration.level == 2
    assert cache.installed_size.kilobytes == 512


def test_port_connector(by_type):
    port = parse_type_8(by_type[8])
    assert port.internal_reference_designator == "J1"
    assert port.external_reference_designator == "USB1"


def test_system_slot(by_type):
    slot = parse_type_9(by_type[9])
    assert slot.slot_designation == "PCIE1"
    assert str(slot.current_usage) == "In use"
    assert slot.slot_id == 1


def test_oem_strings(by_type):
    oem = parse_type_11(by_type[11])
    assert oem.count == 2
    assert oem.strings == ("OEM one", "OEM two")


def test_configuration_options(by_type):
    options = parse_type_12(by_type[12])
    assert options.strings == ("CMOS clear: JP1",)


def test_bios_language(by_type):
    language = parse_type_13(by_type[13])
    assert language.installable_languages == ("en|US|iso8859-1", "fr|FR|iso8859-1")
    assert language.current_language == "en|US|iso8859-1"


def test_group_associations(by_type):
    group = parse_type_14(by_type[14])
    assert group.group_name == "Cpu Module"
    assert [(item.type_code, item.handle) for item in group.items] == [(4, 0x0004), (7, 0x0007)]


def test_group_associations_ignores_partial_record(make_structure):
    group = parse_type_14(make_structure(14, 0x0A, {0x05: ('B', 4), 0x06: ('H', 0x0004)}))
    assert len(group.items) == 1


def test_physical_memory_array(by_type):
    array = parse_type_16(by_type[16])
    assert str(array.location) == "System board or motherboard"
    assert str(array.use) == "System memory"
    assert str(array.memory_error_correction) == "None"
    assert str(array.maximum_capacity) == "128 GB"
    assert str(array.memory_error_information_handle) == "Not Provided"
    assert array.number_of_memory_devices == 4
    assert array.capacity_gigabytes == 128


def test_physical_memory_array_extended_capacity(make_structure):
    array = parse_type_16(make_structure(16, 0x17, {
        0x07: ('I', 0x80000000), 0x0F: ('Q', 8 * 1024 ** 4),
    }))
    assert str(array.maximum_capacity) == ""
    assert str(array.extended_maximum_capacity) == "8192 GB"
    assert array.capacity_gigabytes == 8192


def test_memory_device(by_type):
    dimm = parse_type_17(by_type[17])
    assert str(dimm.physical_memory_array_handle) == "0x0010"
    assert str(dimm.total_width) == "64 bits"
    assert str(dimm.size) == "16384 MB"
    assert dimm.size_megabytes == 16384
    assert str(dimm.form_factor) == "DIMM"
    assert str(dimm.device_set) == "None"
    assert dimm.device_locator == "DIMM 0"
    assert dimm.bank_locator == "P0 CHANNEL A"
    assert str(dimm.memory_type) == "DDR4"
    assert str(dimm.type_detail) == "Synchronous"
    assert str(dimm.speed) == "3200 MT/s"
    assert dimm.manufacturer == "Micron"
    assert dimm.serial_number == ""
    assert dimm.part_number == "16ATF2G64AZ-3G2"
    assert dimm.rank == 2
    assert str(dimm.configured_voltage) == "1.20 V"


def test_memory_device_extended_size(make_structure):
    dimm = parse_type_17(make_structure(17, 0x28, {0x0C: ('H', 0x7FFF), 0x1C: ('I', 65536)}))
    assert dimm.size.extended
    assert dimm.size_megabytes == 65536
    assert dimm.size_text == "65536 MB"


def test_memory_device_truncated_to_smbios_2_1(make_structure):
    dimm = parse_type_17(make_structure(17, 0x15, {0x0C: ('H', 0x8100), 0x0F: ('B', 0xFF)}, ["DIMM"]))
    assert str(dimm.size) == "256 KB"
    assert str(dimm.device_set) == "Unknown"
    assert str(dimm.speed) == "Unknown"
    assert str(dimm.minimum_voltage) == "Unknown"
    assert dimm.extended_size == 0


@pytest.mark.parametrize("type_code", sorted(PARSERS))
def test_every_decoder_accepts_empty_block(type_code):
    record = PARSERS[type_code](RawStructure(type_code, b'', (), 0))
    for value in record:
        assert value in ("", 0, ())


def test_parsers_mapping_is_read_only():
    with pytest.raises(TypeError):
        PARSERS[1] = parse_type_0

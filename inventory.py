"""
Inventory assembly: routes raw structures to their type decoders and
collects the results into one Inventory value.
"""
import logging
from collections import namedtuple
from types import MappingProxyType

from enums import Code
from fields import InvalidStructureError, check_structure
from parsers import RawStructure, Version, iter_raw_structures
from structures import IGNORED_TYPES, PARSERS, TYPE_NAMES, parse_type_1

logger = logging.getLogger(__name__)

# Types that appear once; a repeat replaces the earlier record.
SINGLETONS = MappingProxyType({
    0: 'bios_information',
    1: 'system_information',
    2: 'baseboard_information',
    3: 'system_enclosure',
    11: 'oem_strings',
    12: 'system_configuration_options',
    13: 'bios_language_information',
    14: 'group_associations',
    16: 'physical_memory_array',
})

# Types that repeat, kept in table order.
COLLECTIONS = MappingProxyType({
    4: 'processor_information',
    7: 'cache_information',
    8: 'port_connector_information',
    9: 'system_slots',
    17: 'memory_devices',
})

Inventory = namedtuple('Inventory', ['version'] + list(SINGLETONS.values()) + list(COLLECTIONS.values()))


def parse_structure(structure, version):
    """Decodes one raw structure with the decoder registered for its type."""
    check_structure(structure)
    if structure.type_code == 1:
        return parse_type_1(structure, version)
    return PARSERS[structure.type_code](structure)


def _empty_record(type_code, version):
    return parse_structure(RawStructure(type_code, b'', (), 0), version)


def _handle(structure):
    handle = getattr(structure, 'handle', None)
    return handle if isinstance(handle, int) else 0


def decode(raw_structures, version):
    """
    Builds an Inventory from a sequence of RawStructure values.
    Unknown, obsolete and malformed structures are skipped; this never
    raises because of the table contents.
    """
    singletons = {field: _empty_record(type_code, version) for type_code, field in SINGLETONS.items()}
    collections = {field: [] for field in COLLECTIONS.values()}
    seen = set()

    for structure in raw_structures:
        handle = _handle(structure)
        try:
            check_structure(structure)
            type_code = structure.type_code
            if type_code not in SINGLETONS and type_code not in COLLECTIONS:
                if type_code in IGNORED_TYPES:
                    logger.debug("Ignoring type %d (%s) handle 0x%04X", type_code, TYPE_NAMES[type_code], handle)
                else:
                    logger.debug("No decoder for type %d handle 0x%04X", type_code, handle)
                continue
            record = parse_structure(structure, version)
        except InvalidStructureError as e:
            logger.warning("Skipping structure handle 0x%04X: %s", handle, e)
            continue

        if type_code in SINGLETONS:
            field = SINGLETONS[type_code]
            if field in seen:
                logger.debug("Type %d repeated; keeping handle 0x%04X", type_code, handle)
            seen.add(field)
            singletons[field] = record
        else:
            collections[COLLECTIONS[type_code]].append(record)

    return Inventory(
        version=version,
        **singletons,
        **{field: tuple(records) for field, records in collections.items()},
    )


def decode_table(data, version, offset=0):
    """Frames a raw structure table and decodes it."""
    return decode(iter_raw_structures(data, offset), version)


def _plain(value):
    if isinstance(value, Version):
        return str(value)
    if isinstance(value, Code):
        return str(value)
    if hasattr(value, '_asdict'):
        return {k: _plain(v) for k, v in value._asdict().items()}
    if isinstance(value, (tuple, list)):
        return [_plain(v) for v in value]
    return value


def as_dict(inventory):
    """JSON-ready view of an Inventory: codes become their labels."""
    return _plain(inventory)

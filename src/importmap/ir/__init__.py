from .models import (
    BLOCKED,
    Address,
    Blocked,
    ImportMap,
    Mapped,
    RawImportMap,
    ScopeEntry,
    Scopes,
    SpecifierMap,
    SpecifierMapEntry,
    address_from_json,
    address_to_json,
)
from .serialize import canonical_import_map_json, hash_import_map, serialize_import_map

__all__ = [
    "Address",
    "BLOCKED",
    "Blocked",
    "ImportMap",
    "Mapped",
    "RawImportMap",
    "ScopeEntry",
    "Scopes",
    "SpecifierMap",
    "SpecifierMapEntry",
    "address_from_json",
    "address_to_json",
    "canonical_import_map_json",
    "hash_import_map",
    "serialize_import_map",
]

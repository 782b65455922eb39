from __future__ import annotations

import hashlib
import json

from .models import ImportMap


def canonical_import_map_json(import_map: ImportMap) -> str:
    # Key order carries match priority, so keys are never re-sorted here.
    return json.dumps(
        import_map.as_dict(),
        separators=(",", ":"),
        ensure_ascii=True,
    )


def serialize_import_map(import_map: ImportMap) -> bytes:
    return canonical_import_map_json(import_map).encode("utf-8")


def hash_import_map(import_map: ImportMap, algo: str = "sha256") -> str:
    hasher = hashlib.new(algo)
    hasher.update(serialize_import_map(import_map))
    return hasher.hexdigest()

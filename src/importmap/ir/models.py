from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Final, NotRequired, TypedDict

type RawSpecifierMap = Mapping[str, str | None]
type RawScopes = Mapping[str, RawSpecifierMap]


class RawImportMap(TypedDict):
    imports: NotRequired[RawSpecifierMap]
    scopes: NotRequired[RawScopes]
    integrity: NotRequired[Mapping[str, str]]


@dataclass(frozen=True, slots=True)
class Mapped:
    url: str

    def __post_init__(self) -> None:
        if not self.url:
            raise ValueError("mapped address url must be non-empty")


@dataclass(frozen=True, slots=True)
class Blocked:
    """A key explicitly mapped to nothing; matching it is a hard failure."""


BLOCKED: Final[Blocked] = Blocked()

type Address = Mapped | Blocked


def address_from_json(value: str | None) -> Address:
    if value is None:
        return BLOCKED
    return Mapped(value)


def address_to_json(address: Address) -> str | None:
    if isinstance(address, Mapped):
        return address.url
    return None


def _first_duplicate(values: list[str]) -> str | None:
    seen: set[str] = set()
    for value in values:
        if value in seen:
            return value
        seen.add(value)
    return None


@dataclass(frozen=True, slots=True)
class SpecifierMapEntry:
    key: str
    address: Address

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("specifier key must be non-empty")


@dataclass(frozen=True, slots=True)
class SpecifierMap:
    entries: tuple[SpecifierMapEntry, ...] = ()

    def __post_init__(self) -> None:
        duplicate = _first_duplicate([entry.key for entry in self.entries])
        if duplicate is not None:
            raise ValueError(f"duplicate specifier key: {duplicate}")

    def __getitem__(self, key: str) -> Address:
        for entry in self.entries:
            if entry.key == key:
                return entry.address
        raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        return any(entry.key == key for entry in self.entries)

    def __iter__(self) -> Iterator[SpecifierMapEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, key: str, default: Address | None = None) -> Address | None:
        for entry in self.entries:
            if entry.key == key:
                return entry.address
        return default

    def keys(self) -> tuple[str, ...]:
        return tuple(entry.key for entry in self.entries)

    def as_dict(self) -> dict[str, str | None]:
        return {entry.key: address_to_json(entry.address) for entry in self.entries}

    @classmethod
    def from_dict(cls, raw: Mapping[str, str | None]) -> SpecifierMap:
        return cls(
            tuple(SpecifierMapEntry(key, address_from_json(value)) for key, value in raw.items())
        )


@dataclass(frozen=True, slots=True)
class ScopeEntry:
    prefix: str
    imports: SpecifierMap

    def __post_init__(self) -> None:
        if not self.prefix:
            raise ValueError("scope prefix must be non-empty")


@dataclass(frozen=True, slots=True)
class Scopes:
    entries: tuple[ScopeEntry, ...] = ()

    def __post_init__(self) -> None:
        duplicate = _first_duplicate([entry.prefix for entry in self.entries])
        if duplicate is not None:
            raise ValueError(f"duplicate scope prefix: {duplicate}")

    def __getitem__(self, prefix: str) -> SpecifierMap:
        for entry in self.entries:
            if entry.prefix == prefix:
                return entry.imports
        raise KeyError(prefix)

    def __contains__(self, prefix: object) -> bool:
        if not isinstance(prefix, str):
            return False
        return any(entry.prefix == prefix for entry in self.entries)

    def __iter__(self) -> Iterator[ScopeEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def prefixes(self) -> tuple[str, ...]:
        return tuple(entry.prefix for entry in self.entries)

    def as_dict(self) -> dict[str, dict[str, str | None]]:
        return {entry.prefix: entry.imports.as_dict() for entry in self.entries}

    @classmethod
    def from_dict(cls, raw: Mapping[str, Mapping[str, str | None]]) -> Scopes:
        return cls(
            tuple(ScopeEntry(prefix, SpecifierMap.from_dict(imports)) for prefix, imports in raw.items())
        )


@dataclass(frozen=True, slots=True)
class ImportMap:
    """Normalized import map. Entry order is match priority and is kept as given."""

    imports: SpecifierMap = field(default_factory=SpecifierMap)
    scopes: Scopes = field(default_factory=Scopes)

    def as_dict(self) -> dict[str, object]:
        return {
            "imports": self.imports.as_dict(),
            "scopes": self.scopes.as_dict(),
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, object]) -> ImportMap:
        imports = raw.get("imports", {})
        scopes = raw.get("scopes", {})
        if not isinstance(imports, Mapping):
            raise TypeError("imports must be a mapping")
        if not isinstance(scopes, Mapping):
            raise TypeError("scopes must be a mapping")
        return cls(imports=SpecifierMap.from_dict(imports), scopes=Scopes.from_dict(scopes))

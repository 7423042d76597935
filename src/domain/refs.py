"""
Helpers for reference fields.

A foreign key such as ``animalId`` or ``caretakerId`` comes back from the API
either as a bare id string or as the populated document. ``Ref`` normalises
both shapes so call sites do not branch on the type.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class Ref:
    kind: str  # "id" or "populated"
    id: Optional[str]
    value: Optional[Mapping[str, Any]] = None

    @classmethod
    def of(cls, raw: Any) -> Optional["Ref"]:
        if raw is None or raw == "":
            return None
        if isinstance(raw, Mapping):
            return cls(kind="populated", id=record_id(raw), value=raw)
        return cls(kind="id", id=str(raw))

    @property
    def is_populated(self) -> bool:
        return self.kind == "populated"

    def display_name(self, *fields: str, default: Optional[str] = None) -> Optional[str]:
        """First non-empty display field of a populated reference, else the id."""
        if self.value is not None:
            for field in fields or ("name", "commonName", "title", "email"):
                value = self.value.get(field)
                if value:
                    return str(value)
        return self.id if default is None else default


def record_id(record: Mapping[str, Any]) -> Optional[str]:
    """Identity of a record, preferring ``id`` over ``_id``."""
    value = record.get("id") or record.get("_id")
    return str(value) if value is not None else None


def matches_id(record: Mapping[str, Any], target: str) -> bool:
    return record.get("id") == target or record.get("_id") == target


def ref_id(raw: Any) -> Optional[str]:
    ref = Ref.of(raw)
    return ref.id if ref else None


def ref_name(raw: Any, *fields: str) -> Optional[str]:
    ref = Ref.of(raw)
    return ref.display_name(*fields) if ref else None


def species_name(animal: Mapping[str, Any]) -> Optional[str]:
    """Species label of an animal whichever way the species is attached."""
    ref = Ref.of(animal.get("speciesId"))
    if ref and ref.is_populated:
        return ref.display_name("commonName", "scientificName")
    return animal.get("species") or None

from __future__ import annotations

import uuid
from typing import Callable, List, Tuple

from drugcheck.models import DrugEntry

Roster = Tuple[DrugEntry, ...]


def new_drug_id() -> str:
    return uuid.uuid4().hex


def normalize_drug_name(name: str) -> str:
    return (name or "").strip()


def _same_name(a: str, b: str) -> bool:
    return a.casefold() == b.casefold()


def contains(roster: Roster, name: str) -> bool:
    key = normalize_drug_name(name)
    return any(_same_name(d.name, key) for d in roster)


def add(roster: Roster, name: str, id_factory: Callable[[], str] = new_drug_id) -> Roster:
    """
    Append `name` as a new entry.
    Empty input and case-insensitive duplicates return the roster unchanged (same object).
    """
    clean = normalize_drug_name(name)
    if not clean or contains(roster, clean):
        return roster
    return roster + (DrugEntry(id=id_factory(), name=clean),)


def remove(roster: Roster, drug_id: str) -> Roster:
    if not any(d.id == drug_id for d in roster):
        return roster
    return tuple(d for d in roster if d.id != drug_id)


def clear() -> Roster:
    return ()


def names(roster: Roster) -> List[str]:
    return [d.name for d in roster]

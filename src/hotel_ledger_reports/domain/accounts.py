"""Chart-of-accounts models used by the account selector."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class AccountNode:
    """One node of the chart of accounts as delivered by the ledger source."""

    id: str
    name: str = ""
    name_ar: str | None = None
    name_en: str | None = None
    code: str | None = None
    children: tuple[AccountNode, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AccountNode:
        raw_children = data.get("children")
        children = (
            tuple(cls.from_dict(c) for c in raw_children if isinstance(c, Mapping))
            if isinstance(raw_children, list)
            else ()
        )
        code = data.get("code")
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name") or ""),
            name_ar=data.get("name_ar") or None,
            name_en=data.get("name_en") or None,
            code=str(code) if code not in (None, "") else None,
            children=children,
        )

    def display_name(self, language: str) -> str:
        """Name for the active language, falling back to the other one, then `name`."""
        if language == "ar":
            candidates = (self.name_ar, self.name_en, self.name)
        else:
            candidates = (self.name_en, self.name_ar, self.name)
        for candidate in candidates:
            if candidate:
                return candidate
        return ""


@dataclass(frozen=True, slots=True)
class FlatAccountOption:
    """A selectable account entry: indentation, optional code, then the name."""

    id: str
    label: str
    depth: int = 0

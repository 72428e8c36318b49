"""Outfit and user schemas."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List

from models.wardrobe_item import WardrobeItem


@dataclass(frozen=True)
class Outfit:
    """A named group of item snapshots.

    ``items`` are copies taken when the outfit was created, so removing an
    item from the closet leaves existing outfits untouched.
    """

    id: int
    name: str
    items: List[WardrobeItem] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "items": [item.to_dict() for item in self.items],
        }


def parse_join_date(value: str) -> datetime:
    """Parse an ISO-8601 join date, accepting the trailing ``Z`` browsers emit."""

    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@dataclass(frozen=True)
class User:
    username: str
    join_date: str

    @classmethod
    def create(cls, username: str, now: datetime | None = None) -> User:
        """Build a user joining at ``now`` (UTC wall clock by default)."""

        moment = now or datetime.now(timezone.utc)
        return cls(username=username, join_date=moment.isoformat(timespec="milliseconds"))

    @property
    def member_since(self) -> datetime:
        return parse_join_date(self.join_date)

    def to_dict(self) -> Dict[str, Any]:
        return {"username": self.username, "joinDate": self.join_date}

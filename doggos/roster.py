"""In-memory dog roster and its derived list view."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import Enum
from typing import Optional

from .models import Dog

logger = logging.getLogger(__name__)


class MatchPolicy(str, Enum):
    """How a search query is matched against dog names (case-insensitive)."""

    PREFIX = "prefix"
    CONTAINS = "contains"

    @classmethod
    def parse(cls, value: str | None, default: MatchPolicy | None = None) -> MatchPolicy:
        """Parse a policy name, falling back to ``default`` for blank input.

        Args:
            value: Raw policy name such as ``"prefix"`` or ``"contains"``.
            default: Policy returned when ``value`` is blank.

        Returns:
            The matching policy.

        Raises:
            ValueError: If ``value`` names no known policy.
        """
        normalized = (value or "").strip().lower()
        if not normalized:
            return default or cls.PREFIX
        try:
            return cls(normalized)
        except ValueError as e:
            raise ValueError(
                f"Unknown match policy='{value}'. Options: {[p.value for p in cls]}"
            ) from e


class DuplicateNameError(ValueError):
    """Raised when a dog with the same name (ignoring case) is already listed."""

    def __init__(self, name: str, existing: str):
        super().__init__(f"A dog named '{existing}' already exists.")
        self.name = name
        self.existing = existing


class RosterStore:
    """Owns the dogs of one session and the rules for changing them."""

    def __init__(
        self,
        dogs: Iterable[Dog] = (),
        match_policy: MatchPolicy = MatchPolicy.PREFIX,
    ) -> None:
        self.match_policy = MatchPolicy(match_policy)
        self._dogs: dict[str, Dog] = {}
        for dog in dogs:
            self.add(dog)

    def __len__(self) -> int:
        return len(self._dogs)

    def __contains__(self, name: object) -> bool:
        return name in self._dogs

    def get(self, name: str) -> Optional[Dog]:
        """Return the dog with exactly this name, if listed."""
        return self._dogs.get(name)

    def find(self, name: str) -> Optional[Dog]:
        """Return the dog whose name equals ``name`` ignoring case."""
        key = name.casefold()
        for dog in self._dogs.values():
            if dog.name_key == key:
                return dog
        return None

    def add(self, candidate: Dog) -> None:
        """Insert a dog unless its name clashes with a listed one.

        Args:
            candidate: Dog to insert; stored unchanged.

        Raises:
            DuplicateNameError: If a listed dog has the same name ignoring case.
        """
        existing = self.find(candidate.name)
        if existing is not None:
            logger.info(f"Rejected duplicate dog name '{candidate.name}'.")
            raise DuplicateNameError(candidate.name, existing.name)
        self._dogs[candidate.name] = candidate
        logger.debug(f"Added dog '{candidate.name}'; roster size={len(self._dogs)}")

    def remove(self, name: str) -> None:
        """Remove the dog with exactly this name; absent names are ignored."""
        if self._dogs.pop(name, None) is not None:
            logger.debug(f"Removed dog '{name}'; roster size={len(self._dogs)}")

    def toggle_liked(self, name: str) -> None:
        """Flip the liked flag of the dog with exactly this name, if listed."""
        dog = self._dogs.get(name)
        if dog is None:
            return
        self._dogs[name] = dog.with_liked_toggled()

    def matches(self, name: str, query: str) -> bool:
        """Return True when ``name`` satisfies the match policy for ``query``."""
        name_key = name.casefold()
        query_key = query.casefold()
        if self.match_policy is MatchPolicy.CONTAINS:
            return query_key in name_key
        return name_key.startswith(query_key)

    def derived_view(self, query: str = "") -> list[Dog]:
        """Return the ordered, filtered list shown to the user.

        Liked dogs come first, then unliked dogs, each group sorted by name.
        A non-empty query keeps only names matching the policy, preserving
        that order. Nothing is cached; every call reads the current roster.

        Args:
            query: Free-text search; empty means no filtering.

        Returns:
            A new list of dogs.
        """
        dogs = list(self._dogs.values())
        liked = sorted((d for d in dogs if d.is_liked), key=lambda d: d.name)
        unliked = sorted((d for d in dogs if not d.is_liked), key=lambda d: d.name)
        ordered = liked + unliked
        if not query:
            return ordered
        return [d for d in ordered if self.matches(d.name, query)]

    def liked_count(self, dogs: Iterable[Dog] | None = None) -> int:
        """Count liked dogs in ``dogs``, or in the whole roster."""
        source = self._dogs.values() if dogs is None else dogs
        return sum(1 for d in source if d.is_liked)

"""Per-generation phrase state: rotating banks plus a record of what was said.

A fresh ``PhraseAllocator`` is created for every narrative. Banks are served
in order from a seeded start offset and only repeat after every entry has been
used once. User-entered fragments and composed sentences go through ``claim``
so the same idea never surfaces twice in one narrative.
"""

from __future__ import annotations

import logging
from hashlib import blake2b
from typing import Iterable, Mapping, Sequence

from .phrasebank import BANNED_PHRASES, contains_banned_phrase, phrase_bank

logger = logging.getLogger(__name__)

# Two phrases count as near-duplicates when one contains the other and the
# shorter is at least this fraction of the longer's length.
COMPARABLE_LENGTH_RATIO = 0.5


def _stable_offset(seed: int, key: str, size: int) -> int:
    if size <= 0:
        return 0
    digest = blake2b(f"{seed}|{key}".encode("utf-8"), digest_size=8)
    return int.from_bytes(digest.digest(), "big") % size


def seed_from_parts(parts: Iterable[object]) -> int:
    digest = blake2b("|".join(str(part) for part in parts).encode("utf-8"), digest_size=8)
    return int.from_bytes(digest.digest(), "big")


def _normalize(phrase: str) -> str:
    return " ".join((phrase or "").lower().split()).strip(" .,;:!?")


def is_near_duplicate(candidate: str, previous: str, ratio: float = COMPARABLE_LENGTH_RATIO) -> bool:
    """Case-insensitive containment test between two phrases of comparable length.

    Examples:
        >>> is_near_duplicate("Reduced login failures by 40%", "reduced login failures by 40%.")
        True
        >>> is_near_duplicate("login", "Reduced login failures by 40% across every region")
        False
    """
    a, b = _normalize(candidate), _normalize(previous)
    if not a or not b:
        return False
    if a == b:
        return True
    if a not in b and b not in a:
        return False
    shorter, longer = sorted((len(a), len(b)))
    return shorter / longer >= ratio


class PhraseAllocator:
    def __init__(
        self,
        narrative_type: str,
        tone: str,
        *,
        seed: int | None = None,
        banks: Mapping[str, Sequence[str]] | None = None,
        banned: Sequence[str] = BANNED_PHRASES,
    ) -> None:
        self.narrative_type = narrative_type
        self.tone = tone
        self.seed = seed
        self._banned = tuple(banned)
        source = banks if banks is not None else phrase_bank(narrative_type, tone).as_banks()
        self._banks: dict[str, tuple[str, ...]] = {}
        for kind, values in source.items():
            unique = dict.fromkeys(value for value in values if value)
            self._banks[kind] = tuple(
                value for value in unique if not contains_banned_phrase(value, self._banned)
            )
        self._cursors: dict[str, int] = {}
        self._served: dict[str, list[str]] = {}
        self._claimed: list[str] = []
        self._prominent: dict[str, str] = {}

    # ---------- Rotating banks ----------

    def bank(self, kind: str) -> tuple[str, ...]:
        return self._banks.get(kind, ())

    def next(self, kind: str) -> str:
        """Serve the next phrase of a bank, wrapping only once it is exhausted."""
        values = self.bank(kind)
        if not values:
            return ""
        cursor = self._cursors.get(kind, 0)
        offset = _stable_offset(self.seed, kind, len(values)) if self.seed is not None else 0
        value = values[(offset + cursor) % len(values)]
        self._cursors[kind] = cursor + 1
        self._served.setdefault(kind, []).append(value)
        if cursor and cursor % len(values) == 0:
            logger.debug("phrase bank %s exhausted, wrapping", kind)
        return value

    def next_verb(self) -> str:
        return self.next("verbs")

    def next_transition(self) -> str:
        return self.next("transitions")

    def next_connector(self) -> str:
        return self.next("connectors")

    def next_follow_up(self) -> str:
        return self.next("follow_ups")

    def next_framing(self, variant: str) -> str:
        return self.next(f"framing.{variant}")

    def served(self, kind: str) -> tuple[str, ...]:
        return tuple(self._served.get(kind, ()))

    # ---------- Freshness ----------

    def is_banned(self, phrase: str) -> bool:
        return contains_banned_phrase(phrase, self._banned)

    def is_fresh(self, phrase: str) -> bool:
        if not _normalize(phrase):
            return False
        return not any(is_near_duplicate(phrase, previous) for previous in self._claimed)

    def claim(self, phrase: str) -> bool:
        """Record a phrase for this narrative; False if banned or already said."""
        if self.is_banned(phrase) or not self.is_fresh(phrase):
            return False
        self._claimed.append(phrase)
        return True

    def has_said(self, phrase: str) -> bool:
        key = _normalize(phrase)
        return bool(key) and any(_normalize(previous) == key for previous in self._claimed)

    @property
    def claimed(self) -> tuple[str, ...]:
        return tuple(self._claimed)

    # ---------- Beneficiaries ----------

    def mark_prominent(self, names: Iterable[str]) -> None:
        for name in names:
            key = _normalize(name)
            if key:
                self._prominent.setdefault(key, name)

    def is_prominent(self, name: str) -> bool:
        return _normalize(name) in self._prominent

    @property
    def prominent(self) -> tuple[str, ...]:
        return tuple(self._prominent.values())


__all__ = [
    "COMPARABLE_LENGTH_RATIO",
    "PhraseAllocator",
    "is_near_duplicate",
    "seed_from_parts",
]

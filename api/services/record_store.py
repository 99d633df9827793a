"""In-memory, owner-scoped store for impact entries, stakeholders and custom tags.

Every read and write is keyed by the owning user; a record that belongs to
someone else is indistinguishable from one that does not exist. Field limits
are checked here as well as in the request schemas, so records written by any
caller (the CLI, tests, future importers) obey the same rules. State is
in-process and protected by a threading lock.
"""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import replace
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Mapping

from src.narrative.models import (
    MAX_TAG_LENGTH,
    ImpactEntry,
    Stakeholder,
    validate_entry_fields,
    validate_stakeholder_fields,
)
from src.narrative.tags import normalize_custom_tag

logger = logging.getLogger(__name__)

_ENTRY_TEXT_FIELDS = ("what_you_did", "who_benefited", "problem_solved", "evidence")
_STAKEHOLDER_TEXT_FIELDS = ("name", "team", "what_they_care_about", "how_you_impacted")


class RecordNotFoundError(LookupError):
    def __init__(self, kind: str, record_id: str) -> None:
        super().__init__(f"{kind} {record_id} not found")
        self.kind = kind
        self.record_id = record_id


class RecordValidationError(ValueError):
    def __init__(self, issues: List[str]) -> None:
        super().__init__("; ".join(issues))
        self.issues = issues


class StorageUnavailableError(RuntimeError):
    """Raised while the store is offline."""


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:18]}"


def _clean_text(fields: Mapping[str, Any], names: tuple) -> Dict[str, str]:
    return {name: str(fields.get(name) or "").strip() for name in names}


def _clean_tags(tags: Any) -> tuple:
    return tuple(dict.fromkeys(t for t in (normalize_custom_tag(tag) for tag in tags or ()) if t))


class RecordStore:
    def __init__(self) -> None:
        self._entries: Dict[str, Dict[str, ImpactEntry]] = {}
        self._stakeholders: Dict[str, Dict[str, Stakeholder]] = {}
        self._custom_tags: Dict[str, set] = {}
        self._lock = threading.Lock()
        self._available = True

    # Availability -------------------------------------------------------

    def set_available(self, available: bool) -> None:
        self._available = available
        logger.warning(f"record store availability set to {available}")

    def _ensure_available(self) -> None:
        if not self._available:
            raise StorageUnavailableError("record store is unavailable")

    def reset(self) -> None:
        with self._lock:
            self._entries.clear()
            self._stakeholders.clear()
            self._custom_tags.clear()
            self._available = True

    # Entries ------------------------------------------------------------

    def _entry_values(self, fields: Mapping[str, Any]) -> Dict[str, Any]:
        values: Dict[str, Any] = _clean_text(fields, _ENTRY_TEXT_FIELDS)
        values["tags"] = _clean_tags(fields.get("tags"))
        issues = validate_entry_fields(values)
        week_of = fields.get("week_of")
        if not isinstance(week_of, date):
            issues.append("week_of must be a date")
        if issues:
            raise RecordValidationError(issues)
        values["week_of"] = week_of
        return values

    def create_entry(self, owner: str, fields: Mapping[str, Any]) -> ImpactEntry:
        self._ensure_available()
        values = self._entry_values(fields)
        entry = ImpactEntry(id=_new_id("ent"), created_at=_now(), **values)
        with self._lock:
            self._entries.setdefault(owner, {})[entry.id] = entry
        return entry

    def list_entries(self, owner: str) -> List[ImpactEntry]:
        """Owner's entries, most recent week first."""
        self._ensure_available()
        with self._lock:
            items = list(self._entries.get(owner, {}).values())
        return sorted(items, key=lambda e: (e.week_of, e.created_at), reverse=True)

    def get_entry(self, owner: str, entry_id: str) -> ImpactEntry:
        self._ensure_available()
        with self._lock:
            entry = self._entries.get(owner, {}).get(entry_id)
        if entry is None:
            raise RecordNotFoundError("entry", entry_id)
        return entry

    def get_entries(self, owner: str, entry_ids: List[str]) -> List[ImpactEntry]:
        return [self.get_entry(owner, entry_id) for entry_id in dict.fromkeys(entry_ids)]

    def update_entry(self, owner: str, entry_id: str, fields: Mapping[str, Any]) -> ImpactEntry:
        current = self.get_entry(owner, entry_id)
        values = self._entry_values(fields)
        updated = replace(current, **values)
        with self._lock:
            owned = self._entries.get(owner, {})
            if entry_id not in owned:
                raise RecordNotFoundError("entry", entry_id)
            owned[entry_id] = updated
        return updated

    def delete_entry(self, owner: str, entry_id: str) -> None:
        self._ensure_available()
        with self._lock:
            removed = self._entries.get(owner, {}).pop(entry_id, None)
        if removed is None:
            raise RecordNotFoundError("entry", entry_id)

    # Stakeholders -------------------------------------------------------

    def _stakeholder_values(self, fields: Mapping[str, Any]) -> Dict[str, str]:
        values = _clean_text(fields, _STAKEHOLDER_TEXT_FIELDS)
        issues = validate_stakeholder_fields(values)
        if issues:
            raise RecordValidationError(issues)
        return values

    def create_stakeholder(self, owner: str, fields: Mapping[str, Any]) -> Stakeholder:
        self._ensure_available()
        stakeholder = Stakeholder(id=_new_id("stk"), **self._stakeholder_values(fields))
        with self._lock:
            self._stakeholders.setdefault(owner, {})[stakeholder.id] = stakeholder
        return stakeholder

    def list_stakeholders(self, owner: str) -> List[Stakeholder]:
        self._ensure_available()
        with self._lock:
            items = list(self._stakeholders.get(owner, {}).values())
        return sorted(items, key=lambda s: s.name.lower())

    def get_stakeholder(self, owner: str, stakeholder_id: str) -> Stakeholder:
        self._ensure_available()
        with self._lock:
            stakeholder = self._stakeholders.get(owner, {}).get(stakeholder_id)
        if stakeholder is None:
            raise RecordNotFoundError("stakeholder", stakeholder_id)
        return stakeholder

    def update_stakeholder(
        self, owner: str, stakeholder_id: str, fields: Mapping[str, Any]
    ) -> Stakeholder:
        current = self.get_stakeholder(owner, stakeholder_id)
        updated = replace(current, **self._stakeholder_values(fields))
        with self._lock:
            owned = self._stakeholders.get(owner, {})
            if stakeholder_id not in owned:
                raise RecordNotFoundError("stakeholder", stakeholder_id)
            owned[stakeholder_id] = updated
        return updated

    def delete_stakeholder(self, owner: str, stakeholder_id: str) -> None:
        self._ensure_available()
        with self._lock:
            removed = self._stakeholders.get(owner, {}).pop(stakeholder_id, None)
        if removed is None:
            raise RecordNotFoundError("stakeholder", stakeholder_id)

    # Custom tags --------------------------------------------------------

    def list_custom_tags(self, owner: str) -> List[str]:
        self._ensure_available()
        with self._lock:
            return sorted(self._custom_tags.get(owner, set()))

    def add_custom_tag(self, owner: str, name: str) -> List[str]:
        self._ensure_available()
        tag = normalize_custom_tag(name)
        if not tag:
            raise RecordValidationError(["tag name is required"])
        if len(tag) > MAX_TAG_LENGTH:
            raise RecordValidationError([f"tag name exceeds {MAX_TAG_LENGTH} characters"])
        with self._lock:
            self._custom_tags.setdefault(owner, set()).add(tag)
            return sorted(self._custom_tags[owner])


# Global singleton store used by the API routers.
STORE = RecordStore()


def get_store() -> RecordStore:
    return STORE


__all__ = [
    "RecordNotFoundError",
    "RecordValidationError",
    "StorageUnavailableError",
    "RecordStore",
    "STORE",
    "get_store",
]

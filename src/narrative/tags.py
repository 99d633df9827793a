"""Tag registry: the fixed impact tags plus user-defined custom tags."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Mapping, Union


@dataclass(frozen=True)
class TagInfo:
    label: str
    color: str


IMPACT_TAGS: Mapping[str, TagInfo] = {
    "revenue": TagInfo("Revenue", "emerald"),
    "risk-reduction": TagInfo("Risk Reduction", "blue"),
    "speed": TagInfo("Speed", "amber"),
    "efficiency": TagInfo("Efficiency", "violet"),
    "quality": TagInfo("Quality", "rose"),
    "alignment": TagInfo("Alignment", "cyan"),
    "leadership": TagInfo("Leadership", "orange"),
    "visibility": TagInfo("Visibility", "pink"),
    "engagement": TagInfo("Engagement", "teal"),
    "influence": TagInfo("Influence", "indigo"),
}

CUSTOM_TAG_COLOR = "slate"
FALLBACK_THEME = "general"

_WORD_SPLIT = re.compile(r"[\s_-]+")


@dataclass(frozen=True)
class KnownTag:
    tag_id: str


@dataclass(frozen=True)
class CustomTag:
    name: str


TagRef = Union[KnownTag, CustomTag]


def normalize_custom_tag(raw: object) -> str:
    return str(raw or "").strip().lower()


def parse_tag(raw: object) -> TagRef:
    normalized = normalize_custom_tag(raw)
    if normalized in IMPACT_TAGS:
        return KnownTag(normalized)
    return CustomTag(normalized)


def _title_case(raw: str) -> str:
    words = [word for word in _WORD_SPLIT.split(raw.strip()) if word]
    return " ".join(word[:1].upper() + word[1:] for word in words)


def resolve_tag(tag: TagRef | str) -> TagInfo:
    """Resolve a tag reference (or raw string) to its display label and color."""
    ref = parse_tag(tag) if isinstance(tag, str) else tag
    if isinstance(ref, KnownTag):
        return IMPACT_TAGS[ref.tag_id]
    label = _title_case(ref.name) or _title_case(FALLBACK_THEME)
    return TagInfo(label, CUSTOM_TAG_COLOR)


def tag_label(tag: TagRef | str) -> str:
    return resolve_tag(tag).label


__all__ = [
    "TagInfo",
    "IMPACT_TAGS",
    "CUSTOM_TAG_COLOR",
    "FALLBACK_THEME",
    "KnownTag",
    "CustomTag",
    "TagRef",
    "normalize_custom_tag",
    "parse_tag",
    "resolve_tag",
    "tag_label",
]

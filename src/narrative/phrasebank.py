"""Vocabulary tables for the narrative composer.

A single table keyed by (narrative type, tone) supplies the rotating verb,
transition, connector and follow-up banks. Section templates that only depend
on the narrative type (or only on the tone) live beside it. Nothing here holds
per-generation state; see ``allocator.PhraseAllocator`` for that.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, Mapping

NARRATIVE_TYPES: tuple[str, ...] = ("review", "promotion", "role-change")
TONES: tuple[str, ...] = ("results", "leadership", "technical", "balanced")

TITLES: Mapping[str, str] = {
    "review": "## Performance Review Summary",
    "promotion": "## Promotion Case",
    "role-change": "## Role Transition Narrative",
}

TONE_DESCRIPTIONS: Mapping[str, tuple[str, str]] = {
    "results": ("Results-Focused", "Emphasizes metrics, outcomes, and business impact"),
    "leadership": ("Leadership-Oriented", "Highlights influence, strategy, and team development"),
    "technical": ("Technical Depth", "Showcases expertise, innovation, and problem-solving"),
    "balanced": ("Balanced", "Mix of results, leadership, and technical achievements"),
}

# Generic corporate filler that must never reach the output, matched as
# case-insensitive substrings.
BANNED_PHRASES: tuple[str, ...] = (
    "delivering tangible value to the organization",
    "sustained, high-quality contributions",
    "this directly benefited",
    "positioned to build on foundations",
    "meaningful contribution",
    "move the needle",
    "moved the needle",
    "low-hanging fruit",
    "synergy",
    "synergies",
    "think outside the box",
    "best-in-class",
    "paradigm shift",
    "value-add",
    "circle back",
    "at the end of the day",
)

# Constructions each narrative type's opening is built around.
TENSE_MARKERS: Mapping[str, tuple[str, ...]] = {
    "review": ("I contributed",),
    "promotion": ("I am ready", "I have demonstrated"),
    "role-change": ("I evolved from", "I have been expanding"),
}


# ---------- Rotating banks ----------

# Review: reflective past tense ("I delivered a series of ... initiatives").
# Promotion: participles that follow "I have".
# Role-change: past-tense verbs that take "it" after the progressive lead-in.
_VERBS: Mapping[tuple[str, str], tuple[str, ...]] = {
    ("review", "results"): ("delivered", "accelerated", "completed", "executed", "landed", "shipped"),
    ("review", "leadership"): ("spearheaded", "championed", "orchestrated", "steered", "guided", "coordinated"),
    ("review", "technical"): ("architected", "engineered", "prototyped", "implemented", "designed", "automated"),
    ("review", "balanced"): ("spearheaded", "delivered", "architected", "championed", "executed", "guided"),
    ("promotion", "results"): ("owned", "delivered", "scaled", "accelerated", "sustained", "expanded"),
    ("promotion", "leadership"): ("led", "championed", "orchestrated", "steered", "shaped", "directed"),
    ("promotion", "technical"): ("architected", "engineered", "scaled", "designed", "standardized", "modernized"),
    ("promotion", "balanced"): ("owned", "led", "architected", "shaped", "delivered", "scaled"),
    ("role-change", "results"): ("pushed", "drove", "carried", "extended", "scaled", "stretched"),
    ("role-change", "leadership"): ("steered", "guided", "championed", "shaped", "led", "anchored"),
    ("role-change", "technical"): ("engineered", "rebuilt", "scaled", "automated", "extended", "reworked"),
    ("role-change", "balanced"): ("pushed", "steered", "engineered", "carried", "shaped", "extended"),
}

_TRANSITIONS: Mapping[str, tuple[str, ...]] = {
    "results": (
        "On the results side,",
        "Measured by outcomes,",
        "Where the numbers moved most,",
        "In terms of bottom-line impact,",
        "Looking at hard results,",
        "By the metrics that matter,",
    ),
    "leadership": (
        "Through strategic guidance,",
        "By fostering alignment,",
        "Leading cross-functional efforts,",
        "Cultivating team excellence,",
        "By setting direction early,",
        "Working through others,",
    ),
    "technical": (
        "Leveraging deep expertise,",
        "Through systematic innovation,",
        "By engineering novel solutions,",
        "Applying technical rigor,",
        "Starting from first principles,",
        "With a focus on sound design,",
    ),
    "balanced": (
        "Through focused execution,",
        "Building on a clear plan,",
        "With steady follow-through,",
        "Balancing speed and care,",
        "Working across functions,",
        "Keeping outcomes in view,",
    ),
}

# Link an action clause to a result clause that opens with a past-tense verb.
_CONNECTORS: Mapping[str, tuple[str, ...]] = {
    "review": ("which", "a change that", "work that", "an effort that", "a push that", "a project that"),
    "promotion": ("an outcome that", "a result that", "which", "work that", "an initiative that", "a change that"),
    "role-change": ("which", "an effort that", "work that", "a shift that", "a change that", "a project that"),
}

_FOLLOW_UPS: tuple[str, ...] = (
    "Additionally,",
    "Building on this,",
    "Alongside that,",
    "In parallel,",
    "Beyond that,",
    "Separately,",
)

# How a metric-bearing outcome is framed for each narrative type. Variants
# degrade from metric + beneficiaries down to a plain sentence.
_FRAMINGS: Mapping[str, Mapping[str, tuple[str, ...]]] = {
    "review": {
        "metric_beneficiary": (
            "That {metric} was value delivered directly to {beneficiaries}.",
            "The {metric} figure is the clearest measure of the value {beneficiaries} gained.",
            "For {beneficiaries}, that meant {metric} in concrete, measurable value.",
        ),
        "metric": (
            "That {metric} is value the team can point to.",
            "The {metric} figure captures the value of this work.",
            "Measured plainly, the value of this work came to {metric}.",
        ),
        "beneficiary": (
            "{Beneficiaries} felt the value of this work first-hand.",
            "The value landed with {beneficiaries}.",
            "It gave {beneficiaries} value they could build on.",
        ),
        "plain": (
            "The value of this work showed up in day-to-day results.",
            "It added lasting value to how we work.",
            "It added value by leaving our {theme} practices in better shape.",
        ),
    },
    "promotion": {
        "metric_beneficiary": (
            "Reaching {metric} for {beneficiaries} is evidence that I already operate at next-level scope.",
            "Delivering {metric} for {beneficiaries} reflects the scope expected one level up.",
            "An outcome of {metric} across {beneficiaries} shows capability beyond my current role.",
        ),
        "metric": (
            "A result of {metric} is evidence of next-level scope.",
            "Reaching {metric} reflects the complexity I now handle routinely.",
            "That {metric} shows capability beyond my current role.",
        ),
        "beneficiary": (
            "Owning outcomes for {beneficiaries} is the scope expected at the next level.",
            "Serving {beneficiaries} at this scale reflects next-level responsibility.",
            "Carrying results for {beneficiaries} shows the breadth I already manage.",
        ),
        "plain": (
            "This is the kind of scope expected at the next level.",
            "The complexity here goes beyond my current role.",
            "Work like this is now a routine part of my scope.",
        ),
    },
    "role-change": {
        "metric_beneficiary": (
            "Reaching {metric} for {beneficiaries} in unfamiliar territory showed how well my skills transfer.",
            "Getting to {metric} for {beneficiaries} meant learning fast and adapting what I knew.",
            "Hitting {metric} for {beneficiaries} proved these skills travel across domains.",
        ),
        "metric": (
            "Reaching {metric} outside my home turf showed how well my skills transfer.",
            "Getting to {metric} meant learning fast and adapting what I knew.",
            "Hitting {metric} proved these skills travel across domains.",
        ),
        "beneficiary": (
            "Working with {beneficiaries} pushed me to learn their world quickly.",
            "Supporting {beneficiaries} meant translating my experience into a new context.",
            "Partnering with {beneficiaries} stretched my skills in a new direction.",
        ),
        "plain": (
            "I quickly learned what this new domain demanded.",
            "It showed me my skills transfer well beyond where I started.",
            "Each step here built a skill I can carry into a new role.",
        ),
    },
}

FRAMING_VARIANTS: tuple[str, ...] = ("metric_beneficiary", "metric", "beneficiary", "plain")


# ---------- Section templates ----------

THESIS: Mapping[tuple[str, str], str] = {
    ("review", "results"): "Over this review period, I contributed measurable results across {themes}.",
    ("review", "leadership"): "Over this review period, I contributed direction and momentum across {themes}.",
    ("review", "technical"): "Over this review period, I contributed technical depth across {themes}.",
    ("review", "balanced"): "Over this review period, I contributed steady progress across {themes}.",
    ("promotion", "results"): "I am ready for the next level because I have demonstrated it through results in {themes}.",
    ("promotion", "leadership"): "I am ready for the next level, and I have demonstrated the influence it requires across {themes}.",
    ("promotion", "technical"): "I am ready for the next level because I have demonstrated the technical judgment it requires across {themes}.",
    ("promotion", "balanced"): "I am ready for the next level, and I have demonstrated that readiness across {themes}.",
    ("role-change", "results"): (
        "My path has been one of steady evolution: I evolved from {origin} into {destination}, "
        "and I have been expanding the results I can deliver along the way."
    ),
    ("role-change", "leadership"): (
        "My path has been one of steady evolution: I evolved from {origin} into {destination}, "
        "and I have been expanding my reach as a leader along the way."
    ),
    ("role-change", "technical"): (
        "My path has been one of steady evolution: I evolved from {origin} into {destination}, "
        "and I have been expanding my technical range along the way."
    ),
    ("role-change", "balanced"): (
        "My path has been one of steady evolution: I evolved from {origin} into {destination}, "
        "and I have been expanding my range along the way."
    ),
}

OPENING_METRICS: Mapping[str, str] = {
    "review": "The clearest markers of that work are {metrics}.",
    "promotion": "Results like {metrics} show the scope I already carry.",
    "role-change": "Results like {metrics} came from problems I had to learn my way into.",
}

OPENING_BENEFICIARIES: Mapping[str, str] = {
    "results": "That work created direct value for {beneficiaries}.",
    "leadership": "I built strong working partnerships with {beneficiaries} along the way.",
    "technical": "The systems I built gave {beneficiaries} better tools to reach their goals.",
    "balanced": "I worked closely with {beneficiaries} to make it happen.",
}

BODY_LEADS: Mapping[str, str] = {
    "review": "{transition} I {verb} a series of {theme} initiatives.",
    "promotion": "{transition} I have {verb} {theme} initiatives at a scope beyond my current role.",
    "role-change": "{transition} I kept growing into {theme} work, and I {verb} it well beyond my original lane.",
}

# Used when a bank has run dry (custom banks in tests can be empty).
BODY_FALLBACK_LEAD = "My {theme} work stood out during this period."

RESULT_FALLBACK = "{clause}. The problem it solved: {problem}"
OUTCOME_FALLBACK = "The outcome: {problem}"

# "I ..." clause for a note that does not open with its own verb. Promotion
# keeps the present perfect of its lead-in through every outcome.
ACTION_CLAUSES: Mapping[str, str] = {
    "review": "I {verb} {action}",
    "promotion": "I have {verb} {action}",
    "role-change": "I {verb} {action}",
}

# Stands in for a follow-up entry whose notes echo something already said.
ECHO_OUTCOME: Mapping[str, str] = {
    "metric": "A related piece of {theme} work fed into the {metric} result",
    "plain": "A related piece of {theme} work extended that effort",
}

CLOSING_COLLABORATION: Mapping[str, str] = {
    "results": "Working alongside {beneficiaries} turned individual wins into shared results.",
    "leadership": "Partnerships with {beneficiaries} rounded out this work and sharpened how I lead through influence.",
    "technical": "Partnering with {beneficiaries} kept the technical work grounded in real needs.",
    "balanced": "Collaboration with {beneficiaries} carried this work across team boundaries.",
}

CLOSING_PARTNERSHIPS = "The partnerships behind this work mattered as much as the results themselves."
CLOSING_SOLO = "Cross-functional collaboration remained a consistent thread through all of this work."

CLOSING_FORWARD: Mapping[str, str] = {
    "review": (
        "Looking ahead, I plan to build on this momentum with continued growth "
        "in the areas that matter most to the team."
    ),
    "promotion": (
        "I am ready to formalize the next level I have already been operating at, "
        "and to take on the larger scope that comes with it."
    ),
    "role-change": (
        "I bring genuine enthusiasm for new challenges and look forward to applying "
        "this range in a new role."
    ),
}


# ---------- Table ----------


@dataclass(frozen=True)
class PhraseBank:
    narrative_type: str
    tone: str
    verbs: tuple[str, ...]
    transitions: tuple[str, ...]
    connectors: tuple[str, ...]
    follow_ups: tuple[str, ...]
    framings: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    def as_banks(self) -> dict[str, tuple[str, ...]]:
        """Flatten into the named banks a ``PhraseAllocator`` rotates through."""
        banks = {
            "verbs": self.verbs,
            "transitions": self.transitions,
            "connectors": self.connectors,
            "follow_ups": self.follow_ups,
        }
        for variant, templates in self.framings.items():
            banks[f"framing.{variant}"] = templates
        return banks


def _build_table() -> dict[tuple[str, str], PhraseBank]:
    table: dict[tuple[str, str], PhraseBank] = {}
    for narrative_type in NARRATIVE_TYPES:
        for tone in TONES:
            table[(narrative_type, tone)] = PhraseBank(
                narrative_type=narrative_type,
                tone=tone,
                verbs=_VERBS[(narrative_type, tone)],
                transitions=_TRANSITIONS[tone],
                connectors=_CONNECTORS[narrative_type],
                follow_ups=_FOLLOW_UPS,
                framings=_FRAMINGS[narrative_type],
            )
    return table


PHRASE_TABLE: Mapping[tuple[str, str], PhraseBank] = _build_table()


def phrase_bank(narrative_type: str, tone: str) -> PhraseBank:
    key = (narrative_type, tone)
    if key not in PHRASE_TABLE:
        raise KeyError(f"No phrase bank for type='{narrative_type}' tone='{tone}'")
    return PHRASE_TABLE[key]


# ---------- Banned phrases ----------


def contains_banned_phrase(text: str, banned: Iterable[str] = BANNED_PHRASES) -> bool:
    lowered = (text or "").lower()
    return any(phrase.lower() in lowered for phrase in banned if phrase)


def scrub_banned_phrases(text: str, banned: Iterable[str] = BANNED_PHRASES) -> str:
    """Remove banned phrases, repeating until none remain (removal can join new ones)."""
    patterns = [re.compile(re.escape(phrase), re.IGNORECASE) for phrase in banned if phrase]
    result = text or ""
    while any(pattern.search(result) for pattern in patterns):
        for pattern in patterns:
            result = pattern.sub("", result)
    # Tidy spacing left behind, without touching paragraph breaks
    result = re.sub(r"[ \t]{2,}", " ", result)
    result = re.sub(r"[ \t]+([,.;:!?])", r"\1", result)
    return result


def iter_table_strings() -> Iterable[tuple[str, str]]:
    """Yield (location, text) for every string the composer can emit verbatim."""
    for (narrative_type, tone), bank in PHRASE_TABLE.items():
        prefix = f"{narrative_type}/{tone}"
        for kind, values in bank.as_banks().items():
            for value in values:
                yield f"{prefix}:{kind}", value
    for key, template in THESIS.items():
        yield f"thesis:{key}", template
    for name, mapping in (
        ("opening_metrics", OPENING_METRICS),
        ("opening_beneficiaries", OPENING_BENEFICIARIES),
        ("body_leads", BODY_LEADS),
        ("action_clauses", ACTION_CLAUSES),
        ("echo_outcome", ECHO_OUTCOME),
        ("closing_collaboration", CLOSING_COLLABORATION),
        ("closing_forward", CLOSING_FORWARD),
        ("titles", TITLES),
    ):
        for key, template in mapping.items():
            yield f"{name}:{key}", template
    for name, template in (
        ("body_fallback_lead", BODY_FALLBACK_LEAD),
        ("result_fallback", RESULT_FALLBACK),
        ("outcome_fallback", OUTCOME_FALLBACK),
        ("closing_partnerships", CLOSING_PARTNERSHIPS),
        ("closing_solo", CLOSING_SOLO),
    ):
        yield name, template


__all__ = [
    "NARRATIVE_TYPES",
    "TONES",
    "TITLES",
    "TONE_DESCRIPTIONS",
    "BANNED_PHRASES",
    "TENSE_MARKERS",
    "FRAMING_VARIANTS",
    "THESIS",
    "OPENING_METRICS",
    "OPENING_BENEFICIARIES",
    "BODY_LEADS",
    "BODY_FALLBACK_LEAD",
    "RESULT_FALLBACK",
    "OUTCOME_FALLBACK",
    "ACTION_CLAUSES",
    "ECHO_OUTCOME",
    "CLOSING_COLLABORATION",
    "CLOSING_PARTNERSHIPS",
    "CLOSING_SOLO",
    "CLOSING_FORWARD",
    "PhraseBank",
    "PHRASE_TABLE",
    "phrase_bank",
    "contains_banned_phrase",
    "scrub_banned_phrases",
    "iter_table_strings",
]

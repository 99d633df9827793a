from __future__ import annotations

import argparse
import string
import sys
from pathlib import Path


REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.narrative.phrasebank import (  # noqa: E402
    ACTION_CLAUSES,
    BODY_LEADS,
    CLOSING_COLLABORATION,
    CLOSING_FORWARD,
    CLOSING_PARTNERSHIPS,
    CLOSING_SOLO,
    ECHO_OUTCOME,
    FRAMING_VARIANTS,
    NARRATIVE_TYPES,
    OPENING_BENEFICIARIES,
    OPENING_METRICS,
    PHRASE_TABLE,
    TENSE_MARKERS,
    THESIS,
    TONES,
    contains_banned_phrase,
    iter_table_strings,
)

ALLOWED_PLACEHOLDERS = {
    "transition",
    "verb",
    "theme",
    "themes",
    "origin",
    "destination",
    "metric",
    "metrics",
    "beneficiaries",
    "Beneficiaries",
    "clause",
    "problem",
    "action",
}

MIN_BANK_SIZE = 3


def _placeholders(template: str) -> set[str]:
    return {name for _, name, _, _ in string.Formatter().parse(template) if name}


def _validate_template(text: str) -> list[str]:
    issues: list[str] = []
    stripped = text.strip()
    if not stripped:
        issues.append("template is empty")
        return issues
    if stripped.count("{") != stripped.count("}"):
        issues.append("template has mismatched braces")
        return issues
    unknown = _placeholders(stripped) - ALLOWED_PLACEHOLDERS
    if unknown:
        issues.append(f"unknown placeholders {sorted(unknown)}")
    return issues


def _type_specific_strings(narrative_type: str) -> list[tuple[str, str]]:
    items = [(f"body_leads:{narrative_type}", BODY_LEADS[narrative_type])]
    items.append((f"opening_metrics:{narrative_type}", OPENING_METRICS[narrative_type]))
    items.append((f"action_clauses:{narrative_type}", ACTION_CLAUSES[narrative_type]))
    items.append((f"closing_forward:{narrative_type}", CLOSING_FORWARD[narrative_type]))
    for tone in TONES:
        items.append((f"thesis:{narrative_type}/{tone}", THESIS[(narrative_type, tone)]))
        bank = PHRASE_TABLE[(narrative_type, tone)]
        for kind, values in bank.as_banks().items():
            items.extend((f"{narrative_type}/{tone}:{kind}", value) for value in values)
    return items


def _shared_strings() -> list[tuple[str, str]]:
    items = [("closing_partnerships", CLOSING_PARTNERSHIPS), ("closing_solo", CLOSING_SOLO)]
    items.extend((f"opening_beneficiaries:{tone}", text) for tone, text in OPENING_BENEFICIARIES.items())
    items.extend((f"closing_collaboration:{tone}", text) for tone, text in CLOSING_COLLABORATION.items())
    items.extend((f"echo_outcome:{variant}", text) for variant, text in ECHO_OUTCOME.items())
    return items


def validate() -> list[str]:
    errors: list[str] = []

    for narrative_type in NARRATIVE_TYPES:
        for tone in TONES:
            key = (narrative_type, tone)
            bank = PHRASE_TABLE.get(key)
            if bank is None:
                errors.append(f"missing phrase bank for {key}")
                continue
            for kind, values in bank.as_banks().items():
                if len(values) < MIN_BANK_SIZE:
                    errors.append(f"{key} {kind} has fewer than {MIN_BANK_SIZE} entries")
                if len(set(values)) != len(values):
                    errors.append(f"{key} {kind} contains duplicates")
            for variant in FRAMING_VARIANTS:
                if not bank.framings.get(variant):
                    errors.append(f"{key} missing framing variant '{variant}'")
            for verb in bank.verbs:
                if not (verb.isalpha() and verb.islower()):
                    errors.append(f"{key} verb '{verb}' must be a single lowercase word")
            if key not in THESIS:
                errors.append(f"missing thesis for {key}")

    for location, text in iter_table_strings():
        if contains_banned_phrase(text):
            errors.append(f"{location} contains a banned phrase: {text!r}")
        for issue in _validate_template(text):
            errors.append(f"{location} template issue: {issue}")

    for narrative_type in NARRATIVE_TYPES:
        own = TENSE_MARKERS[narrative_type]
        foreign = [m for t, markers in TENSE_MARKERS.items() if t != narrative_type for m in markers]
        for tone in TONES:
            thesis = THESIS.get((narrative_type, tone), "")
            if not any(marker in thesis for marker in own):
                errors.append(f"thesis {narrative_type}/{tone} lacks its tense marker")
        for location, text in _type_specific_strings(narrative_type):
            leaked = [marker for marker in foreign if marker in text]
            if leaked:
                errors.append(f"{location} uses another type's marker {leaked}")
    every_marker = [m for markers in TENSE_MARKERS.values() for m in markers]
    for location, text in _shared_strings():
        leaked = [marker for marker in every_marker if marker in text]
        if leaked:
            errors.append(f"{location} is shared across types but uses {leaked}")

    return errors


def main() -> int:
    parser = argparse.ArgumentParser(description="Validate narrative phrase tables.")
    parser.parse_args()
    errors = validate()
    if errors:
        for issue in errors:
            print(f"ERROR: {issue}")
        return 1
    print("Phrase tables validated successfully.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

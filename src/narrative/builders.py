"""Section builders: opening, one body paragraph per theme, closing.

Each builder reads only the aggregated data for its section, the narrative
type and tone, and the shared ``PhraseAllocator``. Builders return a single
paragraph of text, or an empty string when the section has nothing to say.
"""

from __future__ import annotations

from typing import Sequence

from .allocator import PhraseAllocator
from .analyzer import AnalyzedEntry
from .inflection import (
    ensure_sentence,
    first_person_clause,
    join_series,
    lower_first,
    starts_with_past_tense_verb,
    strip_terminal,
    upper_first,
)
from .phrasebank import (
    ACTION_CLAUSES,
    BODY_FALLBACK_LEAD,
    BODY_LEADS,
    CLOSING_COLLABORATION,
    CLOSING_FORWARD,
    CLOSING_PARTNERSHIPS,
    CLOSING_SOLO,
    ECHO_OUTCOME,
    OPENING_BENEFICIARIES,
    OPENING_METRICS,
    OUTCOME_FALLBACK,
    RESULT_FALLBACK,
    THESIS,
)
from .themes import ThemeBucket, ThemeSummary

MAX_OUTCOMES_PER_THEME = 3
MAX_THESIS_THEMES = 4
OPENING_METRIC_LIMIT = 2
OPENING_BENEFICIARY_LIMIT = 2
CLOSING_BENEFICIARY_LIMIT = 3
FRAMING_BENEFICIARY_LIMIT = 2


class _FormatTokens(dict[str, str]):
    def __missing__(self, key: str) -> str:
        return ""


def _fill(template: str, **tokens: str) -> str:
    return template.format_map(_FormatTokens(tokens))


def _paragraph(sentences: Sequence[str]) -> str:
    return " ".join(ensure_sentence(sentence) for sentence in sentences if sentence and sentence.strip())


def _theme_series(labels: Sequence[str]) -> str:
    if len(labels) > MAX_THESIS_THEMES:
        remaining = len(labels) - 3
        return join_series([*labels[:3], f"{remaining} other areas"])
    return join_series(labels)


def _named_with_others(names: Sequence[str], limit: int) -> str:
    if len(names) <= limit:
        return join_series(names)
    return f"{', '.join(names[:limit])}, and others"


# ---------- Opening ----------


def build_opening(
    summary: ThemeSummary, narrative_type: str, tone: str, allocator: PhraseAllocator
) -> str:
    labels = [bucket.label.lower() for bucket in summary.ranked]
    if not labels:
        return ""
    origin = f"{labels[0]} work"
    destination = f"{join_series(labels[1:3])} work" if len(labels) > 1 else "broader responsibilities"
    sentences = [
        _fill(
            THESIS[(narrative_type, tone)],
            themes=_theme_series(labels),
            origin=origin,
            destination=destination,
        )
    ]

    metrics = summary.headline_metrics[:OPENING_METRIC_LIMIT]
    if metrics:
        sentences.append(_fill(OPENING_METRICS[narrative_type], metrics=join_series(metrics)))

    top = summary.top_beneficiaries()
    if top:
        sentences.append(
            _fill(
                OPENING_BENEFICIARIES[tone],
                beneficiaries=_named_with_others(top, OPENING_BENEFICIARY_LIMIT),
            )
        )
        allocator.mark_prominent(top[:OPENING_BENEFICIARY_LIMIT])

    for sentence in sentences:
        allocator.claim(sentence)
    return _paragraph(sentences)


# ---------- Body ----------


def _action_clause(what: str, narrative_type: str, allocator: PhraseAllocator) -> str:
    clause = first_person_clause(what)
    if clause:
        return clause
    verb = allocator.next_verb()
    if not verb:
        return f"I took on {lower_first(what)}"
    return _fill(ACTION_CLAUSES[narrative_type], verb=verb, action=lower_first(what))


def _outcome_sentence(item: AnalyzedEntry, narrative_type: str, allocator: PhraseAllocator) -> str:
    what = strip_terminal(item.entry.what_you_did)
    problem = strip_terminal(item.entry.problem_solved)
    use_what = bool(what) and allocator.claim(what)
    use_problem = bool(problem) and allocator.claim(problem)

    if use_what:
        clause = _action_clause(what, narrative_type, allocator)
        if not use_problem:
            return clause
        if starts_with_past_tense_verb(problem):
            connector = allocator.next_connector()
            if connector:
                return f"{clause}, {connector} {lower_first(problem)}"
        return _fill(RESULT_FALLBACK, clause=clause, problem=lower_first(problem))
    if use_problem:
        return first_person_clause(problem) or _fill(OUTCOME_FALLBACK, problem=lower_first(problem))
    return ""


def _echo_sentence(item: AnalyzedEntry, theme: str, allocator: PhraseAllocator) -> str:
    """Short stand-in for an entry whose notes overlap what was already said.

    Exact repeats of an earlier note stay silent.
    """
    notes = [strip_terminal(item.entry.what_you_did), strip_terminal(item.entry.problem_solved)]
    if any(allocator.has_said(note) for note in notes if note):
        return ""
    metric = item.metrics.headline[0] if item.metrics.headline else ""
    template = ECHO_OUTCOME["metric" if metric else "plain"]
    sentence = _fill(template, theme=theme, metric=metric)
    return sentence if allocator.claim(sentence) else ""


def _framing_sentence(item: AnalyzedEntry, theme: str, allocator: PhraseAllocator) -> str:
    metric = item.metrics.headline[0] if item.metrics.headline else ""
    names = tuple(dict.fromkeys(item.beneficiaries))[:FRAMING_BENEFICIARY_LIMIT]
    if metric and names:
        variant = "metric_beneficiary"
    elif metric:
        variant = "metric"
    elif names:
        variant = "beneficiary"
    else:
        variant = "plain"
    beneficiaries = join_series(names)
    for candidate in dict.fromkeys((variant, "plain")):
        template = allocator.next_framing(candidate)
        if not template:
            continue
        sentence = _fill(
            template,
            metric=metric,
            beneficiaries=beneficiaries,
            Beneficiaries=upper_first(beneficiaries),
            theme=theme,
        )
        if allocator.claim(sentence):
            if candidate != "plain":
                allocator.mark_prominent(names)
            return sentence
    return ""


def build_body(
    bucket: ThemeBucket, narrative_type: str, tone: str, allocator: PhraseAllocator
) -> str:
    outcomes = bucket.outcome_entries()[:MAX_OUTCOMES_PER_THEME]
    if not outcomes:
        return ""
    theme = bucket.label.lower()
    verb = allocator.next_verb()
    if verb:
        lead = _fill(
            BODY_LEADS[narrative_type],
            transition=allocator.next_transition(),
            verb=verb,
            theme=theme,
        )
    else:
        lead = _fill(BODY_FALLBACK_LEAD, theme=theme)
    sentences = [lead.strip()]

    for index, item in enumerate(outcomes):
        statement = _outcome_sentence(item, narrative_type, allocator)
        if index == 0:
            sentences.append(statement)
            sentences.append(_framing_sentence(item, theme, allocator))
            continue
        if not statement:
            statement = _echo_sentence(item, theme, allocator)
        if statement:
            follow_up = allocator.next_follow_up()
            sentences.append(f"{follow_up} {lower_first(statement)}" if follow_up else statement)
    return _paragraph(sentences)


# ---------- Closing ----------


def build_closing(
    summary: ThemeSummary, narrative_type: str, tone: str, allocator: PhraseAllocator
) -> str:
    remaining = [
        name for name in summary.top_beneficiaries() if not allocator.is_prominent(name)
    ][:CLOSING_BENEFICIARY_LIMIT]
    if remaining:
        collaboration = _fill(CLOSING_COLLABORATION[tone], beneficiaries=join_series(remaining))
        allocator.mark_prominent(remaining)
    elif summary.beneficiaries:
        collaboration = CLOSING_PARTNERSHIPS
    else:
        collaboration = CLOSING_SOLO
    return _paragraph([collaboration, CLOSING_FORWARD[narrative_type]])


__all__ = [
    "MAX_OUTCOMES_PER_THEME",
    "build_opening",
    "build_body",
    "build_closing",
]

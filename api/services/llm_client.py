"""Async OpenAI client wrapper and prompt builder for narrative drafts."""

from __future__ import annotations

import importlib.util
import logging
import os
from typing import Optional, Sequence

from src.narrative.analyzer import parse_beneficiaries
from src.narrative.models import ImpactEntry
from src.narrative.phrasebank import BANNED_PHRASES, TONE_DESCRIPTIONS

_openai_spec = importlib.util.find_spec("openai")
if _openai_spec:  # pragma: no cover - optional dependency
    from openai import AsyncOpenAI
else:  # pragma: no cover - optional dependency
    AsyncOpenAI = None  # type: ignore

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You write first-person career narratives from documented achievements."

_MAX_TOKENS = {"review": 1000, "promotion": 1200, "role-change": 1000}

_TYPE_INSTRUCTIONS = {
    "review": """You are writing a performance review summary for a professional based on their documented achievements.

IMPACTS:
{impacts}

INSTRUCTIONS:
Write a compelling 300-word performance review summary that:

1. OPENING (2-3 sentences): Lead with the most impressive achievement and overall impact theme

2. BODY (2-3 paragraphs): Deep dive into specific achievements with:
   - Concrete details and metrics
   - Who benefited and how
   - Cross-functional collaboration

3. CLOSING (1-2 sentences): Forward-looking statement about continued growth

WRITING STYLE:
- First person, active voice ("I launched..." not "successfully delivered")
- Professional but conversational
- Specific and concrete, no vague corporate jargon
- NEVER repeat the same phrase twice
- Vary sentence structure""",
    "promotion": """You are writing a promotion case document based on documented achievements.

IMPACTS:
{impacts}

INSTRUCTIONS:
Write a compelling 350-word promotion case that:

1. OPENING (thesis statement): "I am ready for [next level] because..."

2. EVIDENCE (2-3 paragraphs):
   - 2-3 concrete examples of operating at next level
   - Scope, complexity, and strategic thinking beyond current role
   - Leadership and influence on others/teams
   - Pattern of increasing responsibility

3. CLOSING (forward-looking): Continued growth and readiness for new challenges

WRITING STYLE:
- First person, assertive voice
- Present perfect tense showing ongoing capability
- Specific examples with metrics
- No repetition

Focus on WHY the person deserves promotion NOW, not just what they accomplished.""",
    "role-change": """You are writing a role-change narrative showcasing transferable skills and adaptability.

IMPACTS:
{impacts}

INSTRUCTIONS:
Write a compelling 300-word role-change narrative that:

1. OPENING: Story of professional evolution and skill development

2. BODY (2-3 paragraphs):
   - Transferable skills with concrete examples
   - Examples of adaptability and learning new domains
   - Cross-functional experience and breadth
   - "When faced with X, I quickly learned Y"

3. CLOSING: Readiness and enthusiasm for new challenges

WRITING STYLE:
- First person, adaptive voice
- Progressive tense showing growth trajectory
- Show versatility and learning agility
- No repetition

Focus on HOW the person has transformed and is ready for a different role.""",
}


class LLMUnavailableError(RuntimeError):
    """Raised when the OpenAI client cannot be initialized or the call fails."""


def max_entries() -> int:
    return int(os.getenv("LLM_MAX_ENTRIES", "20"))


def _client() -> AsyncOpenAI:
    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        raise LLMUnavailableError("OPENAI_API_KEY is not configured")
    if AsyncOpenAI is None:
        raise LLMUnavailableError("openai package is not installed")

    org_id = os.getenv("OPENAI_ORG_ID")
    timeout = float(os.getenv("OPENAI_TIMEOUT", "60"))

    if org_id:
        return AsyncOpenAI(api_key=api_key, organization=org_id, timeout=timeout)
    return AsyncOpenAI(api_key=api_key, timeout=timeout)


def format_impacts(entries: Sequence[ImpactEntry]) -> str:
    blocks = []
    for index, entry in enumerate(entries, start=1):
        beneficiaries = ", ".join(parse_beneficiaries(entry.who_benefited)) or "None"
        blocks.append(
            f"Impact #{index}:\n"
            f"- What I did: {entry.what_you_did}\n"
            f"- Who benefited: {beneficiaries}\n"
            f"- Result: {entry.problem_solved or 'Not specified'}\n"
            f"- Evidence: {entry.evidence or 'Not specified'}\n"
            f"- Tags: {', '.join(entry.tags) or 'None'}"
        )
    return "\n\n".join(blocks)


def build_prompt(entries: Sequence[ImpactEntry], narrative_type: str, tone: str) -> str:
    """Type-specific user prompt: impacts, structure, tone and banned phrases."""
    capped = list(entries)[: max_entries()]
    template = _TYPE_INSTRUCTIONS.get(narrative_type, _TYPE_INSTRUCTIONS["review"])
    _, tone_desc = TONE_DESCRIPTIONS.get(tone, TONE_DESCRIPTIONS["balanced"])
    banned = "\n".join(f'- "{phrase}"' for phrase in BANNED_PHRASES)
    return (
        template.format(impacts=format_impacts(capped))
        + f"\n\nTONE: {tone_desc}"
        + f"\n\nBANNED PHRASES (never use):\n{banned}"
        + "\n\nWrite ONLY the narrative, no preamble or explanation."
    )


async def generate_text(
    system_prompt: str, user_prompt: str, max_tokens: int = 1000, model: Optional[str] = None
) -> str:
    """Generate text using the OpenAI chat completions API."""

    client = _client()
    model_name = model or os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    try:
        result = await client.chat.completions.create(
            model=model_name,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            max_tokens=max_tokens,
            temperature=0.7,
        )
    except Exception as exc:  # pragma: no cover - network interaction
        error_msg = str(exc).lower()
        if "rate_limit" in error_msg:
            raise LLMUnavailableError("OpenAI rate limit exceeded") from exc
        if "invalid_api_key" in error_msg or "authentication" in error_msg:
            raise LLMUnavailableError("Invalid OpenAI API key") from exc
        if "timeout" in error_msg or "timed out" in error_msg:
            raise LLMUnavailableError("OpenAI request timed out") from exc
        if "insufficient_quota" in error_msg:
            raise LLMUnavailableError("OpenAI quota exceeded") from exc
        raise LLMUnavailableError(f"OpenAI API error: {type(exc).__name__}") from exc

    content = result.choices[0].message.content if result.choices else ""
    text = (content or "").strip()
    if not text:
        raise LLMUnavailableError("OpenAI returned an empty narrative")
    return text


async def generate_narrative_text(
    entries: Sequence[ImpactEntry], narrative_type: str, tone: str
) -> str:
    prompt = build_prompt(entries, narrative_type, tone)
    logger.info(f"llm narrative request type={narrative_type} tone={tone} entries={min(len(entries), max_entries())}")
    return await generate_text(SYSTEM_PROMPT, prompt, max_tokens=_MAX_TOKENS.get(narrative_type, 1000))

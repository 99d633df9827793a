"""Interchangeable narrative backends behind one ``generate`` contract.

The template provider runs the deterministic composer in ``src.narrative``;
the llm provider drafts the same narrative with an external model. Callers
pick one by name and treat the result as plain text either way.
"""

from __future__ import annotations

from typing import Dict, Protocol, Sequence

from src.narrative.assembler import generate as compose_narrative
from src.narrative.models import ImpactEntry

from . import llm_client


class NoEntriesError(ValueError):
    """Raised when a provider that needs material is given no entries."""


class NarrativeProvider(Protocol):
    name: str

    async def generate(self, entries: Sequence[ImpactEntry], narrative_type: str, tone: str) -> str:
        ...


class TemplateProvider:
    name = "template"

    async def generate(self, entries: Sequence[ImpactEntry], narrative_type: str, tone: str) -> str:
        return compose_narrative(entries, narrative_type, tone)


class LLMProvider:
    name = "llm"

    async def generate(self, entries: Sequence[ImpactEntry], narrative_type: str, tone: str) -> str:
        if not entries:
            raise NoEntriesError("No impact entries provided")
        return await llm_client.generate_narrative_text(entries, narrative_type, tone)


PROVIDERS: Dict[str, NarrativeProvider] = {
    TemplateProvider.name: TemplateProvider(),
    LLMProvider.name: LLMProvider(),
}


def get_provider(name: str) -> NarrativeProvider:
    try:
        return PROVIDERS[name]
    except KeyError:
        raise ValueError(f"Unknown narrative provider '{name}'") from None

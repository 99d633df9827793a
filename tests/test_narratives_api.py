import pytest
from fastapi.testclient import TestClient

from api.app import app
from api.services import llm_client
from api.services.llm_client import LLMUnavailableError, build_prompt
from api.services.usage import USAGE
from src.narrative.assembler import NO_ENTRIES_MESSAGE
from src.narrative.phrasebank import BANNED_PHRASES

OAUTH = {
    "week_of": "2026-02-02",
    "what_you_did": "led the OAuth 2.0 migration",
    "who_benefited": "Engineering team, End users",
    "problem_solved": "reduced login failures by 40%",
    "tags": ["efficiency"],
}


@pytest.fixture
def client():
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


@pytest.fixture
def fake_llm(monkeypatch):
    calls = []

    async def _fake(entries, narrative_type, tone):
        calls.append((len(entries), narrative_type, tone))
        return "I shipped things."

    monkeypatch.setattr(llm_client, "generate_narrative_text", _fake)
    return calls


def test_template_provider_generates_from_stored_entries(client):
    client.post("/v1/entries", json=OAUTH)
    r = client.post("/v1/narratives/generate", json={"type": "promotion", "tone": "results"})
    assert r.status_code == 200
    body = r.json()
    assert body["narrative"].startswith("## Promotion Case")
    assert "40%" in body["narrative"]
    assert body["meta"] == {
        "type": "promotion",
        "tone": "results",
        "provider": "template",
        "entry_count": 1,
        "remaining_today": None,
    }


def test_template_provider_with_no_entries(client):
    r = client.post("/v1/narratives/generate", json={})
    assert r.status_code == 200
    assert r.json()["narrative"] == NO_ENTRIES_MESSAGE


def test_entry_ids_select_a_subset(client):
    first = client.post("/v1/entries", json=OAUTH).json()
    client.post("/v1/entries", json={**OAUTH, "what_you_did": "Sped up search", "tags": ["speed"]})
    r = client.post("/v1/narratives/generate", json={"entry_ids": [first["id"]]})
    assert r.json()["meta"]["entry_count"] == 1

    r = client.post("/v1/narratives/generate", json={"entry_ids": ["ent_missing"]})
    assert r.status_code == 404
    assert r.json()["detail"] == "ENTRY_NOT_FOUND"


@pytest.mark.parametrize(
    "payload",
    [{"type": "memo"}, {"tone": "snarky"}, {"provider": "oracle"}],
)
def test_unknown_options_are_rejected(client, payload):
    assert client.post("/v1/narratives/generate", json=payload).status_code == 422


def test_llm_provider_records_usage(client, fake_llm):
    client.post("/v1/entries", json=OAUTH)
    r = client.post("/v1/narratives/generate", json={"type": "review", "provider": "llm"})
    assert r.status_code == 200
    assert r.json()["narrative"] == "I shipped things."
    assert r.json()["meta"]["remaining_today"] == 4
    assert fake_llm == [(1, "review", "balanced")]
    assert USAGE.used("local") == 1


def test_llm_daily_cap(client, fake_llm, monkeypatch):
    monkeypatch.setenv("LLM_DAILY_LIMIT", "2")
    client.post("/v1/entries", json=OAUTH)
    for _ in range(2):
        assert client.post("/v1/narratives/generate", json={"provider": "llm"}).status_code == 200
    r = client.post("/v1/narratives/generate", json={"provider": "llm"})
    assert r.status_code == 429
    assert r.json()["detail"] == "DAILY_LIMIT_REACHED"
    # the deterministic composer is never capped
    assert client.post("/v1/narratives/generate", json={"provider": "template"}).status_code == 200


def test_llm_without_entries_is_a_bad_request(client, fake_llm):
    r = client.post("/v1/narratives/generate", json={"provider": "llm"})
    assert r.status_code == 400
    assert r.json()["detail"] == "NO_ENTRIES"
    assert fake_llm == []
    assert USAGE.used("local") == 0


def test_llm_failure_is_reported_and_not_counted(client, monkeypatch):
    async def _boom(entries, narrative_type, tone):
        raise LLMUnavailableError("upstream timeout")

    monkeypatch.setattr(llm_client, "generate_narrative_text", _boom)
    client.post("/v1/entries", json=OAUTH)
    r = client.post("/v1/narratives/generate", json={"provider": "llm"})
    assert r.status_code == 503
    assert r.json()["detail"] == "PROVIDER_UNAVAILABLE"
    assert USAGE.used("local") == 0


def test_llm_without_api_key_is_unavailable(client):
    client.post("/v1/entries", json=OAUTH)
    r = client.post("/v1/narratives/generate", json={"provider": "llm"})
    assert r.status_code == 503
    assert "upstream" not in r.text


def test_prompt_carries_type_tone_and_banned_phrases(make_entry, monkeypatch):
    monkeypatch.setenv("LLM_MAX_ENTRIES", "2")
    entries = [make_entry(what=f"Project {i}", who="Ops; Sales", tags=["speed"]) for i in range(3)]
    prompt = build_prompt(entries, "promotion", "technical")
    assert "promotion case" in prompt
    assert "Showcases expertise, innovation, and problem-solving" in prompt
    assert "Impact #2" in prompt and "Impact #3" not in prompt
    assert "- Who benefited: Ops, Sales" in prompt
    for phrase in BANNED_PHRASES:
        assert phrase in prompt


def test_llm_slot_is_held_while_the_call_is_in_flight(client, monkeypatch):
    monkeypatch.setenv("LLM_DAILY_LIMIT", "1")
    seen = []

    async def _slow(entries, narrative_type, tone):
        seen.append(USAGE.used("local"))
        return "Drafted."

    monkeypatch.setattr(llm_client, "generate_narrative_text", _slow)
    client.post("/v1/entries", json=OAUTH)
    r = client.post("/v1/narratives/generate", json={"provider": "llm"})
    assert r.json()["meta"]["remaining_today"] == 0
    assert seen == [1]
    assert client.post("/v1/narratives/generate", json={"provider": "llm"}).status_code == 429

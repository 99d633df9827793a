from datetime import date

import pytest
from fastapi.testclient import TestClient

from api.app import app
from api.services.record_store import STORE, RecordValidationError

ENTRY = {
    "week_of": "2026-02-02",
    "what_you_did": "Led the OAuth 2.0 migration",
    "who_benefited": "Engineering team, End users",
    "problem_solved": "Reduced login failures by 40%",
    "evidence": "",
    "tags": ["Efficiency", "efficiency", " speed "],
}

ALICE = {"Authorization": "Bearer tok-a"}
BOB = {"Authorization": "Bearer tok-b"}


@pytest.fixture
def client():
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


@pytest.fixture
def two_users(monkeypatch):
    monkeypatch.setenv("AUTH_ENABLED", "true")
    monkeypatch.setenv("API_KEYS", "tok-a:alice,tok-b:bob")


def test_entry_crud_roundtrip(client):
    r = client.post("/v1/entries", json=ENTRY)
    assert r.status_code == 201
    created = r.json()
    assert created["id"].startswith("ent_")
    assert created["tags"] == ["efficiency", "speed"]

    r = client.get(f"/v1/entries/{created['id']}")
    assert r.status_code == 200
    assert r.json()["what_you_did"] == ENTRY["what_you_did"]

    r = client.put(f"/v1/entries/{created['id']}", json={**ENTRY, "what_you_did": "  Led the SSO rollout  "})
    assert r.status_code == 200
    updated = r.json()
    assert updated["what_you_did"] == "Led the SSO rollout"
    assert updated["id"] == created["id"]
    assert updated["created_at"] == created["created_at"]

    r = client.delete(f"/v1/entries/{created['id']}")
    assert r.status_code == 204
    r = client.get(f"/v1/entries/{created['id']}")
    assert r.status_code == 404
    assert r.json()["detail"] == "ENTRY_NOT_FOUND"


def test_entries_list_newest_week_first_with_filters(client):
    client.post("/v1/entries", json={**ENTRY, "week_of": "2026-01-05"})
    client.post("/v1/entries", json={**ENTRY, "week_of": "2026-02-09", "what_you_did": "Sped up search", "tags": ["speed"]})
    r = client.get("/v1/entries")
    body = r.json()
    assert body["count"] == 2
    assert [e["week_of"] for e in body["entries"]] == ["2026-02-09", "2026-01-05"]

    r = client.get("/v1/entries", params={"q": "oauth"})
    assert r.json()["count"] == 1
    r = client.get("/v1/entries", params={"date_from": "2026-02-01"})
    assert [e["what_you_did"] for e in r.json()["entries"]] == ["Sped up search"]
    r = client.get("/v1/entries", params=[("tag", "efficiency"), ("tag", "quality")])
    assert r.json()["count"] == 1


def test_records_are_scoped_to_their_owner(client, two_users):
    r = client.post("/v1/entries", json=ENTRY, headers=ALICE)
    entry_id = r.json()["id"]

    assert client.get(f"/v1/entries/{entry_id}", headers=BOB).json()["detail"] == "ENTRY_NOT_FOUND"
    assert client.put(f"/v1/entries/{entry_id}", json=ENTRY, headers=BOB).status_code == 404
    assert client.delete(f"/v1/entries/{entry_id}", headers=BOB).status_code == 404
    assert client.get("/v1/entries", headers=BOB).json()["count"] == 0
    assert client.get(f"/v1/entries/{entry_id}", headers=ALICE).status_code == 200


@pytest.mark.parametrize(
    "patch",
    [
        {"what_you_did": "   "},
        {"what_you_did": "x" * 2001},
        {"problem_solved": "x" * 501},
        {"who_benefited": "x" * 501},
        {"evidence": "x" * 1001},
        {"tags": [f"tag{i}" for i in range(11)]},
        {"week_of": "not-a-date"},
    ],
)
def test_entry_input_validation(client, patch):
    r = client.post("/v1/entries", json={**ENTRY, **patch})
    assert r.status_code == 422


def test_entry_limits_are_inclusive(client):
    r = client.post("/v1/entries", json={**ENTRY, "what_you_did": "x" * 2000, "evidence": "y" * 1000})
    assert r.status_code == 201


def test_store_enforces_limits_without_the_api():
    with pytest.raises(RecordValidationError) as info:
        STORE.create_entry("alice", {"week_of": None, "what_you_did": "x" * 2001, "tags": ["a"] * 3})
    assert "what_you_did exceeds 2000 characters" in info.value.issues
    assert "week_of must be a date" in info.value.issues


def test_storage_outage_is_reported(client):
    STORE.set_available(False)
    r = client.get("/v1/entries")
    assert r.status_code == 503
    assert r.json()["detail"] == "STORAGE_UNAVAILABLE"


def test_stakeholder_crud_and_validation(client):
    payload = {"name": " Priya Shah ", "team": "Platform", "what_they_care_about": "Pager load"}
    r = client.post("/v1/stakeholders", json=payload)
    assert r.status_code == 201
    stakeholder = r.json()
    assert stakeholder["name"] == "Priya Shah"

    r = client.put(f"/v1/stakeholders/{stakeholder['id']}", json={**payload, "team": "Infra"})
    assert r.json()["team"] == "Infra"
    assert client.get("/v1/stakeholders").json()["count"] == 1

    assert client.delete(f"/v1/stakeholders/{stakeholder['id']}").status_code == 204
    r = client.get(f"/v1/stakeholders/{stakeholder['id']}")
    assert r.json()["detail"] == "STAKEHOLDER_NOT_FOUND"

    assert client.post("/v1/stakeholders", json={"name": ""}).status_code == 422
    assert client.post("/v1/stakeholders", json={"name": "x" * 201}).status_code == 422


def test_tags_list_known_and_custom(client):
    r = client.get("/v1/tags")
    tags = r.json()["tags"]
    assert len(tags) == 10
    assert not any(t["custom"] for t in tags)

    client.post("/v1/tags", json={"name": "  Mentoring "})
    r = client.post("/v1/tags", json={"name": "mentoring"})
    assert r.status_code == 201
    custom = [t for t in r.json()["tags"] if t["custom"]]
    assert custom == [{"tag": "mentoring", "label": "Mentoring", "color": "slate", "custom": True}]

    assert client.post("/v1/tags", json={"name": "   "}).json()["detail"] == "RECORD_INVALID"


def test_insights_summarize_the_callers_log(client):
    client.post("/v1/entries", json=ENTRY)
    client.post("/v1/entries", json={**ENTRY, "what_you_did": "Sped up search", "tags": ["speed"], "who_benefited": "Search team"})
    body = client.get("/v1/insights").json()
    assert body["stats"]["total_entries"] == 2
    assert body["stats"]["unique_tags"] == 2
    assert body["stats"]["top_tag"]["tag"] == "speed"
    assert body["stakeholders"][0]["name"] in {"Engineering team", "End users", "Search team"}
    assert body["gaps"] == []


@pytest.mark.parametrize(
    "text, accepted",
    [
        ("x" * 2000 + "   ", True),
        ("  " + "x" * 2000, True),
        ("x" * 2001 + "   ", False),
    ],
)
def test_api_and_store_measure_trimmed_length_alike(client, text, accepted):
    r = client.post("/v1/entries", json={**ENTRY, "what_you_did": text})
    assert (r.status_code == 201) is accepted
    if accepted:
        assert len(r.json()["what_you_did"]) == 2000

    fields = {"week_of": date(2026, 2, 2), "what_you_did": text}
    if accepted:
        assert len(STORE.create_entry("alice", fields).what_you_did) == 2000
    else:
        with pytest.raises(RecordValidationError):
            STORE.create_entry("alice", fields)


def test_padded_stakeholder_name_within_limit_is_accepted(client):
    r = client.post("/v1/stakeholders", json={"name": "   " + "n" * 200 + "   "})
    assert r.status_code == 201
    assert r.json()["name"] == "n" * 200
    assert STORE.create_stakeholder("alice", {"name": "   " + "n" * 200}).name == "n" * 200


def test_custom_tag_length_matches_store(client):
    assert client.post("/v1/tags", json={"name": " " + "t" * 50 + " "}).status_code == 201
    assert client.post("/v1/tags", json={"name": "t" * 51}).status_code == 422
    with pytest.raises(RecordValidationError):
        STORE.add_custom_tag("alice", "t" * 51)

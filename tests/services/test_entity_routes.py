"""Entity Routes — verifies the CRUD API, relation navigation and error envelopes.

Tests:
    - POST → 201 with id, timestamps and fingerprint; GET/PATCH/DELETE round out CRUD
    - Validation, dangling references and duplicate labels map to 400/400/409
    - Deleting a claim removes its rebuttals; deleting a source nullifies evidence
    - Question targets resolve to their kind; orphan cleanup counts deletions
    - Fallacy writes through the API invalidate the app-owned lookup cache
"""

from debatekb.main import app


async def _create(client, path: str, body: dict) -> dict:
    res = await client.post(f"/api/v1/{path}", json=body)
    assert res.status_code == 201, res.text
    return res.json()


async def test_create_and_get_topic(client):
    topic = await _create(client, "topics", {"title": "Energy", "posture": "sceptique"})

    assert topic["posture"] == "skeptical"
    assert topic["created_at"] == topic["updated_at"]
    res = await client.get(f"/api/v1/topics/{topic['id']}")
    assert res.status_code == 200
    assert res.json()["title"] == "Energy"


async def test_patch_recomputes_fingerprint(client):
    claim = await _create(client, "claims", {"text": "Nuclear power is safe"})

    res = await client.patch(
        f"/api/v1/claims/{claim['id']}", json={"text": "Nuclear power is dangerous"},
    )

    assert res.status_code == 200
    body = res.json()
    assert body["fingerprint"] != claim["fingerprint"]
    assert body["updated_at"] >= claim["updated_at"]
    assert body["created_at"] == claim["created_at"]


async def test_empty_patch_is_noop(client):
    tag = await _create(client, "tags", {"label": "ethics"})
    res = await client.patch(f"/api/v1/tags/{tag['id']}", json={})
    assert res.status_code == 200
    assert res.json()["updated_at"] == tag["updated_at"]


async def test_missing_entity_returns_404(client):
    res = await client.get("/api/v1/claims/does-not-exist")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"

    res = await client.delete("/api/v1/claims/does-not-exist")
    assert res.status_code == 404


async def test_blank_text_is_validation_error(client):
    res = await client.post("/api/v1/claims", json={"text": "   "})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_dangling_parent_is_rejected(client):
    res = await client.post("/api/v1/rebuttals", json={"claim_id": "missing", "text": "No"})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "DANGLING_REFERENCE"


async def test_duplicate_tag_label_conflicts(client):
    await _create(client, "tags", {"label": "Ethics"})
    res = await client.post("/api/v1/tags", json={"label": "ethics"})
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "DUPLICATE_LABEL"


async def test_delete_claim_cascades(client):
    claim = await _create(client, "claims", {"text": "Solar is cheap"})
    rebuttal = await _create(client, "rebuttals", {"claim_id": claim["id"], "text": "Storage"})

    res = await client.delete(f"/api/v1/claims/{claim['id']}")

    assert res.status_code == 204
    assert (await client.get(f"/api/v1/rebuttals/{rebuttal['id']}")).status_code == 404


async def test_delete_source_nullifies_evidence(client):
    source = await _create(client, "sources", {"title": "Census 2020"})
    claim = await _create(client, "claims", {"text": "Population grew"})
    evidence = await _create(client, "evidences", {
        "claim_id": claim["id"], "content": "Census counts", "source_id": source["id"],
    })

    assert (await client.delete(f"/api/v1/sources/{source['id']}")).status_code == 204

    res = await client.get(f"/api/v1/evidences/{evidence['id']}")
    assert res.status_code == 200
    assert res.json()["source_id"] is None


async def test_relations(client):
    topic = await _create(client, "topics", {"title": "Energy"})
    claim = await _create(client, "claims", {"text": "Wind is reliable", "topics": [topic["id"]]})
    await _create(client, "rebuttals", {"claim_id": claim["id"], "text": "Calm days exist"})
    await _create(client, "evidences", {"claim_id": claim["id"], "content": "Capacity factor 35%"})
    question = await _create(client, "questions", {"target_id": claim["id"], "text": "Where?"})

    claims = (await client.get(f"/api/v1/topics/{topic['id']}/claims")).json()
    assert [c["id"] for c in claims] == [claim["id"]]
    rebuttals = (await client.get(f"/api/v1/claims/{claim['id']}/rebuttals")).json()
    assert len(rebuttals) == 1
    evidences = (await client.get(f"/api/v1/claims/{claim['id']}/evidences")).json()
    assert evidences[0]["type"] == "example"
    target = (await client.get(f"/api/v1/questions/{question['id']}/target")).json()
    assert target == {"kind": "claim", "id": claim["id"]}
    questions = (await client.get(f"/api/v1/targets/{claim['id']}/questions")).json()
    assert [q["id"] for q in questions] == [question["id"]]


async def test_orphan_question_cleanup(client):
    topic = await _create(client, "topics", {"title": "Energy"})
    question = await _create(client, "questions", {"target_id": topic["id"], "text": "Why?"})
    await client.delete(f"/api/v1/topics/{topic['id']}")

    res = await client.get(f"/api/v1/questions/{question['id']}/target")
    assert res.status_code == 404

    res = await client.post("/api/v1/maintenance/orphan-questions")
    assert res.json() == {"deleted": 1}
    assert (await client.get(f"/api/v1/questions/{question['id']}")).status_code == 404


async def test_list_and_search(client):
    await _create(client, "claims", {"text": "Nuclear power is safe"})
    await _create(client, "claims", {"text": "Cats are mammals"})

    found = (await client.get("/api/v1/claims/search", params={"q": "nuclear"})).json()
    assert [c["text"] for c in found] == ["Nuclear power is safe"]

    page = (await client.get("/api/v1/fallacies", params={"limit": 5})).json()
    assert len(page["items"]) == 5
    assert page["pagination"]["total"] == 15


async def test_fallacy_create_is_custom(client):
    fallacy = await _create(client, "fallacies", {"name": "Appeal to Vibes"})
    assert fallacy["is_custom"] is True


async def test_fallacy_writes_invalidate_app_cache(client):
    cache = app.state.fallacy_cache
    cache.put("Appeal to Vibes", None)
    assert len(cache) == 1

    await _create(client, "fallacies", {"name": "Appeal to Vibes"})

    assert len(cache) == 0

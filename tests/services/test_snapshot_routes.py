"""Snapshot Routes — verifies import/export over HTTP and fatal error mapping."""

import json

from debatekb.main import app
from tests.services.snapshot_factory import claim, encode, snapshot


async def _import(client, data: bytes, **params):
    return await client.post(
        "/api/v1/snapshots/import", content=data, params=params,
        headers={"Content-Type": "application/json"},
    )


async def test_import_twice_then_export(client):
    data = encode(snapshot(claims=[claim("c1", "Nuclear power is safe")]))

    first = await _import(client, data)
    second = await _import(client, data)

    assert first.status_code == 200
    assert first.json()["created"] == 1
    assert second.json()["duplicates"] == 1

    res = await client.get("/api/v1/snapshots/export")
    assert res.status_code == 200
    assert res.headers["content-disposition"].startswith("attachment;")
    document = json.loads(res.content)
    assert [c["id"] for c in document["entities"]["claims"]] == ["c1"]


async def test_item_errors_are_report_data(client):
    data = encode(snapshot(claims=[{"id": "bad"}]))
    res = await _import(client, data)
    assert res.status_code == 200
    assert res.json()["errors"] == 1
    assert res.json()["error_messages"][0].startswith("Claim bad:")


async def test_invalid_document_is_400(client):
    res = await _import(client, b"{not json")
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "SNAPSHOT_FORMAT_INVALID"


async def test_unsupported_version_is_422(client):
    res = await _import(client, encode(snapshot(format_version="2.0")))
    assert res.status_code == 422
    assert res.json()["error"]["code"] == "SNAPSHOT_VERSION_UNSUPPORTED"


async def test_threshold_outside_band_is_rejected(client):
    res = await _import(client, encode(snapshot()), similarity_threshold=0.5)
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_unsupported_version_names_versions(client):
    res = await _import(client, encode(snapshot(format_version="2.0")))
    assert res.json()["error"]["details"] == {"found": "2.0", "supported": "1.0"}


async def test_busy_import_is_409_with_retry_after(client):
    service = app.state.transfer_service
    service._importing = True
    try:
        res = await _import(client, encode(snapshot()))
    finally:
        service._importing = False

    assert res.status_code == 409
    assert res.headers["retry-after"] == "1"
    body = res.json()["error"]
    assert body["code"] == "TRANSFER_IN_PROGRESS"
    assert body["details"] == {"operation": "import"}

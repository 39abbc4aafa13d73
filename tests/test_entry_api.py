"""Tests for the store management routes under /api/v1/store/{entry_type}."""

import json

import pytest

from util.enums import EntryType


@pytest.mark.asyncio
async def test_create_and_get_template(test_client, store):
    res = await test_client.post(
        "/api/v1/store/templates",
        params={"name": "/deepcore/template1/"},
        content=b"Hello {{ name }}",
    )
    assert res.status_code == 201
    assert res.json() == {"name": "deepcore/template1"}
    assert await store.fetch(EntryType.TEMPLATES, "deepcore/template1") == b"Hello {{ name }}"

    res = await test_client.get(
        "/api/v1/store/templates", params={"name": "deepcore/template1"}
    )
    assert res.status_code == 200
    assert res.json() == {"name": "deepcore/template1", "content": "Hello {{ name }}"}


@pytest.mark.asyncio
async def test_create_duplicate_conflicts(test_client):
    url = "/api/v1/store/templates"
    await test_client.post(url, params={"name": "t"}, content=b"1")
    res = await test_client.post(url, params={"name": "t"}, content=b"2")
    assert res.status_code == 409
    assert "error" in res.json()


@pytest.mark.asyncio
async def test_put_replaces(test_client, store):
    url = "/api/v1/store/templates"
    await test_client.post(url, params={"name": "t"}, content=b"1")
    res = await test_client.put(url, params={"name": "t"}, content=b"2")
    assert res.status_code == 200
    assert await store.fetch(EntryType.TEMPLATES, "t") == b"2"


@pytest.mark.asyncio
async def test_missing_name_is_400(test_client):
    res = await test_client.post("/api/v1/store/templates", content=b"x")
    assert res.status_code == 400
    res = await test_client.delete("/api/v1/store/templates", params={"name": "/"})
    assert res.status_code == 400


@pytest.mark.asyncio
async def test_get_missing_is_404(test_client):
    res = await test_client.get("/api/v1/store/auths", params={"name": "nope"})
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_auth_yaml_body_stored_as_json(test_client, store):
    body = b"URL: https://x\nmethod: POST\nheaders: '{\"A\": \"b\"}'\nnote: kept\n"
    res = await test_client.post(
        "/api/v1/store/auths", params={"name": "billing"}, content=body
    )
    assert res.status_code == 201
    stored = json.loads(await store.fetch(EntryType.AUTHS, "billing"))
    assert stored == {"URL": "https://x", "method": "POST", "headers": '{"A": "b"}', "note": "kept"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [b'{"template": "t"}', b"[1, 2]", b"{broken"],
)
async def test_invalid_bind_body_is_400(test_client, body):
    res = await test_client.post(
        "/api/v1/store/binds", params={"name": "orders"}, content=body
    )
    assert res.status_code == 400


@pytest.mark.asyncio
async def test_list_folder(test_client):
    url = "/api/v1/store/templates"
    for name in ["deepcore/a", "deepcore/b", "deepcore/sub/c", "top"]:
        await test_client.post(url, params={"name": name}, content=b"x")

    res = await test_client.get(url + "/folder")
    assert res.status_code == 200
    assert res.json()["data"] == [
        {"item": "deepcore/", "name": "deepcore/"},
        {"item": "top", "name": "top"},
    ]

    res = await test_client.get(url + "/folder", params={"folder": "deepcore", "limit": 2})
    body = res.json()
    assert body["data"] == [
        {"item": "a", "name": "deepcore/a"},
        {"item": "b", "name": "deepcore/b"},
    ]
    assert body["meta"] == {"folder": "deepcore/", "limit": 2, "offset": 0}

    res = await test_client.get(
        url + "/folder", params={"folder": "deepcore/", "limit": 2, "offset": 2}
    )
    assert res.json()["data"] == [{"item": "sub/", "name": "deepcore/sub/"}]


@pytest.mark.asyncio
async def test_delete_exact_and_folder(test_client, store):
    url = "/api/v1/store/templates"
    for name in ["deepcore/a", "deepcore/b", "keep"]:
        await test_client.post(url, params={"name": name}, content=b"x")

    res = await test_client.delete(url, params={"name": "deepcore/a"})
    assert res.status_code == 204
    assert await store.keys(EntryType.TEMPLATES, "") == ["deepcore/b", "keep"]

    res = await test_client.delete(url, params={"name": "deepcore/"})
    assert res.status_code == 204
    assert await store.keys(EntryType.TEMPLATES, "") == ["keep"]

    res = await test_client.delete(url, params={"name": "deepcore/"})
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_unknown_entry_type_is_rejected(test_client):
    res = await test_client.get("/api/v1/store/widgets", params={"name": "x"})
    assert res.status_code == 422
    assert "entry_type" in res.json()["error"]


@pytest.mark.asyncio
async def test_invalid_paging_uses_error_envelope(test_client):
    res = await test_client.get("/api/v1/store/templates/folder", params={"limit": 0})
    assert res.status_code == 422
    body = res.json()
    assert set(body) == {"error"}
    assert "limit" in body["error"]


@pytest.mark.asyncio
async def test_entries_are_per_tenant(test_client, registry):
    await test_client.post(
        "/api/v1/store/templates",
        params={"name": "t"},
        content=b"x",
        headers={"X-Tenant-Id": "acme"},
    )
    assert await registry.require("acme").store.keys(EntryType.TEMPLATES, "") == ["t"]
    assert await registry.require("default").store.keys(EntryType.TEMPLATES, "") == []

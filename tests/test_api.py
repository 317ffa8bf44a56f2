"""HTTP routes: status mapping and payload shapes."""

import json

from auth import _b64url, _sign
from main import bearer_token


def _auth(token):
    return {"Authorization": f"Bearer {token}"}


async def test_root(client):
    res = await client.get("/")
    assert res.status_code == 200
    assert res.json() == {"message": "Animal Registry Backend is running"}


async def test_storage_diagnostics(client, token, fox_json):
    await client.post("/animals", content=fox_json, headers=_auth(token))

    body = (await client.get("/test")).json()

    assert body["collection"] == "animals"
    assert body["collection_exists"] is True
    assert body["records"] == 1


async def test_create_and_fetch(client, token, fox_json):
    res = await client.post("/animals", content=fox_json, headers=_auth(token))
    assert res.status_code == 201
    assert res.json() == {"success": "Animal created", "id": "1"}

    res = await client.get("/animals/1")
    assert res.status_code == 200
    assert res.json()["createdByUser"] == "u1"
    assert res.json()["sciName"] == "Vulpes vulpes"


async def test_create_without_credentials_is_401(client, fox_json):
    res = await client.post("/animals", content=fox_json)
    assert res.status_code == 401
    assert res.json() == {"error": "Unauthorized"}


async def test_create_with_bad_json_is_400(client, token):
    res = await client.post("/animals", content="{not json", headers=_auth(token))
    assert res.status_code == 400
    assert res.json() == {"error": "Invalid JSON string"}


async def test_create_with_schema_violation_is_400(client, token, fox):
    fox["events"][0]["date"] = "13/01/2020"
    res = await client.post("/animals", content=json.dumps(fox), headers=_auth(token))
    assert res.status_code == 400
    assert res.json() == {"error": "invalid event: must contain a date in the format mm/dd/yyyy"}


async def test_identity_failure_is_500(client, store, fox_json, secret):
    header = _b64url(b'{"alg": "HS256", "typ": "JWT"}')
    body = _b64url(b'{"sub": "u1"}')
    message = f"{header}.{body}"
    token = f"{message}.{_b64url(_sign(secret.encode(), message))}"

    res = await client.post("/animals", content=fox_json, headers=_auth(token))

    assert res.status_code == 500
    assert res.json()["error"]["code"] == "IDENTITY_RESOLUTION_FAILED"
    assert await store.list_records("animals") == []


async def test_list_animals(client, token, fox_json):
    await client.post("/animals", content=fox_json, headers=_auth(token))
    await client.post("/animals", content=fox_json, headers=_auth(token))

    res = await client.get("/animals")

    assert res.status_code == 200
    assert [a["id"] for a in res.json()] == ["1", "2"]


async def test_unknown_animal_is_404(client):
    res = await client.get("/animals/99")
    assert res.status_code == 404
    assert res.json() == {"error": "Animal not found"}


async def test_user_animals(client, token, fox_json):
    await client.post("/animals", content=fox_json, headers=_auth(token))

    res = await client.get("/users/u1/animals")
    assert res.status_code == 200
    assert len(res.json()) == 1

    res = await client.get("/users/nobody/animals")
    assert res.status_code == 404
    assert res.json() == {"error": "No animals found"}


def test_bearer_token_parsing():
    assert bearer_token("Bearer abc") == "abc"
    assert bearer_token("bearer  abc ") == "abc"
    assert bearer_token("Basic abc") is None
    assert bearer_token("Bearer ") is None
    assert bearer_token(None) is None

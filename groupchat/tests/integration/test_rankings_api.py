# groupchat/tests/integration/test_rankings_api.py
import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def create_chat(client, auth_header, creator, members):
    response = await client.post(
        "/api/v1/group-chat/create",
        headers=auth_header(creator),
        json={"name": "", "memberIds": members},
    )
    return response.json()["id"]


async def test_rankings_round_trip(client: AsyncClient, auth_header):
    chat_id = await create_chat(client, auth_header, "me", ["a", "b"])
    rankings = [{"userId": "a", "position": 0}, {"userId": "b", "position": 1}]

    response = await client.post(
        "/api/v1/rankings",
        headers=auth_header("me"),
        json={"chatId": chat_id, "rankings": rankings},
    )
    assert response.status_code == 200
    assert response.json()["success"] is True

    response = await client.get(f"/api/v1/rankings/{chat_id}", headers=auth_header("me"))
    assert response.status_code == 200
    assert response.json() == {"rankings": rankings}


async def test_no_rankings_yet(client: AsyncClient, auth_header):
    chat_id = await create_chat(client, auth_header, "me", [])

    response = await client.get(f"/api/v1/rankings/{chat_id}", headers=auth_header("me"))
    assert response.json() == {"rankings": []}


async def test_rankings_require_membership(client: AsyncClient, auth_header):
    chat_id = await create_chat(client, auth_header, "me", ["a"])

    response = await client.get(
        f"/api/v1/rankings/{chat_id}", headers=auth_header("stranger")
    )
    assert response.status_code == 403

    response = await client.post(
        "/api/v1/rankings",
        headers=auth_header("stranger"),
        json={"chatId": chat_id, "rankings": []},
    )
    assert response.status_code == 403


async def test_rankings_only_for_existing_group_chats(client: AsyncClient, auth_header):
    response = await client.get("/api/v1/rankings/a--b", headers=auth_header("me"))
    assert response.status_code == 400

    response = await client.get("/api/v1/rankings/group_missing", headers=auth_header("me"))
    assert response.status_code == 404


async def test_malformed_rankings_rejected(client: AsyncClient, auth_header):
    chat_id = await create_chat(client, auth_header, "me", [])

    response = await client.post(
        "/api/v1/rankings",
        headers=auth_header("me"),
        json={"chatId": chat_id, "rankings": [{"userId": "a"}]},
    )
    assert response.status_code == 422


async def test_rankings_survive_rebuild(client: AsyncClient, auth_header):
    chat_id = await create_chat(client, auth_header, "me", ["a"])
    rankings = [{"userId": "a", "position": 0}]
    await client.post(
        "/api/v1/rankings",
        headers=auth_header("me"),
        json={"chatId": chat_id, "rankings": rankings},
    )

    response = await client.post("/api/v1/group-chat/rebuild", headers=auth_header("admin"))
    assert response.status_code == 200

    response = await client.get(f"/api/v1/rankings/{chat_id}", headers=auth_header("me"))
    assert response.status_code == 200
    assert response.json()["rankings"] == rankings

    response = await client.get(f"/api/v1/rankings/{chat_id}", headers=auth_header("b"))
    assert response.status_code == 403

# mypy: ignore-errors
# tests/v1/test_moderation_api.py
"""Tests for ban and mute endpoints."""

from fastapi import status


def test_ban_and_unban(client, station, add_member, auth_headers) -> None:
    add_member("bob")
    base = f"/api/v1/stations/{station.id}/moderation"

    response = client.post(
        f"{base}/bans",
        json={"principal": "bob", "reason": "spam"},
        headers=auth_headers("alice"),
    )
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["kind"] == "ban"
    assert response.json()["expires_at"] is None

    response = client.post(
        f"{base}/bans", json={"principal": "bob"}, headers=auth_headers("alice")
    )
    assert response.status_code == status.HTTP_409_CONFLICT

    status_body = client.get(f"{base}/status/bob").json()
    assert status_body["is_banned"] is True
    assert status_body["is_muted"] is False

    response = client.delete(f"{base}/bans/bob", headers=auth_headers("alice"))
    assert response.json() == {"success": True, "lifted": 1}
    response = client.delete(f"{base}/bans/bob", headers=auth_headers("alice"))
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_mute_blocks_posting(client, station, add_member, auth_headers) -> None:
    add_member("bob")
    base = f"/api/v1/stations/{station.id}/moderation"
    response = client.post(
        f"{base}/mutes",
        json={"principal": "bob", "duration_hours": 2},
        headers=auth_headers("alice"),
    )
    assert response.status_code == status.HTTP_201_CREATED

    response = client.post(
        f"/api/v1/stations/{station.id}/posts",
        json={"post_type": "feedback", "title": "Hi", "content": "Hello"},
        headers=auth_headers("bob"),
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["code"] == "muted"

    active = client.get(base, headers=auth_headers("alice")).json()
    assert [(a["target_principal"], a["kind"]) for a in active] == [("bob", "mute")]

    response = client.delete(f"{base}/mutes/bob", headers=auth_headers("alice"))
    assert response.json()["lifted"] == 1


def test_mute_requires_duration(client, station, add_member, auth_headers) -> None:
    add_member("bob")
    response = client.post(
        f"/api/v1/stations/{station.id}/moderation/mutes",
        json={"principal": "bob"},
        headers=auth_headers("alice"),
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_moderator_cannot_ban(client, station, add_member, auth_headers) -> None:
    add_member("bob", "moderator")
    add_member("carol")
    response = client.post(
        f"/api/v1/stations/{station.id}/moderation/bans",
        json={"principal": "carol"},
        headers=auth_headers("bob"),
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN

# mypy: ignore-errors
# tests/v1/test_invite_api.py
"""Tests for invite endpoints."""

from fastapi import status


def test_invite_roundtrip(client, station, auth_headers) -> None:
    response = client.post(
        f"/api/v1/stations/{station.id}/invites",
        json={"max_uses": 1, "role_on_join": "moderator"},
        headers=auth_headers("alice"),
    )
    assert response.status_code == status.HTTP_201_CREATED
    invite = response.json()
    assert len(invite["code"]) == 8

    response = client.post(
        "/api/v1/invites/redeem", json={"code": invite["code"]}, headers=auth_headers("bob")
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"station_id": station.id, "role": "moderator"}

    response = client.post(
        "/api/v1/invites/redeem", json={"code": invite["code"]}, headers=auth_headers("carol")
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["code"] == "invite_usage_limit"


def test_list_and_revoke(client, station, auth_headers) -> None:
    created = client.post(
        f"/api/v1/stations/{station.id}/invites", json={}, headers=auth_headers("alice")
    ).json()
    listed = client.get(f"/api/v1/stations/{station.id}/invites", headers=auth_headers("alice"))
    assert [i["id"] for i in listed.json()] == [created["id"]]

    response = client.delete(f"/api/v1/invites/{created['id']}", headers=auth_headers("alice"))
    assert response.json()["is_active"] is False

    response = client.post(
        "/api/v1/invites/redeem", json={"code": created["code"]}, headers=auth_headers("bob")
    )
    assert response.json()["code"] == "invite_inactive"


def test_crew_cannot_create_invites(client, station, add_member, auth_headers) -> None:
    add_member("bob")
    response = client.post(
        f"/api/v1/stations/{station.id}/invites", json={}, headers=auth_headers("bob")
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN

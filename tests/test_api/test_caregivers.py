"""
Tests for Caregivers API
=========================

Tests caregiver contact CRUD and the single primary caregiver rule.
"""

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from models import User


def _add(client: TestClient, user: User, name: str = "Sam Doe", is_primary: bool = False, **overrides):
    payload = {
        "user_id": user.id,
        "name": name,
        "relationship": "spouse",
        "phone": "555-010-2030",
        "email": "sam@example.com",
        "is_primary": is_primary
    }
    payload.update(overrides)
    return client.post("/api/v1/caregivers/", json=payload)


class TestCreateCaregiver:

    @pytest.mark.api
    def test_create_caregiver(self, client: TestClient, test_user: User):
        response = _add(client, test_user, is_primary=True)

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["name"] == "Sam Doe"
        assert data["relationship"] == "spouse"
        assert data["is_primary"] is True

    @pytest.mark.api
    def test_unknown_user(self, client: TestClient):
        response = client.post("/api/v1/caregivers/", json={
            "user_id": 9999,
            "name": "Sam Doe",
            "relationship": "spouse",
            "phone": "555-010-2030"
        })

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.api
    def test_short_phone_rejected(self, client: TestClient, test_user: User):
        response = _add(client, test_user, phone="555")

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    @pytest.mark.api
    def test_new_primary_demotes_previous(self, client: TestClient, test_user: User):
        first = _add(client, test_user, name="Sam Doe", is_primary=True).json()
        second = _add(client, test_user, name="Alex Doe", is_primary=True).json()

        caregivers = client.get(f"/api/v1/caregivers/user/{test_user.id}").json()

        primaries = [c["id"] for c in caregivers if c["is_primary"]]
        assert primaries == [second["id"]]
        assert first["id"] in [c["id"] for c in caregivers]


class TestListCaregivers:

    @pytest.mark.api
    def test_primary_listed_first(self, client: TestClient, test_user: User):
        _add(client, test_user, name="Sam Doe")
        _add(client, test_user, name="Alex Doe", is_primary=True)

        response = client.get(f"/api/v1/caregivers/user/{test_user.id}")

        assert response.status_code == status.HTTP_200_OK
        assert [c["name"] for c in response.json()] == ["Alex Doe", "Sam Doe"]

    @pytest.mark.api
    def test_unknown_user(self, client: TestClient):
        response = client.get("/api/v1/caregivers/user/9999")

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestUpdateCaregiver:

    @pytest.mark.api
    def test_update_relationship(self, client: TestClient, test_user: User):
        caregiver = _add(client, test_user).json()

        response = client.patch(f"/api/v1/caregivers/{caregiver['id']}", json={"relationship": "daughter"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["relationship"] == "daughter"
        assert response.json()["phone"] == "555-010-2030"

    @pytest.mark.api
    def test_promote_to_primary(self, client: TestClient, test_user: User):
        first = _add(client, test_user, name="Sam Doe", is_primary=True).json()
        second = _add(client, test_user, name="Alex Doe").json()

        client.patch(f"/api/v1/caregivers/{second['id']}", json={"is_primary": True})

        caregivers = {c["id"]: c for c in client.get(f"/api/v1/caregivers/user/{test_user.id}").json()}
        assert caregivers[second["id"]]["is_primary"] is True
        assert caregivers[first["id"]]["is_primary"] is False

    @pytest.mark.api
    def test_update_missing(self, client: TestClient):
        response = client.patch("/api/v1/caregivers/9999", json={"name": "Nobody"})

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestDeleteCaregiver:

    @pytest.mark.api
    def test_delete(self, client: TestClient, test_user: User):
        caregiver = _add(client, test_user).json()

        response = client.delete(f"/api/v1/caregivers/{caregiver['id']}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"success": True}
        assert client.get(f"/api/v1/caregivers/user/{test_user.id}").json() == []

    @pytest.mark.api
    def test_delete_missing(self, client: TestClient):
        response = client.delete("/api/v1/caregivers/9999")

        assert response.status_code == status.HTTP_404_NOT_FOUND

"""Tests for participant endpoints: wish, address, assignment and acknowledgement."""

from fastapi import status

from tests.consts import API_BASE
from tests.fixtures.app_fixtures import auth_headers

ADMIN = auth_headers("admin", role="ADMIN")
MEMBERS = ("alice", "bob", "carol")


def _setup_group(client, shuffle: bool = True) -> str:
    """Create a group owned by alice that bob and carol join; optionally shuffle it."""
    created = client.post(f"{API_BASE}/group/create", json={"name": "Office"}, headers=auth_headers("alice"))
    group = created.json()["Group"]
    for user_id in MEMBERS[1:]:
        client.post(f"{API_BASE}/group/join", json={"joinCode": group["JoinCode"]}, headers=auth_headers(user_id))
    if shuffle:
        assert client.post(f"{API_BASE}/admin/shuffle/{group['GroupId']}", headers=ADMIN).status_code == 200
    return group["GroupId"]


def _santa_of(client, group_id: str, recipient_id: str) -> str:
    mappings = client.get(f"{API_BASE}/admin/group-status/{group_id}", headers=ADMIN).json()["Mappings"]
    return next(m["SantaId"] for m in mappings if m["RecipientId"] == recipient_id)


def _approve_wish(client, group_id: str, user_id: str, wish: str = "A red scarf"):
    client.post(f"{API_BASE}/user/set-wish/{group_id}", json={"wish": wish}, headers=auth_headers(user_id))
    return client.post(f"{API_BASE}/admin/approve-wish/{group_id}/{user_id}", headers=ADMIN)


class TestMyGroups:
    def test_lists_only_callers_groups(self, client):
        _setup_group(client, shuffle=False)
        client.post(f"{API_BASE}/group/create", json={"name": "Elsewhere"}, headers=auth_headers("dave"))

        data = client.get(f"{API_BASE}/user/my-groups", headers=auth_headers("bob")).json()

        assert data["Count"] == 1
        assert data["Groups"][0]["Name"] == "Office"

    def test_empty(self, client):
        data = client.get(f"{API_BASE}/user/my-groups").json()

        assert data["Count"] == 0
        assert data["Groups"] == []


class TestSetWish:
    """POST /user/set-wish/{group_id}."""

    def test_before_shuffle_forbidden(self, client):
        group_id = _setup_group(client, shuffle=False)

        response = client.post(
            f"{API_BASE}/user/set-wish/{group_id}", json={"wish": "Socks"}, headers=auth_headers("bob")
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_submit_and_resubmit(self, client):
        group_id = _setup_group(client)

        for wish in ("Socks", "Better socks"):
            response = client.post(
                f"{API_BASE}/user/set-wish/{group_id}", json={"wish": wish}, headers=auth_headers("bob")
            )
            assert response.status_code == status.HTTP_200_OK
            assert response.json() == {"Message": "Wish submitted for approval"}

    def test_locked_after_approval(self, client):
        group_id = _setup_group(client)
        assert _approve_wish(client, group_id, "bob").status_code == status.HTTP_200_OK

        response = client.post(
            f"{API_BASE}/user/set-wish/{group_id}", json={"wish": "New"}, headers=auth_headers("bob")
        )

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_unknown_group(self, client):
        response = client.post(f"{API_BASE}/user/set-wish/nope", json={"wish": "Socks"})

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_empty_wish(self, client):
        group_id = _setup_group(client)

        response = client.post(f"{API_BASE}/user/set-wish/{group_id}", json={"wish": ""}, headers=auth_headers("bob"))

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT


class TestSubmitAddress:
    """POST /user/submit-address/{group_id}."""

    def test_requires_approved_wish(self, client):
        group_id = _setup_group(client)
        client.post(f"{API_BASE}/user/set-wish/{group_id}", json={"wish": "Socks"}, headers=auth_headers("bob"))

        response = client.post(
            f"{API_BASE}/user/submit-address/{group_id}", json={"address": "1 Elm St"}, headers=auth_headers("bob")
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_submit(self, client):
        group_id = _setup_group(client)
        _approve_wish(client, group_id, "bob")

        response = client.post(
            f"{API_BASE}/user/submit-address/{group_id}", json={"address": "1 Elm St"}, headers=auth_headers("bob")
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"Message": "Address submitted for approval"}

    def test_outsider_forbidden(self, client):
        group_id = _setup_group(client)

        response = client.post(
            f"{API_BASE}/user/submit-address/{group_id}",
            json={"address": "1 Elm St"},
            headers=auth_headers("mallory"),
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestMyAssignment:
    """GET /user/my-assignment/{group_id}."""

    def test_no_assignment(self, client):
        group_id = _setup_group(client, shuffle=False)

        response = client.get(f"{API_BASE}/user/my-assignment/{group_id}", headers=auth_headers("alice"))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_not_ready(self, client):
        group_id = _setup_group(client)

        response = client.get(f"{API_BASE}/user/my-assignment/{group_id}", headers=auth_headers("alice"))

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["error_type"] == "NotReady"

    def test_disclosed_after_both_approvals(self, client):
        group_id = _setup_group(client)
        _approve_wish(client, group_id, "carol", "Knitting kit")
        client.post(
            f"{API_BASE}/user/submit-address/{group_id}", json={"address": "3 Oak Ave"}, headers=auth_headers("carol")
        )
        client.post(f"{API_BASE}/admin/approve-address/{group_id}/carol", headers=ADMIN)
        santa = _santa_of(client, group_id, "carol")

        response = client.get(f"{API_BASE}/user/my-assignment/{group_id}", headers=auth_headers(santa))

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"Wish": "Knitting kit", "Address": "3 Oak Ave", "RecipientNameHidden": True}


class TestAcknowledge:
    """POST /user/acknowledge/{group_id}."""

    def test_once_only(self, client):
        group_id = _setup_group(client)

        first = client.post(f"{API_BASE}/user/acknowledge/{group_id}", headers=auth_headers("alice"))
        second = client.post(f"{API_BASE}/user/acknowledge/{group_id}", headers=auth_headers("alice"))

        assert first.status_code == status.HTTP_200_OK
        assert first.json()["Message"] == "Gift marked as sent"
        assert "SentAt" in first.json()
        assert second.status_code == status.HTTP_409_CONFLICT

    def test_not_a_santa(self, client):
        group_id = _setup_group(client)

        response = client.post(f"{API_BASE}/user/acknowledge/{group_id}", headers=auth_headers("mallory"))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_requires_token(self, unauthenticated_client):
        response = unauthenticated_client.post(f"{API_BASE}/user/acknowledge/g1")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

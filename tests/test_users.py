import uuid

import pytest
from dishka import Scope

from app.models import User
from app.schemas.users import UserUpdateSchema
from app.services.users import RetrieveUserInteractor, UpdateUserInteractor
from app.services.users.errors import UserModifiedConcurrently

from tests.support import ADMIN, JANE, JOHN, MANAGER, find_user_id, login

NEW_USER = {
    "first_name": "Bob",
    "last_name": "Builder",
    "email": "bob@example.com",
    "password": "Builder@1",
    "role": "manager",
}


def test_admin_creates_user(seeded_client, admin_headers):
    response = seeded_client.post("/api/users", json=NEW_USER, headers=admin_headers)

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "User created successfully"
    assert body["data"]["role"] == "manager"
    assert body["data"]["last_login_at"] is None
    uuid.UUID(body["data"]["id"])

    login(seeded_client, NEW_USER["email"], NEW_USER["password"])


def test_create_user_duplicate_email(seeded_client, admin_headers):
    response = seeded_client.post(
        "/api/users", json={**NEW_USER, "email": JANE[0]}, headers=admin_headers
    )

    assert response.status_code == 409


@pytest.mark.parametrize("account", [JOHN, MANAGER])
def test_non_admin_cannot_create_user(seeded_client, account):
    headers = login(seeded_client, *account)

    response = seeded_client.post("/api/users", json=NEW_USER, headers=headers)

    assert response.status_code == 403
    assert response.json() == {
        "success": False,
        "message": "Access denied. Required roles: admin",
    }


def test_create_user_requires_authentication(seeded_client):
    response = seeded_client.post("/api/users", json=NEW_USER)

    assert response.status_code == 401


def test_get_me(seeded_client, user_headers):
    response = seeded_client.get("/api/users/me", headers=user_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["email"] == JOHN[0]
    assert data["full_name"] == "John Doe"


def test_list_users_pagination(seeded_client, user_headers):
    response = seeded_client.get(
        "/api/users", params={"limit": 3, "sort_by": "email", "sort_order": "asc"},
        headers=user_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Users retrieved successfully"
    assert [user["email"] for user in body["data"]] == [ADMIN[0], JANE[0], JOHN[0]]
    assert body["pagination"] == {
        "page": 1,
        "limit": 3,
        "total": 4,
        "total_pages": 2,
        "has_next_page": True,
        "has_previous_page": False,
    }

    response = seeded_client.get(
        "/api/users",
        params={"page": 2, "limit": 3, "sort_by": "email", "sort_order": "ASC"},
        headers=user_headers,
    )
    body = response.json()
    assert [user["email"] for user in body["data"]] == [MANAGER[0]]
    assert body["pagination"]["has_next_page"] is False
    assert body["pagination"]["has_previous_page"] is True


def test_list_users_page_past_end(seeded_client, user_headers):
    response = seeded_client.get("/api/users", params={"page": 5}, headers=user_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["data"] == []
    assert body["pagination"]["total"] == 4
    assert body["pagination"]["total_pages"] == 1


def test_list_users_sort_descending(seeded_client, user_headers):
    response = seeded_client.get(
        "/api/users", params={"sort_by": "first_name", "sort_order": "desc"},
        headers=user_headers,
    )

    names = [user["first_name"] for user in response.json()["data"]]
    assert names == ["Manager", "John", "Jane", "Admin"]


def test_list_users_search_is_case_insensitive(seeded_client, user_headers):
    response = seeded_client.get("/api/users", params={"search": "SMITH"}, headers=user_headers)

    assert [user["email"] for user in response.json()["data"]] == [JANE[0]]


def test_list_users_role_filter(seeded_client, user_headers):
    response = seeded_client.get("/api/users", params={"role": "manager"}, headers=user_headers)

    body = response.json()
    assert [user["email"] for user in body["data"]] == [MANAGER[0]]
    assert body["pagination"]["total"] == 1


@pytest.mark.parametrize(
    "params",
    [
        {"limit": 101},
        {"limit": 0},
        {"page": 0},
        {"sort_by": "password"},
        {"sort_order": "sideways"},
        {"role": "superuser"},
    ],
)
def test_list_users_rejects_bad_query(seeded_client, user_headers, params):
    response = seeded_client.get("/api/users", params=params, headers=user_headers)

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_get_user_by_id(seeded_client, user_headers, admin_headers):
    user_id = find_user_id(seeded_client, admin_headers, JANE[0])

    response = seeded_client.get(f"/api/users/{user_id}", headers=user_headers)

    assert response.status_code == 200
    assert response.json()["data"]["email"] == JANE[0]


def test_get_missing_user(seeded_client, user_headers):
    missing = uuid.uuid4()

    response = seeded_client.get(f"/api/users/{missing}", headers=user_headers)

    assert response.status_code == 404
    assert response.json()["message"] == f"User with ID {missing} not found"


def test_get_user_invalid_id(seeded_client, user_headers):
    response = seeded_client.get("/api/users/not-a-uuid", headers=user_headers)

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "user_id"


def test_user_updates_own_profile(seeded_client, user_headers, admin_headers):
    user_id = find_user_id(seeded_client, admin_headers, JOHN[0])

    response = seeded_client.put(
        f"/api/users/{user_id}", json={"first_name": "Johnny"}, headers=user_headers
    )

    assert response.status_code == 200
    assert response.json()["data"]["full_name"] == "Johnny Doe"


def test_user_cannot_update_someone_else(seeded_client, user_headers, admin_headers):
    user_id = find_user_id(seeded_client, admin_headers, JANE[0])

    response = seeded_client.put(
        f"/api/users/{user_id}", json={"first_name": "Hacked"}, headers=user_headers
    )

    assert response.status_code == 403


def test_user_cannot_change_own_role(seeded_client, user_headers, admin_headers):
    user_id = find_user_id(seeded_client, admin_headers, JOHN[0])

    response = seeded_client.put(
        f"/api/users/{user_id}", json={"role": "admin"}, headers=user_headers
    )

    assert response.status_code == 403


def test_admin_changes_role(seeded_client, admin_headers):
    user_id = find_user_id(seeded_client, admin_headers, JANE[0])

    response = seeded_client.put(
        f"/api/users/{user_id}", json={"role": "manager"}, headers=admin_headers
    )

    assert response.status_code == 200
    assert response.json()["data"]["role"] == "manager"


def test_update_email_conflict(seeded_client, user_headers, admin_headers):
    user_id = find_user_id(seeded_client, admin_headers, JOHN[0])

    response = seeded_client.put(
        f"/api/users/{user_id}", json={"email": JANE[0]}, headers=user_headers
    )

    assert response.status_code == 409
    assert response.json()["message"] == "Email already exists"


def test_update_password_rehashes(seeded_client, user_headers, admin_headers):
    user_id = find_user_id(seeded_client, admin_headers, JOHN[0])

    response = seeded_client.put(
        f"/api/users/{user_id}", json={"password": "N3wPassword!"}, headers=user_headers
    )
    assert response.status_code == 200

    login(seeded_client, JOHN[0], "N3wPassword!")
    response = seeded_client.post("/api/auth/login", json={"email": JOHN[0], "password": JOHN[1]})
    assert response.status_code == 401


def test_update_rejects_unknown_fields(seeded_client, admin_headers):
    user_id = find_user_id(seeded_client, admin_headers, JOHN[0])

    response = seeded_client.put(
        f"/api/users/{user_id}", json={"version": 99}, headers=admin_headers
    )

    assert response.status_code == 400


def test_update_missing_user(seeded_client, admin_headers):
    response = seeded_client.put(
        f"/api/users/{uuid.uuid4()}", json={"first_name": "Nobody"}, headers=admin_headers
    )

    assert response.status_code == 404


def test_admin_soft_deletes_user(seeded_client, admin_headers):
    user_id = find_user_id(seeded_client, admin_headers, JANE[0])

    response = seeded_client.delete(f"/api/users/{user_id}", headers=admin_headers)

    assert response.status_code == 204
    assert response.content == b""
    assert seeded_client.get(f"/api/users/{user_id}", headers=admin_headers).status_code == 404
    listing = seeded_client.get("/api/users", headers=admin_headers).json()
    assert JANE[0] not in [user["email"] for user in listing["data"]]
    assert listing["pagination"]["total"] == 3

    response = seeded_client.post("/api/auth/login", json={"email": JANE[0], "password": JANE[1]})
    assert response.status_code == 401


def test_deleted_email_stays_reserved(seeded_client, admin_headers):
    user_id = find_user_id(seeded_client, admin_headers, JANE[0])
    seeded_client.delete(f"/api/users/{user_id}", headers=admin_headers)

    response = seeded_client.post(
        "/api/auth/register",
        json={"first_name": "Jane", "last_name": "Again", "email": JANE[0], "password": "User@123"},
    )

    assert response.status_code == 409


def test_delete_missing_user(seeded_client, admin_headers):
    response = seeded_client.delete(f"/api/users/{uuid.uuid4()}", headers=admin_headers)

    assert response.status_code == 404


def test_non_admin_cannot_delete(seeded_client, user_headers, admin_headers):
    user_id = find_user_id(seeded_client, admin_headers, JANE[0])

    response = seeded_client.delete(f"/api/users/{user_id}", headers=user_headers)

    assert response.status_code == 403


async def update_from_stale_session(container, email: str):
    async with (
        container(scope=Scope.REQUEST) as fresh,
        container(scope=Scope.REQUEST) as stale,
    ):
        retrieve = await stale.get(RetrieveUserInteractor)
        admin = await retrieve.get(User.email == ADMIN[0])
        user = await retrieve.get(User.email == email)

        update = await fresh.get(UpdateUserInteractor)
        await update(admin, user.id, UserUpdateSchema(first_name="Johnny"))

        stale_update = await stale.get(UpdateUserInteractor)
        with pytest.raises(UserModifiedConcurrently):
            await stale_update(admin, user.id, UserUpdateSchema(last_name="Doherty"))


def test_concurrent_update_conflicts(app, seeded_client, admin_headers):
    seeded_client.portal.call(update_from_stale_session, app.state.dishka_container, JOHN[0])

    user_id = find_user_id(seeded_client, admin_headers, JOHN[0])
    response = seeded_client.get(f"/api/users/{user_id}", headers=admin_headers)
    assert response.json()["data"]["first_name"] == "Johnny"
    assert response.json()["data"]["last_name"] == "Doe"


def test_create_user_unique_violation_is_conflict(seeded_client, admin_headers, monkeypatch):
    async def not_found(self, query, with_deleted=False):
        return False

    # another request inserts the same email after the existence check
    monkeypatch.setattr(RetrieveUserInteractor, "exists", not_found)

    response = seeded_client.post(
        "/api/users", json={**NEW_USER, "email": JANE[0]}, headers=admin_headers
    )

    assert response.status_code == 409
    assert response.json() == {"success": False, "message": "Email already exists"}

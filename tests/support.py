from fastapi.testclient import TestClient

JWT_SECRET = "test-secret-key-which-is-long-enough-for-hs256"

ADMIN = ("admin@example.com", "Admin@123")
MANAGER = ("manager@example.com", "Manager@123")
JOHN = ("john.doe@example.com", "User@123")
JANE = ("jane.smith@example.com", "User@123")


def login(client: TestClient, email: str, password: str) -> dict[str, str]:
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    token = response.json()["data"]["access_token"]
    return {"Authorization": f"Bearer {token}"}


def find_user_id(client: TestClient, headers: dict[str, str], email: str) -> str:
    response = client.get("/api/users", params={"search": email}, headers=headers)
    assert response.status_code == 200, response.text
    (user,) = response.json()["data"]
    return user["id"]

from datetime import timedelta

from app.core.security import create_access_token, decode_access_token

API = "/api/v1"


def register(client, email="ada@example.com", password="lovelace", name="Ada"):
    return client.post(
        f"{API}/auth/register", json={"email": email, "password": password, "name": name}
    )


def test_register_and_login(client):
    response = register(client)
    assert response.status_code == 201
    user = response.json()
    assert user["email"] == "ada@example.com"
    assert user["name"] == "Ada"
    assert "password_hash" not in user

    login = client.post(
        f"{API}/auth/login", json={"email": "Ada@Example.com", "password": "lovelace"}
    )
    assert login.status_code == 200
    token = login.json()["access_token"]
    assert login.json()["token_type"] == "bearer"
    assert decode_access_token(token) == user["id"]

    me = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["id"] == user["id"]


def test_duplicate_email(client):
    assert register(client).status_code == 201
    response = register(client, email="ADA@example.com")
    assert response.status_code == 409


def test_registration_validation(client):
    assert register(client, password="short").status_code == 422
    assert register(client, email="not-an-email").status_code == 422


def test_wrong_credentials(client):
    register(client)
    wrong_password = client.post(
        f"{API}/auth/login", json={"email": "ada@example.com", "password": "babbage"}
    )
    unknown_user = client.post(
        f"{API}/auth/login", json={"email": "bob@example.com", "password": "lovelace"}
    )
    assert wrong_password.status_code == 401
    assert unknown_user.status_code == 401
    assert wrong_password.json() == unknown_user.json()


def test_expired_token_rejected(client):
    token = create_access_token("someone", expires_delta=timedelta(seconds=-1))
    response = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_token_for_unknown_user(client):
    token = create_access_token("ghost")
    headers = {"Authorization": f"Bearer {token}"}
    assert client.get(f"{API}/auth/me", headers=headers).status_code == 401

    created = client.post(f"{API}/secrets", json={"content": "orphan"}, headers=headers)
    assert created.status_code == 401
    assert client.get(f"{API}/secrets", headers=headers).status_code == 401


def test_owner_flow_with_real_account(client):
    user = register(client).json()
    token = client.post(
        f"{API}/auth/login", json={"email": "ada@example.com", "password": "lovelace"}
    ).json()["access_token"]
    headers = {"Authorization": f"Bearer {token}"}

    created = client.post(f"{API}/secrets", json={"content": "for bob"}, headers=headers)
    assert created.status_code == 201

    listed = client.get(f"{API}/secrets", headers=headers).json()
    assert listed["total"] == 1
    assert user["id"]


def login_headers(client, email="ada@example.com", password="lovelace"):
    token = client.post(
        f"{API}/auth/login", json={"email": email, "password": password}
    ).json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


def test_update_profile(client):
    register(client)
    headers = login_headers(client)

    response = client.patch(
        f"{API}/auth/me", json={"name": "Countess", "email": "Countess@Example.com"}, headers=headers
    )
    assert response.status_code == 200
    assert response.json()["name"] == "Countess"
    assert response.json()["email"] == "countess@example.com"

    me = client.get(f"{API}/auth/me", headers=headers).json()
    assert me["email"] == "countess@example.com"
    assert login_headers(client, email="countess@example.com")


def test_update_profile_keeps_absent_fields(client):
    register(client)
    headers = login_headers(client)
    response = client.patch(f"{API}/auth/me", json={"name": "A. Lovelace"}, headers=headers)
    assert response.json()["email"] == "ada@example.com"

    same_email = client.patch(f"{API}/auth/me", json={"email": "ada@example.com"}, headers=headers)
    assert same_email.status_code == 200


def test_update_profile_email_taken(client):
    register(client)
    register(client, email="bob@example.com", name="Bob")
    headers = login_headers(client)

    response = client.patch(f"{API}/auth/me", json={"email": "BOB@example.com"}, headers=headers)
    assert response.status_code == 409
    assert client.get(f"{API}/auth/me", headers=headers).json()["email"] == "ada@example.com"


def test_update_profile_validation(client):
    register(client)
    headers = login_headers(client)
    assert client.patch(f"{API}/auth/me", json={"name": ""}, headers=headers).status_code == 422
    assert client.patch(f"{API}/auth/me", json={"email": "nope"}, headers=headers).status_code == 422
    assert client.patch(f"{API}/auth/me", json={"name": "x"}).status_code == 401


def test_change_password(client):
    register(client)
    headers = login_headers(client)

    response = client.post(
        f"{API}/auth/change-password",
        json={"current_password": "lovelace", "new_password": "analytical"},
        headers=headers,
    )
    assert response.status_code == 204

    old = client.post(f"{API}/auth/login", json={"email": "ada@example.com", "password": "lovelace"})
    assert old.status_code == 401
    assert login_headers(client, password="analytical")


def test_change_password_rejects_wrong_current_password(client):
    register(client)
    headers = login_headers(client)

    wrong = client.post(
        f"{API}/auth/change-password",
        json={"current_password": "babbage", "new_password": "analytical"},
        headers=headers,
    )
    assert wrong.status_code == 401

    short = client.post(
        f"{API}/auth/change-password",
        json={"current_password": "lovelace", "new_password": "short"},
        headers=headers,
    )
    assert short.status_code == 422
    assert login_headers(client)

"""
Интеграционные тесты эндпоинтов /api/auth.

Покрываемые сценарии:
- POST /auth/register: успех, дубль email (400), невалидные данные (422)
- POST /auth/login: успех, неверный пароль (401)
- POST /auth/refresh: ротация, невалидный токен (401)
- POST /auth/logout
- GET /auth/me: с токеном и без
"""

import pytest
from datetime import datetime, timedelta

from fitbody.models.user import User
from fitbody.services.auth_service import auth_service
from tests.conftest import make_auth_headers

pytestmark = pytest.mark.integration


async def test_register_returns_tokens(client, mock_repo):
    mock_repo.get_by_email.return_value = None
    mock_repo.create_user.return_value = User(id=5, email="new@test.com", name="new", password="h")

    response = await client.post("/api/auth/register", json={
        "email": "new@test.com", "password": "secret1", "name": "new",
    })

    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["access_token"] and body["refresh_token"]
    mock_repo.save_refresh_token.assert_awaited_once()


async def test_register_existing_email_returns_400(client, mock_repo, user_fixture):
    mock_repo.get_by_email.return_value = user_fixture

    response = await client.post("/api/auth/register", json={
        "email": user_fixture.email, "password": "secret1",
    })

    assert response.status_code == 400


@pytest.mark.parametrize("payload", [
    {"email": "not-an-email", "password": "secret1"},
    {"email": "a@test.com", "password": "123"},
    {"email": "a@test.com"},
])
async def test_register_invalid_payload_returns_422(client, payload):
    response = await client.post("/api/auth/register", json=payload)
    assert response.status_code == 422


async def test_register_multibyte_password_over_72_bytes_returns_422(client, mock_repo):
    """42 символа кириллицы = 84 байта: bcrypt их не примет."""
    response = await client.post("/api/auth/register", json={
        "email": "ru@test.com", "password": "пароль" * 7,
    })

    assert response.status_code == 422
    mock_repo.create_user.assert_not_awaited()


async def test_register_multibyte_password_of_72_bytes(client, mock_repo):
    mock_repo.get_by_email.return_value = None
    mock_repo.create_user.side_effect = lambda user: user

    response = await client.post("/api/auth/register", json={
        "email": "ru@test.com", "password": "пароль" * 6,
    })

    assert response.status_code == 200
    created = mock_repo.create_user.call_args.args[0]
    assert auth_service.verify_password("пароль" * 6, created.password)


async def test_login_success(client, mock_repo, user_fixture):
    mock_repo.get_by_email.return_value = user_fixture

    response = await client.post("/api/auth/login", json={
        "email": user_fixture.email, "password": "password123",
    })

    assert response.status_code == 200
    assert response.json()["token_type"] == "bearer"


async def test_login_wrong_password_returns_401(client, mock_repo, user_fixture):
    mock_repo.get_by_email.return_value = user_fixture

    response = await client.post("/api/auth/login", json={
        "email": user_fixture.email, "password": "wrong-password",
    })

    assert response.status_code == 401
    mock_repo.save_refresh_token.assert_not_awaited()


async def test_refresh_rotates_token(client, mock_repo, user_fixture):
    old_token = auth_service.create_refresh_token(data={"sub": str(user_fixture.id)})
    user_fixture.refresh_token = old_token
    user_fixture.refresh_token_expires = datetime.utcnow() + timedelta(days=1)
    mock_repo.get_by_refresh_token.return_value = user_fixture

    response = await client.post("/api/auth/refresh", json={"refresh_token": old_token})

    assert response.status_code == 200
    assert response.json()["refresh_token"] != old_token


async def test_refresh_invalid_token_returns_401(client):
    response = await client.post("/api/auth/refresh", json={"refresh_token": "garbage"})
    assert response.status_code == 401


async def test_logout_revokes_token(client, mock_repo, user_fixture):
    token = auth_service.create_refresh_token(data={"sub": str(user_fixture.id)})
    mock_repo.get_by_id.return_value = user_fixture

    response = await client.post("/api/auth/logout", json={"refresh_token": token})

    assert response.status_code == 200
    mock_repo.revoke_refresh_token.assert_awaited_once_with(user_fixture)


async def test_me_with_valid_token(client, mock_repo, user_fixture):
    mock_repo.get_by_id.return_value = user_fixture

    response = await client.get("/api/auth/me", headers=make_auth_headers(user_fixture))

    assert response.status_code == 200
    assert response.json()["email"] == user_fixture.email
    assert "password" not in response.json()


async def test_me_without_token_is_rejected(client):
    response = await client.get("/api/auth/me")
    assert response.status_code in (401, 403)


async def test_me_with_token_of_deleted_user_returns_401(client, mock_repo, user_fixture):
    mock_repo.get_by_id.return_value = None

    response = await client.get("/api/auth/me", headers=make_auth_headers(user_fixture))

    assert response.status_code == 401

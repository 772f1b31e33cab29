"""
Общие фикстуры для тестов FitBody backend.

Стратегия:
- Тестовое FastAPI-приложение создаётся без startup-событий (нет подключения к БД).
- Репозитории заменяются на AsyncMock(spec=...) через dependency_overrides.
- get_current_user заменяется на лямбду с нужным пользователем;
  для проверки middleware токены выпускаются через auth_service.
"""

import pytest
from unittest.mock import AsyncMock
from httpx import AsyncClient, ASGITransport
from fastapi import FastAPI
from datetime import datetime
from typing import AsyncGenerator

from fitbody.api.router import api_router
from fitbody.models.user import User
from fitbody.repositories.user_repository import UserRepository
from fitbody.repositories.workout_repository import WorkoutRepository
from fitbody.repositories.nutrition_repository import NutritionRepository
from fitbody.repositories.progress_repository import ProgressRepository
from fitbody.services.auth_service import auth_service
from fitbody.core.dependencies import (
    get_current_user,
    get_user_repository,
    get_workout_repository,
    get_nutrition_repository,
    get_progress_repository,
)


# ---------------------------------------------------------------------------
# Вспомогательные функции
# ---------------------------------------------------------------------------

def create_test_app() -> FastAPI:
    """Тестовое FastAPI-приложение без startup-событий."""
    test_app = FastAPI(title="FitBody Test App")
    test_app.include_router(api_router, prefix="/api")
    return test_app


def make_auth_headers(user: User) -> dict:
    """Заголовки авторизации с валидным JWT для указанного пользователя."""
    access_token = auth_service.create_access_token(data={"sub": str(user.id)})
    return {"Authorization": f"Bearer {access_token}"}


def assign_id(entity_id: int = 1):
    """side_effect для repo.create: эмулирует INSERT с выдачей id."""
    async def _create(entity):
        entity.id = entity_id
        return entity
    return _create


# ---------------------------------------------------------------------------
# Пользователи
# ---------------------------------------------------------------------------

@pytest.fixture
def user_fixture() -> User:
    return User(
        id=1,
        email="test@example.com",
        name="tester",
        password=auth_service.hash_password("password123"),
        created_at=datetime.utcnow(),
    )


@pytest.fixture
def other_user_fixture() -> User:
    """Второй пользователь - владелец "чужих" записей."""
    return User(
        id=2,
        email="other@example.com",
        name="other",
        password="hashed",
        created_at=datetime.utcnow(),
    )


# ---------------------------------------------------------------------------
# Репозитории
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_repo() -> AsyncMock:
    return AsyncMock(spec=UserRepository)


@pytest.fixture
def workout_repo() -> AsyncMock:
    repo = AsyncMock(spec=WorkoutRepository)
    repo.list_for_user.return_value = []
    repo.get_by_id.return_value = None
    return repo


@pytest.fixture
def nutrition_repo() -> AsyncMock:
    repo = AsyncMock(spec=NutritionRepository)
    repo.list_for_user.return_value = []
    repo.get_by_id.return_value = None
    return repo


@pytest.fixture
def progress_repo() -> AsyncMock:
    repo = AsyncMock(spec=ProgressRepository)
    repo.list_for_user.return_value = []
    repo.get_by_id.return_value = None
    repo.get_latest_weight.return_value = None
    return repo


# ---------------------------------------------------------------------------
# HTTP-клиенты
# ---------------------------------------------------------------------------

def _override_repos(app: FastAPI, mock_repo, workout_repo, nutrition_repo, progress_repo) -> None:
    app.dependency_overrides[get_user_repository] = lambda: mock_repo
    app.dependency_overrides[get_workout_repository] = lambda: workout_repo
    app.dependency_overrides[get_nutrition_repository] = lambda: nutrition_repo
    app.dependency_overrides[get_progress_repository] = lambda: progress_repo


@pytest.fixture
async def client(mock_repo, workout_repo, nutrition_repo, progress_repo) -> AsyncGenerator[AsyncClient, None]:
    """Клиент без аутентификации: get_current_user работает по-настоящему."""
    app = create_test_app()
    _override_repos(app, mock_repo, workout_repo, nutrition_repo, progress_repo)
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
async def user_client(
    user_fixture, mock_repo, workout_repo, nutrition_repo, progress_repo
) -> AsyncGenerator[AsyncClient, None]:
    """Клиент, аутентифицированный как user_fixture."""
    app = create_test_app()
    _override_repos(app, mock_repo, workout_repo, nutrition_repo, progress_repo)
    app.dependency_overrides[get_current_user] = lambda: user_fixture
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

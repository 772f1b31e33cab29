"""
E2E сценарии через полный HTTP-стек с настоящими JWT.

Сценарии:
1. Регистрация -> /me -> логаут; повторный refresh после логаута отклоняется
2. Пользователь логирует вес, тренировку без калорий и еду,
   затем видит их в сводке аналитики
3. Чужую запись нельзя удалить даже с валидным токеном

Репозитории мокируются (AsyncMock), без реальной БД; get_current_user
работает по-настоящему и достаёт пользователя из mock_repo.
"""

import pytest
from datetime import datetime
from unittest.mock import patch

from fitbody.core.timeutils import local_now
from fitbody.models.user import User
from fitbody.models.workout import Workout
from fitbody.services.auth_service import auth_service
from tests.conftest import assign_id, make_auth_headers

pytestmark = pytest.mark.e2e


# ---------------------------------------------------------------------------
# Сценарий 1: регистрация -> /me -> логаут
# ---------------------------------------------------------------------------

async def test_register_me_logout_flow(client, mock_repo):
    new_user = User(
        id=42,
        email="e2e@test.com",
        name="e2e",
        password=auth_service.hash_password("securepass"),
        created_at=datetime.utcnow(),
    )
    mock_repo.get_by_email.return_value = None
    mock_repo.create_user.return_value = new_user

    reg_response = await client.post("/api/auth/register", json={
        "email": "e2e@test.com", "password": "securepass", "name": "e2e",
    })
    assert reg_response.status_code == 200
    tokens = reg_response.json()

    mock_repo.get_by_id.return_value = new_user
    me_response = await client.get(
        "/api/auth/me", headers={"Authorization": f"Bearer {tokens['access_token']}"}
    )
    assert me_response.status_code == 200
    assert me_response.json()["id"] == 42

    logout_response = await client.post("/api/auth/logout", json={"refresh_token": tokens["refresh_token"]})
    assert logout_response.status_code == 200
    mock_repo.revoke_refresh_token.assert_awaited_once_with(new_user)

    # после логаута токена нет в БД: refresh отклоняется
    mock_repo.get_by_refresh_token.return_value = None
    refresh_response = await client.post("/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert refresh_response.status_code == 401


# ---------------------------------------------------------------------------
# Сценарий 2: вес -> тренировка с расчётом калорий -> еда -> сводка
# ---------------------------------------------------------------------------

async def test_log_day_and_see_overview(
    client, mock_repo, workout_repo, nutrition_repo, progress_repo, user_fixture
):
    mock_repo.get_by_id.return_value = user_fixture
    headers = make_auth_headers(user_fixture)
    now = local_now().replace(microsecond=0)

    progress_repo.create.side_effect = assign_id(1)
    response = await client.post("/api/progress", headers=headers, json={
        "weight": 70.0, "date": now.isoformat(),
    })
    assert response.status_code == 201
    progress_repo.get_latest_weight.return_value = 70.0

    workout_repo.create.side_effect = assign_id(1)
    response = await client.post("/api/workouts", headers=headers, json={
        "activity_type": "running", "duration_minutes": 60, "date": now.isoformat(),
    })
    assert response.status_code == 201
    created_workout = workout_repo.create.call_args.args[0]
    assert created_workout.calories_burned == 686

    nutrition_repo.create.side_effect = assign_id(1)
    response = await client.post("/api/nutrition", headers=headers, json={
        "food": "Pasta", "calories": 900, "protein": 30, "carbs": 150, "fat": 20, "date": now.isoformat(),
    })
    assert response.status_code == 201
    created_meal = nutrition_repo.create.call_args.args[0]

    workout_repo.list_for_user.return_value = [created_workout]
    nutrition_repo.list_for_user.return_value = [created_meal]
    with patch("fitbody.api.v1.analytics.local_today", return_value=now.date()):
        response = await client.get("/api/analytics/overview", headers=headers)

    assert response.status_code == 200
    overview = response.json()
    assert overview["today_calories_in"] == 900
    assert overview["calorie_balance_today"] == 900 - 686
    assert overview["current_weight"] == 70.0
    assert overview["streaks"] == {"workout": 1, "nutrition": 1}


# ---------------------------------------------------------------------------
# Сценарий 3: удаление чужой записи
# ---------------------------------------------------------------------------

async def test_cannot_delete_other_users_workout(client, mock_repo, workout_repo, user_fixture, other_user_fixture):
    mock_repo.get_by_id.return_value = user_fixture
    workout_repo.get_by_id.return_value = Workout(
        id=77, user_id=other_user_fixture.id, activity_type="cycling",
        duration_minutes=40, calories_burned=350, date=datetime(2026, 10, 1, 18, 0),
    )

    response = await client.delete("/api/workouts/77", headers=make_auth_headers(user_fixture))

    assert response.status_code == 403
    workout_repo.delete.assert_not_awaited()

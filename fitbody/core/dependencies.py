from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from fitbody.core.db import get_db
from fitbody.core.config import settings
from fitbody.models.user import User
from fitbody.repositories.user_repository import UserRepository
from fitbody.repositories.workout_repository import WorkoutRepository
from fitbody.repositories.nutrition_repository import NutritionRepository
from fitbody.repositories.progress_repository import ProgressRepository


security = HTTPBearer()


# Фабрики репозиториев - инжектируются в эндпоинты через Depends
def get_user_repository(db: AsyncSession = Depends(get_db)) -> UserRepository:
    return UserRepository(db)


def get_workout_repository(db: AsyncSession = Depends(get_db)) -> WorkoutRepository:
    return WorkoutRepository(db)


def get_nutrition_repository(db: AsyncSession = Depends(get_db)) -> NutritionRepository:
    return NutritionRepository(db)


def get_progress_repository(db: AsyncSession = Depends(get_db)) -> ProgressRepository:
    return ProgressRepository(db)


async def get_current_user(
        credentials: HTTPAuthorizationCredentials = Depends(security),
        repo: UserRepository = Depends(get_user_repository),
) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Невалидный токен доступа",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = jwt.decode(
            credentials.credentials,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
        )
        user_id: str = payload.get("sub")
        if user_id is None:
            raise credentials_exception
    except JWTError:
        raise credentials_exception

    user = await repo.get_by_id(int(user_id))
    if user is None:
        raise credentials_exception

    return user


def ensure_owner(entity, current_user: User, not_found: str):
    """404 - записи нет, 403 - запись принадлежит другому пользователю."""
    if entity is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=not_found)
    if entity.user_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Нет доступа к чужой записи"
        )
    return entity

import logging
from datetime import datetime, timedelta
from typing import Optional, Tuple

import bcrypt
from jose import jwt, JWTError
from fastapi import HTTPException, status

from fitbody.core.config import settings
from fitbody.models.user import User
from fitbody.repositories.user_repository import UserRepository
from fitbody.schemas.auth import BCRYPT_MAX_BYTES, UserLogin, UserRegister

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self):
        self.SECRET_KEY = settings.SECRET_KEY
        self.REFRESH_SECRET_KEY = settings.REFRESH_SECRET_KEY
        self.ALGORITHM = settings.ALGORITHM
        self.ACCESS_TOKEN_EXPIRE_MINUTES = settings.ACCESS_TOKEN_EXPIRE_MINUTES
        self.REFRESH_TOKEN_EXPIRE_DAYS = settings.REFRESH_TOKEN_EXPIRE_DAYS

    def hash_password(self, password: str) -> str:
        hashed = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt())
        return hashed.decode('utf-8')

    def verify_password(self, plain_password: str, hashed_password: Optional[str]) -> bool:
        if not hashed_password:
            return False
        # пароль длиннее 72 байт зарегистрировать нельзя
        if len(plain_password.encode("utf-8")) > BCRYPT_MAX_BYTES:
            return False
        try:
            return bcrypt.checkpw(
                plain_password.encode('utf-8'),
                hashed_password.encode('utf-8')
            )
        except ValueError:
            # хэш в БД не bcrypt
            return False

    def create_access_token(self, data: dict, expires_delta: Optional[timedelta] = None) -> str:
        to_encode = data.copy()
        expire = datetime.utcnow() + (expires_delta or timedelta(minutes=self.ACCESS_TOKEN_EXPIRE_MINUTES))
        to_encode.update({"exp": expire})
        return jwt.encode(to_encode, self.SECRET_KEY, algorithm=self.ALGORITHM)

    def create_refresh_token(self, data: dict) -> str:
        to_encode = data.copy()
        expire = datetime.utcnow() + timedelta(days=self.REFRESH_TOKEN_EXPIRE_DAYS)
        # iat с микросекундами, чтобы два токена подряд не совпадали
        to_encode.update({"exp": expire, "iat": datetime.utcnow().timestamp()})
        return jwt.encode(to_encode, self.REFRESH_SECRET_KEY, algorithm=self.ALGORITHM)

    def _decode_refresh(self, refresh_token: str) -> Optional[int]:
        try:
            payload = jwt.decode(refresh_token, self.REFRESH_SECRET_KEY, algorithms=[self.ALGORITHM])
        except JWTError:
            return None
        user_id = payload.get("sub")
        return int(user_id) if user_id is not None else None

    async def issue_tokens(self, repo: UserRepository, user: User) -> Tuple[str, str]:
        """Выдать пару токенов и сохранить refresh-токен пользователю."""
        access_token = self.create_access_token(data={"sub": str(user.id)})
        refresh_token = self.create_refresh_token(data={"sub": str(user.id)})
        await repo.save_refresh_token(
            user,
            refresh_token,
            datetime.utcnow() + timedelta(days=self.REFRESH_TOKEN_EXPIRE_DAYS),
        )
        return access_token, refresh_token

    async def authenticate_user(self, repo: UserRepository, login_data: UserLogin) -> Optional[User]:
        user = await repo.get_by_email(login_data.email)
        if not user or not self.verify_password(login_data.password, user.password):
            return None
        return user

    async def register_user(self, repo: UserRepository, user_data: UserRegister) -> User:
        existing_user = await repo.get_by_email(user_data.email)
        if existing_user:
            raise HTTPException(status_code=400, detail="Пользователь с таким email уже существует")

        new_user = User(
            email=user_data.email,
            name=user_data.name,
            password=self.hash_password(user_data.password),
            created_at=datetime.utcnow()
        )
        return await repo.create_user(new_user)

    async def rotate_refresh_token(self, repo: UserRepository, refresh_token: str) -> Optional[User]:
        """
        Проверить refresh-токен для ротации.
        Валидный JWT, которого нет в БД, - признак повторного использования:
        отзываем текущий токен пользователя.
        """
        user_id = self._decode_refresh(refresh_token)
        if user_id is None:
            return None

        user = await repo.get_by_refresh_token(refresh_token)
        if user is None:
            victim = await repo.get_by_id(user_id)
            if victim is not None:
                logger.warning(f"Повторное использование refresh-токена: user_id={user_id}")
                await repo.revoke_refresh_token(victim)
            return None

        if not user.refresh_token_expires or user.refresh_token_expires < datetime.utcnow():
            return None
        return user

    async def logout_user(self, repo: UserRepository, refresh_token: str) -> bool:
        user_id = self._decode_refresh(refresh_token)
        if user_id is None:
            return False
        user = await repo.get_by_id(user_id)
        if user is None:
            return False
        await repo.revoke_refresh_token(user)
        return True


auth_service = AuthService()

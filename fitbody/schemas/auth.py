from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime

BCRYPT_MAX_BYTES = 72


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserRegister(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6, max_length=BCRYPT_MAX_BYTES)
    name: Optional[str] = Field(default=None, max_length=100)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        # bcrypt учитывает только первые 72 байта, кириллица - 2 байта на символ
        if len(value.encode("utf-8")) > BCRYPT_MAX_BYTES:
            raise ValueError(f"Пароль не должен превышать {BCRYPT_MAX_BYTES} байт в UTF-8")
        return value


class AuthResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str


class RefreshTokenRequest(BaseModel):
    refresh_token: str


class UserRead(BaseModel):
    id: int
    email: str
    name: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

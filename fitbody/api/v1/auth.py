from fastapi import APIRouter, Depends, HTTPException, status

from fitbody.core.dependencies import get_current_user, get_user_repository
from fitbody.models.user import User
from fitbody.repositories.user_repository import UserRepository
from fitbody.services.auth_service import auth_service
from fitbody.schemas.auth import (
    UserLogin, UserRegister, AuthResponse, RefreshTokenRequest, UserRead
)

router = APIRouter()


@router.post("/register", response_model=AuthResponse)
async def register(user: UserRegister, repo: UserRepository = Depends(get_user_repository)):
    """Регистрация нового пользователя и выдача JWT токенов"""
    new_user = await auth_service.register_user(repo, user)
    access_token, refresh_token = await auth_service.issue_tokens(repo, new_user)
    return AuthResponse(access_token=access_token, refresh_token=refresh_token, token_type="bearer")


@router.post("/login", response_model=AuthResponse)
async def login(user: UserLogin, repo: UserRepository = Depends(get_user_repository)):
    """Аутентификация пользователя и выдача JWT токенов"""
    authenticated_user = await auth_service.authenticate_user(repo, user)
    if not authenticated_user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Неверный email или пароль",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token, refresh_token = await auth_service.issue_tokens(repo, authenticated_user)
    return AuthResponse(access_token=access_token, refresh_token=refresh_token, token_type="bearer")


@router.post("/refresh", response_model=AuthResponse)
async def refresh_token(request: RefreshTokenRequest, repo: UserRepository = Depends(get_user_repository)):
    """Ротация refresh-токена: старый перестает действовать"""
    user = await auth_service.rotate_refresh_token(repo, request.refresh_token)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired refresh token"
        )

    access_token, new_refresh_token = await auth_service.issue_tokens(repo, user)
    return AuthResponse(access_token=access_token, refresh_token=new_refresh_token, token_type="bearer")


@router.post("/logout")
async def logout(request: RefreshTokenRequest, repo: UserRepository = Depends(get_user_repository)):
    await auth_service.logout_user(repo, request.refresh_token)
    return {"message": "Выход выполнен"}


@router.get("/me", response_model=UserRead)
async def me(current_user: User = Depends(get_current_user)):
    return current_user

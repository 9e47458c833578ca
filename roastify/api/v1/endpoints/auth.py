"""
Endpoints de autenticación.

Login con email/contraseña; devuelve un JWT Bearer para el resto de la API.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from roastify.api.v1.dependencies.auth_deps import get_current_user
from roastify.api.v1.dependencies.use_case_deps import get_auth_use_cases
from roastify.application.dto.auth_dto import LoginRequestDTO, TokenResponseDTO, UserResponseDTO
from roastify.application.use_cases.auth_use_cases import AuthUseCases
from roastify.infrastructure.database.models import UserModel


router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/login",
    response_model=TokenResponseDTO,
    status_code=status.HTTP_200_OK,
    summary="Login con email y contraseña",
)
async def login(
    dto: LoginRequestDTO,
    use_cases: AuthUseCases = Depends(get_auth_use_cases),
) -> TokenResponseDTO:
    return await use_cases.login(dto.email, dto.password)


@router.get("/me", response_model=UserResponseDTO, summary="Usuario autenticado")
async def me(user: UserModel = Depends(get_current_user)) -> UserResponseDTO:
    return UserResponseDTO.model_validate(user)

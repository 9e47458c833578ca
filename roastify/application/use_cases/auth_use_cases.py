"""
Casos de uso para autenticación.

Login con email/contraseña contra la tabla users; emite un JWT con sub = id.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from roastify.application.dto.auth_dto import TokenResponseDTO, UserResponseDTO
from roastify.core.security import security_service
from roastify.infrastructure.database.models import UserModel
from roastify.infrastructure.repositories.user_repository import UserRepository
from roastify.shared.exceptions.auth import InvalidCredentialsException


class AuthUseCases:
    def __init__(self, db: AsyncSession) -> None:
        self.repository = UserRepository(db)

    async def login(self, email: str, password: str) -> TokenResponseDTO:
        user = await self.repository.get_by_email(email)
        if not user or not security_service.verify_password(password, user.password):
            logger.warning(f"Login fallido para {email}")
            raise InvalidCredentialsException()

        token = security_service.create_access_token({"sub": str(user.id), "role": user.role})
        return TokenResponseDTO(access_token=token, user=UserResponseDTO.model_validate(user))

    async def get_user_from_token(self, token: str) -> UserModel:
        """
        Resuelve el usuario dueño de un token.

        Raises:
            InvalidCredentialsException: token sin sub o usuario inexistente
            TokenExpiredException: token vencido
        """
        payload = security_service.decode_access_token(token)
        try:
            user_id = int(payload.get("sub"))
        except (TypeError, ValueError):
            raise InvalidCredentialsException("Token inválido")

        user = await self.repository.get_by_id(user_id)
        if not user:
            raise InvalidCredentialsException("Token inválido")
        return user

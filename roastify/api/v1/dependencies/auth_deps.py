"""
Dependencias de autenticación (Bearer JWT).
"""
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from roastify.api.v1.dependencies.use_case_deps import get_auth_use_cases
from roastify.application.use_cases.auth_use_cases import AuthUseCases
from roastify.infrastructure.database.models import UserModel
from roastify.shared.exceptions.auth import ForbiddenException, UnauthorizedException


bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    use_cases: AuthUseCases = Depends(get_auth_use_cases),
) -> UserModel:
    """
    Resuelve el usuario del header Authorization: Bearer <token>.

    Raises:
        UnauthorizedException: sin header o esquema distinto de Bearer
        InvalidCredentialsException / TokenExpiredException: token inválido
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise UnauthorizedException("Token de acceso requerido")
    return await use_cases.get_user_from_token(credentials.credentials)


async def require_admin(user: UserModel = Depends(get_current_user)) -> UserModel:
    if not user.is_admin:
        raise ForbiddenException("Se requiere rol de administrador", required_role="admin")
    return user

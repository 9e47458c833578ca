"""
Utilidades de seguridad: hashing de contraseñas y tokens JWT.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from passlib.context import CryptContext

from roastify.core.config import settings
from roastify.shared.exceptions.auth import InvalidCredentialsException, TokenExpiredException


# Contexto para hashing de contraseñas
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=12)


class SecurityService:
    """Servicio para operaciones de seguridad."""

    @staticmethod
    def hash_password(password: str) -> str:
        """
        Genera un hash de la contraseña.

        Args:
            password: Contraseña en texto plano

        Returns:
            str: Hash de la contraseña
        """
        return pwd_context.hash(password)

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """
        Verifica si una contraseña coincide con su hash.

        Args:
            plain_password: Contraseña en texto plano
            hashed_password: Hash de la contraseña

        Returns:
            bool: True si coinciden, False en caso contrario
        """
        try:
            return pwd_context.verify(plain_password, hashed_password)
        except ValueError:
            # Hash con formato desconocido (p.ej. usuario importado sin password)
            return False

    @staticmethod
    def create_access_token(
        data: Dict[str, Any],
        expires_delta: Optional[timedelta] = None
    ) -> str:
        """
        Crea un token JWT de acceso.

        Args:
            data: Datos a incluir en el token
            expires_delta: Tiempo de expiración personalizado

        Returns:
            str: Token JWT codificado
        """
        to_encode = data.copy()
        expire = datetime.now(timezone.utc) + (
            expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        )
        to_encode.update({"exp": expire})
        return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    @staticmethod
    def decode_access_token(token: str) -> Dict[str, Any]:
        """
        Decodifica y valida un token JWT.

        Raises:
            InvalidCredentialsException: Si el token es inválido
            TokenExpiredException: Si el token ha expirado
        """
        try:
            return jwt.decode(
                token,
                settings.SECRET_KEY,
                algorithms=[settings.ALGORITHM]
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpiredException()
        except JWTError:
            raise InvalidCredentialsException()


# Instancia global del servicio de seguridad
security_service = SecurityService()

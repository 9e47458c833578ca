"""
Casos de uso para administración del sistema.
"""
from typing import Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from roastify.core.security import security_service
from roastify.infrastructure.database.models import UserModel
from roastify.infrastructure.repositories.user_repository import UserRepository
from roastify.shared.exceptions.domain import ValidationException


class AdminUseCases:
    """
    Mantenimiento de usuarios administradores.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.user_repo = UserRepository(db)

    async def seed_admin_user(self, name: str, email: str, password: str) -> Tuple[UserModel, bool]:
        """
        Crea o actualiza el usuario administrador (upsert por email).

        La contraseña se guarda hasheada con bcrypt y nunca se loguea.

        Returns:
            Tuple[UserModel, bool]: (usuario, True si fue creado)
        """
        if not email or "@" not in email:
            raise ValidationException("Email de administrador inválido", field="email")
        if not password:
            raise ValidationException("La contraseña de administrador es requerida", field="password")

        existing = await self.user_repo.get_by_email(email)
        user = await self.user_repo.save({
            "name": name or "Admin",
            "email": email,
            "password": security_service.hash_password(password),
            "role": "admin",
            "email_verified": True,
        })
        await self.db.commit()

        created = existing is None
        logger.info(
            f"Administrador {'creado' if created else 'actualizado'}: "
            f"id={user.id} email={user.email} role={user.role}"
        )
        return user, created

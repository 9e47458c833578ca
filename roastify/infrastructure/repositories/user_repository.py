"""
Repositorio de usuarios.
"""
from typing import Any, Dict, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from roastify.infrastructure.database.models import UserModel


class UserRepository:
    """Gestiona la tabla users."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, user_id: int) -> Optional[UserModel]:
        return await self.db.get(UserModel, user_id)

    async def get_by_email(self, email: str) -> Optional[UserModel]:
        result = await self.db.execute(
            select(UserModel).where(UserModel.email == email.strip().lower())
        )
        return result.scalars().first()

    async def save(self, data: Dict[str, Any]) -> UserModel:
        """
        Crea o actualiza un usuario identificado por email (upsert por email).
        """
        email = data["email"].strip().lower()
        user = await self.get_by_email(email)

        if user:
            for key, value in data.items():
                if key != "email":
                    setattr(user, key, value)
        else:
            user = UserModel(**{**data, "email": email})
            self.db.add(user)

        await self.db.flush()
        await self.db.refresh(user)
        return user

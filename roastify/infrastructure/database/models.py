"""
Modelos de base de datos (ORM).
"""
from sqlalchemy import Column, String, Integer, DateTime, Text, Boolean, Index, text
from sqlalchemy.sql import func

from roastify.infrastructure.database.session import Base


class UserModel(Base):
    """
    Modelo de base de datos para usuarios.

    Roles posibles:
    - user: freelancer (dueño de sus clientes, proyectos y tiempos)
    - admin: acceso a paneles de administracion y al mirror
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password = Column(String(255), nullable=False)
    role = Column(String(50), nullable=False, default="user")
    email_verified = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"


class TimeEntryModel(Base):
    """
    Modelo de base de datos para entradas de tiempo.

    Una entrada "corriendo" tiene is_running=True y end_time/duration en NULL.
    Cada usuario puede tener como maximo una entrada corriendo (indice unico parcial).
    duration se guarda en minutos enteros.
    """

    __tablename__ = "time_entries"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    task_id = Column(Integer, nullable=True, index=True)
    project_id = Column(Integer, nullable=True, index=True)
    description = Column(Text, nullable=True)
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=True)
    duration = Column(Integer, nullable=True)
    is_running = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index(
            "uq_time_entries_one_running_per_user",
            "user_id",
            unique=True,
            postgresql_where=text("is_running"),
            sqlite_where=text("is_running = 1"),
        ),
    )

    def __repr__(self):
        return f"<TimeEntry(id={self.id}, user_id={self.user_id}, running={self.is_running})>"

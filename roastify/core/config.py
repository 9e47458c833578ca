"""
Configuracion central de la aplicacion.
Gestiona variables de entorno y configuraciones globales.
Soporta configuracion dinamica para desarrollo (ENVIRONMENT=development)
y produccion (ENVIRONMENT=production).
"""
import json
from typing import List
from pydantic_settings import BaseSettings
from pydantic import Field, computed_field


class Settings(BaseSettings):
    """
    Clase de configuracion de la aplicacion.
    Lee variables de entorno y proporciona valores por defecto.

    Bases de datos:
    - DATABASE_*: base de la API (async SQLAlchemy)
    - LOCAL_DB_* / REMOTE_DB_*: los dos lados del mirror (psycopg)
    - Cada base se puede especificar por URL completa o por componentes
    """

    # Configuracion de la aplicacion
    APP_NAME: str = Field(default="Roastify API")
    APP_VERSION: str = Field(default="1.0.0")
    DEBUG: bool = Field(default=False)
    ENVIRONMENT: str = Field(default="production")

    # Configuracion del servidor
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8000)

    # Base de datos - Componentes separados (recomendado para flexibilidad)
    DATABASE_HOST: str = Field(default="localhost")
    DATABASE_PORT: int = Field(default=5432)
    DATABASE_USER: str = Field(default="postgres")
    DATABASE_PASSWORD: str = Field(default="postgres")
    DATABASE_NAME: str = Field(default="roastify")

    # Base de datos - URL completa (override de componentes si se proporciona)
    DATABASE_URL: str = Field(default="")
    DB_POOL_SIZE: int = Field(default=5)
    DB_MAX_OVERFLOW: int = Field(default=10)

    # Mirror - lado local
    LOCAL_DATABASE_URL: str = Field(default="")
    LOCAL_DB_HOST: str = Field(default="localhost")
    LOCAL_DB_PORT: int = Field(default=5432)
    LOCAL_DB_NAME: str = Field(default="roastify")
    LOCAL_DB_USER: str = Field(default="postgres")
    LOCAL_DB_PASSWORD: str = Field(default="")
    LOCAL_DB_SSLMODE: str = Field(default="disable")

    # Mirror - lado remoto (sin valores por defecto: se debe configurar explicitamente)
    REMOTE_DATABASE_URL: str = Field(default="")
    REMOTE_DB_HOST: str = Field(default="")
    REMOTE_DB_PORT: int = Field(default=5432)
    REMOTE_DB_NAME: str = Field(default="roastifydb")
    REMOTE_DB_USER: str = Field(default="")
    REMOTE_DB_PASSWORD: str = Field(default="")
    REMOTE_DB_SSLMODE: str = Field(default="require")

    # Mirror - comportamiento
    MIRROR_MANIFEST_PATH: str = Field(default="")
    MIRROR_BATCH_SIZE: int = Field(default=100)
    MIRROR_STRATEGY: str = Field(default="row_count")

    # Seguridad
    SECRET_KEY: str = Field(default="change-this-secret-key-in-production")
    ALGORITHM: str = Field(default="HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=60 * 24)

    # Usuario administrador inicial (scripts/seed_admin.py)
    ADMIN_NAME: str = Field(default="Administrator")
    ADMIN_EMAIL: str = Field(default="")
    ADMIN_PASSWORD: str = Field(default="")

    # Cliente del timer (scripts/watch_timer.py)
    API_BASE_URL: str = Field(default="http://localhost:8000/api/v1")
    API_TOKEN: str = Field(default="")
    TIMER_TICK_SECONDS: float = Field(default=1.0)
    TIMER_POLL_SECONDS: float = Field(default=5.0)

    # CORS (acepta lista JSON o "*" para todos los origenes)
    CORS_ORIGINS: str = Field(default="*")

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE: str = Field(default="logs/app.log")

    @computed_field
    @property
    def effective_database_url(self) -> str:
        """
        Retorna la URL de base de datos efectiva.
        Si DATABASE_URL esta definida, la usa directamente.
        Si no, construye la URL desde los componentes individuales.
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+asyncpg://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}"
            f"@{self.DATABASE_HOST}:{self.DATABASE_PORT}/{self.DATABASE_NAME}"
        )

    @computed_field
    @property
    def is_development(self) -> bool:
        """Indica si el entorno es de desarrollo."""
        return self.ENVIRONMENT.lower() == "development"

    class Config:
        """Configuracion de Pydantic."""
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignorar campos extra del .env


def get_cors_origins(cors_string: str) -> List[str]:
    """
    Parsea la configuracion de CORS.
    Acepta "*" para todos los origenes o una lista JSON.
    """
    if cors_string == "*":
        return ["*"]
    try:
        return json.loads(cors_string)
    except json.JSONDecodeError:
        # Si no es JSON valido, retornar como lista simple
        return [origin.strip() for origin in cors_string.split(",")]


# Instancia global de configuracion
settings = Settings()

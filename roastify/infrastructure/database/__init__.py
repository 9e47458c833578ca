"""
Configuración de base de datos.

Importa todos los modelos para que se registren con Base
antes de crear las tablas.
"""
from roastify.infrastructure.database.models import (
    UserModel,
    TimeEntryModel,
)

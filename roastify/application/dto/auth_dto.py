"""
DTOs de autenticación.
"""
from pydantic import BaseModel, Field


class LoginRequestDTO(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1)


class UserResponseDTO(BaseModel):
    id: int
    name: str
    email: str
    role: str
    email_verified: bool

    class Config:
        from_attributes = True


class TokenResponseDTO(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponseDTO

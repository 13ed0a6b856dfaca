"""
Schemas Pydantic para User e para o ator autenticado (Principal).
"""

from uuid import UUID

from pydantic import ConfigDict, EmailStr

from app.models.enums import STAFF_ROLES, UserRole
from app.schemas.base import BaseSchema, TimestampSchema


class UserRead(TimestampSchema):
    """
    Schema para leitura de usuário.

    Nunca expõe password_hash.
    """
    id: UUID
    name: str
    email: EmailStr
    role: UserRole


class UserEmbedded(BaseSchema):
    """Referência curta a um usuário (quem alterou um status, dono do pedido)."""
    id: UUID
    name: str


class UserLogin(BaseSchema):
    """Schema para login."""
    email: EmailStr
    password: str


class TokenResponse(BaseSchema):
    """Resposta de autenticação com token JWT."""
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class UserWithToken(BaseSchema):
    """Usuário com token JWT (retorno do login)."""
    user: UserRead
    token: TokenResponse


class Principal(BaseSchema):
    """
    Ator autenticado de uma requisição.

    Passado explicitamente para os services no lugar do objeto User,
    para que regras de autorização dependam só de id e role.
    """
    model_config = ConfigDict(frozen=True)

    id: UUID
    role: UserRole

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES

    @classmethod
    def from_user(cls, user) -> "Principal":
        return cls(id=user.id, role=user.role)

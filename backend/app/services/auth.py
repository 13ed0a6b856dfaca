"""
Service de autenticação.

Usuários são criados apenas pelo seed; aqui só existe o login.
"""

import logging

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.security import create_user_token, verify_password
from app.repositories.user import UserRepository
from app.schemas.user import UserRead, TokenResponse, UserWithToken

logger = logging.getLogger(__name__)
settings = get_settings()


class AuthService:
    """Service para operações de autenticação."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.user_repo = UserRepository(db)

    async def login(self, email: str, password: str) -> UserWithToken:
        """
        Autentica usuário e retorna token JWT com o papel (role) no payload.

        Raises:
            HTTPException 401: Credenciais inválidas
        """
        user = await self.user_repo.get_by_email(email)

        if user is None or not verify_password(password, user.password_hash):
            logger.info(f"Login recusado: {email}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Email ou senha incorretos",
                headers={"WWW-Authenticate": "Bearer"},
            )

        return UserWithToken(
            user=UserRead.model_validate(user),
            token=TokenResponse(
                access_token=create_user_token(user.id, user.role),
                token_type="bearer",
                expires_in=settings.JWT_EXPIRES_MINUTES * 60,
            ),
        )

"""
Utilitários de segurança: hash de senha e JWT.

O token carrega o id do usuário em "sub" e o papel em "role".
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID

import bcrypt
from jose import JWTError, jwt

from app.core.config import get_settings
from app.models.enums import UserRole

logger = logging.getLogger(__name__)
settings = get_settings()


def hash_password(password: str) -> str:
    """Gera hash bcrypt da senha."""
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verifica se a senha corresponde ao hash.

    Hash malformado conta como senha incorreta.
    """
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"),
            hashed_password.encode("utf-8"),
        )
    except ValueError as e:
        logger.debug(f"Hash de senha inválido: {e}")
        return False


def create_access_token(
    subject: str,
    extra_data: dict[str, Any] | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Cria token JWT assinado.

    Args:
        subject: Valor de "sub" (id do usuário)
        extra_data: Claims adicionais
        expires_delta: Expiração customizada (default: JWT_EXPIRES_MINUTES)
    """
    issued_at = datetime.now(timezone.utc)
    expire = issued_at + (expires_delta or timedelta(minutes=settings.JWT_EXPIRES_MINUTES))

    payload = {"sub": subject, "exp": expire, "iat": issued_at}
    if extra_data:
        payload.update(extra_data)

    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def create_user_token(user_id: UUID, role: UserRole) -> str:
    """Token de acesso de um usuário, com o papel no claim "role"."""
    return create_access_token(subject=str(user_id), extra_data={"role": role.value})


def decode_token(token: str) -> dict[str, Any] | None:
    """
    Decodifica e valida token JWT.

    Returns:
        Payload do token ou None se inválido/expirado
    """
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except JWTError:
        return None


def get_token_subject(payload: dict[str, Any] | None) -> UUID | None:
    """Extrai o id do usuário ("sub") do payload; None se ausente ou malformado."""
    if not payload or "sub" not in payload:
        return None
    try:
        return UUID(str(payload["sub"]))
    except ValueError:
        return None

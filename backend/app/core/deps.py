"""
Dependencies FastAPI para autenticação e autorização.

O usuário autenticado é convertido em Principal (id + role) antes de
chegar aos services de pedido.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import decode_token, get_token_subject
from app.db.session import get_db
from app.models.enums import UserRole
from app.models.user import User
from app.repositories.user import UserRepository
from app.schemas.user import Principal

# Scheme Bearer para extrair token do header Authorization
security = HTTPBearer()


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """
    Dependency que retorna o usuário autenticado.

    Raises:
        HTTPException 401: Token inválido, expirado ou usuário não encontrado
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Token inválido ou expirado",
        headers={"WWW-Authenticate": "Bearer"},
    )

    user_id = get_token_subject(decode_token(credentials.credentials))
    if user_id is None:
        raise credentials_exception

    user = await UserRepository(db).get_by_id(user_id)
    if user is None:
        raise credentials_exception

    return user


async def get_current_principal(
    current_user: Annotated[User, Depends(get_current_user)],
) -> Principal:
    """Dependency que retorna o ator autenticado (id + role)."""
    return Principal.from_user(current_user)


async def require_admin(
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> Principal:
    """
    Dependency que exige papel ADMIN.

    Raises:
        HTTPException 403: Usuário não é admin
    """
    if principal.role != UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Acesso restrito a administradores",
        )
    return principal


async def require_staff(
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> Principal:
    """
    Dependency que exige papel de staff (ADMIN, MANAGER ou OPERATOR).

    Raises:
        HTTPException 403: Usuário comum
    """
    if not principal.is_staff:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Acesso restrito à equipe",
        )
    return principal


async def require_manager(
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> Principal:
    """
    Dependency que exige papel MANAGER (bloqueio de equipamento).

    Raises:
        HTTPException 403: Usuário não é gerente
    """
    if principal.role != UserRole.MANAGER:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Acesso restrito a gerentes",
        )
    return principal


# Type aliases para uso nos endpoints
CurrentUser = Annotated[User, Depends(get_current_user)]
CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]
AdminUser = Annotated[Principal, Depends(require_admin)]
StaffUser = Annotated[Principal, Depends(require_staff)]
ManagerUser = Annotated[Principal, Depends(require_manager)]
DbSession = Annotated[AsyncSession, Depends(get_db)]

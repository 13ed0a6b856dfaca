"""
Endpoints de autenticação.

Rate Limiting aplicado:
    - POST /login: 10 req/min (rate_limit_auth)
"""

from fastapi import APIRouter, Depends

from app.core.deps import CurrentUser, DbSession
from app.core.rate_limit import rate_limit_auth
from app.schemas.user import UserLogin, UserRead, UserWithToken
from app.services.auth import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/login",
    response_model=UserWithToken,
    summary="Autenticar usuário",
    description="Retorna token JWT para autenticação nos endpoints protegidos.",
)
async def login(
    data: UserLogin,
    db: DbSession,
    _: None = Depends(rate_limit_auth),
) -> UserWithToken:
    """
    Login de usuário.

    Uso: `Authorization: Bearer <access_token>`
    """
    service = AuthService(db)
    return await service.login(data.email, data.password)


@router.get(
    "/me",
    response_model=UserRead,
    summary="Dados do usuário autenticado",
)
async def get_me(current_user: CurrentUser) -> UserRead:
    """Retorna dados do usuário autenticado."""
    return UserRead.model_validate(current_user)

"""FastAPI dependency injection — wires infrastructure to application layer."""

from functools import lru_cache

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.application.services import EntityService
from app.domain.entities import Identity
from app.domain.exceptions import UnauthenticatedError
from app.infrastructure.database.session import get_db_session
from app.infrastructure.database.repositories import SQLAlchemyEntityRepository
from app.infrastructure.security import JWTIdentityProvider

_bearer_scheme = HTTPBearer(auto_error=False, description="JWT access token")


@lru_cache
def get_identity_provider() -> JWTIdentityProvider:
    """Process-wide token verifier (keeps the JWKS key cache warm)."""
    return JWTIdentityProvider.from_settings(get_settings())


def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
    provider: JWTIdentityProvider = Depends(get_identity_provider),
) -> Identity:
    """Resolve the caller from the ``Authorization: Bearer`` header or fail with 401.

    Plain ``def`` so FastAPI runs it in the threadpool: a cold JWKS cache
    means a blocking HTTP fetch inside ``identify``.
    """
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError("Authentication required")
    return provider.identify(credentials.credentials)


async def get_entity_service(
    session: AsyncSession = Depends(get_db_session, scope="function"),
) -> EntityService:
    """Provides an EntityService instance with its repository wired up.

    The session is function-scoped so its commit finishes before the
    response is sent; a failed commit surfaces as an error response.
    """
    settings = get_settings()
    repository = SQLAlchemyEntityRepository(session)
    return EntityService(repository, write_roles=settings.entity_write_roles)

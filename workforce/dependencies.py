from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from workforce.core.security import extract_principal
from workforce.core.exceptions import UnauthorizedException
from workforce.database import get_db
from workforce.models.actor import Actor
from workforce.models.principal import Principal
from workforce.repositories.account_repository import AccountRepository
from workforce.services.provisioning_service import ProvisioningResolver

security = HTTPBearer()


async def get_current_principal(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> Principal:
    """
    FastAPI dependency to validate the bearer JWT.

    Raises:
        HTTPException 401: If token invalid or expired
    """
    try:
        return extract_principal(credentials.credentials)
    except UnauthorizedException as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )


async def get_current_actor(
    principal: Principal = Depends(get_current_principal), db: Session = Depends(get_db)
) -> Actor:
    """
    FastAPI dependency resolving the acting caller.

    Flow:
    1. Validate JWT and build the principal (sub + role claims)
    2. Get or auto-create the local account for employees and owners
    3. Return the Actor passed explicitly to every service call

    Raises:
        AccessDeniedException: If the principal has no usable role
    """
    resolver = ProvisioningResolver(AccountRepository(db))
    return resolver.resolve(principal)

from jose import JWTError, jwt
from workforce.config import settings
from workforce.core.exceptions import UnauthorizedException
from workforce.models.principal import Principal

# Spring-style authorities carry this prefix; the bare role name is kept
ROLE_PREFIX = "ROLE_"


def decode_jwt(token: str) -> dict:
    """
    Decode and validate a JWT issued by the identity provider.

    Args:
        token: JWT access token from Authorization header

    Returns:
        Decoded token payload with 'sub', 'exp' and role claims

    Raises:
        UnauthorizedException: If token invalid, expired, or malformed
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])

        # Validate expiration (jose checks this automatically)
        exp = payload.get("exp")
        if exp is None:
            raise UnauthorizedException("Token missing expiration")

        # Extract user_id from 'sub' claim
        user_id: str = payload.get("sub")
        if user_id is None:
            raise UnauthorizedException("Token missing user identifier")

        return payload

    except JWTError as e:
        raise UnauthorizedException(f"Invalid token: {str(e)}")


def extract_role_claims(payload: dict) -> frozenset[str]:
    """
    Collect role claims from a decoded token.

    Reads Keycloak's ``realm_access.roles`` and a top-level ``roles`` list,
    stripping any ``ROLE_`` prefix.
    """
    raw_roles: list = []
    realm_access = payload.get("realm_access")
    if isinstance(realm_access, dict):
        raw_roles.extend(realm_access.get("roles") or [])
    top_level = payload.get("roles")
    if isinstance(top_level, list):
        raw_roles.extend(top_level)

    roles = set()
    for role in raw_roles:
        if not isinstance(role, str):
            continue
        if role.startswith(ROLE_PREFIX):
            role = role[len(ROLE_PREFIX):]
        roles.add(role)
    return frozenset(roles)


def extract_principal(token: str) -> Principal:
    """Build the verified principal carried by a bearer token"""
    payload = decode_jwt(token)
    external_id = str(payload["sub"])
    return Principal(
        external_id=external_id,
        username=payload.get("preferred_username") or external_id,
        role_claims=extract_role_claims(payload),
    )

from typing import Optional
from jose import JWTError, jwt


ROLE_CLAIM = "role"


def decode_token_claims(token: str) -> Optional[dict]:
    """
    Read the claims of a backend-issued JWT.

    The backend owns the signing key and verifies the signature on every API
    call, so the web client only reads the payload to drive navigation.

    Args:
        token: Encoded JWT returned by ``POST /auth/login``

    Returns:
        Claims dict, or None when the token cannot be parsed
    """
    if not token:
        return None
    try:
        return jwt.get_unverified_claims(token)
    except JWTError:
        return None


def extract_roles(claims: Optional[dict]) -> list[str]:
    if not claims:
        return []
    role = claims.get(ROLE_CLAIM)
    if role is None:
        return []
    if isinstance(role, (list, tuple)):
        return [str(r) for r in role]
    return [str(role)]


def roles_from_token(token: str) -> list[str]:
    return extract_roles(decode_token_claims(token))

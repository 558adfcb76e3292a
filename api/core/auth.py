from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header

from api.core.errors import Unauthorized
from api.services.auth_service import AuthService, get_auth_service


@dataclass(frozen=True)
class OwnerContext:
    """Identity under which documents are stored and read."""
    user_id: str
    access_token: Optional[str] = None


def _bearer_token(authorization: Optional[str]) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        raise Unauthorized("Unauthorized")
    token = authorization[len("Bearer "):].strip()
    if not token:
        raise Unauthorized("Unauthorized")
    return token


def get_owner_context(
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
    auth_service: AuthService = Depends(get_auth_service),
) -> OwnerContext:
    """Require a valid bearer token and resolve it to the owning user."""
    token = _bearer_token(authorization)
    user_id = auth_service.get_user_id(token)
    return OwnerContext(user_id=user_id, access_token=token)

# sweetshop/core/auth.py
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from sweetshop.core.config import Settings, get_settings
from sweetshop.core.errors import Forbidden, Unauthorized
from sweetshop.repositories.user_repo import UserRepository
from sweetshop.schemas.user import TokenIdentity
from sweetshop.services.auth_service import AuthService

# HTTP Bearer scheme:
# - auto_error=False => a missing Authorization header does not raise 403;
#   we answer 401 ourselves so every auth failure looks the same.
bearer_scheme = HTTPBearer(auto_error=False)


def get_auth_service(settings: Settings = Depends(get_settings)) -> AuthService:
    """FastAPI dependency returning an AuthService bound to current settings."""
    return AuthService(UserRepository(), settings)


def require_auth(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> TokenIdentity:
    """
    Enforce authentication.

    Flow:
      1. No bearer credential => 401.
      2. Verify the token signature/expiry => 401 on failure.
      3. Hand the identity to downstream dependencies / handlers.

    No database lookup is made; the token is self-contained.

    Returns:
        The verified TokenIdentity (user_id, role).
    """
    if credentials is None:
        raise Unauthorized()

    return auth_service.verify(credentials.credentials)


def require_admin(
    identity: TokenIdentity = Depends(require_auth),
    settings: Settings = Depends(get_settings),
) -> TokenIdentity:
    """
    Enforce admin role on inventory-management operations.

    Controlled by ENFORCE_ADMIN_ROLE. When disabled any authenticated
    identity passes, which is the behaviour of the first storefront
    release.

    Raises:
        Forbidden(403): if the policy is on and role is not admin.
    """
    if settings.ENFORCE_ADMIN_ROLE and identity.role != "admin":
        raise Forbidden()
    return identity

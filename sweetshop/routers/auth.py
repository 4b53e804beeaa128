# sweetshop/routers/auth.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from sweetshop.core.auth import get_auth_service, require_auth
from sweetshop.database import get_session
from sweetshop.schemas.user import Token, TokenIdentity, UserLogin, UserRead, UserRegister
from sweetshop.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
)
def register(
    payload: UserRegister,
    session: Session = Depends(get_session),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Create a customer account.

    - 400 on malformed fields, 409 if the email is taken.
    - The password hash is never part of the response.
    """
    return auth_service.register(session, payload)


@router.post("/login", response_model=Token)
def login(
    payload: UserLogin,
    session: Session = Depends(get_session),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Exchange email/password for a bearer token.

    - 401 with a generic message on any credential failure.
    """
    token = auth_service.authenticate(session, payload.email, payload.password)
    return Token(token=token)


@router.get("/me", response_model=UserRead)
def read_me(
    identity: TokenIdentity = Depends(require_auth),
    session: Session = Depends(get_session),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Return the authenticated user's account.
    """
    return auth_service.get_user(session, identity.user_id)

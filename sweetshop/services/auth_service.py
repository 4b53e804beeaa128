# sweetshop/services/auth_service.py
import logging
import uuid
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import ValidationError as PydanticValidationError, validate_email
from pydantic_core import PydanticCustomError
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from sweetshop.core.config import Settings
from sweetshop.core.errors import (
    DuplicateEmail,
    InvalidCredentials,
    InvalidToken,
    NotFound,
)
from sweetshop.models.user import User
from sweetshop.repositories.user_repo import UserRepository
from sweetshop.schemas.user import TokenIdentity, UserRegister

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Compared against when the email is unknown, so a miss costs the same
# bcrypt round as a wrong password.
_DUMMY_HASH = pwd_context.hash("not-a-real-password")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def normalize_email(email: str) -> str:
    """
    Apply the same normalization EmailStr applies at registration
    (e.g. lowercase domain). Malformed input is returned unchanged so it
    simply fails the lookup.
    """
    try:
        return validate_email(email)[1]
    except PydanticCustomError:
        return email


class AuthService:
    """
    Registration, login and token verification.

    Responsibilities:
      - hash passwords (bcrypt via passlib), never keep plaintext
      - issue signed access tokens carrying user id + role
      - verify tokens without a database round-trip
      - keep auth failures generic (no user enumeration)
    """

    def __init__(self, repo: UserRepository, settings: Settings):
        self.repo = repo
        self.settings = settings

    # ----- Registration / login -----

    def register(self, session: Session, payload: UserRegister) -> User:
        """
        Create a customer account.

        Raises:
            DuplicateEmail(409): if the email is already registered.
        """
        if self.repo.get_by_email(session, payload.email) is not None:
            raise DuplicateEmail()

        user = User(
            email=payload.email,
            name=payload.name,
            password_hash=hash_password(payload.password),
            role="customer",
        )
        try:
            user = self.repo.create(session, user)
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email.
            session.rollback()
            raise DuplicateEmail()

        logger.info("Registered user %s", user.id)
        return user

    def authenticate(self, session: Session, email: str, password: str) -> str:
        """
        Check credentials and return a signed access token.

        Raises:
            InvalidCredentials(401): unknown email or wrong password.
        """
        user = self.repo.get_by_email(session, normalize_email(email))
        if user is None:
            verify_password(password, _DUMMY_HASH)
            logger.info("Failed login attempt")
            raise InvalidCredentials()

        if not verify_password(password, user.password_hash):
            logger.info("Failed login attempt")
            raise InvalidCredentials()

        logger.info("User %s logged in", user.id)
        return self.create_access_token(user)

    # ----- Tokens -----

    def create_access_token(self, user: User, expires_delta: timedelta | None = None) -> str:
        now = datetime.now(timezone.utc)
        expire = now + (
            expires_delta or timedelta(minutes=self.settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        )
        claims = {
            "sub": str(user.id),
            "role": user.role,
            "iat": now,
            "exp": expire,
        }
        return jwt.encode(claims, self.settings.JWT_SECRET, algorithm=self.settings.JWT_ALG)

    def verify(self, token: str) -> TokenIdentity:
        """
        Decode and verify an access token.

        Verification:
          - signature (JWT_SECRET / JWT_ALG)
          - expiration time (exp is required)
          - sub must be a UUID, role must be a known role

        Raises:
            InvalidToken(401): for any of the above failures.
        """
        try:
            payload = jwt.decode(
                token,
                self.settings.JWT_SECRET,
                algorithms=[self.settings.JWT_ALG],
                options={"require_exp": True, "require_sub": True},
            )
        except JWTError:
            raise InvalidToken()

        try:
            return TokenIdentity(
                user_id=uuid.UUID(payload["sub"]),
                role=payload.get("role"),
            )
        except (KeyError, ValueError, PydanticValidationError):
            raise InvalidToken()

    # ----- Profile -----

    def get_user(self, session: Session, user_id: uuid.UUID) -> User:
        user = self.repo.get_by_id(session, user_id)
        if user is None:
            raise NotFound("User not found")
        return user

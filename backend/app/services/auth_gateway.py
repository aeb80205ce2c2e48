"""
Auth Gateway Service

Registers users, checks credentials and mints/verifies stateless session
tokens. Tokens are never stored; a token is valid while its signature
checks out and it has not expired.
"""
import logging
from dataclasses import dataclass
from typing import Optional

import jwt
from tortoise.exceptions import IntegrityError

from app.core.errors import (
    DuplicateUsernameError,
    InvalidCredentialsError,
    InvalidToken,
    Unauthenticated,
    ValidationError,
)
from app.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from app.models.user import User

logger = logging.getLogger("uvicorn.error")


@dataclass(frozen=True)
class Identity:
    """Who a valid session token belongs to."""
    user_id: str
    username: str


class AuthGateway:
    def __init__(self, secret: str, expire_minutes: int = 60):
        self.secret = secret
        self.expire_minutes = expire_minutes

    @classmethod
    def from_settings(cls, settings) -> "AuthGateway":
        return cls(secret=settings.secret_key, expire_minutes=settings.access_token_expire_minutes)

    async def register(self, username: Optional[str], password: Optional[str]) -> User:
        """
        Create a user account.

        Raises:
            ValidationError: username or password missing
            DuplicateUsernameError: username already taken
        """
        if not username or not password:
            raise ValidationError("username/password required")
        logger.info("[auth] registering user: %s", username)
        if await User.filter(username=username).exists():
            raise DuplicateUsernameError("Username already exists")
        try:
            user = await User.create(username=username, password_hash=hash_password(password))
        except IntegrityError:
            # Lost a race with a concurrent registration of the same name
            raise DuplicateUsernameError("Username already exists")
        return user

    async def login(self, username: Optional[str], password: Optional[str]) -> str:
        """
        Check credentials and mint a session token.

        Unknown username and wrong password raise the same error so callers
        cannot tell which one failed.

        Raises:
            ValidationError: username or password missing
            InvalidCredentialsError: bad username or password
        """
        if not username or not password:
            raise ValidationError("username/password required")
        logger.info("[auth] logging in user: %s", username)
        user = await User.get_or_none(username=username)
        if not user or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError("Incorrect username or password")
        return create_access_token(str(user.id), user.username, self.secret, self.expire_minutes)

    def authenticate(self, token: Optional[str]) -> Identity:
        """
        Resolve a session token to an Identity.

        Raises:
            Unauthenticated: no token supplied
            InvalidToken: bad signature, malformed or expired token
        """
        if not token:
            raise Unauthenticated("Access denied")
        try:
            payload = decode_access_token(token, self.secret)
        except jwt.InvalidTokenError:
            raise InvalidToken("Invalid token")
        user_id = payload.get("sub")
        username = payload.get("username")
        if not user_id or not username:
            raise InvalidToken("Invalid token")
        return Identity(user_id=user_id, username=username)


def extract_token(authorization: Optional[str]) -> Optional[str]:
    """
    Pull the token out of an Authorization header.
    Accepts "Bearer <token>" and a bare token.
    """
    if not authorization:
        return None
    value = authorization.strip()
    scheme, _, rest = value.partition(" ")
    if scheme.lower() == "bearer":
        value = rest.strip()
    return value or None

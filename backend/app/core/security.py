# app/core/security.py
"""
Security module for authentication.
Handles password hashing and JWT session token creation/validation.
"""
import datetime as dt
import jwt  # PyJWT
from passlib.context import CryptContext

# Password hashing context
# Argon2 is a modern, salted, memory-hard password hashing algorithm
pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto",   # Automatically handle deprecated schemes
)

JWT_ALG = "HS256"  # JWT signing algorithm (HMAC SHA-256)
DEFAULT_EXPIRE_MINUTES = 60


def hash_password(plain: str) -> str:
    """
    Hash a plain text password using Argon2.

    Args:
        plain: Plain text password to hash

    Returns:
        Hashed password string (salt included, safe to store in database)
    """
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    """
    Verify a plain text password against a hashed password.

    Returns:
        True if password matches, False otherwise
    """
    return pwd_context.verify(plain, hashed)


def create_access_token(
    user_id: str,
    username: str,
    secret: str,
    expire_minutes: int = DEFAULT_EXPIRE_MINUTES,
) -> str:
    """
    Create a signed session token.

    Token payload includes:
        - sub: Subject (user ID)
        - username: Login name, so handlers need no database lookup
        - iat: Issued at timestamp
        - exp: Expiration timestamp
    """
    now = dt.datetime.now(dt.timezone.utc)
    payload = {
        "sub": user_id,
        "username": username,
        "iat": now,
        "exp": now + dt.timedelta(minutes=expire_minutes),
    }
    return jwt.encode(payload, secret, algorithm=JWT_ALG)


def decode_access_token(token: str, secret: str) -> dict:
    """
    Decode and validate a session token.

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.MissingRequiredClaimError: If exp or sub is absent
        jwt.InvalidTokenError: If token is invalid or malformed

    Note: signature and expiration are both checked; nothing is looked up server-side.
    """
    return jwt.decode(token, secret, algorithms=[JWT_ALG], options={"require": ["exp", "sub"]})

# app/schemas/auth.py
"""
Pydantic schemas for authentication endpoints.
Defines request/response models for registration and login.
"""
from pydantic import BaseModel

class RegisterIn(BaseModel):
    """
    Request model for user registration.
    Fields are optional so missing values become a 400 instead of a 422.
    """
    username: str | None = None
    password: str | None = None  # Plain text, hashed server-side, never stored or logged

class LoginRequest(BaseModel):
    """
    Request model for user login endpoint.
    Contains credentials for authentication.
    """
    username: str | None = None
    password: str | None = None

class UserOut(BaseModel):
    """
    User information returned after registration.
    Contains basic user details without sensitive information.
    """
    id: str
    username: str

class RegisterResponse(BaseModel):
    message: str
    user: UserOut

class LoginResponse(BaseModel):
    """
    Response model for successful login.
    The token goes into the Authorization header of later requests.
    """
    token: str

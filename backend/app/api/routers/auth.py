# app/api/routers/auth.py
from fastapi import APIRouter, Depends, status
from app.api.deps import get_services, http_error
from app.core.context import ServiceContext
from app.core.errors import AppError
from app.schemas.auth import LoginRequest, LoginResponse, RegisterIn, RegisterResponse, UserOut

router = APIRouter(tags=["auth"])

@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=RegisterResponse)
async def register(body: RegisterIn, services: ServiceContext = Depends(get_services)):
    """
    Register a new user account.

    The password is hashed before storage. Usernames are unique.

    Returns:
        201 with a message and the new user's id and username

    Error codes:
        - BAD_REQUEST (400): Missing username or password
        - USERNAME_EXISTS (500): Username already taken
    """
    try:
        user = await services.auth.register(body.username, body.password)
    except AppError as e:
        raise http_error(e)
    return RegisterResponse(
        message="User registered successfully",
        user=UserOut(id=str(user.id), username=user.username),
    )

@router.post("/login", response_model=LoginResponse)
async def login(payload: LoginRequest, services: ServiceContext = Depends(get_services)):
    """
    Authenticate user and create a session token valid for one hour.

    Error codes:
        - BAD_REQUEST (400): Missing username or password
        - AUTH_INVALID_CREDENTIALS (401): Unknown user or wrong password (same answer for both)
    """
    try:
        token = await services.auth.login(payload.username, payload.password)
    except AppError as e:
        raise http_error(e)
    return LoginResponse(token=token)

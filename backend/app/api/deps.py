# app/api/deps.py
from fastapi import Depends, Header, HTTPException, Request
from app.core.context import ServiceContext
from app.core.errors import AppError
from app.services.auth_gateway import Identity, extract_token


def get_services(request: Request) -> ServiceContext:
    """
    FastAPI dependency returning the service context built at startup.
    """
    return request.app.state.services


def http_error(err: AppError) -> HTTPException:
    """Translate a domain error into the HTTPException the route raises."""
    return HTTPException(status_code=err.status_code, detail=err.code)


async def get_current_identity(
    authorization: str | None = Header(default=None),
    services: ServiceContext = Depends(get_services),
) -> Identity:
    """
    FastAPI dependency to get the identity behind the session token.

    The token is read from the Authorization header, either as
    "Bearer <token>" or bare. It is checked by signature and expiry only;
    no database lookup happens.

    Returns:
        Identity: user id and username from the token

    Raises:
        HTTPException (401): If no token is provided (AUTH_REQUIRED)
        HTTPException (403): If token is invalid or expired (AUTH_INVALID_TOKEN)

    Usage:
        @router.post("/protected")
        async def protected_route(identity: Identity = Depends(get_current_identity)):
            return {"username": identity.username}
    """
    try:
        return services.auth.authenticate(extract_token(authorization))
    except AppError as e:
        raise http_error(e)

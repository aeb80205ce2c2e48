# app/api/routers/files.py
from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse, Response
from app.api.deps import get_services, http_error
from app.core.context import ServiceContext
from app.core.errors import AppError

# No auth: anyone who knows a stored filename can fetch it
router = APIRouter(tags=["files"])

async def _serve(filename: str, services: ServiceContext):
    try:
        media = await services.media.fetch(filename)
    except AppError as e:
        raise http_error(e)
    if media.path is not None:
        return FileResponse(media.path, media_type=media.media_type)
    return Response(content=media.data, media_type=media.media_type)

@router.get("/api/files/{filename}")
async def get_file(filename: str, services: ServiceContext = Depends(get_services)):
    """
    Stream a stored upload back byte for byte.

    Raises:
        HTTPException (404): Unknown filename (NOT_FOUND)
    """
    return await _serve(filename, services)

@router.get("/uploads/{filename}")
async def get_upload(filename: str, services: ServiceContext = Depends(get_services)):
    """Alias of /api/files/{filename} for clients that link uploads directly."""
    return await _serve(filename, services)

# app/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.core.context import build_services
from app.core.db import init_db, close_db

from app.api.routers import auth, posts, files

logger = logging.getLogger("uvicorn.error")
logger.setLevel(settings.log_level.upper())

app = FastAPI(title=settings.APP_NAME)

# CORS for the web client
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE"],
    allow_headers=["*"],
)

@app.on_event("startup")
async def on_startup():
    await init_db(settings.database_url, generate_schemas=settings.generate_schemas)
    app.state.services = build_services(settings)
    if not app.state.services.moderation.is_available():
        logger.warning("[moderation] GEMINI_API_KEY not set -> every text will be treated as appropriate")
    logger.info("[media] using %s backend", app.state.services.media.name)

@app.on_event("shutdown")
async def on_shutdown():
    services = getattr(app.state, "services", None)
    if services is not None:
        await services.aclose()
    await close_db()

@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    # Full detail goes to the log, the caller only sees a generic code
    logger.exception("[error] %s %s failed", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "INTERNAL_ERROR"})

# REST
app.include_router(auth.router, prefix="/api")
app.include_router(posts.router, prefix="/api")
app.include_router(files.router)

@app.get("/healthz")
def healthz():
    return {"ok": True}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host=settings.host, port=settings.port)

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from .db import ensure_storage
from .errors import BlogError
from .routers import login as login_router
from .routers import posts as posts_router
from .routers import upload as upload_router
from .settings import get_settings
from .uploads import UploadSizeLimitMiddleware

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {"name": "auth", "description": "Admin login issuing bearer tokens."},
    {"name": "posts", "description": "CRUD operations for blog posts."},
    {"name": "uploads", "description": "File uploads for the editor (images, attachments)."},
]

app = FastAPI(
    title="Blog Backend",
    description="Single-admin blog API: posts stored in a JSON file, uploads on local disk.",
    version="0.1.0",
    openapi_tags=openapi_tags,
)

_settings = get_settings()
ensure_storage(_settings)

app.add_middleware(
    UploadSizeLimitMiddleware,
    path="/api/upload",
    max_bytes=_settings.max_upload_bytes,
)

# Added last so CORS headers wrap every response, including early 413s
allow_all = (_settings.cors_allow_origins == ["*"]) or (len(_settings.cors_allow_origins) == 0)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if allow_all else _settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(BlogError)
async def blog_error_handler(request: Request, exc: BlogError) -> JSONResponse:
    """
    Render domain errors as `{"msg": ...}` with the error's status code.
    """
    return JSONResponse(status_code=exc.status_code, content={"msg": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Return a consistent JSON structure for request validation errors.

    Response format:
        {
            "msg": "Request validation failed",
            "detail": [... pydantic/fastapi error details ...]
        }
    """
    return JSONResponse(
        status_code=400,
        content={
            "msg": "Request validation failed",
            "detail": jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """
    Unmatched routes (including a wrong method on a known path) become a JSON 404.
    """
    if exc.status_code in (404, 405):
        return JSONResponse(status_code=404, content={"msg": "API Not Found"})
    return JSONResponse(
        status_code=exc.status_code,
        content={"msg": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


# PUBLIC_INTERFACE
@app.get("/api/health", summary="Health Check", tags=["health"])
def health_check():
    """
    Health check endpoint.

    Returns:
        A JSON object indicating service health.
    """
    return {"message": "Healthy", "backend": _settings.persistence_backend}


# Include routers
app.include_router(login_router.router)
app.include_router(posts_router.router)
app.include_router(upload_router.router)

# Static mounts go last: "/" matches every path not claimed above
app.mount("/uploads", StaticFiles(directory=_settings.upload_dir), name="uploads")
app.mount("/", StaticFiles(directory=_settings.public_dir, html=True), name="frontend")


# PUBLIC_INTERFACE
def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the server process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


# PUBLIC_INTERFACE
def run() -> None:
    """
    Start the blog server with uvicorn on the configured host/port.

    Usage:
        python -m blog_backend.main
    """
    import uvicorn

    configure_logging(_settings.log_level)
    logger.info("Blog server starting on http://localhost:%d", _settings.port)
    logger.info("Posts file: %s (%s backend)", _settings.posts_file, _settings.persistence_backend)
    logger.info("Uploads served from %s at /uploads/", _settings.upload_dir)
    uvicorn.run(app, host=_settings.host, port=_settings.port, log_level=_settings.log_level.lower())


if __name__ == "__main__":
    run()

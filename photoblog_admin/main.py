"""Main FastAPI application."""
import sys
import logging
import traceback
from pathlib import Path
from contextlib import asynccontextmanager

# Add parent directory to path if running directly
if __name__ == "__main__":
    sys.path.insert(0, str(Path(__file__).parent.parent))

from fastapi import FastAPI, Request, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from photoblog_admin import __version__
from photoblog_admin.core.config import settings
from photoblog_admin.core.exceptions import PhotoBlogException
from photoblog_admin.api.dependencies import close_services
from photoblog_admin.api.middleware import RequestTimingMiddleware
from photoblog_admin.api.routes import api_router


def configure_logging():
    """Configure root logging from settings."""
    handlers = [logging.StreamHandler(sys.stdout)]
    if settings.log_file:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(settings.log_file, encoding="utf-8"))

    logging.basicConfig(
        level=settings.log_level.upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )
    # Silence noisy third-party loggers
    for name in ("PIL", "httpx", "httpcore", "multipart"):
        logging.getLogger(name).setLevel(logging.WARNING)


configure_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    settings.ensure_directories_exist()
    logger.info("Photo blog admin panel starting")
    logger.info(f"Posts: {settings.posts_dir}")
    logger.info(f"Album data: {settings.data_dir}")
    logger.info(f"B2 bucket: {settings.b2_bucket_name or 'not configured'}")
    logger.info(f"CDN: {settings.b2_cdn_domain if settings.b2_use_cdn and settings.b2_cdn_domain else 'not configured'}")

    yield

    logger.info("Shutting down")
    await close_services()


# Create FastAPI application
app = FastAPI(
    title="Photo Blog Admin",
    description="Local admin panel for photo-blog albums backed by B2 object storage",
    version=__version__,
    lifespan=lifespan,
)


@app.exception_handler(PhotoBlogException)
async def photoblog_exception_handler(request: Request, exc: PhotoBlogException):
    """Map domain errors to their status code and category."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(f"HTTP {exc.status_code} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.category, "detail": exc.message}
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies and parameters as bad requests."""
    messages = [
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    ]
    logger.warning(f"HTTP 400 on {request.method} {request.url.path}: {messages}")
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": "bad_request", "detail": "; ".join(messages)}
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions with logging."""
    logger.warning(f"HTTP {exc.status_code} on {request.method} {request.url}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": "http_error", "detail": exc.detail}
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch all unhandled exceptions and log them with full traceback."""
    logger.error(f"Unhandled exception on {request.method} {request.url}")
    logger.error(f"Full traceback:\n{traceback.format_exc()}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "server_error",
            "detail": str(exc) or type(exc).__name__,
        }
    )


# The panel is served locally to a single operator
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,  # Must be False when using wildcard origin
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestTimingMiddleware)

app.include_router(api_router)


@app.get("/", include_in_schema=False)
async def root():
    """Root endpoint."""
    return RedirectResponse(url="/docs")


def run():
    """Run the admin panel with uvicorn."""
    import uvicorn

    logger.info(f"Running at: http://{settings.api_host}:{settings.api_port}/docs")
    uvicorn.run(
        "photoblog_admin.main:app",
        host=settings.api_host,
        port=settings.api_port,
    )


if __name__ == "__main__":
    run()

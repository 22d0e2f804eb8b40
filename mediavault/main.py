import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.datastructures import Headers
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from mediavault.core.config import get_settings
from mediavault.core.errors import MediaVaultError, PayloadTooLarge
from mediavault.core.logging import configure_logging
from mediavault.routers import auth, files
from mediavault.services.maintenance import sweep_orphans
from mediavault.services.storage import ensure_upload_dir
from mediavault.store.files import FileIndex
from mediavault.store.users import CredentialStore

logger = logging.getLogger(__name__)

# Room for multipart boundaries and part headers on top of the file itself.
MULTIPART_OVERHEAD_BYTES = 64 * 1024


class UploadSizeLimit:
    """Cap the request body of upload calls, declared or streamed.

    A declared ``Content-Length`` over the cap is answered with 413 before the
    body is touched. Bodies without one (chunked) are counted as they are
    received, and reading stops with ``PayloadTooLarge`` once the count passes
    the cap, so the multipart parser never spools more than that.
    """

    def __init__(self, app: ASGIApp, max_body_bytes: int, path: str = "/api/upload") -> None:
        self.app = app
        self.max_body_bytes = max_body_bytes
        self.path = path

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope["method"] != "POST" or scope["path"] != self.path:
            await self.app(scope, receive, send)
            return

        length = Headers(scope=scope).get("content-length", "")
        if length.isdigit() and int(length) > self.max_body_bytes:
            logger.warning("upload_rejected", extra={"content_length": int(length), "reason": "too_large"})
            response = JSONResponse(
                status_code=PayloadTooLarge.status_code,
                content={"error": PayloadTooLarge.default_message},
            )
            await response(scope, receive, send)
            return

        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_bytes:
                    logger.warning("upload_rejected", extra={"received_bytes": received, "reason": "too_large"})
                    raise PayloadTooLarge()
            return message

        await self.app(scope, limited_receive, send)


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)
    app = FastAPI(title=settings.app_name, debug=settings.debug)

    users = CredentialStore(settings.users_path)
    index = FileIndex(settings.storage_path)
    users.ensure()
    index.ensure()
    upload_dir = ensure_upload_dir(settings.upload_path)

    app.state.settings = settings
    app.state.users = users
    app.state.files = index

    # Added first so CORS wraps it and its 413 still carries CORS headers.
    app.add_middleware(UploadSizeLimit, max_body_bytes=settings.max_upload_bytes + MULTIPART_OVERHEAD_BYTES)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(MediaVaultError)
    async def handle_mediavault_error(request: Request, exc: MediaVaultError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("request_failed", exc_info=exc, extra={"path": request.url.path})
        else:
            logger.warning(
                "request_rejected",
                extra={"path": request.url.path, "status": exc.status_code, "error": exc.message},
            )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": "Invalid request body"})

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=exc.headers)

    app.include_router(auth.router)
    app.include_router(files.router)

    @app.on_event("startup")
    def startup() -> None:
        if settings.sweep_orphans_on_startup:
            sweep_orphans(index, upload_dir)

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    app.mount("/uploads", StaticFiles(directory=upload_dir), name="uploads")
    app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")

    return app


app = create_app()

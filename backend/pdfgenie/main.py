"""
FastAPI Application — Entry Point

PDF Genie API

Routes:
  POST /upload    ingest a base64 document → extracted text + summary
  POST /process   answer a question against previously extracted text
  GET  /health    liveness probe

Middleware stack (innermost → outermost):
  1. CORS — browser client sends Content-Type / X-Api-Key / Authorization
  2. Request ID + structured request logging with latency

Every error leaves the service as {"error": ..., "details"?: ...}; stack
traces are logged, never returned.
"""

from __future__ import annotations

import logging
import time
import uuid

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from pdfgenie.api.v1.documents import router as documents_router
from pdfgenie.api.v1.query import router as query_router
from pdfgenie.core.config import settings
from pdfgenie.schemas.documents import ErrorResponse

logger = logging.getLogger(__name__)

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------

def create_app() -> FastAPI:
    app = FastAPI(
        title="PDF Genie",
        description=(
            "Upload a PDF, image or text file, get its extracted text and an "
            "AI-generated summary, then ask questions about it."
        ),
        version="1.0.0",
        docs_url="/api/docs" if not settings.is_production else None,
        redoc_url=None,
        openapi_url="/api/openapi.json" if not settings.is_production else None,
    )

    # ----------------------------------------------------------------
    # Middleware (last added runs outermost)
    # ----------------------------------------------------------------

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_methods=["POST", "OPTIONS"],
        allow_headers=["Content-Type", "X-Api-Key", "Authorization"],
        expose_headers=["X-Request-ID"],
    )

    @app.middleware("http")
    async def request_id_and_logging(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        start = time.perf_counter()

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start) * 1000
        response.headers["X-Request-ID"] = request_id

        logger.info(
            "HTTP %s %s %d %.1fms | request_id=%s",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            request_id,
        )
        return response

    # ----------------------------------------------------------------
    # Exception handlers: uniform {"error", "details"} envelope
    # ----------------------------------------------------------------

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Malformed or missing JSON body is a caller error: 400, not 422."""
        details = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        body = ErrorResponse(error="No input provided or request body is invalid", details=details)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=body.model_dump(exclude_none=True),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        content = (
            exc.detail if isinstance(exc.detail, dict)
            else ErrorResponse(error=str(exc.detail)).model_dump(exclude_none=True)
        )
        return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        """Catch-all for unhandled exceptions — never expose stack traces."""
        logger.exception("Unhandled exception | path=%s", request.url.path)
        body = ErrorResponse(error="Server processing error")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=body.model_dump(exclude_none=True),
        )

    # ----------------------------------------------------------------
    # Routers
    # ----------------------------------------------------------------

    app.include_router(documents_router)
    app.include_router(query_router)

    @app.get(
        "/health",
        tags=["Operations"],
        summary="Liveness probe",
        description="Returns 200 if the process is alive. No external checks.",
    )
    async def health() -> dict:
        return {"status": "ok", "service": "pdf-genie-api"}

    logger.info(
        "PDF Genie ready | env=%s bucket=%s model=%s api_key_check=%s",
        settings.app_env, settings.s3_bucket, settings.bedrock_model_id,
        bool(settings.api_key_list),
    )
    return app


# ---------------------------------------------------------------------------
# Application instance (imported by uvicorn)
# ---------------------------------------------------------------------------

app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "pdfgenie.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.app_env == "development",
        log_level="debug" if settings.debug else "info",
        access_log=True,
    )

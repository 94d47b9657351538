from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from standards_api.config import settings
from standards_api.db.init_db import init_db
from standards_api.db.session import engine
from standards_api.errors import CatalogError
from standards_api.middleware import ObservabilityMiddleware
from standards_api.routers import api_router
from standards_api.services.blob_store import upload_root
from standards_api.telemetry.logging import get_logger, init_logging
from standards_api.telemetry.metrics import router as metrics_router

init_logging()
log = get_logger()


@asynccontextmanager
async def lifespan(_app: FastAPI):
    init_db(engine)
    upload_root()
    log.info("startup", upload_dir=str(settings.upload_dir), session_backend=settings.session_backend)
    yield


app = FastAPI(title="Standards Library API", lifespan=lifespan)

app.add_middleware(ObservabilityMiddleware)

_allowed_origins = settings.cors_origins
app.add_middleware(
    CORSMiddleware,  # type: ignore[arg-type]
    allow_origins=_allowed_origins,
    allow_credentials=_allowed_origins != ["*"],
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "x-admin-token"],
)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.exception_handler(CatalogError)
async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    if exc.status_code >= 500:
        log.error("request_failed", path=request.url.path, error=exc.message)
    return _error(exc.status_code, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code, content={"error": message}, headers=getattr(exc, "headers", None)
    )


# 422 is reported as 400 with a readable message
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    parts: list[str] = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path", "header"))
        msg = str(err.get("msg") or "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return _error(400, "; ".join(parts) or "Invalid request")


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    log.exception("unhandled_error", path=request.url.path)
    return _error(500, "Internal server error")


app.include_router(api_router)
app.include_router(metrics_router)  # /metrics

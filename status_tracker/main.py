import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from status_tracker.config import settings
from status_tracker.database import engine, init_db
from status_tracker.errors import AppError, ErrorKind
from status_tracker.routers import auth, status
from status_tracker.services.locks import UserLockRegistry

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = "Internal server error"
DEFAULT_SECRET_KEY = "change-me-in-production"


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.is_production and settings.SECRET_KEY == DEFAULT_SECRET_KEY:
        logger.warning("SECRET_KEY is still the default value; tokens can be forged")
    if settings.is_production and settings.BCRYPT_ROUNDS < 12:
        logger.warning("BCRYPT_ROUNDS=%s is below 12 in production", settings.BCRYPT_ROUNDS)
    # Create tables on startup (migrations handle production schema)
    await init_db()
    app.state.status_locks = UserLockRegistry()
    yield
    await engine.dispose()


app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(status.router, prefix="/api/status", tags=["status"])


def error_response(status_code: int, message: str, code: str) -> JSONResponse:
    if status_code >= 500 and not settings.is_development:
        message = GENERIC_SERVER_ERROR
    return JSONResponse(status_code=status_code, content={"success": False, "error": message, "code": code})


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.code)
    return error_response(exc.status_code, exc.message, exc.code)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    parts = []
    for err in exc.errors():
        # loc is e.g. ("body", "altitude") or ("query", "limit")
        field = ".".join(str(p) for p in err["loc"][1:]) or str(err["loc"][0])
        parts.append(f"{field}: {err['msg']}")
    return error_response(400, ", ".join(parts), ErrorKind.VALIDATION.value)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return error_response(404, f"Endpoint {request.method} {request.url.path} not found", "ENDPOINT_NOT_FOUND")
    return error_response(exc.status_code, str(exc.detail), "HTTP_ERROR")


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(500, str(exc), "INTERNAL_ERROR")


@app.get("/api/health")
async def health():
    return {"success": True, "data": {"status": "ok", "version": settings.APP_VERSION}}

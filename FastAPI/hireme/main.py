import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException

from hireme.config import settings
from hireme.core.errors import HireMeError
from hireme.core.rate_limiter import rate_limiter
from hireme.database import init_db, engine
from hireme.logging_config import setup_logging
from hireme.routers import applications, auth, jobs
from hireme.schemas.common import error_envelope

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="HireMe API",
    description="Job board: postings, search, applications and employer review.",
    version="1.0.0",
)

cors_origins = [o.strip() for o in settings.cors_allow_origins.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(jobs.router)
app.include_router(applications.router)

AUTH_PATHS = {"/auth/login", "/auth/register"}
EXEMPT_PATHS = {"/", "/health/live", "/health/ready"}


def _is_development() -> bool:
    return (settings.app_env or "development").lower() in {"development", "dev"}


@app.exception_handler(HireMeError)
async def domain_error_handler(request, exc: HireMeError):
    return JSONResponse(status_code=exc.status_code, content=error_envelope(exc.message, exc.errors))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request, exc: RequestValidationError):
    errors = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        errors.append({"field": ".".join(loc) or None, "message": err.get("msg", "Invalid value")})
    return JSONResponse(status_code=400, content=error_envelope("Validation failed", errors))


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_envelope(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request, exc):
    logger.exception("Unhandled server error on %s %s: %s", request.method, request.url.path, exc)
    detail = str(exc) if _is_development() else None
    return JSONResponse(status_code=500, content=error_envelope("Internal server error", error=detail))


@app.middleware("http")
async def apply_rate_limits(request, call_next):
    path = request.url.path
    if request.method == "OPTIONS" or path in EXEMPT_PATHS:
        return await call_next(request)

    client_ip = request.client.host if request.client else "unknown"
    if path in AUTH_PATHS:
        limit, window, key = settings.rate_limit_auth_per_min, 60, f"{client_ip}:{path}"
    else:
        limit, window, key = settings.rate_limit_per_window, settings.rate_limit_window_seconds, client_ip

    if limit is not None and limit > 0:
        allowed, retry_after = await rate_limiter.allow(key, limit=limit, window_seconds=window)
        if not allowed:
            return JSONResponse(
                status_code=429,
                content=error_envelope("Too many requests. Please try again later."),
                headers={"Retry-After": str(retry_after)},
            )

    return await call_next(request)


@app.get("/health/live")
def health_live():
    return {"status": "ok"}


@app.get("/health/ready")
def health_ready():
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return {"status": "ready"}
    except Exception:
        logger.exception("Readiness check failed")
        return JSONResponse(status_code=503, content={"status": "not_ready"})


@app.on_event("startup")
def on_startup():
    logger.info("Starting HireMe API (%s)", settings.app_env)
    env = (settings.app_env or "development").lower()
    if env in {"production", "prod"}:
        if settings.secret_key == "replace-with-a-long-random-secret-key":
            raise RuntimeError("SECRET_KEY placeholder is not allowed in production")
        if "username:password@" in settings.database_url:
            raise RuntimeError("DATABASE_URL placeholder credentials are not allowed in production")
    else:
        if settings.secret_key == "replace-with-a-long-random-secret-key":
            logger.warning("SECRET_KEY is using placeholder default. Set SECRET_KEY in .env for secure deployments.")
        if "username:password@" in settings.database_url:
            logger.warning("DATABASE_URL appears to use placeholder credentials. Set DATABASE_URL in .env.")
    init_db()


@app.get("/")
def root():
    return {"message": "HireMe API is running. See /docs for the job and application endpoints."}

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException

from entrevisto.config import settings
from entrevisto.core.rate_limiter import limit_for_path, rate_limiter
from entrevisto.database import init_db, engine
from entrevisto.logging_config import setup_logging
from entrevisto.routers import applications, interviews, jobs, profile, resume, webhooks
from entrevisto.services.vapi_client import build_vapi_client

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Entrevisto API",
    description="Job board with AI voice screening interviews.",
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

app.include_router(profile.router)
app.include_router(jobs.router)
app.include_router(applications.router)
app.include_router(resume.router)
app.include_router(interviews.router)
app.include_router(webhooks.router)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    fields = sorted({".".join(str(p) for p in err.get("loc", ()) if p != "body") for err in exc.errors()})
    fields = [f for f in fields if f]
    message = f"Invalid request: {', '.join(fields)}" if fields else "Invalid request"
    return JSONResponse(status_code=400, content={"message": message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled server error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


@app.middleware("http")
async def apply_rate_limits(request: Request, call_next):
    if request.method == "OPTIONS":
        return await call_next(request)

    path = request.url.path
    limit = limit_for_path(request.method, path)
    if limit is not None and limit > 0:
        client_ip = request.client.host if request.client else "unknown"
        allowed, retry_after = rate_limiter.allow(f"{client_ip}:{path}", limit=limit, window_seconds=60)
        if not allowed:
            return JSONResponse(
                status_code=429,
                content={"message": "Too many requests. Please retry shortly."},
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
    logger.info("Starting Entrevisto API")
    env = (settings.app_env or "development").lower()
    if env in {"production", "prod"}:
        if "replace-with" in settings.identity_jwt_key:
            raise RuntimeError("IDENTITY_JWT_KEY placeholder is not allowed in production")
        if "username:password@" in settings.database_url:
            raise RuntimeError("DATABASE_URL placeholder credentials are not allowed in production")
    else:
        if "replace-with" in settings.identity_jwt_key:
            logger.warning("IDENTITY_JWT_KEY is using a placeholder. Set it to the identity provider key in .env.")
        if "username:password@" in settings.database_url:
            logger.warning("DATABASE_URL appears to use placeholder credentials. Set DATABASE_URL in .env.")
    init_db()
    # Missing provider credentials fail startup, not the first interview request.
    app.state.vapi_client = build_vapi_client()


@app.on_event("shutdown")
def on_shutdown():
    client = getattr(app.state, "vapi_client", None)
    if client is not None:
        client.close()


@app.get("/")
def root():
    return {"message": "Entrevisto API. See /docs for the available endpoints."}

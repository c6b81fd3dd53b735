import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from devtrack.config import settings
from devtrack.database import init_models
from devtrack.exceptions import AuthError, DevTrackError, InvalidCredentialsError, NotFoundError
from devtrack.logging_setup import setup_logging
from devtrack.routers.analytics import router as analytics_router
from devtrack.routers.auth import router as auth_router
from devtrack.routers.tasks import router as tasks_router
from devtrack.routers.users import router as users_router

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)
    await init_models()
    logger.info("DevTrack API ready")
    yield
    logger.info("DevTrack API shutting down")


app = FastAPI(
    lifespan=lifespan,
    title="DevTrack API",
    description="Personal task tracking with timers and analytics",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _format_validation_errors(errors) -> str:
    parts = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        field = ".".join(loc)
        parts.append(f"{field}: {err.get('msg')}" if field else str(err.get("msg")))
    return "; ".join(parts)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    return JSONResponse(
        status_code=400,
        content={
            "error": f"Validation failed: {_format_validation_errors(errors)}",
            "details": [
                {"field": ".".join(str(p) for p in e.get("loc", ())), "message": e.get("msg")}
                for e in errors
            ],
        },
    )


@app.exception_handler(DevTrackError)
async def devtrack_error_handler(request: Request, exc: DevTrackError):
    if isinstance(exc, NotFoundError):
        return Response(status_code=exc.status_code)

    headers = None
    if isinstance(exc, AuthError) and not isinstance(exc, InvalidCredentialsError):
        headers = {"WWW-Authenticate": "Bearer"}

    content = {"error": exc.message}
    if exc.details:
        content["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=content, headers=headers)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": str(exc)})


app.include_router(auth_router)
app.include_router(users_router)
app.include_router(tasks_router)
app.include_router(analytics_router)

@app.get("/")
def root():
    return {"message": "DevTrack API running"}

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pymongo.errors import PyMongoError

from portal.api import auth, citizen, officer
from portal.api.admin import dashboard as admin_dashboard
from portal.api.admin import departments, requests, services, users
from portal.core.config import Settings, get_settings
from portal.core.errors import PortalError, StorageFailure, ValidationFailed
from portal.core.logging_config import configure_logging
from portal.core.method_override import MethodOverrideMiddleware
from portal.db.mongo import close_client, ensure_indexes, get_db
from portal.schemas.outcome import ActionResult, Outcome

logger = logging.getLogger(__name__)


def error_result(exc: PortalError, data=None) -> JSONResponse:
    body = ActionResult(
        outcome=Outcome(kind=exc.kind, message=exc.message),
        redirect=exc.redirect,
        data=data,
    )
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(body))


async def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
    if isinstance(exc, StorageFailure):
        logger.error("Storage failure on %s %s", request.method, request.url.path)
    return error_result(exc)


async def storage_error_handler(request: Request, exc: PyMongoError) -> JSONResponse:
    logger.error(
        "Unhandled storage error on %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return error_result(StorageFailure())


def _field_name(loc) -> str:
    # loc is ("body" | "query" | "path", field, ...)
    parts = loc[1:] or loc
    return ".".join(str(part) for part in parts)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = sorted({_field_name(err.get("loc", ())) for err in exc.errors()})
    logger.info("Rejected input on %s %s: %s", request.method, request.url.path, ", ".join(fields))
    message = f"Invalid input: {', '.join(fields)}." if fields else None
    return error_result(ValidationFailed(message), data={"fields": fields})


@asynccontextmanager
async def lifespan(app: FastAPI):
    await ensure_indexes(get_db())
    yield
    close_client()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(title=settings.app_name, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(MethodOverrideMiddleware)

    app.add_exception_handler(PortalError, portal_error_handler)
    app.add_exception_handler(PyMongoError, storage_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    app.include_router(auth.router)
    app.include_router(citizen.router)
    app.include_router(officer.router)

    # admin routers
    app.include_router(admin_dashboard.router)
    app.include_router(users.router)
    app.include_router(departments.router)
    app.include_router(services.router)
    app.include_router(requests.router)

    # uploaded attachments
    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=str(upload_dir)), name="uploads")

    @app.get("/")
    def root():
        return {"ok": True, "message": "Welcome to E-Government Portal", "docs": "/docs"}

    return app


app = create_app()

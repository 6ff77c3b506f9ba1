import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import models  # noqa: F401  (registers tables with Base)
from .config import (
    ADMIN_EMAIL,
    ADMIN_PASSWORD,
    ADMIN_USERNAME,
    ALLOWED_ORIGINS,
    EVENT_WORKERS,
    SECURITY_HEADERS_ENABLED,
)
from .database import Base, SessionLocal, engine
from .domain.appointments.router import router as appointments_router
from .domain.auth.router import router as auth_router
from .domain.companies.router import router as companies_router
from .domain.customers.router import router as customers_router
from .domain.employees.router import router as employees_router
from .domain.events import EventBus
from .domain.locations.router import router as locations_router
from .domain.services.router import router as services_router
from .domain.users.router import router as users_router
from .domain.users.service import UserService
from .security_headers import SecurityHeadersMiddleware
from .services.notification_service import default_listeners
from .shared.exceptions import DomainError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("passlib").setLevel(logging.ERROR)

API_PREFIX = "/api"


def seed_admin(event_bus: EventBus) -> None:
    if not (ADMIN_USERNAME and ADMIN_PASSWORD):
        return

    db = SessionLocal()
    try:
        admin = UserService(db, event_bus).ensure_admin(ADMIN_USERNAME, ADMIN_PASSWORD, ADMIN_EMAIL)
        logger.info(f"Bootstrap admin ready: {admin.username}")
    except (DomainError, ValueError) as e:
        logger.error(f"Failed to create bootstrap admin '{ADMIN_USERNAME}': {e}")
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("Database tables created successfully")
    except Exception as e:
        # Ignore "already exists" errors from race conditions between workers
        error_msg = str(e)
        if "already exists" in error_msg or "duplicate key" in error_msg:
            logger.info("Database tables already exist (created by another worker)")
        else:
            logger.error(f"Failed to create database tables: {e}")

    app.state.event_bus = EventBus.threaded(default_listeners(), max_workers=EVENT_WORKERS)
    seed_admin(app.state.event_bus)

    yield

    logger.info("Application shutting down...")
    app.state.event_bus.shutdown(wait=True)


app = FastAPI(title="Beauty Center Management API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(DomainError)
async def domain_exception_handler(request: Request, exc: DomainError):
    """Translate domain errors to their HTTP status"""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} - {type(exc).__name__}: {exc.detail}")
    else:
        logger.warning(f"{request.method} {request.url.path} - {type(exc).__name__}: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Convert 422 validation errors to 401 authentication errors
    when the issue is with the Authorization header
    """
    for error in exc.errors():
        if error.get("loc") and "authorization" in str(error.get("loc")).lower():
            logger.warning(
                f"Authentication failed for {request.url.path}: Missing or invalid Authorization header"
            )
            return JSONResponse(
                status_code=401,
                content={
                    "detail": "Not authenticated. Please provide a valid Bearer token in the Authorization header."
                },
            )

    # For other validation errors, return 422 as normal
    logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=422, content={"detail": jsonable_errors(exc)})


def jsonable_errors(exc: RequestValidationError) -> list:
    # ctx may carry the raised ValueError, which is not JSON serializable
    return [{k: v for k, v in error.items() if k != "ctx"} for error in exc.errors()]


@app.middleware("http")
async def log_requests(request: Request, call_next):
    try:
        response = await call_next(request)
        return response
    except Exception as e:
        logger.error(f"{request.method} {request.url.path} - Error: {str(e)}")
        raise


if SECURITY_HEADERS_ENABLED:
    app.add_middleware(
        SecurityHeadersMiddleware, exclude_paths=["/health", "/docs", "/openapi.json"]
    )
    logger.info("Security headers enabled")
else:
    logger.warning("Security headers DISABLED - only use in development!")

logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

# Routes
app.include_router(auth_router, prefix=API_PREFIX)
app.include_router(users_router, prefix=API_PREFIX)
app.include_router(companies_router, prefix=API_PREFIX)
app.include_router(locations_router, prefix=API_PREFIX)
app.include_router(services_router, prefix=API_PREFIX)
app.include_router(employees_router, prefix=API_PREFIX)
app.include_router(customers_router, prefix=API_PREFIX)
app.include_router(appointments_router, prefix=API_PREFIX)


@app.get("/")
def root():
    return {"message": "Beauty Center Management API is running"}


@app.get("/health")
def health():
    return {"status": "healthy"}

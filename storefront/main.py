import logging
import time
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Dict, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .api import api_router
from .config import settings
from .database import engine, Base, SessionLocal, test_connection
from .exceptions import StorefrontError
from .seed import seed_products
from .services.cart_service import CartService

# Register the tables on Base.metadata
from . import models  # noqa: F401

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def wait_for_db(max_retries: int = 30, delay: int = 2):
    """Block until the database accepts connections"""
    retries = 0
    while retries < max_retries:
        try:
            logger.info(f"Attempting to connect to database (attempt {retries + 1}/{max_retries})...")

            db = SessionLocal()
            try:
                db.execute(text("SELECT 1"))
            finally:
                db.close()

            logger.info("✅ Database connection successful!")
            return True

        except OperationalError as e:
            retries += 1
            if retries >= max_retries:
                logger.error(f"❌ Failed to connect to database after {max_retries} attempts")
                raise e

            logger.warning(f"Database not ready, waiting {delay} seconds... (attempt {retries}/{max_retries})")
            time.sleep(delay)

    return False


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"Starting {settings.app_name}...")

    try:
        wait_for_db(settings.db_connect_retries, settings.db_connect_delay)

        logger.info("Creating database tables...")
        Base.metadata.create_all(bind=engine)

        db = SessionLocal()
        try:
            if settings.seed_demo_products:
                seed_products(db)
            if settings.cart_item_ttl_hours:
                CartService(db).purge_stale_items(timedelta(hours=settings.cart_item_ttl_hours))
        finally:
            db.close()

        logger.info(f"✅ {settings.app_name} started successfully!")

    except Exception as e:
        logger.error(f"❌ Failed to start {settings.app_name}: {e}")
        raise

    yield

    # Shutdown
    engine.dispose()
    logger.info(f"{settings.app_name} shut down")


app = FastAPI(
    title=settings.app_name,
    description="Product catalog, session carts and checkout",
    version=__version__,
    debug=settings.debug,
    lifespan=lifespan
)

CORS_ALLOW_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
CORS_ALLOW_HEADERS = ["Content-Type", "Authorization", "X-Client-Info", "Apikey"]


def cors_headers(origin: Optional[str]) -> Dict[str, str]:
    """Cross-origin headers attached to every response"""
    if "*" in settings.cors_origins:
        allow_origin = "*"
    elif origin and origin in settings.cors_origins:
        allow_origin = origin
    else:
        return {}
    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Methods": ", ".join(CORS_ALLOW_METHODS),
        "Access-Control-Allow-Headers": ", ".join(CORS_ALLOW_HEADERS),
    }


# Middleware order: the first one registered runs innermost.
# Unexpected errors become responses here, inside the CORS layers.
@app.middleware("http")
async def unhandled_error_middleware(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception as exc:
        logger.error(f"❌ Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(status_code=500, content={"error": str(exc) or "Internal server error"})


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=CORS_ALLOW_METHODS,
    allow_headers=CORS_ALLOW_HEADERS,
)


@app.middleware("http")
async def cors_defaults_middleware(request: Request, call_next):
    # Any OPTIONS request is a preflight: empty 200, never routed
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=cors_headers(request.headers.get("origin")))

    response = await call_next(request)
    for name, value in cors_headers(request.headers.get("origin")).items():
        response.headers.setdefault(name, value)
    return response


app.include_router(api_router, prefix=settings.api_prefix)


@app.get("/health")
def health_check():
    """Service health including database reachability"""
    db_status = "connected" if test_connection() else "disconnected"
    if db_status != "connected":
        raise HTTPException(status_code=503, detail="Service unhealthy")

    return {
        "status": "healthy",
        "service": settings.app_name,
        "database": db_status,
        "version": __version__
    }


@app.get("/")
def root():
    return {
        "service": settings.app_name,
        "version": __version__,
        "status": "running",
        "endpoints": {
            "health": "/health",
            "docs": "/docs",
            "products": f"{settings.api_prefix}/products",
            "cart": f"{settings.api_prefix}/cart",
            "checkout": f"{settings.api_prefix}/checkout",
        }
    }


# Exception handlers: every failure answers {"error": message}
@app.exception_handler(StorefrontError)
async def storefront_error_handler(request: Request, exc: StorefrontError):
    if exc.status_code >= 500:
        logger.error(f"❌ {request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"Invalid request: {field} {first.get('msg', '')}".strip() if field else "Invalid request body"
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "storefront.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )

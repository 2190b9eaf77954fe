"""
CartCraft Catalog Service

Product catalog API backed by a JSON file, with protected create/update
endpoints and on-demand invalidation of rendered product pages.
"""

import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Load environment variables
load_dotenv()

from .core.config import get_settings
from .models.revalidate import ErrorResponse
from .routes import products_router, revalidate_router
from .security.api_key import get_verifier
from .services.revalidation import get_invalidator

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info(f"{settings.app_name} starting up...")
    logger.info(f"Catalog file: {settings.data_file}")
    verifier = get_verifier()
    logger.info(f"Admin API: {'enabled' if getattr(verifier, 'configured', True) else 'locked'}")
    logger.info(
        f"Page invalidation: {'remote' if settings.remote_revalidation else 'local'}"
    )

    yield

    logger.info(f"{settings.app_name} shutting down...")
    await get_invalidator().close()


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Product catalog with on-demand page revalidation",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, restrict this
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=str(exc.detail)).model_dump(),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info(f"Invalid request to {request.url.path}: {len(exc.errors())} error(s)")
    return JSONResponse(status_code=400, content=ErrorResponse(error="Invalid request").model_dump())


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content=ErrorResponse(error="Internal server error").model_dump())


# Include API routers
app.include_router(products_router)
app.include_router(revalidate_router)


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "cartcraft"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "cartcraft.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )

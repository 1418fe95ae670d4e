"""Main FastAPI application"""
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError
import logging

from trackmanager import __version__
from trackmanager.config import settings
from trackmanager.database import init_db
from trackmanager.errors import StoreError
from trackmanager.api import tracks, sets, library

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan events for startup and shutdown"""
    # Startup
    logger.info("Starting DJ Track Manager API...")
    
    init_db()
    logger.info("Database initialized")
    
    logger.info("Application startup complete")
    
    yield
    
    # Shutdown
    logger.info("Shutting down...")


# Create FastAPI app
app = FastAPI(
    title="DJ Track Manager API",
    description="API for managing a DJ's tracks and sets",
    version=__version__,
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(tracks.router)
app.include_router(sets.router)
app.include_router(library.router)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies and query parameters are client errors (400)"""
    return JSONResponse(
        status_code=400,
        content={"detail": {"message": "Invalid request", "errors": jsonable_encoder(exc.errors())}},
    )


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    """Database failures already logged and rolled back by the services"""
    return JSONResponse(status_code=500, content={"detail": "Server error"})


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Server error"})


@app.get("/")
def root():
    """Root endpoint"""
    return {
        "message": "DJ Track Manager API",
        "version": __version__,
        "docs": "/docs"
    }


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}


def run():
    """Run the API with uvicorn"""
    import uvicorn
    uvicorn.run(
        "trackmanager.main:app",
        host=settings.api_host,
        port=settings.api_port,
    )


if __name__ == "__main__":
    run()

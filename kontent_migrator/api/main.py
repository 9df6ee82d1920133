"""FastAPI application entry point."""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .routes import content_types, mappings, migrations
from ..config import KontentConfig
from ..errors import ConfigurationError, KontentApiError, MigrationError

app = FastAPI(
    title="Kontent.ai Migrator API",
    description="API for content type and content item migration between Kontent.ai types and environments",
    version="0.1.0",
)

# CORS middleware for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://127.0.0.1:5173", "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(mappings.router, prefix="/api/mappings", tags=["mappings"])
app.include_router(content_types.router, prefix="/api/content-types", tags=["content-types"])
app.include_router(migrations.router, prefix="/api/migrations", tags=["migrations"])


@app.exception_handler(KontentApiError)
async def kontent_api_error_handler(request: Request, exc: KontentApiError):
    return JSONResponse(status_code=502, content={"detail": exc.message, **exc.to_dict()})


@app.exception_handler(ConfigurationError)
@app.exception_handler(MigrationError)
async def bad_request_handler(request: Request, exc: Exception):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/api/config/status")
async def config_status():
    """Which Kontent.ai settings are present, never their values."""
    return KontentConfig.from_env().status()

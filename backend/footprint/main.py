"""
Main application module for the footprint backend.

This file sets up the FastAPI application, configures CORS so the
frontend viewer can make cross‑origin requests, mounts the static
frontend files when they exist, and exposes a simple health check
endpoint.  The footprint router is included under the ``/api``
namespace.
"""

from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from .api.routes_footprint import router as footprint_router
from .services.errors import FootprintError


def create_app() -> FastAPI:
    """Factory to create and configure the FastAPI application.

    Returns:
        FastAPI: The configured FastAPI application instance.
    """
    app = FastAPI(title="Footprint service")

    # Allow all origins by default.  In production you should restrict
    # this to the domains that are allowed to access your API.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Errors raised outside the route body (e.g. while building the
    # WebGeocalc client from the environment) still get the structured body.
    @app.exception_handler(FootprintError)
    async def footprint_error_handler(request: Request, exc: FootprintError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    # Health check endpoint for monitoring and deployment probes.
    @app.get("/api/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(footprint_router, prefix="/api", tags=["footprint"])

    # Mount the frontend as static files if it exists.  The frontend
    # directory is located two levels up from this file.
    frontend_dir = Path(__file__).resolve().parents[2] / "frontend"
    if frontend_dir.exists():
        app.mount(
            "/",
            StaticFiles(directory=str(frontend_dir), html=True),
            name="frontend",
        )

    return app


# Create the application instance.  Uvicorn will import this when
# running `uvicorn footprint.main:app` from within backend/.
app = create_app()

"""FastAPI application for the template generator."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from umt_gen import __version__
from umt_gen.api.routes import config, template, versions


def create_app(dev: bool = False) -> FastAPI:
    """Create the FastAPI application."""
    app = FastAPI(
        title="Universal Mod Template Generator",
        version=__version__,
        docs_url="/api/docs",
        openapi_url="/api/openapi.json",
    )

    # CORS for a locally served frontend
    if dev:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["*"],
            allow_headers=["*"],
        )

    prefix = "/api"
    app.include_router(config.router, prefix=prefix, tags=["config"])
    app.include_router(versions.router, prefix=prefix, tags=["versions"])
    app.include_router(template.router, prefix=prefix, tags=["template"])

    return app

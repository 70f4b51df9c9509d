"""FastAPI app: /health, /rules, /check, /report."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routes import check_router, health_router, rules_router
from .startup import validate_config


@asynccontextmanager
async def _lifespan(app: FastAPI):
    validate_config()
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="BEAM Conformance Checker API",
        description="Block / Element / Attribute / Module naming and variable-tier checks for stylesheets and markup.",
        version="0.1.0",
        lifespan=_lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(health_router)
    app.include_router(rules_router)
    app.include_router(check_router)
    return app


app = create_app()

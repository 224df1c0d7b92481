"""
Bank Demo API Application Factory
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import get_config
from ..store import BankStore, create_bank_store
from .accounts import router as accounts_router
from .transfers import router as transfers_router


def create_app(store: Optional[BankStore] = None) -> FastAPI:
    """
    Create and configure the FastAPI application

    Args:
        store: Bank store to serve; built from configuration when omitted
    """
    if store is None:
        store = create_bank_store(get_config())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        app.state.bank_store.close()

    app = FastAPI(
        title="Bank Demo API",
        description="Accounts, deposits, withdrawals and transfers",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )
    app.state.bank_store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def invalid_body_handler(request: Request, exc: RequestValidationError):
        """Unparseable request bodies are client errors"""
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "Invalid request body"}
        )

    app.include_router(accounts_router, prefix="/accounts", tags=["Accounts"])
    app.include_router(transfers_router, tags=["Transfers"])

    @app.get("/status")
    def get_status():
        """Liveness check"""
        return {"status": "ok"}

    @app.get("/health")
    def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": "bank_demo_api",
            "version": __version__,
            "backend": app.state.bank_store.backend_name
        }

    return app

"""
Account Ledger API Application Factory
"""

from typing import Optional
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import uvicorn

from .accounts import router as accounts_router
from .. import __version__
from ..config import LedgerConfig, get_config
from ..errors import (
    AccountNotFoundError, BelowMinimumBalanceError, InsufficientFundsError,
    LedgerError, OverdraftLimitExceededError
)
from ..logging_config import setup_logging
from ..registry import AccountRegistry, seed_sample_accounts


ERROR_STATUS = {
    AccountNotFoundError: 404,
    InsufficientFundsError: 409,
    BelowMinimumBalanceError: 409,
    OverdraftLimitExceededError: 409,
}


def create_app(
    registry: Optional[AccountRegistry] = None,
    config: Optional[LedgerConfig] = None
) -> FastAPI:
    """
    Create and configure the FastAPI application

    Args:
        registry: Registry to serve; a new one is built from config if omitted
        config: Settings, defaults to the global configuration
    """
    config = config or get_config()

    if registry is None:
        registry = AccountRegistry(config=config)
        if config.seed_sample_accounts:
            seed_sample_accounts(registry)

    app = FastAPI(
        title="Account Ledger API",
        description="In-memory savings and checking account ledger",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc"
    )
    app.state.registry = registry

    @app.exception_handler(LedgerError)
    async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
        status_code = ERROR_STATUS.get(type(exc), 400)
        return JSONResponse(status_code=status_code, content=exc.to_dict())

    app.include_router(accounts_router, prefix="/accounts", tags=["Accounts"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": "bank_ledger_api",
            "version": __version__,
            "accounts": len(app.state.registry)
        }

    @app.get("/")
    async def get_api_info():
        """Get API information"""
        return {
            "name": "Account Ledger API",
            "version": __version__,
            "endpoints": {
                "docs": "/docs",
                "health": "/health",
                "accounts": "/accounts"
            }
        }

    return app


def run_server(host: Optional[str] = None, port: Optional[int] = None) -> None:
    """Run the API with uvicorn using configured logging"""
    config = get_config()
    setup_logging(config.log_level, log_format=config.log_format)
    uvicorn.run(
        create_app(config=config),
        host=host or config.api_host,
        port=port or config.api_port,
        log_level=config.log_level.lower()
    )

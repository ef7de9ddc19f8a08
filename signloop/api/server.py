"""
FastAPI server for the contract analysis API.
"""

import logging
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from signloop.config import Config
from signloop.exceptions import ContractAnalysisError
from signloop.api.routes import router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)
logger = logging.getLogger(__name__)


def create_app(config: Config = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        config: Configuration settings

    Returns:
        Configured FastAPI app
    """
    if config is None:
        config = Config()

    app = FastAPI(
        title=config.API_TITLE,
        description=config.API_DESCRIPTION,
        version=config.API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[config.APP_URL],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)

    @app.exception_handler(ContractAnalysisError)
    async def pipeline_error_handler(request: Request, exc: ContractAnalysisError):
        logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc), "error_type": type(exc).__name__},
        )

    return app


def run_server(config: Config = None):
    """Run the API server."""
    config = config or Config()
    app = create_app(config)
    uvicorn.run(app, host=config.API_HOST, port=config.API_PORT)


if __name__ == "__main__":
    run_server()

"""Main FastAPI application for the askdata query service"""
import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config import settings
from .models import AskRequest, AskResponse, HealthCheckResponse
from .core_api.routes import router as core_api_router
from .services.ollama_client import get_ollama_client
from .services.postgres_client import get_postgres_client
from .workflow.query_workflow import get_workflow, run_query_pipeline

# Set up logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Compile the workflow on startup and release pooled connections on shutdown"""
    get_workflow()
    logger.info(f"{settings.SERVICE_NAME} started")

    yield

    logger.info("Shutting down services...")
    get_postgres_client().close()


# Create FastAPI app
app = FastAPI(
    title=settings.SERVICE_NAME,
    description="Natural Language to SQL, Chart and Explanation Service",
    version=__version__,
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register Core API routes
app.include_router(core_api_router)


@app.get("/health", response_model=HealthCheckResponse)
async def health_check():
    """
    Health check endpoint.

    Returns service health and dependency status.
    """
    postgres_ok = await asyncio.to_thread(get_postgres_client().test_connection)
    ollama_ok = await get_ollama_client().health_check()
    dependencies = {
        "postgres": "healthy" if postgres_ok else "unhealthy",
        "ollama": "healthy" if ollama_ok else "unhealthy",
    }

    # Overall status
    status = "healthy" if all(v == "healthy" for v in dependencies.values()) else "degraded"

    return HealthCheckResponse(
        status=status,
        service=settings.SERVICE_NAME,
        version=__version__,
        timestamp=datetime.now(timezone.utc).isoformat(),
        dependencies=dependencies
    )


@app.post("/ask", response_model=AskResponse)
async def ask(request: AskRequest):
    """
    Answer a natural language question end to end.

    Returns the generated SQL, the result rows, a chart configuration with
    render-ready data, and a clause-by-clause explanation. Guard rejections
    and execution failures come back with success=false and an errorCode;
    a failed explanation only sets explanationError.

    Args:
        request: Question and optional uploaded table name

    Returns:
        Pipeline outcome
    """
    logger.info(f"Received question: {request.question}")
    return await run_query_pipeline(request.question, table_name=request.tableName)


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": settings.SERVICE_NAME,
        "version": __version__,
        "status": "running",
        "endpoints": {
            "health": "/health",
            "ask": "/ask",
            "core_api": "/core/v1"
        }
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "askdata.main:app",
        host=settings.SERVICE_HOST,
        port=settings.SERVICE_PORT,
        reload=True
    )

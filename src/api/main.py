"""FastAPI application entry point."""

import warnings
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.models.responses import ErrorCodes, ErrorResponse
from api.routes import analytics_router, health_router, outcomes_router
from core.config import API_DEBUG, API_VERSION, FUB_API_KEY
from core.crm_client import close_crm_client
from core.database import get_connection, init_database


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    # Startup: make sure the outcome database exists
    conn = get_connection()
    try:
        init_database(conn)
    finally:
        conn.close()

    if not FUB_API_KEY:
        warnings.warn("FUB_API_KEY is not set; Follow Up Boss requests will fail")

    yield

    # Shutdown: release the shared HTTP client
    await close_crm_client()


app = FastAPI(
    title="FUB Analytics API",
    description="Appointment outcome dashboards over Follow Up Boss, with local outcome tracking",
    version=API_VERSION,
    debug=API_DEBUG,
    lifespan=lifespan,
)

# CORS middleware (for the React dev server)
if API_DEBUG:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


# Global exception handler for unexpected errors
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions with standard error format."""
    print(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="Internal server error",
            code=ErrorCodes.INTERNAL_ERROR,
            details=[],
        ).model_dump(),
    )


# Include routers
app.include_router(health_router)
app.include_router(analytics_router)
app.include_router(outcomes_router)


# Entry point for uvicorn
if __name__ == "__main__":
    import uvicorn

    from core.config import API_HOST, API_PORT

    uvicorn.run(
        "api.main:app",
        host=API_HOST,
        port=API_PORT,
        reload=API_DEBUG,
    )

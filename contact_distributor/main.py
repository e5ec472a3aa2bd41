from datetime import datetime, timezone
from pathlib import Path
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from contact_distributor.core.config import settings
from contact_distributor.core.logging import setup_logger
from contact_distributor.api.auth_routes import router as auth_router
from contact_distributor.api.agent_routes import router as agent_router
from contact_distributor.api.list_routes import router as list_router
from contact_distributor.core.db import initialize_database, close_engine, check_database_connection

# Initialize settings and logger
logger = setup_logger(settings.LOG_LEVEL)

app = FastAPI(title=settings.APP_NAME)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth_router)
app.include_router(agent_router)
app.include_router(list_router)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every incoming request to help debug frontend connectivity."""
    logger.info(f"[REQ] {request.method} {request.url.path}")
    return await call_next(request)


@app.on_event("startup")
async def startup_event():
    """Initialize application and database on startup."""
    logger.info(f"{settings.APP_NAME} started in {settings.ENV} environment")

    Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)

    # Initialize PostgreSQL database
    try:
        logger.info("Initializing PostgreSQL database...")
        await initialize_database()
        logger.info("✅ Database initialized successfully")

    except Exception as e:
        logger.error(f"❌ Failed to initialize database: {str(e)}")
        logger.warning("Application starting without database. Some features may be unavailable.")


@app.on_event("shutdown")
async def shutdown_event():
    """Clean up resources on shutdown."""
    logger.info("Shutting down application...")

    try:
        await close_engine()
        logger.info("✅ Database connections closed")
    except Exception as e:
        logger.error(f"Error closing database: {str(e)}")


@app.get("/api/health")
async def health_check():
    """Health check endpoint with database status."""
    db_available, db_error = await check_database_connection()

    return {
        "status": "ok",
        "time": datetime.now(timezone.utc).isoformat(),
        "database": {
            "available": db_available,
            "error": db_error
        }
    }

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from travelcrm import __version__
from travelcrm.config import get_settings
from travelcrm.database import engine, Base
from travelcrm.models import User, Customer, DailyLog  # noqa: F401  (register tables)
from travelcrm.routers import auth, users, customers, logs, dashboard

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

settings = get_settings()

_started_at = time.monotonic()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting Travel CRM API...")

    # Create database tables
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")

    yield

    logger.info("Shutting down Travel CRM API...")


app = FastAPI(
    title="Travel CRM",
    description="Customer records, activity logs and role-scoped dashboards for a travel agency",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware for the web frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth.router, prefix="/api")
app.include_router(users.router, prefix="/api")
app.include_router(customers.router, prefix="/api")
app.include_router(logs.router, prefix="/api")
app.include_router(dashboard.router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Travel CRM API",
        "version": __version__,
        "status": "running",
        "endpoints": {
            "health": "/api/health",
            "auth": "/api/auth",
            "users": "/api/users",
            "customers": "/api/customers",
            "dashboard": "/api/dashboard",
        },
    }


@app.get("/api/health")
async def health_check():
    """Liveness probe."""
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - _started_at, 3),
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "travelcrm.main:app",
        host="0.0.0.0",
        port=settings.api_port,
        reload=True,
    )

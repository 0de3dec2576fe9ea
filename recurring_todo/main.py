"""Main FastAPI application for the recurring task engine."""
from fastapi import FastAPI

from recurring_todo import __version__
from recurring_todo.config import ENVIRONMENT, LOG_LEVEL
from recurring_todo.db.init import init_db
from recurring_todo.routers import recurring_tasks_router
from recurring_todo.utils.logger import configure_logging, get_logger
from recurring_todo.utils.metrics import metrics_collector

configure_logging(LOG_LEVEL)
logger = get_logger("recurring_todo.app")

# Create FastAPI application
app = FastAPI(
    title="Recurring Tasks API",
    description="Generates concrete tasks from recurring task templates",
    version=__version__,
)


@app.on_event("startup")
async def startup_event():
    """Initialize database tables on startup."""
    init_db()
    logger.info("Application startup complete", environment=ENVIRONMENT)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


@app.get("/metrics")
async def metrics():
    """Generation counters and timers."""
    return metrics_collector.get_metrics()


app.include_router(recurring_tasks_router, prefix="/api")  # /api/{user_id}/recurring-tasks


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "recurring_todo.main:app",
        host="0.0.0.0",
        port=8000,
        reload=ENVIRONMENT == "development",
    )

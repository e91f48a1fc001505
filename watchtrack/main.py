import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .core.config import settings
from .core.errors import register_error_handlers
from .core.logging import setup_logging
from .middleware.logging import log_request
from .middleware.rate_limit import limiter
from .routes import admin, content, health, playback, users

setup_logging(settings.LOG_LEVEL, settings.LOG_JSON)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=__version__,
    openapi_url=f"{settings.API_V1_STR}/openapi.json"
)

app.state.limiter = limiter
register_error_handlers(app)
app.middleware("http")(log_request)

# CORS middleware configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        settings.FRONTEND_URL,
        "http://localhost:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(playback.router, prefix=settings.API_V1_STR)
app.include_router(users.router, prefix=settings.API_V1_STR)
app.include_router(content.router, prefix=settings.API_V1_STR)
app.include_router(admin.router, prefix=settings.API_V1_STR)


@app.on_event("startup")
async def startup_event():
    logger.info("Starting up application...")
    from .db.mongodb import mongodb
    try:
        await mongodb.connect()
        await mongodb.ensure_indexes()
    except Exception as e:
        # Requests will report the dependency as unavailable until Mongo is back
        logger.error(f"Error connecting to MongoDB: {str(e)}")
    logger.info(f"API Version: {settings.API_V1_STR}")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down application...")
    from .db.mongodb import mongodb
    from .db.redis import redis_client
    await mongodb.close()
    try:
        await redis_client.aclose()
    except Exception as e:
        logger.error(f"Error closing Redis connection: {str(e)}")


@app.get("/")
async def root():
    return {"status": "healthy", "message": settings.PROJECT_NAME}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("watchtrack.main:app", host="0.0.0.0", port=8000)

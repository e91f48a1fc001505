import os
from datetime import datetime, timezone
from typing import Dict, Optional

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import BaseModel

from .. import __version__
from ..db.mongodb import mongodb

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: str
    version: str
    timestamp: str
    environment: str
    dependencies: Optional[Dict[str, bool]] = None


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Liveness plus a MongoDB ping."""
    environment = "production" if os.getenv("ENV") == "production" else "development"
    mongo_ok = await mongodb.ping()
    return HealthResponse(
        status="healthy" if mongo_ok else "degraded",
        version=__version__,
        timestamp=datetime.now(timezone.utc).isoformat(),
        environment=environment,
        dependencies={"mongodb": mongo_ok},
    )


@router.get("/metrics", include_in_schema=False)
async def metrics():
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

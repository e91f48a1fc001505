import logging
import time
import uuid

from fastapi import Request

from ..core.monitoring import record_request

logger = logging.getLogger(__name__)


async def log_request(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    request.state.request_id = request_id
    start_time = time.perf_counter()

    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(
            f"{request.method} {request.url.path} failed: {str(e)}",
            extra={"request_id": request_id}
        )
        raise

    elapsed = time.perf_counter() - start_time
    # Label by route template so ids in the path don't explode cardinality
    route = request.scope.get("route")
    endpoint = getattr(route, "path", request.url.path)
    record_request(request.method, endpoint, response.status_code, elapsed)

    logger.info(
        f"{request.method} {request.url.path} -> {response.status_code} in {elapsed * 1000:.1f}ms",
        extra={"request_id": request_id}
    )
    response.headers["X-Request-ID"] = request_id
    return response

from prometheus_client import Counter, Histogram, Info

from .. import __version__

REQUESTS_TOTAL = Counter(
    'watchtrack_requests_total',
    'Total number of API requests',
    ['method', 'endpoint', 'status']
)

REQUEST_LATENCY = Histogram(
    'watchtrack_request_latency_seconds',
    'Request latency in seconds',
    ['method', 'endpoint']
)

PLAYBACK_EVENTS = Counter(
    'watchtrack_playback_events_total',
    'Playback session lifecycle events',
    ['event']
)

PROGRESS_REPORTS = Counter(
    'watchtrack_progress_reports_total',
    'Watch progress reports by outcome',
    ['outcome']
)

SYSTEM_INFO = Info('watchtrack_system', 'API system information')
SYSTEM_INFO.info({"version": __version__})


def record_request(method: str, endpoint: str, status_code: int, elapsed: float) -> None:
    REQUESTS_TOTAL.labels(method=method, endpoint=endpoint, status=str(status_code)).inc()
    REQUEST_LATENCY.labels(method=method, endpoint=endpoint).observe(elapsed)

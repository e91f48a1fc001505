from slowapi import Limiter
from slowapi.util import get_remote_address

# Per-client limits for the high-frequency telemetry endpoints
limiter = Limiter(key_func=get_remote_address)

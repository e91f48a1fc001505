from .mongodb import mongodb, get_mongodb
from .redis import get_redis

__all__ = ["mongodb", "get_mongodb", "get_redis"]

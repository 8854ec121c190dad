"""Cache: Redis service.

Implements lms.application.interfaces.services.ICacheService. Uses
lms.core.config; key format is in lms.application.services.cache_keys.
"""

from lms.infrastructure.cache.redis_cache import CacheService

__all__ = ["CacheService"]

"""Rate limiter instance for SlowAPI.

Shared so main (app.state.limiter) and the endpoint modules use the same
instance. Decorated endpoints must accept ``request: Request``.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)

AUTH_LIMIT = "10/minute"
WRITE_ENDPOINT_LIMIT = "120/minute"
UPLOAD_LIMIT = "30/minute"

limit_auth = limiter.limit(AUTH_LIMIT)
limit_writes = limiter.limit(WRITE_ENDPOINT_LIMIT)
limit_upload = limiter.limit(UPLOAD_LIMIT)

"""HTTP middleware: timeout, request size limit, request ID, security headers.

Applied in lms.main; order matters (last added = outermost).
"""

from lms.middleware.request_id import RequestIDMiddleware
from lms.middleware.request_size_limit import RequestSizeLimitMiddleware
from lms.middleware.security_headers import SecurityHeadersMiddleware
from lms.middleware.timeout import TimeoutMiddleware

__all__ = [
    "RequestIDMiddleware",
    "RequestSizeLimitMiddleware",
    "SecurityHeadersMiddleware",
    "TimeoutMiddleware",
]

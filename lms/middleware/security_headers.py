"""Security headers middleware (raw ASGI).

API responses are JSON only, so the policy forbids every content source.
Headers already set by a route are left untouched.
"""

from typing import Callable

DEFAULT_HEADERS = {
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}

# Swagger UI loads scripts and styles from a CDN.
_DOCS_PATHS = ("/docs", "/redoc", "/openapi.json")


def SecurityHeadersMiddleware(
    app: Callable, headers: dict[str, str] | None = None
) -> Callable:
    resolved = [
        (k.lower().encode(), v.encode())
        for k, v in (headers or DEFAULT_HEADERS).items()
    ]

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http" or scope.get("path", "").startswith(_DOCS_PATHS):
            await app(scope, receive, send)
            return

        async def send_wrapper(message: dict) -> None:
            if message["type"] == "http.response.start":
                current = list(message.get("headers", []))
                present = {name.lower() for name, _ in current}
                current.extend(h for h in resolved if h[0] not in present)
                message["headers"] = current
            await send(message)

        await app(scope, receive, send_wrapper)

    return asgi_app

"""Request body size limit middleware (raw ASGI).

Rejects bodies larger than max_bytes (the upload limit) with 413, using
Content-Length when present and counting streamed chunks otherwise.
"""

from typing import Callable

from lms.middleware.asgi import get_header, send_json_error


async def _too_large(send: Callable, max_bytes: int, actual: int) -> None:
    await send_json_error(
        send,
        413,
        "PAYLOAD_TOO_LARGE",
        f"Request body must be at most {max_bytes} bytes",
        {"max_bytes": max_bytes, "content_length": actual},
    )


def RequestSizeLimitMiddleware(app: Callable, max_bytes: int) -> Callable:
    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        declared = get_header(scope, "content-length")
        if declared is not None and declared.isdigit():
            if int(declared) > max_bytes:
                await _too_large(send, max_bytes, int(declared))
                return
            await app(scope, receive, send)
            return

        # No usable Content-Length: buffer and count the streamed body.
        chunks: list[bytes] = []
        total = 0
        while True:
            message = await receive()
            if message["type"] != "http.request":
                break
            body = message.get("body", b"")
            total += len(body)
            if total > max_bytes:
                await _too_large(send, max_bytes, total)
                return
            chunks.append(body)
            if not message.get("more_body", False):
                break

        replayed = False

        async def replay() -> dict:
            nonlocal replayed
            if not replayed:
                replayed = True
                return {"type": "http.request", "body": b"".join(chunks), "more_body": False}
            return await receive()

        await app(scope, replay, send)

    return asgi_app

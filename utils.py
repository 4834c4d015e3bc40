import logging

from fastapi import UploadFile
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from errors import PayloadTooLargeError, error_response
from normalizer import MAX_JSON_BYTES, MAX_UPLOAD_BYTES, UploadedFile

logger = logging.getLogger(__name__)


def _format_size(limit: int) -> str:
    return f"{limit // (1024 * 1024)} MiB"


async def read_upload(upload: UploadFile | None, limit: int = MAX_UPLOAD_BYTES) -> UploadedFile | None:
    """Buffer an uploaded file, reading at most ``limit + 1`` bytes.

    Returns ``None`` when no file was sent; an empty filename is how browsers
    submit an untouched file input.
    """
    if upload is None or (not upload.filename and upload.size == 0):
        return None

    data = await upload.read(limit + 1)
    if len(data) > limit:
        raise PayloadTooLargeError(f"File '{upload.filename}' exceeds the {_format_size(limit)} upload limit")
    return UploadedFile(data=data, mime_type=upload.content_type or "", filename=upload.filename)


class JsonBodyLimitMiddleware:
    """Reject JSON bodies over ``max_bytes`` with a 413 ``{message}``.

    ``Content-Length`` is checked first; bodies without it (chunked) are
    buffered up to the limit and replayed to the app.
    """

    def __init__(self, app: ASGIApp, max_bytes: int = MAX_JSON_BYTES) -> None:
        self.app = app
        self.max_bytes = max_bytes

    async def _reject(self, scope: Scope, receive: Receive, send: Send) -> None:
        logger.warning("Rejected %s %s: JSON body over limit", scope.get("method"), scope.get("path"))
        response = error_response(413, f"JSON body exceeds the {_format_size(self.max_bytes)} limit")
        await response(scope, receive, send)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = Headers(scope=scope)
        if "json" not in headers.get("content-type", "").lower():
            await self.app(scope, receive, send)
            return

        try:
            declared = int(headers.get("content-length", "0"))
        except ValueError:
            declared = 0
        if declared > self.max_bytes:
            await self._reject(scope, receive, send)
            return

        body = bytearray()
        more_body = True
        while more_body:
            message = await receive()
            if message["type"] == "http.disconnect":
                return
            body.extend(message.get("body", b""))
            if len(body) > self.max_bytes:
                await self._reject(scope, receive, send)
                return
            more_body = message.get("more_body", False)

        replayed = False

        async def replay() -> Message:
            nonlocal replayed
            if not replayed:
                replayed = True
                return {"type": "http.request", "body": bytes(body), "more_body": False}
            return await receive()

        await self.app(scope, replay, send)

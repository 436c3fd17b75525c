import logging

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from bulk_feedback.core.config import MAX_UPLOAD_BYTES

log = logging.getLogger("limits")


class BodySizeLimitMiddleware(BaseHTTPMiddleware):
    """Rejects requests whose declared Content-Length is over MAX_UPLOAD_BYTES."""

    def __init__(self, app, max_bytes: int = MAX_UPLOAD_BYTES):
        super().__init__(app)
        self.max_bytes = max_bytes

    async def dispatch(self, request: Request, call_next):
        cl = request.headers.get("content-length")
        if cl is not None:
            try:
                size = int(cl)
            except ValueError:
                return JSONResponse({"detail": "Bad Content-Length"}, status_code=400)
            if size > self.max_bytes:
                log.warning("Rejected %s %s: %d bytes", request.method, request.url.path, size)
                return JSONResponse({"detail": "Request too large"}, status_code=413)
        return await call_next(request)

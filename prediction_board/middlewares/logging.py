import json
import logging
import time
import uuid
from typing import Callable, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

logger = logging.getLogger("prediction_board.access")


def classify(status_code: int) -> str:
    if status_code >= 500:
        return "failed"
    if status_code >= 400:
        return "rejected"
    return "ok"


def summarize_error(body: bytes) -> Optional[str]:
    """Pull the client-facing reason out of an ``{error}`` or ``{errors}`` body."""
    try:
        payload = json.loads(body)
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None
    if "errors" in payload:
        fields = [e.get("field") for e in payload["errors"] if isinstance(e, dict)]
        return "invalid fields: " + ", ".join(str(f) for f in fields)
    if "error" in payload:
        return str(payload["error"])
    return None


async def read_body(response: Response) -> bytes:
    chunks = [chunk async for chunk in response.body_iterator]
    body = b"".join(chunks)

    async def replay():
        yield body

    response.body_iterator = replay()
    return body


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """One JSON access line per request, tagged with an ``X-Request-ID``.

    Rejected and failed requests carry the reason sent to the client. A
    handler that raises is logged as failed before the exception
    reaches the catch-all handler.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            self.log_access(request, request_id, start_time, 500, "failed", repr(exc))
            raise

        outcome = classify(response.status_code)
        error = None
        if outcome != "ok":
            error = summarize_error(await read_body(response))

        self.log_access(request, request_id, start_time, response.status_code, outcome, error)
        response.headers["X-Request-ID"] = request_id
        return response

    @staticmethod
    def log_access(
        request: Request,
        request_id: str,
        start_time: float,
        status_code: int,
        outcome: str,
        error: Optional[str],
    ) -> None:
        route = request.scope.get("route")
        log_data = {
            "request_id": request_id,
            "method": request.method,
            "route": getattr(route, "path", None),
            "path": request.url.path,
            "category": request.query_params.get("category"),
            "status_code": status_code,
            "outcome": outcome,
            "error": error,
            "duration_ms": round((time.perf_counter() - start_time) * 1000, 2),
        }
        level = logging.ERROR if outcome == "failed" else logging.INFO
        logger.log(level, json.dumps(log_data))

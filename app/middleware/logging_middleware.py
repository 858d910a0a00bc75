import time
import json
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp
import structlog
from uuid import uuid4

logger = structlog.get_logger()

# Base64 thumbnails make product bodies large; only this much of any value is logged
MAX_LOGGED_VALUE = 100


class LoggingMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp):
        super().__init__(app)

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("x-request-id") or str(uuid4())
        start_time = time.time()

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        log_data = {
            "method": request.method,
            "path": request.url.path,
            "client_ip": request.client.host if request.client else None,
            "user_agent": request.headers.get("user-agent", "")[:MAX_LOGGED_VALUE],
        }

        if request.query_params:
            log_data["query_params"] = dict(request.query_params)

        if request.method in ["POST", "PUT", "PATCH"]:
            log_data.update(await self._body_fields(request))

        logger.info("API Request Started", **log_data)

        request.state.request_id = request_id
        request.state.start_time = start_time

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.time() - start_time
            logger.error(
                "API Request Failed",
                path=request.url.path,
                method=request.method,
                error=str(e),
                process_time=round(process_time, 4)
            )
            raise

        process_time = time.time() - start_time

        response_log_data = {
            "path": request.url.path,
            "method": request.method,
            "status_code": response.status_code,
            "process_time": round(process_time, 4),
        }

        if response.status_code >= 400:
            logger.warning("API Request Completed with Error", **response_log_data)
        else:
            logger.info("API Request Completed Successfully", **response_log_data)

        response.headers["X-Request-ID"] = request_id
        return response

    @staticmethod
    async def _body_fields(request: Request) -> dict:
        """Flatten a JSON body into body_<key> log fields."""
        body = await request.body()
        if not body:
            return {}

        text = body.decode(errors="replace")
        if "application/json" not in request.headers.get("content-type", ""):
            return {"body": text[:200]}

        try:
            body_data = json.loads(text)
        except json.JSONDecodeError:
            return {"body": text[:200]}

        if not isinstance(body_data, dict):
            return {"body": str(body_data)[:200]}

        fields = {}
        for key, value in body_data.items():
            if isinstance(value, (int, float, bool)) or value is None:
                fields[f"body_{key}"] = value
            elif isinstance(value, list) and len(value) <= 3:
                fields[f"body_{key}"] = value
            else:
                fields[f"body_{key}"] = str(value)[:MAX_LOGGED_VALUE]
        return fields

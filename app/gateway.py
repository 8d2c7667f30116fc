"""Path-based gateway in front of the question and search services."""
from datetime import datetime
from typing import List, Optional, Tuple
import logging

import httpx
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from app.config import get_settings
from app.middleware.request_logging import RequestLoggingMiddleware
from app.models.schemas import HealthCheck
from app.utils.network import append_forwarded_for

settings = get_settings()

logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)

# Headers that describe a single hop and must not be forwarded
HOP_BY_HOP_HEADERS = {
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailers",
    "transfer-encoding",
    "upgrade",
    "host",
    "content-length",
}

# httpx hands back decoded bodies, so encoding/length headers no longer apply
STRIPPED_RESPONSE_HEADERS = HOP_BY_HOP_HEADERS | {"content-encoding"}


def build_routes() -> List[Tuple[str, str]]:
    """Route table: path prefix -> upstream base URL."""
    return [
        ("/questions", settings.question_service_url),
        ("/tags", settings.question_service_url),
        ("/search", settings.search_service_url),
    ]


def resolve_route(path: str, routes: List[Tuple[str, str]]) -> Optional[str]:
    """Return the upstream for ``path``, matching prefixes on segment boundaries."""
    for prefix, upstream in routes:
        if path == prefix or path.startswith(prefix + "/"):
            return upstream
    return None


routes = build_routes()
http_client: Optional[httpx.AsyncClient] = None

app = FastAPI(
    title=settings.gateway_app_name,
    description="Routes /questions and /tags to the question service, /search to the search service",
    version="1.0.0"
)

app.add_middleware(RequestLoggingMiddleware)


@app.on_event("startup")
async def startup_event():
    global http_client
    http_client = httpx.AsyncClient(timeout=settings.gateway_timeout)
    for prefix, upstream in routes:
        logger.info(f"Route {prefix}/** -> {upstream}")


@app.on_event("shutdown")
async def shutdown_event():
    global http_client
    if http_client is not None:
        await http_client.aclose()
        http_client = None


@app.get("/", response_model=HealthCheck)
async def health_check():
    """Health check endpoint."""
    return HealthCheck(status="healthy", timestamp=datetime.utcnow())


async def forward(request: Request, upstream: str, client: httpx.AsyncClient) -> Response:
    headers = {
        key: value for key, value in request.headers.items()
        if key.lower() not in HOP_BY_HOP_HEADERS
    }
    headers["X-Forwarded-For"] = append_forwarded_for(request)
    headers["X-Forwarded-Host"] = request.headers.get("host", "")

    upstream_response = await client.request(
        request.method,
        upstream.rstrip("/") + request.url.path,
        params=request.query_params.multi_items(),
        headers=headers,
        content=await request.body(),
    )

    response_headers = {
        key: value for key, value in upstream_response.headers.items()
        if key.lower() not in STRIPPED_RESPONSE_HEADERS
    }
    return Response(
        content=upstream_response.content,
        status_code=upstream_response.status_code,
        headers=response_headers,
    )


@app.api_route("/{path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"])
async def gateway(path: str, request: Request):
    upstream = resolve_route(request.url.path, routes)
    if upstream is None:
        return JSONResponse(status_code=404, content={"detail": "No route for path"})

    client = http_client
    if client is None:
        logger.warning("Gateway HTTP client not initialized, using a one-off client")
        async with httpx.AsyncClient(timeout=settings.gateway_timeout) as one_off:
            return await _forward_or_502(request, upstream, one_off)
    return await _forward_or_502(request, upstream, client)


async def _forward_or_502(request: Request, upstream: str, client: httpx.AsyncClient) -> Response:
    try:
        return await forward(request, upstream, client)
    except httpx.HTTPError as e:
        logger.error(f"Upstream {upstream} failed for {request.method} {request.url.path}: {e}")
        return JSONResponse(status_code=502, content={"detail": "Upstream service unavailable"})

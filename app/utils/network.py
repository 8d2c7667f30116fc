"""Network utility functions."""
from starlette.requests import Request


def get_client_ip(request: Request) -> str:
    """Extract client IP address from request, handling proxies."""
    # X-Forwarded-For can contain multiple IPs; the first is the original client
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    if request.client and request.client.host:
        return request.client.host

    return "unknown"


def append_forwarded_for(request: Request) -> str:
    """Return the X-Forwarded-For value to send upstream, with this hop's peer appended."""
    peer = request.client.host if request.client and request.client.host else "unknown"
    existing = request.headers.get("X-Forwarded-For")
    if existing:
        return f"{existing}, {peer}"
    return peer

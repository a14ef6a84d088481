"""Security headers, CORS and compression middleware."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from app.config import settings


def setup_cors(app: FastAPI) -> None:
    """Allow the browser front end to call the API."""
    origins = settings.cors_origins_list

    # Credentials are not allowed together with a wildcard origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Response-Time"],
    )


def setup_compression(app: FastAPI) -> None:
    """Recipe lists carry base64 photos; compress them."""
    app.add_middleware(GZipMiddleware, minimum_size=1000)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers."""

    async def dispatch(self, request, call_next):
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        # Geolocation is used by the nearby-store search
        response.headers["Permissions-Policy"] = "geolocation=(self), camera=(self)"

        return response

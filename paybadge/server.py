"""HTTP service for badges and embed code.

A thin FastAPI adapter over the badge and code generators: it maps query
strings and JSON bodies onto generator calls, attaches SVG caching
headers and translates generator errors into JSON error responses.
"""

import hashlib
import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional

from fastapi import Body, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from paybadge import __version__
from paybadge.badges import generate_badge_svg, generate_enhanced_badge
from paybadge.code_generator import (
    BADGE_PRESETS,
    DEFAULT_ALT_TEXT,
    UnknownPresetError,
    generate_all_badge_formats,
    generate_badge_code,
    generate_preset_badge,
)
from paybadge.models import ServerConfig
from paybadge.validator import ValidationError

logger = logging.getLogger(__name__)

SVG_MEDIA_TYPE = "image/svg+xml"

AVAILABLE_ENDPOINTS = [
    "/badge.svg",
    "/badge-crypto.svg",
    "/generate-code",
    "/generate-all-formats",
    "/preset/{name}",
    "/presets",
    "/health",
    "/api",
]

API_INFO: dict[str, Any] = {
    "name": "PayBadge API",
    "version": __version__,
    "description": "Dynamic SVG badge generator for crypto payments",
    "endpoints": {
        "/badge.svg": "Standard crypto payment badge",
        "/badge-crypto.svg": "Enhanced crypto payment badge with icon",
        "/generate-code": "POST - Generate markdown/HTML code for badges",
        "/generate-all-formats": "POST - Generate both markdown and HTML formats",
        "/preset/{name}": "GET - Generate code using preset configurations",
        "/presets": "GET - List available preset configurations",
        "/health": "Health check endpoint",
        "/api": "API information",
    },
    "badgeParameters": {
        "leftText": "Left side text (default: paybadge)",
        "rightText": "Right side text (default: crypto)",
        "leftColor": "Left side color (default: #555)",
        "rightColor": "Right side color (default: #4c1)",
        "style": "Badge style (standard|enhanced)",
        "icon": "Icon in the right segment (crypto|bitcoin)",
    },
    "codeGenerationParameters": {
        "baseUrl": "Base URL for badge service (auto-detected)",
        "badgeParams": "Badge customization parameters",
        "linkUrl": "URL to link to when badge is clicked (required)",
        "altText": f"Alt text for the badge (default: {DEFAULT_ALT_TEXT})",
        "format": "Output format: markdown or html (default: markdown)",
    },
    "examples": [
        "/badge.svg",
        "/badge.svg?leftText=donate&rightText=bitcoin",
        "/badge.svg?leftColor=%23333&rightColor=%23007bff",
        "/badge-crypto.svg?rightText=BTC",
        "/preset/bitcoin?linkUrl=https://example.com&format=html",
        "/presets",
    ],
}


def compute_etag(content: str) -> str:
    """Strong ETag for a response body."""
    return f'"{hashlib.sha256(content.encode("utf-8")).hexdigest()}"'


def etag_matches(if_none_match: Optional[str], etag: str) -> bool:
    """Check an If-None-Match header against an ETag (weak comparison)."""
    if not if_none_match:
        return False
    candidates = [tag.strip() for tag in if_none_match.split(",")]
    return "*" in candidates or etag in [tag.removeprefix("W/") for tag in candidates]


def svg_response(request: Request, svg: str, max_age: int) -> Response:
    """Wrap SVG markup in a cacheable response, honoring If-None-Match."""
    etag = compute_etag(svg)
    headers = {
        "Cache-Control": f"public, max-age={max_age}, s-maxage={max_age}",
        "ETag": etag,
        "Vary": "Accept-Encoding",
    }

    if etag_matches(request.headers.get("if-none-match"), etag):
        return Response(status_code=304, headers=headers)

    return Response(content=svg, media_type=SVG_MEDIA_TYPE, headers=headers)


def error_response(error: str, message: str, status_code: int = 400) -> JSONResponse:
    return JSONResponse({"error": error, "message": message}, status_code=status_code)


def request_base_url(request: Request) -> str:
    """Public base URL of the service as seen by the client."""
    proto = request.headers.get("x-forwarded-proto") or request.url.scheme or "http"
    host = request.headers.get("host") or request.url.netloc
    return f"{proto}://{host}"


def create_app(config: Optional[ServerConfig] = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        config: Server configuration (defaults to ServerConfig()).

    Returns:
        Configured FastAPI app.
    """
    config = config or ServerConfig()
    started = time.monotonic()

    app = FastAPI(title="PayBadge", version=__version__)
    app.state.config = config
    # Badges are embedded from any origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    def render_badge(
        request: Request,
        generator: Callable[[Mapping[str, Any]], str],
    ) -> Response:
        try:
            svg = generator(dict(request.query_params))
        except ValidationError as e:
            return error_response(str(e), "Invalid badge parameters")
        return svg_response(request, svg, config.cache_max_age)

    @app.get("/badge.svg")
    def standard_badge(request: Request) -> Response:
        return render_badge(request, generate_badge_svg)

    @app.get("/badge-crypto.svg")
    def enhanced_badge(request: Request) -> Response:
        return render_badge(request, generate_enhanced_badge)

    @app.post("/generate-code")
    def generate_code(request: Request, payload: dict[str, Any] = Body(...)) -> JSONResponse:
        link_url = payload.get("linkUrl")
        if not link_url:
            return error_response(
                "Missing required parameter: linkUrl",
                "linkUrl is required for code generation",
            )

        badge_params = payload.get("badgeParams") or {}
        if not isinstance(badge_params, dict):
            return error_response("badgeParams must be an object", "Invalid badge parameters")

        result = generate_badge_code(
            base_url=payload.get("baseUrl") or request_base_url(request),
            link_url=link_url,
            badge_params=badge_params,
            alt_text=payload.get("altText") or DEFAULT_ALT_TEXT,
            output_format=str(payload.get("format") or "markdown"),
        )
        return JSONResponse(result.to_dict())

    @app.post("/generate-all-formats")
    def generate_all_formats(request: Request, payload: dict[str, Any] = Body(...)) -> JSONResponse:
        link_url = payload.get("linkUrl")
        if not link_url:
            return error_response(
                "Missing required parameter: linkUrl",
                "linkUrl is required for code generation",
            )

        badge_params = payload.get("badgeParams") or {}
        if not isinstance(badge_params, dict):
            return error_response("badgeParams must be an object", "Invalid badge parameters")

        result = generate_all_badge_formats(
            base_url=payload.get("baseUrl") or request_base_url(request),
            link_url=link_url,
            badge_params=badge_params,
            alt_text=payload.get("altText") or DEFAULT_ALT_TEXT,
        )
        return JSONResponse(result)

    @app.get("/preset/{preset_name}")
    def preset_badge(preset_name: str, request: Request) -> JSONResponse:
        base_url = request_base_url(request)
        overrides = dict(request.query_params)
        link_url = overrides.pop("linkUrl", None) or f"{base_url}/"
        output_format = overrides.pop("format", None) or "markdown"

        try:
            result = generate_preset_badge(base_url, preset_name, link_url, output_format, overrides)
        except UnknownPresetError as e:
            return error_response(str(e), "Failed to generate preset badge")
        return JSONResponse(result.to_dict())

    @app.get("/presets")
    def list_presets() -> JSONResponse:
        return JSONResponse({
            "presets": list(BADGE_PRESETS),
            "descriptions": {
                name: {"altText": preset["altText"], "badgeParams": preset["badgeParams"]}
                for name, preset in BADGE_PRESETS.items()
            },
        })

    @app.get("/health")
    def health() -> JSONResponse:
        return JSONResponse({
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": __version__,
            "uptime": round(time.monotonic() - started, 3),
        })

    @app.get("/api")
    def api_info() -> JSONResponse:
        return JSONResponse(API_INFO)

    @app.exception_handler(404)
    def not_found(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(
            {
                "error": "Not Found",
                "message": "The requested endpoint does not exist",
                "availableEndpoints": AVAILABLE_ENDPOINTS,
            },
            status_code=404,
        )

    @app.exception_handler(Exception)
    def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error_response(
            "Internal Server Error",
            "An unexpected error occurred",
            status_code=500,
        )

    return app

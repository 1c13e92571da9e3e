"""Locale-prefixed web pages."""

import logging
import os

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import FileResponse, RedirectResponse

from route_weather.config import LOCALES
from route_weather.i18n import negotiate_locale

logger = logging.getLogger(__name__)

STATIC_PATH = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "static")

router = APIRouter(tags=["pages"])


@router.get("/", include_in_schema=False)
async def root(request: Request) -> RedirectResponse:
    """Redirect to the page in the visitor's preferred language."""
    locale = negotiate_locale(request.headers.get("accept-language"))
    logger.debug(f"Redirecting root to locale '{locale}'")
    return RedirectResponse(url=f"/{locale}/", status_code=307)


@router.get("/{locale}/", include_in_schema=False)
async def localized_page(locale: str) -> FileResponse:
    """Serve the map page for a supported locale."""
    if locale not in LOCALES:
        raise HTTPException(status_code=404, detail=f"Unsupported locale: {locale}")
    return FileResponse(os.path.join(STATIC_PATH, "index.html"))

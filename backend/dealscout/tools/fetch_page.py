"""fetch_page tool: fetch a retailer page or feed and extract products."""

import json
import re
from typing import Dict, Optional

import structlog
from bs4 import BeautifulSoup

from dealscout.config import settings
from dealscout.core.exceptions import (
    DealScoutException,
    ErrorKind,
    InputMissingError,
    error_response,
)
from dealscout.scrapers.dispatcher import ExtractionDispatcher, ExtractionStatus
from dealscout.scrapers.fetcher import PageFetcher

logger = structlog.get_logger(__name__)

_STATUS_ERROR_KINDS = {
    ExtractionStatus.NO_PRODUCT_DATA: ErrorKind.PARSE_FAILURE,
    ExtractionStatus.PARSE_FAILURE: ErrorKind.PARSE_FAILURE,
    ExtractionStatus.UNKNOWN_RETAILER: ErrorKind.UNKNOWN_RETAILER,
}

_WHITESPACE = re.compile(r"\s+")


def visible_text(html: str, max_chars: int) -> str:
    """Page text without scripts and styles, whitespace-collapsed and capped."""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style", "noscript", "template", "svg"]):
        tag.decompose()
    text = _WHITESPACE.sub(" ", soup.get_text(separator=" ")).strip()
    return text[:max_chars]


async def fetch_page(
    params: Dict[str, str],
    fetcher: Optional[PageFetcher] = None,
    dispatcher: Optional[ExtractionDispatcher] = None,
) -> str:
    """Fetch ``url`` and return its products as canonical records.

    Retailers without a registered profile fall back to the page's
    visible text when no structured product data is found, so the agent
    can still read the page. Registered retailers never fall back.
    """
    url = (params.get("url") or "").strip()
    retailer = params.get("retailer") or ""
    category = params.get("category") or ""

    try:
        if not url:
            raise InputMissingError("url")
        page = await (fetcher or PageFetcher()).fetch(url)
    except DealScoutException as e:
        return error_response(e.message, e.kind)

    extraction = (dispatcher or ExtractionDispatcher()).extract(page.body, retailer, category)

    body = {
        "success": True,
        "url": url,
        "retailer": retailer,
        "category": category,
        "strategy": str(extraction.strategy) if extraction.strategy else None,
        "productsFound": len(extraction.products),
        "products": extraction.products_as_dicts(),
        "rawLength": page.raw_length,
        "contentType": page.content_type,
    }

    if extraction.ok:
        logger.info(
            "fetch_page_complete",
            url=url,
            retailer=retailer,
            category=category,
            strategy=body["strategy"],
            products=len(extraction.products),
        )
        return json.dumps(body)

    can_fall_back = (
        extraction.status is ExtractionStatus.NO_PRODUCT_DATA
        and not extraction.profile.is_registered
        and isinstance(page.body, str)
    )
    if can_fall_back:
        body["strategy"] = "text"
        body["content"] = visible_text(page.body, settings.TEXT_FALLBACK_MAX_CHARS)
        logger.info("fetch_page_text_fallback", url=url, retailer=retailer, length=len(body["content"]))
        return json.dumps(body)

    logger.warning("fetch_page_no_products", url=url, retailer=retailer, status=str(extraction.status))
    return error_response(
        f"{extraction.message} for {url} (retailer: {retailer or 'unregistered'})",
        _STATUS_ERROR_KINDS.get(extraction.status, ErrorKind.PARSE_FAILURE),
    )

"""save_deals tool: persist deals returned by parse_deals."""

import json
from typing import Any, Dict, Optional

import structlog
from pydantic import ValidationError

from dealscout.core.exceptions import (
    DealScoutException,
    ErrorKind,
    InputMissingError,
    ParseFailureError,
    error_response,
)
from dealscout.schemas.tools import deal_list_adapter
from dealscout.services.deal_store import DealStore, get_deal_store

logger = structlog.get_logger(__name__)


async def save_deals(params: Dict[str, str], store: Optional[DealStore] = None) -> str:
    raw = params.get("deals") or ""

    try:
        if not raw:
            raise InputMissingError("deals")
        try:
            parsed: Any = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ParseFailureError("deals must be a valid JSON array string") from e
        if not isinstance(parsed, list) or not parsed:
            raise ParseFailureError("deals must be a non-empty array")
        try:
            items = deal_list_adapter.validate_python(parsed)
        except ValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first["loc"])
            raise ParseFailureError(f"invalid deal at {location}: {first['msg']}") from e
    except DealScoutException as e:
        return error_response(e.message, e.kind)

    result = await (store or get_deal_store()).save_deals([item.to_deal() for item in items])

    body = result.to_dict()
    if not result.success:
        # Partial write: some chunks landed, report the rest as a warning
        body["errorKind"] = str(ErrorKind.PARTIAL_WRITE_FAILURE)
        body["warning"] = f"{result.unprocessed} of {result.total} deals were not saved"
        logger.warning("save_deals_partial", saved=result.saved, total=result.total)

    return json.dumps(body)

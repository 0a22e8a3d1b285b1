"""Agent tools. Each takes the unwrapped string parameters and returns a JSON string."""

from typing import Awaitable, Callable, Dict

from dealscout.tools.fetch_page import fetch_page
from dealscout.tools.parse_deals import parse_deals
from dealscout.tools.save_deals import save_deals

ToolHandler = Callable[[Dict[str, str]], Awaitable[str]]

TOOL_MAP: Dict[str, ToolHandler] = {
    "fetch_page": fetch_page,
    "parse_deals": parse_deals,
    "save_deals": save_deals,
}

__all__ = [
    "TOOL_MAP",
    "ToolHandler",
    "fetch_page",
    "parse_deals",
    "save_deals",
]

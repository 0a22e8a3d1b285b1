"""Pydantic schemas for the agent envelope and tool payloads."""

from dealscout.schemas.agent import AgentEvent, AgentParameter, AgentResponse
from dealscout.schemas.tools import DealItem, ProductItem, deal_list_adapter, product_list_adapter

__all__ = [
    "AgentEvent",
    "AgentParameter",
    "AgentResponse",
    "DealItem",
    "ProductItem",
    "deal_list_adapter",
    "product_list_adapter",
]

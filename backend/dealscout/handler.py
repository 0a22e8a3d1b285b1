"""Agent action-group entry point.

Unwraps the agent's parameter list, routes to the requested tool and
wraps the tool's JSON result back into the envelope the agent expects.
Tools report expected failures in their JSON body; anything they raise
is caught here and reported as an unhandled error instead of crashing
the process.
"""

import asyncio
from typing import Any, Dict, Optional

import structlog
from pydantic import ValidationError

from dealscout.core.exceptions import ErrorKind, error_response
from dealscout.core.logging_config import configure_logging
from dealscout.schemas.agent import AgentEvent, AgentResponse
from dealscout.tools import TOOL_MAP

configure_logging()
logger = structlog.get_logger(__name__)


async def handle_event(event: Dict[str, Any]) -> Dict[str, Any]:
    """Dispatch one agent event to its tool and wrap the result."""
    try:
        agent_event = AgentEvent.model_validate(event)
    except ValidationError as e:
        logger.warning("agent_event_invalid", error=str(e))
        fallback = AgentEvent(
            action_group=str(event.get("actionGroup", "")),
            function=str(event.get("function", "")),
        )
        return AgentResponse.wrap(
            fallback, error_response("Malformed agent event", ErrorKind.PARSE_FAILURE)
        ).to_payload()

    function_name = agent_event.function
    params = agent_event.params()
    logger.info(
        "agent_event_received",
        action_group=agent_event.action_group,
        function=function_name,
        parameters=sorted(params.keys()),
    )

    tool = TOOL_MAP.get(function_name)
    if tool is None:
        available = ", ".join(TOOL_MAP.keys())
        return AgentResponse.wrap(
            agent_event,
            error_response(
                f"Unknown function: {function_name}. Available: {available}",
                ErrorKind.UNKNOWN_FUNCTION,
            ),
        ).to_payload()

    try:
        body = await tool(params)
    except Exception as e:
        logger.exception("tool_unhandled_error", function=function_name, error=str(e))
        body = error_response(f"Unhandled error in {function_name}: {e}", ErrorKind.UNHANDLED)

    return AgentResponse.wrap(agent_event, body).to_payload()


def handler(event: Dict[str, Any], context: Optional[Any] = None) -> Dict[str, Any]:
    """Synchronous entry point for serverless runtimes."""
    return asyncio.run(handle_event(event))

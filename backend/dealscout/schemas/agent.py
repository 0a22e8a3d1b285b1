"""Pydantic schemas for the agent action-group envelope.

The calling agent sends every tool parameter as a string inside a
``parameters`` list and expects the tool result back as a JSON string
wrapped in ``functionResponse.responseBody.TEXT.body``.
"""

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field


class AgentParameter(BaseModel):
    """A single named tool parameter."""

    name: str
    type: str = "string"
    value: str = ""


class AgentEvent(BaseModel):
    """Inbound tool invocation."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    action_group: str = Field("", alias="actionGroup")
    function: str = ""
    parameters: List[AgentParameter] = Field(default_factory=list)

    def params(self) -> Dict[str, str]:
        """Unwrap the parameter list into a string-keyed dict (last one wins)."""
        return {p.name: p.value for p in self.parameters}


class TextBody(BaseModel):
    body: str


class ResponseBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: TextBody = Field(..., alias="TEXT")


class FunctionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    response_body: ResponseBody = Field(..., alias="responseBody")


class AgentResponse(BaseModel):
    """Outbound envelope carrying the tool's JSON result string."""

    model_config = ConfigDict(populate_by_name=True)

    action_group: str = Field(..., alias="actionGroup")
    function: str
    function_response: FunctionResponse = Field(..., alias="functionResponse")

    @classmethod
    def wrap(cls, event: AgentEvent, body: str) -> "AgentResponse":
        return cls(
            action_group=event.action_group,
            function=event.function,
            function_response=FunctionResponse(
                response_body=ResponseBody(text=TextBody(body=body)),
            ),
        )

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)

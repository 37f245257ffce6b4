from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Action(str, Enum):
    RUN = "run"
    GET_ALL_PROPERTY_NAMES = "getAllPropertyNames"
    INSPECT = "inspect"


class WireModel(BaseModel):
    # Worker payloads use camelCase keys; attributes stay snake_case
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Request(WireModel):
    action: Action = Field(description="Operation requested of the worker")
    code: str = Field(description="Code the worker evaluates for this action")

    def to_wire(self) -> list[str]:  # type: ignore[override]
        """Encode as the ``[action, code]`` pair the worker expects."""
        return [self.action.value, self.code]


class ExecutionResult(WireModel):
    mime: dict[str, str] = Field(
        default_factory=dict, description="MIME representations of the result"
    )


class NameListResult(WireModel):
    names: list[str] = Field(default_factory=list, description="All property names")


class Inspection(WireModel):
    string: str = Field(default="", description="String representation")
    type: str = Field(default="", description="Javascript type")
    constructor_list: Optional[list[str]] = Field(
        default=None, description="Constructors, most-derived first"
    )
    length: Optional[Union[int, float]] = Field(
        default=None, description="Length property, if any"
    )


class InspectionReply(WireModel):
    inspection: Inspection


class ErrorResult(WireModel):
    ename: str = Field(default="", description="Error name")
    evalue: str = Field(default="", description="Error value")
    traceback: list[str] = Field(default_factory=list, description="Error traceback")


class Documentation(WireModel):
    description: str
    usage: Optional[str] = None
    url: str


class CompletionResult(WireModel):
    matches: list[str] = Field(
        default_factory=list, alias="list", description="Candidate replacements"
    )
    code: str
    cursor_pos: int
    matched_text: str = ""
    cursor_start: int
    cursor_end: int


class InspectionResult(WireModel):
    code: str
    cursor_pos: int
    matched_text: str = ""
    string: str = ""
    type: str = ""
    constructor_list: Optional[list[str]] = None
    length: Optional[Union[int, float]] = None
    doc: Optional[Documentation] = None


class WorkerError(Exception):
    """Error reported by the worker while running a request."""

    def __init__(self, error: ErrorResult) -> None:
        super().__init__(f"{error.ename}: {error.evalue}")
        self.error = error


Reply = Union[ExecutionResult, NameListResult, InspectionReply, ErrorResult]


def parse_reply(action: Action, data: Any) -> Reply:
    """Parse a worker reply for a request of the given action.

    Args:
        action: Action of the request this reply answers
        data: Decoded reply payload

    Returns:
        ``ErrorResult`` if the payload carries an ``error`` key, otherwise
        the success model for ``action``

    Raises:
        ValueError: If the payload is not an object or fails validation
    """
    if not isinstance(data, dict):
        raise ValueError(f"Reply must be an object, got {type(data).__name__}")

    if "error" in data:
        return ErrorResult.model_validate(data["error"] or {})

    reply_classes: dict[Action, type[Reply]] = {
        Action.RUN: ExecutionResult,
        Action.GET_ALL_PROPERTY_NAMES: NameListResult,
        Action.INSPECT: InspectionReply,
    }

    return reply_classes[action].model_validate(data)

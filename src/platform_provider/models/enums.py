"""
Enums shared across the executor and polling layers.
"""

from enum import Enum, Flag, auto


class HttpOption(Flag):
    """
    Call-time behavior flags for a single executor request.

    Combine with `|`, e.g. HttpOption.ALLOW_404 | HttpOption.YAML_BODY.
    """

    NONE = 0
    ALLOW_404 = auto()  # Treat 404 as success; caller branches on the status
    YAML_BODY = auto()  # Send the body as application/x-yaml instead of JSON


class BodyEncoding(str, Enum):
    JSON = "application/json"
    YAML = "application/x-yaml"

    @property
    def content_type(self) -> str:
        return self.value


class DecisionKind(str, Enum):
    """Outcome of a single probe attempt."""

    RETRY = "retry"
    SUCCEED = "succeed"
    FAIL = "fail"


class CompletionState(str, Enum):
    """Terminal states reported by build and action status endpoints."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"

"""
Request and outcome models for the HTTP executor.

Both are transient: a RequestDescriptor is built per call and an Outcome
is returned from it; neither outlives the resource operation.
"""

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

from platform_provider.models.enums import BodyEncoding, HttpOption

T = TypeVar("T")


@dataclass(frozen=True)
class RequestDescriptor:
    """
    Everything the executor needs to issue one request.

    Attributes:
        method: HTTP verb
        path: Server-relative path with identifiers already interpolated
        body: None, a JSON-serializable value / pydantic model, or a
            pre-encoded YAML string (with HttpOption.YAML_BODY)
        options: Call-time behavior flags
    """

    method: str
    path: str
    body: Any = None
    options: HttpOption = HttpOption.NONE

    @property
    def encoding(self) -> BodyEncoding:
        if HttpOption.YAML_BODY in self.options:
            return BodyEncoding.YAML
        return BodyEncoding.JSON

    def allows(self, status: int) -> bool:
        """True if a non-2xx status is explicitly allowed for this call."""
        return status == 404 and HttpOption.ALLOW_404 in self.options


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """
    Classified result of one executor call.

    Invariant: ok is False on transport failure (status == -1), on a
    non-2xx status outside the allow-list, and on a decode failure of a
    2xx body. `result` is only set when ok, the status was 2xx and a
    result type was supplied.
    """

    ok: bool
    status: int
    result: Optional[T] = None

    @property
    def transport_failed(self) -> bool:
        return self.status == -1

    @property
    def not_found(self) -> bool:
        return self.status == 404

    def __iter__(self):
        # Allows `ok, status = await executor.request(...)`
        yield self.ok
        yield self.status

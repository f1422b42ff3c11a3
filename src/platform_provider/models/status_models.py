"""
Status payloads decoded by the polling protocols.

Only the fields the protocols act on are modelled; everything else in the
platform's responses is ignored.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ReadyStatus(BaseModel):
    """Generic `{status}` body returned by runtimes, services, networks..."""

    status: str = Field(default="", description="Lifecycle status, 'ready' once usable")

    @property
    def is_ready(self) -> bool:
        return self.status.lower() == "ready"


class CompletionStatus(BaseModel):
    """
    Base for long-running jobs that end in 'succeeded' or 'failed'.

    Subclasses name the field that carries the failure detail.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    status: str = Field(default="", description="pending, running, succeeded, failed...")

    def failure_detail(self) -> str:
        return ""


class BuildStatus(CompletionStatus):
    """Contract build status; compile errors are reported on failure."""

    compile_error: str = Field(default="", alias="compileError")

    def failure_detail(self) -> str:
        return self.compile_error


class ActionStatus(CompletionStatus):
    """Contract action (deploy, create API...) status."""

    error: str = Field(default="", description="Error text when status is 'failed'")

    def failure_detail(self) -> str:
        return self.error


class VerifierStatus(BaseModel):
    type: str = ""
    value: str = ""


class OrgStatus(BaseModel):
    name: str = ""
    registered: bool = False
    did: str = ""
    id: str = ""
    verifiers: list[VerifierStatus] = Field(default_factory=list)


class NodeStatus(BaseModel):
    name: str = ""
    registered: bool = False
    id: str = ""


class RegistrationStatus(BaseModel):
    """
    Combined status of the two self-registering sub-resources.

    The organization must be registered before the node.
    """

    org: OrgStatus = Field(default_factory=OrgStatus)
    node: NodeStatus = Field(default_factory=NodeStatus)

    @property
    def registered(self) -> bool:
        return self.org.registered and self.node.registered

    def to_result(self) -> Optional["RegistrationResult"]:
        """Outputs for the caller, None until both are registered."""
        if not self.registered:
            return None
        return RegistrationResult(
            org_id=self.org.id,
            org_did=self.org.did,
            org_verifiers=frozenset(v.value for v in self.org.verifiers),
            node_id=self.node.id,
        )


class RegistrationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    org_id: str
    org_did: str
    org_verifiers: frozenset[str] = Field(default_factory=frozenset)
    node_id: str


class RegistrationPaths(BaseModel):
    """Endpoints driving one registration session."""

    model_config = ConfigDict(frozen=True)

    status: str = Field(..., description="GET: combined org/node status")
    org: str = Field(..., description="POST: register the organization")
    node: str = Field(..., description="POST: register the node")

    @classmethod
    def for_namespace(cls, base: str) -> "RegistrationPaths":
        """Paths under a namespace API root, e.g. /endpoint/env/svc/rest/api/v1."""
        base = base.rstrip("/")
        return cls(
            status=f"{base}/status",
            org=f"{base}/network/organizations/self",
            node=f"{base}/network/nodes/self",
        )

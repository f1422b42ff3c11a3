"""
Data models for the executor and polling protocols.
"""

from platform_provider.models.enums import (
    BodyEncoding,
    CompletionState,
    DecisionKind,
    HttpOption,
)
from platform_provider.models.http_models import Outcome, RequestDescriptor
from platform_provider.models.status_models import (
    ActionStatus,
    BuildStatus,
    CompletionStatus,
    NodeStatus,
    OrgStatus,
    ReadyStatus,
    RegistrationPaths,
    RegistrationResult,
    RegistrationStatus,
    VerifierStatus,
)

__all__ = [
    "BodyEncoding",
    "CompletionState",
    "DecisionKind",
    "HttpOption",
    "Outcome",
    "RequestDescriptor",
    "ActionStatus",
    "BuildStatus",
    "CompletionStatus",
    "NodeStatus",
    "OrgStatus",
    "ReadyStatus",
    "RegistrationPaths",
    "RegistrationResult",
    "RegistrationStatus",
    "VerifierStatus",
]

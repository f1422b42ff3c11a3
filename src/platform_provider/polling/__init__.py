"""
Status-polling protocols built on the executor and the retry engine.

Components:
- StatusPoller: wait_for_ready / wait_for_removal / wait_for_build /
  wait_for_action / wait_for_registration
- probes: ReadyProbe, RemovalProbe, CompletionProbe, RegistrationProbe
"""

from platform_provider.polling.poller import StatusPoller
from platform_provider.polling.probes import (
    CompletionProbe,
    ReadyProbe,
    RegistrationProbe,
    RemovalProbe,
)

__all__ = [
    "StatusPoller",
    "CompletionProbe",
    "ReadyProbe",
    "RegistrationProbe",
    "RemovalProbe",
]

"""
Platform Provider reconciliation core.

Bridges declarative resource operations to the platform's REST control plane:
- HTTP request executor with success/allowed-404/error classification
- Retry/poll engine with capped backoff and cooperative cancellation
- Status-polling protocols (ready, removal, build/action completion, registration)

Resource schemas and attribute mapping live in the resource layer built on
top of PlatformResource; this package only executes requests and polls status.
"""

__version__ = "1.1.0"

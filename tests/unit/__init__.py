"""
Unit tests for the Platform Provider.

Test individual components against the scripted mock platform:
- HTTP executor (classification, encoding, rate limiting, cancellation)
- Retry engine (termination, cancellation, bounds)
- Status-polling protocols (ready, removal, build/action, registration)
- Resource lifecycle helpers
"""

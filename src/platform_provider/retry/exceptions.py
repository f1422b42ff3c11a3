"""
Retry engine exceptions.

The engine distinguishes three terminal failures so that callers can word
their diagnostics differently:

- ProbeFailed: the remote object reached a state it will never leave
  ("build failed", "GET returned 500")
- RetryTimeout: the engine's own bound was exceeded ("gave up waiting")
- RetryCancelled: the operation context was cancelled or hit its deadline
"""


class RetryError(Exception):
    """
    Base exception for all terminal retry-session failures.

    Attributes:
        session_name: Name of the retry session (e.g. "ready-check /api/v1/runtimes/r1")
        attempts: Number of probe invocations made
        progress: Last progress annotation set by the probe
    """

    def __init__(self, message: str, session_name: str, attempts: int, progress: str = ""):
        super().__init__(message)
        self.message = message
        self.session_name = session_name
        self.attempts = attempts
        self.progress = progress


class ProbeFailed(RetryError):
    """
    Raised when a probe reports a terminal failure.

    Attributes:
        error: The exception supplied with the probe's Fail decision
    """

    def __init__(self, session_name: str, attempts: int, error: Exception, progress: str = ""):
        super().__init__(
            f"{session_name} failed on attempt {attempts}: {error}",
            session_name=session_name,
            attempts=attempts,
            progress=progress,
        )
        self.error = error


class RetryTimeout(RetryError):
    """
    Raised when a session exceeds its maximum duration or attempt count
    while the probe still wants to retry.

    Attributes:
        last_reason: The probe's most recent retry reason
    """

    def __init__(self, session_name: str, attempts: int, elapsed: float, last_reason: str = "", progress: str = ""):
        super().__init__(
            f"timed out waiting for {session_name} after {attempts} attempts ({elapsed:.1f}s)",
            session_name=session_name,
            attempts=attempts,
            progress=progress,
        )
        self.elapsed = elapsed
        self.last_reason = last_reason


class RetryCancelled(RetryError):
    """Raised when the operation context is cancelled between attempts."""

    def __init__(self, session_name: str, attempts: int, reason: str, progress: str = ""):
        message = f"{session_name}: {reason}"
        if progress:
            message = f"{message} {progress}"
        super().__init__(message, session_name=session_name, attempts=attempts, progress=progress)
        self.reason = reason

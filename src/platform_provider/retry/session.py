"""
Retry session state.

A RetrySession lives for exactly one RetryEngine.run() call. The engine
owns the attempt counter; the probe may only write the progress
annotation.
"""

import time
from dataclasses import dataclass, field


@dataclass
class RetrySession:
    """
    Mutable state of one polling loop.

    Attributes:
        name: Session name for logging and error messages
        attempt: Current attempt number (1-indexed)
        progress: Short operator-facing annotation set by the probe,
            e.g. "(waiting for completion - status: pending)"
        started_at: time.monotonic() when the session began
    """

    name: str
    attempt: int = 1
    progress: str = ""
    started_at: float = field(default_factory=time.monotonic)

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.started_at

    def __post_init__(self) -> None:
        if self.attempt < 1:
            raise ValueError("attempt must be >= 1")

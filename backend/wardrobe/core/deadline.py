"""
Per-request time budget for chained remote calls.
"""
import time
from typing import Type

from wardrobe.core.exceptions import WardrobeError


class Deadline:
    """Monotonic deadline shared by every remote call of one request."""

    def __init__(self, seconds: float):
        self.seconds = seconds
        self.expires_at = time.monotonic() + seconds

    def remaining(self) -> float:
        """Seconds left in the budget (never negative)."""
        return max(0.0, self.expires_at - time.monotonic())

    def expired(self) -> bool:
        return self.remaining() <= 0

    def timeout_for(self, call_timeout: float) -> float:
        """Timeout for a single call: its own limit capped by the budget left."""
        return min(call_timeout, self.remaining())

    def check(self, step: str, error_cls: Type[WardrobeError]) -> None:
        """
        Raise ``error_cls`` if the budget is exhausted before ``step`` starts.

        Args:
            step: Human-readable name of the step about to run
            error_cls: Error category the step reports on failure
        """
        if self.expired():
            raise error_cls(
                f"Request deadline of {self.seconds:g}s exceeded before {step}."
            )

from __future__ import annotations


class RateLimiterError(Exception):
    pass


class AdmissionTimedOut(RateLimiterError, TimeoutError):
    """
    acquire() could not be admitted before its deadline.
    """

    def __init__(self, priority: int, waited_s: float) -> None:
        super().__init__(f"Admission timed out after {waited_s:.3f}s (priority={priority})")
        self.priority = priority
        self.waited_s = waited_s


class AdmissionCancelled(RateLimiterError):
    """
    The caller's cancel event was set while it was waiting for admission.
    """

    def __init__(self, priority: int) -> None:
        super().__init__(f"Admission cancelled (priority={priority})")
        self.priority = priority

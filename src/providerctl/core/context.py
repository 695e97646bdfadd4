#!/usr/bin/env python3
"""
PROVIDERCTL OPERATION CONTEXT
-----------------------------
Carries cancellation and deadline for calls that reach the cluster.
Owned by the caller and threaded explicitly through every inventory call;
the transformation pipeline itself never needs one.

Author: ProviderCtl Team
Date: 2026-10-17
"""

import threading
import time
from dataclasses import dataclass, field
from typing import Optional

from providerctl.core.errors import OperationCancelledError


@dataclass
class OperationContext:
    deadline: Optional[float] = None       # Absolute time.monotonic() value, None = no deadline
    cancelled: threading.Event = field(default_factory=threading.Event)

    @classmethod
    def with_timeout(cls, seconds: float) -> "OperationContext":
        return cls(deadline=time.monotonic() + seconds)

    def cancel(self):
        self.cancelled.set()

    def timeout(self) -> Optional[float]:
        """Seconds left before the deadline, for transport-level timeouts."""
        if self.deadline is None:
            return None
        return max(self.deadline - time.monotonic(), 0.0)

    def check(self):
        if self.cancelled.is_set():
            raise OperationCancelledError("Operation cancelled")
        if self.deadline is not None and time.monotonic() >= self.deadline:
            raise OperationCancelledError("Operation deadline exceeded")

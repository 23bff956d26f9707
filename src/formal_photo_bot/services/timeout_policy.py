"""Revision window deadlines."""

from dataclasses import dataclass
from datetime import datetime, timedelta


@dataclass(frozen=True)
class RevisionTimeoutPolicy:
    """Computes and checks the absolute revision deadline.

    The deadline is stored with the session when a result is delivered and
    only checked when the next text event arrives; nothing sweeps expired
    sessions in the background.
    """

    window: timedelta

    def deadline_from(self, delivered_at: datetime) -> datetime:
        """Return the deadline for a result delivered at ``delivered_at``."""
        return delivered_at + self.window

    def is_expired(self, deadline: datetime | None, now: datetime) -> bool:
        """Return true once ``now`` is strictly past the deadline."""
        if deadline is None:
            return False
        return now > deadline

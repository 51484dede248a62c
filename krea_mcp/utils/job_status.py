from __future__ import annotations

from typing import Any

from ..shard.enums import JobStatus

TERMINAL_STATUSES: frozenset[str] = frozenset(s.value for s in (JobStatus.COMPLETED, JobStatus.FAILED, JobStatus.CANCELLED))


def normalize_status(value: Any) -> str:
    """Lower-case a vendor status; anything that is not a string becomes ``unknown``."""
    if not isinstance(value, str):
        return JobStatus.UNKNOWN.value
    return value.lower()


def is_terminal_status(status: str) -> bool:
    """True for completed/failed/cancelled. Expects an already normalized status."""
    return status in TERMINAL_STATUSES


__all__ = ["TERMINAL_STATUSES", "normalize_status", "is_terminal_status"]

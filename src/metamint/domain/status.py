"""Policy status vocabulary and publication states.

The policy status is a field value carried inside the schema descriptor.
Publication state is derived: only the ``Published`` status triggers a
content write and a mint.
"""

from __future__ import annotations

from enum import StrEnum


class PolicyStatus(StrEnum):
    """Ordered lifecycle of an insured policy."""

    DRAFT = "Draft"
    UNDERWRITTEN = "Underwritten"
    PUBLISHED = "Published"
    CLAIMED = "Claimed"
    PAID_OUT = "PaidOut"


class PublicationState(StrEnum):
    """Pipeline state for a single descriptor.

    ``PUBLISHING`` only exists while a publish call is in flight and
    ``FAILED`` is only ever reported, never stored.
    """

    DRAFT = "draft"
    PUBLISHING = "publishing"
    PUBLISHED = "published"
    FAILED = "failed"


STATUS_ORDER: tuple[str, ...] = tuple(s.value for s in PolicyStatus)


def is_publish_event(status: str | None) -> bool:
    """True when a submitted status value is the distinguished publish status."""
    return status == PolicyStatus.PUBLISHED


def state_for_status(status: str | None) -> PublicationState:
    """Map a stored policy status onto the pipeline state it implies.

    Statuses at or after ``Published`` in :data:`STATUS_ORDER` (``Claimed``,
    ``PaidOut``) describe a policy that was published. Anything earlier,
    missing, or outside the vocabulary is a draft.
    """
    if status not in STATUS_ORDER:
        return PublicationState.DRAFT
    if STATUS_ORDER.index(status) >= STATUS_ORDER.index(PolicyStatus.PUBLISHED):
        return PublicationState.PUBLISHED
    return PublicationState.DRAFT

"""
Issue status workflow.

    pending -> under_review -> approved -> in_progress -> resolved

Forward moves along the main line may skip states. rejected and duplicate
can be entered from any non-terminal state. resolved, rejected and
duplicate are terminal.
"""

from backend.app.models.issue import IssueStatus

MAIN_LINE: tuple[str, ...] = (
    IssueStatus.PENDING.value,
    IssueStatus.UNDER_REVIEW.value,
    IssueStatus.APPROVED.value,
    IssueStatus.IN_PROGRESS.value,
    IssueStatus.RESOLVED.value,
)

CLOSING_STATUSES: frozenset[str] = frozenset({
    IssueStatus.REJECTED.value,
    IssueStatus.DUPLICATE.value,
})

TERMINAL_STATUSES: frozenset[str] = CLOSING_STATUSES | {IssueStatus.RESOLVED.value}


def is_terminal(status: str) -> bool:
    return status in TERMINAL_STATUSES


def can_transition(current: str, requested: str) -> bool:
    """
    Whether the workflow allows moving from current to requested.

    Staying in the same status is always allowed; callers treat it as a
    no-op.
    """
    if current == requested:
        return True
    if is_terminal(current):
        return False
    if requested in CLOSING_STATUSES:
        return True
    if current in MAIN_LINE and requested in MAIN_LINE:
        return MAIN_LINE.index(requested) > MAIN_LINE.index(current)
    return False


def allowed_next_statuses(current: str) -> list[str]:
    """Statuses reachable in one step from current, excluding current itself."""
    return [
        status.value
        for status in IssueStatus
        if status.value != current and can_transition(current, status.value)
    ]

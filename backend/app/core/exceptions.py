"""Custom exception classes for CivicFix application."""


class CivicFixException(Exception):
    """Base exception for all CivicFix-specific errors."""

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(self.message)


# Validation errors

class InvalidVoteTypeError(CivicFixException):
    """Raised when a vote direction is neither upvote nor downvote."""

    def __init__(self, vote_type: object):
        super().__init__(
            message="Invalid vote type",
            details=f"Expected 'upvote' or 'downvote', got {vote_type!r}"
        )
        self.vote_type = vote_type


class InvalidStatusTransitionError(CivicFixException):
    """Raised when a status change is not allowed by the issue workflow."""

    def __init__(self, current: str, requested: str, allowed: list[str]):
        super().__init__(
            message=f"Cannot change status from {current} to {requested}",
            details=(
                f"Allowed next statuses: {', '.join(allowed)}"
                if allowed
                else f"{current} is a final status"
            )
        )
        self.current = current
        self.requested = requested
        self.allowed = allowed


class InvalidCategoryError(CivicFixException):
    """Raised when an issue references an unknown or inactive category."""

    def __init__(self, category: object):
        super().__init__(
            message="Invalid category",
            details=f"No active category matches {category!r}"
        )
        self.category = category


class InvalidParentCommentError(CivicFixException):
    """Raised when a reply targets a comment that cannot be replied to."""

    def __init__(self, parent_id: int):
        super().__init__(
            message="Invalid parent comment",
            details="The parent comment must exist, belong to the same issue and be top-level"
        )
        self.parent_id = parent_id


class InvalidSortFieldError(CivicFixException):
    """Raised when a listing is sorted by an unsupported field."""

    def __init__(self, sort_by: str, allowed: list[str]):
        super().__init__(
            message=f"Cannot sort by {sort_by}",
            details=f"Allowed sort fields: {', '.join(allowed)}"
        )
        self.sort_by = sort_by


# Not-found errors

class IssueNotFoundError(CivicFixException):
    """Raised when an issue is not found."""

    def __init__(self, issue_id: int):
        super().__init__(
            message="Issue not found",
            details=f"Issue {issue_id} does not exist or has been removed"
        )
        self.issue_id = issue_id


class UserNotFoundError(CivicFixException):
    """Raised when a user is not found."""

    def __init__(self, user_id: int):
        super().__init__(message=f"User not found: {user_id}")
        self.user_id = user_id


class CategoryNotFoundError(CivicFixException):
    """Raised when a category is not found."""

    def __init__(self, category_id: int):
        super().__init__(message="Category not found")
        self.category_id = category_id


class NotificationNotFoundError(CivicFixException):
    """Raised when a notification is not found for the caller."""

    def __init__(self, notification_id: int):
        super().__init__(message="Notification not found")
        self.notification_id = notification_id


# Authorization errors

class AuthenticationError(CivicFixException):
    """Raised when the caller is not authenticated."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message=message)


class AccountInactiveError(CivicFixException):
    """Raised when a suspended, banned or deleted user tries to sign in."""

    def __init__(self, status: str):
        super().__init__(
            message="Account is suspended or deactivated",
            details=f"Account status: {status}"
        )
        self.status = status


class PermissionDeniedError(CivicFixException):
    """Raised when the caller lacks the role or ownership an action needs."""

    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(message=message)


# Conflict errors

class EmailAlreadyRegisteredError(CivicFixException):
    """Raised when registering an e-mail address that is taken."""

    def __init__(self, email: str):
        super().__init__(message="User with this email already exists")
        self.email = email


class CategoryAlreadyExistsError(CivicFixException):
    """Raised when a category name is taken."""

    def __init__(self, name: str):
        super().__init__(message="Category name already exists")
        self.name = name


class VoteConflictError(CivicFixException):
    """
    Raised when the (user, issue) vote key is already taken.

    The voting service catches this and re-applies the toggle; it only
    reaches the client once the retry budget is spent.
    """

    def __init__(self, user_id: int, issue_id: int):
        super().__init__(
            message="Vote could not be recorded",
            details="Concurrent votes from the same user collided, please retry"
        )
        self.user_id = user_id
        self.issue_id = issue_id


# Infrastructure errors

class StorageUnavailableError(CivicFixException):
    """Raised when the persistence layer cannot be reached."""

    def __init__(self, operation: str, original_error: Exception | None = None):
        message = f"Storage error during {operation}"
        if original_error:
            message += f": {str(original_error)}"
        super().__init__(
            message=message,
            details="The database is temporarily unavailable"
        )
        self.operation = operation
        self.original_error = original_error

"""Custom exceptions for split balances."""


class BalanceError(Exception):
    """Base exception for all balance errors."""

    pass


class ConfigurationError(BalanceError):
    """Raised when configuration is invalid or missing."""

    pass


class InvalidArgumentError(BalanceError):
    """Raised when a computation is requested with invalid inputs."""

    pass


class NotFoundError(BalanceError):
    """Base class for records missing from the store."""

    pass


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id, message: str | None = None):
        self.user_id = user_id
        super().__init__(message or f"User {user_id} not found")


class GroupNotFoundError(NotFoundError):
    def __init__(self, group_id, message: str | None = None):
        self.group_id = group_id
        super().__init__(message or f"Group {group_id} not found")


class ExpenseNotFoundError(NotFoundError):
    def __init__(self, expense_id, message: str | None = None):
        self.expense_id = expense_id
        super().__init__(message or f"Expense {expense_id} not found")


class UnauthorizedError(BalanceError):
    """Base class for membership and involvement check failures."""

    pass


class NotGroupMemberError(UnauthorizedError):
    """Raised when the acting user is not a member of the requested group."""

    pass


class ExpensePermissionError(UnauthorizedError):
    """Raised when someone other than the creator or payer deletes an expense."""

    pass

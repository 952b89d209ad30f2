"""Error taxonomy for the progression engine.

The engine has no user-visible error surface. Missing ids and malformed
breakdown input degrade to a no-op that carries one of the codes below, and
negative balances clamp to zero.
"""

from pydantic import ValidationError


class ErrorCode:
    """Error codes attached to no-op outcomes."""

    # Lookup errors
    ERR_QUEST_NOT_FOUND = "ERR_QUEST_NOT_FOUND"
    ERR_CATEGORY_NOT_FOUND = "ERR_CATEGORY_NOT_FOUND"
    ERR_TASK_NOT_FOUND = "ERR_TASK_NOT_FOUND"
    ERR_GOAL_NOT_FOUND = "ERR_GOAL_NOT_FOUND"
    ERR_TEMPLATE_NOT_FOUND = "ERR_TEMPLATE_NOT_FOUND"

    # Input errors
    ERR_INVALID_BREAKDOWN = "ERR_INVALID_BREAKDOWN"

    # State errors
    ERR_NO_PENDING_BONUS = "ERR_NO_PENDING_BONUS"
    ERR_NO_STATE_CHANGE = "ERR_NO_STATE_CHANGE"


class EngineError(Exception):
    """Base class for errors raised inside the engine."""

    code: str = "ERR_UNKNOWN"


class BreakdownValidationError(EngineError):
    """Raised when breakdown descriptors are malformed; the whole batch is rejected."""

    code = ErrorCode.ERR_INVALID_BREAKDOWN

    def __init__(self, message: str, *, validation_error: ValidationError | None = None) -> None:
        super().__init__(message)
        self.validation_error = validation_error

    @property
    def error_count(self) -> int:
        """Number of individual field errors reported by pydantic."""
        if self.validation_error is None:
            return 0
        return self.validation_error.error_count()

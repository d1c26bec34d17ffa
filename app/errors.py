"""Errors raised by the expense and itinerary core.

Route handlers never catch these; exception handlers registered in
``app.main`` turn them into JSON responses with the message as ``detail``.
"""


class ValidationError(ValueError):
    """Invalid input, rejected before anything is written."""

    status_code = 400


class PermissionDenied(ValidationError):
    """The current profile lacks the capability for this operation."""

    status_code = 403


class NotFound(ValidationError):
    status_code = 404


class ConsistencyError(Exception):
    """Stored splits of an expense do not add up to its amount."""

    def __init__(self, expense_id: str, amount, split_total):
        self.expense_id = expense_id
        self.amount = amount
        self.split_total = split_total
        super().__init__(
            f"Splits of expense {expense_id} sum to {split_total}, expected {amount}"
        )


class CompensationError(RuntimeError):
    """A failed write could not be undone and left the database inconsistent."""

"""Custom exception classes."""
from typing import Dict, Optional


class ValidationError(Exception):
    """Raised when signup fields fail validation."""

    def __init__(self, errors: Dict[str, str], message: Optional[str] = None):
        self.errors = dict(errors)
        if message is None:
            fields = ", ".join(sorted(self.errors))
            message = f"Invalid signup fields: {fields}"
        super().__init__(message)


class SubmissionError(Exception):
    """Raised when the submission round trip fails before registration."""
    pass


class PersistenceError(Exception):
    """Raised when store state cannot be read from or written to storage."""
    pass

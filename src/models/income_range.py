"""Income range data model."""
from dataclasses import dataclass


@dataclass(frozen=True)
class IncomeRange:
    """One bracket of the income range catalog."""

    value: str
    label: str

    def __post_init__(self):
        """Validate income range data after initialization."""
        if not self.value or not self.value.strip():
            raise ValueError("Income range value cannot be empty")

        if not self.label or not self.label.strip():
            raise ValueError("Income range label cannot be empty")

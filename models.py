"""
Pydantic data models for the Chameleon Sum API.

The only persisted entity is a recorded sum. The store never recomputes
``total`` after insert, so the writer builds rows through
``SumRecord.from_operands`` to keep ``total == first_number + second_number``.
"""

from typing import Optional

from pydantic import BaseModel, Field


class SumRecord(BaseModel):
    """One row of the ``sums`` table."""
    id: Optional[int] = Field(None, description="Surrogate key, assigned by SQLite on insert")
    first_number: int
    second_number: int
    total: int

    @classmethod
    def from_operands(cls, a: int, b: int) -> "SumRecord":
        """Build an unsaved record for ``a + b``."""
        return cls(first_number=a, second_number=b, total=a + b)

    def as_row(self) -> tuple[int, int, int]:
        return (self.first_number, self.second_number, self.total)

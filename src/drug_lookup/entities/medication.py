"""User medication list entities."""

import math
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class UserMedication:
    """A drug saved on a user's medication list."""

    user_id: str
    identifier: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class MedicationPage(Generic[T]):
    """One page of a user's medication list plus its pagination metadata.

    Attributes:
        items: Page contents, in store order
        current_page: 1-based page number
        per_page: Requested page size
        total: Total number of rows across all pages
    """

    items: tuple[T, ...]
    current_page: int
    per_page: int
    total: int

    @property
    def last_page(self) -> int:
        """Number of the last page (at least 1)."""
        return max(1, math.ceil(self.total / self.per_page))

    def with_items(self, items: "list[U] | tuple[U, ...]") -> "MedicationPage[U]":
        """Return a page with new contents and the same pagination metadata."""
        return replace(self, items=tuple(items))  # type: ignore[return-value]

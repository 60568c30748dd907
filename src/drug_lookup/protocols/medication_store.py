"""User medication store protocol.

Relational storage of users' saved medications lives outside the lookup
pipeline; the services only see this interface.
"""

from typing import Protocol, runtime_checkable

from drug_lookup.entities import MedicationPage, UserMedication


@runtime_checkable
class UserMedicationStore(Protocol):
    """Protocol for per-user medication list storage."""

    def paginate(self, user_id: str, page: int, per_page: int) -> MedicationPage[str]:
        """Return one page of the user's saved identifiers, oldest first."""
        ...

    def find(self, user_id: str, identifier: str) -> UserMedication | None:
        """Return the saved row for an identifier, if any."""
        ...

    def add(self, user_id: str, identifier: str) -> UserMedication:
        """Save an identifier on the user's list."""
        ...

    def remove(self, user_id: str, identifier: str) -> bool:
        """Remove an identifier from the user's list.

        Returns:
            True if a row was removed, False if none existed
        """
        ...

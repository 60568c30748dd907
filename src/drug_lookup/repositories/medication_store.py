"""In-process implementation of UserMedicationStore."""

import threading

from drug_lookup.entities import MedicationPage, UserMedication


class InMemoryMedicationStore:
    """Per-user medication lists held in memory, in insertion order."""

    def __init__(self) -> None:
        self._rows: dict[str, dict[str, UserMedication]] = {}
        self._lock = threading.Lock()

    def paginate(self, user_id: str, page: int, per_page: int) -> MedicationPage[str]:
        with self._lock:
            identifiers = list(self._rows.get(user_id, {}))
        start = (page - 1) * per_page
        return MedicationPage(
            items=tuple(identifiers[start : start + per_page]),
            current_page=page,
            per_page=per_page,
            total=len(identifiers),
        )

    def find(self, user_id: str, identifier: str) -> UserMedication | None:
        with self._lock:
            return self._rows.get(user_id, {}).get(identifier)

    def add(self, user_id: str, identifier: str) -> UserMedication:
        medication = UserMedication(user_id=user_id, identifier=identifier)
        with self._lock:
            self._rows.setdefault(user_id, {})[identifier] = medication
        return medication

    def remove(self, user_id: str, identifier: str) -> bool:
        with self._lock:
            return self._rows.get(user_id, {}).pop(identifier, None) is not None

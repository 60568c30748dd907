"""Error kinds raised by the lookup pipeline.

The core raises these and never renders user-facing messages itself;
the handler layer maps each kind to an HTTP status.
"""


class DrugLookupError(Exception):
    """Base class for all drug lookup errors."""


class UpstreamUnavailable(DrugLookupError):
    """The terminology service could not answer a search request."""


class NotFound(DrugLookupError):
    """No detail record exists for an identifier."""

    def __init__(self, identifier: str, reason: str = "No drug details found") -> None:
        self.identifier = identifier
        self.reason = reason
        super().__init__(f"{reason}: {identifier}")


class DetailUnavailable(DrugLookupError):
    """A stored medication row could not be resolved during enrichment."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"Drug details unavailable for saved medication: {identifier}")


class InvalidIdentifier(DrugLookupError):
    """Upstream validation rejected a caller-supplied identifier."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"Invalid or inactive RxCUI: {identifier}")


class MedicationAlreadyExists(DrugLookupError):
    """The identifier is already on the user's medication list."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"Medication already exists for this user: {identifier}")


class MedicationNotFound(DrugLookupError):
    """The identifier is not on the user's medication list."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"Medication not found for this user or already deleted: {identifier}")

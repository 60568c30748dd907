"""Drug record domain entity."""

from dataclasses import dataclass
from typing import Any


def unique_in_order(values: Any) -> tuple[str, ...]:
    """Deduplicate names while keeping first-seen order."""
    return tuple(dict.fromkeys(values))


@dataclass(frozen=True, eq=False)
class DrugRecord:
    """Normalized drug concept assembled from terminology data.

    A record is always fully populated; lookups that cannot produce every
    field raise instead of returning a partial record.

    Attributes:
        identifier: RxCUI of the concept
        name: Canonical display name
        base_ingredient_names: Deduplicated ingredient base names, upstream order
        dose_form_names: Deduplicated dose form group names, upstream order
    """

    identifier: str
    name: str
    base_ingredient_names: tuple[str, ...] = ()
    dose_form_names: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.identifier:
            raise ValueError("DrugRecord identifier must not be empty")
        if not self.name:
            raise ValueError("DrugRecord name must not be empty")
        object.__setattr__(self, "base_ingredient_names", unique_in_order(self.base_ingredient_names))
        object.__setattr__(self, "dose_form_names", unique_in_order(self.dose_form_names))

    # Name collections are ordered sets: order is kept but not compared.
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DrugRecord):
            return NotImplemented
        return (
            self.identifier == other.identifier
            and self.name == other.name
            and set(self.base_ingredient_names) == set(other.base_ingredient_names)
            and set(self.dose_form_names) == set(other.dose_form_names)
        )

    def __hash__(self) -> int:
        return hash(
            (
                self.identifier,
                self.name,
                frozenset(self.base_ingredient_names),
                frozenset(self.dose_form_names),
            )
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON payload shape used by the cache and the API."""
        return {
            "rxcui": self.identifier,
            "name": self.name,
            "baseNames": list(self.base_ingredient_names),
            "doseForms": list(self.dose_form_names),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DrugRecord":
        """Rebuild a record from its payload shape."""
        return cls(
            identifier=data["rxcui"],
            name=data["name"],
            base_ingredient_names=tuple(data.get("baseNames") or ()),
            dose_form_names=tuple(data.get("doseForms") or ()),
        )

"""RxNorm terminology client using the NLM RxNav REST API.

All knowledge of RxNav's nested response shapes lives here. The rest of
the package only sees candidate identifiers, DrugRecord values and a
validity flag.

Endpoints used:
- /drugs.json?name=...                  name search, grouped by term type
- /rxcui/{rxcui}/historystatus.json     status history with definitional features
- /rxcui/{rxcui}/properties.json        concept properties

API documentation: https://lhncbc.nlm.nih.gov/RxNav/APIs/RxNormAPIs.html
"""

import logging
from typing import Any
from urllib.parse import quote

import httpx

from drug_lookup.config import settings
from drug_lookup.entities import DrugRecord
from drug_lookup.entities.drug_record import unique_in_order
from drug_lookup.errors import NotFound, UpstreamUnavailable

logger = logging.getLogger(__name__)


class TerminologyClient:
    """Async client for the three RxNav calls the lookup pipeline needs.

    No call is retried: each attempt either succeeds or is reported as a
    failure of the kind the operation defines.

    Example:
        ```python
        client = TerminologyClient.create()
        candidates = await client.search("lipitor")
        record = await client.detail(candidates[0])
        await client.close()
        ```
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        branded_drug_tty: str | None = None,
        candidate_limit: int | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the terminology client.

        Args:
            base_url: RxNav REST base URL. Defaults to settings.rxnorm_base_url.
            timeout: Request timeout in seconds. Defaults to settings.
            branded_drug_tty: Term type of the concept group search reads.
            candidate_limit: Maximum candidates returned by search.
            http_client: Pre-built client (tests inject a mock transport).
        """
        self._base_url = (base_url or settings.rxnorm_base_url).rstrip("/")
        self._timeout = timeout or settings.terminology_timeout
        self._tty = branded_drug_tty or settings.branded_drug_tty
        self._limit = candidate_limit or settings.search_result_limit
        self._client = http_client
        self._owns_client = http_client is None

    @classmethod
    def create(cls, base_url: str | None = None) -> "TerminologyClient":
        """Factory method to create TerminologyClient with defaults.

        Args:
            base_url: RxNav URL. If None, uses settings.

        Returns:
            Configured TerminologyClient
        """
        return cls(base_url=base_url)

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            )
        return self._client

    async def _get_json(self, path: str, params: dict[str, str] | None = None) -> Any:
        """GET a path under the base URL and decode the JSON body.

        Raises:
            httpx.HTTPError: On transport errors, timeouts and non-2xx statuses
            ValueError: If the body is not JSON
        """
        response = await self.client.get(f"{self._base_url}/{path}", params=params)
        response.raise_for_status()
        return response.json()

    async def search(self, name: str) -> list[str]:
        """Find candidate identifiers for a drug name.

        Reads only the first concept group whose term type is the branded
        drug type, keeps upstream order, drops duplicates and returns at
        most the configured number of candidates.

        Args:
            name: Drug name as entered by the caller

        Returns:
            Candidate RxCUIs, possibly empty

        Raises:
            UpstreamUnavailable: If the call fails or the response has no drugGroup
        """
        try:
            data = await self._get_json("drugs.json", params={"name": name})
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("RxNav drugs.json failed for name=%r: %s", name, e)
            raise UpstreamUnavailable(f"Drug search failed: {e}") from e

        drug_group = data.get("drugGroup") if isinstance(data, dict) else None
        if not isinstance(drug_group, dict):
            raise UpstreamUnavailable("Drug search response has no drugGroup")

        # RxNav omits conceptGroup entirely when nothing matches
        concept_groups = drug_group.get("conceptGroup") or []
        if not isinstance(concept_groups, list):
            return []

        branded = next(
            (g for g in concept_groups if isinstance(g, dict) and g.get("tty") == self._tty),
            None,
        )
        if branded is None:
            logger.debug("No %s concept group for name=%r", self._tty, name)
            return []

        properties = branded.get("conceptProperties") or []
        if not isinstance(properties, list):
            return []
        rxcuis = (
            str(prop["rxcui"])
            for prop in properties
            if isinstance(prop, dict) and prop.get("rxcui")
        )
        return list(unique_in_order(rxcuis))[: self._limit]

    async def detail(self, identifier: str) -> DrugRecord:
        """Fetch and normalize the full record for an identifier.

        Response structure:
        {
          "rxcuiStatusHistory": {
            "attributes": {"name": "...", ...},
            "definitionalFeatures": {
              "ingredientAndStrength": [{"baseName": "...", ...}, ...],
              "doseFormGroupConcept": [{"doseFormGroupName": "...", ...}, ...]
            }
          }
        }

        Args:
            identifier: RxCUI to resolve

        Returns:
            Fully populated DrugRecord

        Raises:
            NotFound: If the call fails or the expected structure is absent
        """
        try:
            data = await self._get_json(f"rxcui/{quote(identifier, safe='')}/historystatus.json")
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("RxNav historystatus failed for rxcui=%s: %s", identifier, e)
            raise NotFound(identifier) from e

        history = data.get("rxcuiStatusHistory") if isinstance(data, dict) else None
        if not isinstance(history, dict):
            raise NotFound(identifier)

        attributes = history.get("attributes")
        name = attributes.get("name") if isinstance(attributes, dict) else None
        features = history.get("definitionalFeatures")
        if not name or not isinstance(features, dict):
            raise NotFound(identifier)

        return DrugRecord(
            identifier=identifier,
            name=str(name),
            base_ingredient_names=_pluck(features.get("ingredientAndStrength"), "baseName"),
            dose_form_names=_pluck(features.get("doseFormGroupConcept"), "doseFormGroupName"),
        )

    async def validate(self, identifier: str) -> bool:
        """Check whether an identifier names a current concept.

        Advisory only: every failure mode answers False instead of raising.

        Args:
            identifier: RxCUI to check

        Returns:
            True if RxNav returns properties for exactly this RxCUI
        """
        try:
            data = await self._get_json(f"rxcui/{quote(identifier, safe='')}/properties.json")
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("RxNav properties failed for rxcui=%s: %s", identifier, e)
            return False

        properties = data.get("properties") if isinstance(data, dict) else None
        if not isinstance(properties, dict):
            return False
        return properties.get("rxcui") == identifier

    async def close(self) -> None:
        """Close the async HTTP client if this instance created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None


def _pluck(items: Any, field: str) -> tuple[str, ...]:
    if not isinstance(items, list):
        return ()
    values = (
        item[field]
        for item in items
        if isinstance(item, dict) and isinstance(item.get(field), str) and item[field]
    )
    return unique_in_order(values)

"""Shared fixtures: a scripted RxNav backend and a controllable clock."""

from collections import Counter
from typing import Any

import httpx
import pytest

from drug_lookup.clients import TerminologyClient
from drug_lookup.repositories import InMemoryCacheRepository
from drug_lookup.services import DrugLookupService

BASE_URL = "https://rxnav.test/REST"


def drugs_json(*groups: tuple[str, list[str]]) -> dict:
    """Build a /drugs.json body from (tty, [rxcui, ...]) groups."""
    return {
        "drugGroup": {
            "name": None,
            "conceptGroup": [
                {
                    "tty": tty,
                    "conceptProperties": [
                        {"rxcui": rxcui, "name": f"drug {rxcui}", "tty": tty} for rxcui in rxcuis
                    ],
                }
                for tty, rxcuis in groups
            ],
        }
    }


def history_json(name: str, base_names: list[str], dose_forms: list[str]) -> dict:
    """Build a /historystatus.json body."""
    return {
        "rxcuiStatusHistory": {
            "metaData": {"status": "Active"},
            "attributes": {"name": name, "tty": "SBD"},
            "definitionalFeatures": {
                "ingredientAndStrength": [
                    {"baseName": base, "activeIngredientName": base} for base in base_names
                ],
                "doseFormGroupConcept": [
                    {"doseFormGroupName": form, "doseFormGroupRxcui": "0"} for form in dose_forms
                ],
            },
        }
    }


def properties_json(rxcui: str) -> dict:
    """Build a /properties.json body."""
    return {"properties": {"rxcui": rxcui, "name": f"drug {rxcui}", "tty": "SBD"}}


class FakeRxNav:
    """Scripted RxNav backend for httpx.MockTransport.

    Each mapping value is a JSON body, an int status code, or an
    exception instance to raise as a transport error.
    """

    def __init__(self) -> None:
        self.searches: dict[str, Any] = {}
        self.histories: dict[str, Any] = {}
        self.properties: dict[str, Any] = {}
        self.calls: Counter[str] = Counter()

    def add_drug(self, rxcui: str, name: str, base_names: list[str], dose_forms: list[str]) -> None:
        self.histories[rxcui] = history_json(name, base_names, dose_forms)
        self.properties[rxcui] = properties_json(rxcui)

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix("/REST/")
        if path == "drugs.json":
            name = request.url.params["name"]
            self.calls[f"search:{name}"] += 1
            return self._reply(request, self.searches.get(name, {"drugGroup": {"name": None}}))

        _, rxcui, endpoint = path.split("/")
        if endpoint == "historystatus.json":
            self.calls[f"detail:{rxcui}"] += 1
            return self._reply(request, self.histories.get(rxcui, 404))
        if endpoint == "properties.json":
            self.calls[f"properties:{rxcui}"] += 1
            return self._reply(request, self.properties.get(rxcui, {}))
        return httpx.Response(404)

    @staticmethod
    def _reply(request: httpx.Request, outcome: Any) -> httpx.Response:
        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, int):
            return httpx.Response(outcome, json={"error": "scripted"})
        return httpx.Response(200, json=outcome)


class FakeClock:
    """Manually advanced replacement for time.time."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def rxnav() -> FakeRxNav:
    return FakeRxNav()


@pytest.fixture
def terminology_client(rxnav: FakeRxNav) -> TerminologyClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(rxnav.handler))
    return TerminologyClient(base_url=BASE_URL, http_client=http_client)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> InMemoryCacheRepository:
    return InMemoryCacheRepository(clock=clock)


@pytest.fixture
def lookup_service(terminology_client: TerminologyClient, cache: InMemoryCacheRepository) -> DrugLookupService:
    return DrugLookupService(terminology_client=terminology_client, cache=cache, ttl=86400)

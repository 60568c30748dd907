"""Tests for cache-aside search and detail lookups."""

import pytest

from conftest import drugs_json
from drug_lookup.entities import DrugRecord
from drug_lookup.errors import NotFound, UpstreamUnavailable
from drug_lookup.repositories import InMemoryCacheRepository
from drug_lookup.services import DrugLookupService
from drug_lookup.services.drug_lookup_service import details_cache_key, search_cache_key


@pytest.fixture
def lipitor(rxnav):
    rxnav.searches["lipitor"] = drugs_json(("SBD", ["617310", "617311", "617312"]))
    rxnav.add_drug("617310", "atorvastatin 10 MG Oral Tablet [Lipitor]", ["atorvastatin"], ["Oral Product", "Pill"])
    rxnav.add_drug("617311", "atorvastatin 20 MG Oral Tablet [Lipitor]", ["atorvastatin"], ["Oral Product", "Pill"])
    rxnav.add_drug("617312", "atorvastatin 40 MG Oral Tablet [Lipitor]", ["atorvastatin"], ["Oral Product", "Pill"])
    return rxnav


class RecordingCache(InMemoryCacheRepository):
    """In-memory cache that records delete calls."""

    def __init__(self, clock) -> None:
        super().__init__(clock=clock)
        self.deleted: list[str] = []

    def delete(self, key: str) -> bool:
        self.deleted.append(key)
        return super().delete(key)


class TestSearchByName:
    @pytest.mark.asyncio
    async def test_assembles_records_in_candidate_order(self, lipitor, lookup_service):
        records = await lookup_service.search_by_name("lipitor")

        assert [r.identifier for r in records] == ["617310", "617311", "617312"]
        assert records[0].name == "atorvastatin 10 MG Oral Tablet [Lipitor]"
        assert records[0].base_ingredient_names == ("atorvastatin",)

    @pytest.mark.asyncio
    async def test_repeated_search_hits_cache(self, lipitor, lookup_service):
        first = await lookup_service.search_by_name("lipitor")
        second = await lookup_service.search_by_name("lipitor")

        assert first == second
        assert lipitor.calls["search:lipitor"] == 1
        for rxcui in ("617310", "617311", "617312"):
            assert lipitor.calls[f"detail:{rxcui}"] == 1

    @pytest.mark.asyncio
    async def test_name_is_used_verbatim_as_key(self, lipitor, lookup_service, cache):
        lipitor.searches["Lipitor "] = drugs_json(("SBD", ["617310"]))

        await lookup_service.search_by_name("lipitor")
        await lookup_service.search_by_name("Lipitor ")

        assert lipitor.calls["search:Lipitor "] == 1
        assert cache.get(search_cache_key("lipitor")) is not None
        assert cache.get(search_cache_key("Lipitor ")) is not None

    @pytest.mark.asyncio
    async def test_failed_candidate_is_skipped(self, lipitor, lookup_service):
        del lipitor.histories["617311"]

        records = await lookup_service.search_by_name("lipitor")

        assert [r.identifier for r in records] == ["617310", "617312"]

    @pytest.mark.asyncio
    async def test_partial_result_is_cached(self, lipitor, lookup_service):
        del lipitor.histories["617311"]

        await lookup_service.search_by_name("lipitor")
        records = await lookup_service.search_by_name("lipitor")

        assert len(records) == 2
        assert lipitor.calls["search:lipitor"] == 1
        assert lipitor.calls["detail:617311"] == 1

    @pytest.mark.asyncio
    async def test_missing_branded_group_returns_empty_list(self, rxnav, lookup_service):
        rxnav.searches["aspirin"] = drugs_json(("SCD", ["1191"]))

        assert await lookup_service.search_by_name("aspirin") == []
        assert await lookup_service.search_by_name("aspirin") == []
        assert rxnav.calls["search:aspirin"] == 1

    @pytest.mark.asyncio
    async def test_search_failure_propagates_and_caches_nothing(self, rxnav, lookup_service, cache):
        rxnav.searches["lipitor"] = 500

        with pytest.raises(UpstreamUnavailable):
            await lookup_service.search_by_name("lipitor")
        assert cache.get(search_cache_key("lipitor")) is None

    @pytest.mark.asyncio
    async def test_search_result_expires_after_ttl(self, lipitor, lookup_service, clock):
        await lookup_service.search_by_name("lipitor")
        clock.advance(86400)

        await lookup_service.search_by_name("lipitor")

        assert lipitor.calls["search:lipitor"] == 2

    @pytest.mark.asyncio
    async def test_uses_cached_details_for_candidates(self, lipitor, lookup_service):
        await lookup_service.detail_cached("617310")

        await lookup_service.search_by_name("lipitor")

        assert lipitor.calls["detail:617310"] == 1


class TestDetailCached:
    @pytest.mark.asyncio
    async def test_repeated_lookups_return_identical_records(self, lipitor, lookup_service):
        first = await lookup_service.detail_cached("617310")
        second = await lookup_service.detail_cached("617310")

        assert first == second
        assert first.to_dict() == second.to_dict()
        assert lipitor.calls["detail:617310"] == 1

    @pytest.mark.asyncio
    async def test_record_is_cached_under_identifier_key(self, lipitor, lookup_service, cache):
        record = await lookup_service.detail_cached("617310")

        assert cache.get(details_cache_key("617310")) == record.to_dict()

    @pytest.mark.asyncio
    async def test_failure_leaves_no_cache_entry(self, rxnav, lookup_service, cache):
        with pytest.raises(NotFound):
            await lookup_service.detail_cached("999")

        assert cache.get(details_cache_key("999")) is None

    @pytest.mark.asyncio
    async def test_failure_purges_entry_for_identifier(self, rxnav, terminology_client, clock):
        cache = RecordingCache(clock)
        service = DrugLookupService(terminology_client=terminology_client, cache=cache, ttl=60)

        with pytest.raises(NotFound):
            await service.detail_cached("999")

        assert cache.deleted == [details_cache_key("999")]

    @pytest.mark.asyncio
    async def test_deactivated_drug_is_not_served_after_expiry(self, lipitor, lookup_service, cache, clock):
        await lookup_service.detail_cached("617310")
        del lipitor.histories["617310"]
        clock.advance(86400)

        with pytest.raises(NotFound):
            await lookup_service.detail_cached("617310")
        assert cache.get(details_cache_key("617310")) is None

    @pytest.mark.asyncio
    async def test_expired_entry_triggers_exactly_one_refetch(self, lipitor, lookup_service, clock):
        await lookup_service.detail_cached("617310")
        clock.advance(86401)

        await lookup_service.detail_cached("617310")
        await lookup_service.detail_cached("617310")

        assert lipitor.calls["detail:617310"] == 2

    @pytest.mark.asyncio
    async def test_get_details_propagates_not_found(self, lookup_service):
        with pytest.raises(NotFound):
            await lookup_service.get_details("404")


def test_record_equality_ignores_name_order():
    a = DrugRecord("1", "X", ("a", "b"), ("p", "q"))
    b = DrugRecord("1", "X", ("b", "a"), ("q", "p"))

    assert a == b
    assert hash(a) == hash(b)
    assert a.to_dict() != b.to_dict()


def test_record_requires_identifier_and_name():
    with pytest.raises(ValueError):
        DrugRecord("", "X")
    with pytest.raises(ValueError):
        DrugRecord("1", "")

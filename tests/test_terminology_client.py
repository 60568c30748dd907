"""Unit tests for the RxNav terminology client: parsing, shapes, failures."""

import httpx
import pytest

from conftest import drugs_json, history_json
from drug_lookup.clients import TerminologyClient
from drug_lookup.errors import NotFound, UpstreamUnavailable


class TestSearch:
    """Tests for search."""

    @pytest.mark.asyncio
    async def test_returns_first_five_branded_candidates_in_upstream_order(self, rxnav, terminology_client):
        rxnav.searches["lipitor"] = drugs_json(
            ("SCD", ["1", "2"]),
            ("SBD", ["617310", "617311", "617312", "617313", "617314", "617315"]),
        )

        candidates = await terminology_client.search("lipitor")

        assert candidates == ["617310", "617311", "617312", "617313", "617314"]

    @pytest.mark.asyncio
    async def test_duplicates_are_dropped_before_the_cap(self, rxnav, terminology_client):
        rxnav.searches["advil"] = drugs_json(("SBD", ["9", "9", "3", "9", "4", "5", "6", "7"]))

        candidates = await terminology_client.search("advil")

        assert candidates == ["9", "3", "4", "5", "6"]

    @pytest.mark.asyncio
    async def test_first_branded_group_wins(self, rxnav, terminology_client):
        rxnav.searches["zocor"] = drugs_json(("SBD", ["10", "11"]), ("SBD", ["20", "21"]))

        assert await terminology_client.search("zocor") == ["10", "11"]

    @pytest.mark.asyncio
    async def test_missing_branded_group_yields_no_candidates(self, rxnav, terminology_client):
        rxnav.searches["aspirin"] = drugs_json(("SCD", ["1191"]), ("IN", ["1191"]))

        assert await terminology_client.search("aspirin") == []

    @pytest.mark.asyncio
    async def test_no_match_shape_yields_no_candidates(self, terminology_client):
        # FakeRxNav answers unknown names with {"drugGroup": {"name": null}}
        assert await terminology_client.search("zzzz") == []

    @pytest.mark.asyncio
    async def test_sends_name_as_query_parameter(self, rxnav, terminology_client):
        await terminology_client.search("tylenol pm")

        assert rxnav.calls["search:tylenol pm"] == 1

    @pytest.mark.asyncio
    async def test_server_error_is_upstream_unavailable(self, rxnav, terminology_client):
        rxnav.searches["lipitor"] = 503

        with pytest.raises(UpstreamUnavailable):
            await terminology_client.search("lipitor")

    @pytest.mark.asyncio
    async def test_missing_drug_group_is_upstream_unavailable(self, rxnav, terminology_client):
        rxnav.searches["lipitor"] = {"unexpected": True}

        with pytest.raises(UpstreamUnavailable):
            await terminology_client.search("lipitor")

    @pytest.mark.asyncio
    async def test_timeout_is_upstream_unavailable(self, rxnav, terminology_client):
        rxnav.searches["lipitor"] = httpx.ReadTimeout("timed out")

        with pytest.raises(UpstreamUnavailable):
            await terminology_client.search("lipitor")

    @pytest.mark.asyncio
    async def test_non_json_body_is_upstream_unavailable(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>maintenance</html>")

        client = TerminologyClient(
            base_url="https://rxnav.test/REST",
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        )
        with pytest.raises(UpstreamUnavailable):
            await client.search("lipitor")


class TestDetail:
    """Tests for detail."""

    @pytest.mark.asyncio
    async def test_builds_record_with_deduplicated_names(self, rxnav, terminology_client):
        rxnav.histories["861004"] = history_json(
            "Glucophage 500 MG Oral Tablet",
            ["metformin", "metformin"],
            ["Oral Product", "Pill", "Oral Product"],
        )

        record = await terminology_client.detail("861004")

        assert record.identifier == "861004"
        assert record.name == "Glucophage 500 MG Oral Tablet"
        assert record.base_ingredient_names == ("metformin",)
        assert record.dose_form_names == ("Oral Product", "Pill")

    @pytest.mark.asyncio
    async def test_missing_feature_lists_give_empty_collections(self, rxnav, terminology_client):
        rxnav.histories["1"] = {
            "rxcuiStatusHistory": {"attributes": {"name": "X"}, "definitionalFeatures": {}}
        }

        record = await terminology_client.detail("1")

        assert record.base_ingredient_names == ()
        assert record.dose_form_names == ()

    @pytest.mark.asyncio
    async def test_missing_definitional_features_is_not_found(self, rxnav, terminology_client):
        rxnav.histories["1"] = {"rxcuiStatusHistory": {"attributes": {"name": "X"}}}

        with pytest.raises(NotFound) as exc_info:
            await terminology_client.detail("1")
        assert exc_info.value.identifier == "1"

    @pytest.mark.asyncio
    async def test_missing_status_history_is_not_found(self, rxnav, terminology_client):
        rxnav.histories["1"] = {}

        with pytest.raises(NotFound):
            await terminology_client.detail("1")

    @pytest.mark.asyncio
    async def test_http_error_is_not_found(self, terminology_client):
        with pytest.raises(NotFound):
            await terminology_client.detail("unknown")

    @pytest.mark.asyncio
    async def test_timeout_is_not_found(self, rxnav, terminology_client):
        rxnav.histories["1"] = httpx.ConnectTimeout("timed out")

        with pytest.raises(NotFound):
            await terminology_client.detail("1")

    @pytest.mark.asyncio
    async def test_identifier_is_sent_as_one_path_segment(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(404)

        client = TerminologyClient(
            base_url="https://rxnav.test/REST",
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        )
        with pytest.raises(NotFound):
            await client.detail("617310?x")

        assert seen[0].url.raw_path == b"/REST/rxcui/617310%3Fx/historystatus.json"
        assert seen[0].url.query == b""


class TestValidate:
    """Tests for validate."""

    @pytest.mark.asyncio
    async def test_matching_identifier_is_valid(self, rxnav, terminology_client):
        rxnav.add_drug("617310", "Lipitor", ["atorvastatin"], ["Pill"])

        assert await terminology_client.validate("617310") is True

    @pytest.mark.asyncio
    async def test_different_identifier_is_invalid(self, rxnav, terminology_client):
        rxnav.properties["617310"] = {"properties": {"rxcui": "617311"}}

        assert await terminology_client.validate("617310") is False

    @pytest.mark.asyncio
    async def test_missing_properties_is_invalid(self, terminology_client):
        assert await terminology_client.validate("000") is False

    @pytest.mark.asyncio
    async def test_server_error_is_invalid_not_raised(self, rxnav, terminology_client):
        rxnav.properties["617310"] = 500

        assert await terminology_client.validate("617310") is False

    @pytest.mark.asyncio
    async def test_transport_error_is_invalid_not_raised(self, rxnav, terminology_client):
        rxnav.properties["617310"] = httpx.ConnectError("refused")

        assert await terminology_client.validate("617310") is False

    @pytest.mark.asyncio
    async def test_identifier_with_slashes_stays_in_one_path_segment(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"properties": {"rxcui": "1"}})

        client = TerminologyClient(
            base_url="https://rxnav.test/REST",
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        )

        assert await client.validate("617310/../1") is False
        assert seen[0].url.raw_path == b"/REST/rxcui/617310%2F..%2F1/properties.json"

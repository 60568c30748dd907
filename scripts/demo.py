#!/usr/bin/env python3
"""
Demo script for the drug lookup pipeline.

Runs a few searches against the live RxNav API and shows how the
lookaside cache absorbs repeated queries.
"""

import asyncio
import time

from drug_lookup import (
    DrugLookupService,
    InMemoryCacheRepository,
    MedicationEnricher,
    NotFound,
    TerminologyClient,
    UpstreamUnavailable,
)


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


async def demo_search(service: DrugLookupService) -> list[str]:
    """Search a few names twice and compare cold/warm timings."""
    print_section("Search by name")

    found: list[str] = []
    for name in ["lipitor", "glucophage", "aspirin"]:
        for attempt in ("cold", "warm"):
            start = time.time()
            records = await service.search_by_name(name)
            duration = (time.time() - start) * 1000
            print(f"\n  {name!r} ({attempt}): {len(records)} results in {duration:.1f}ms")
        for record in records:
            print(f"    {record.identifier:>8}  {record.name}")
            print(f"              ingredients: {', '.join(record.base_ingredient_names)}")
            print(f"              dose forms:  {', '.join(record.dose_form_names)}")
            found.append(record.identifier)
    return found


async def demo_validation(client: TerminologyClient, identifiers: list[str]) -> None:
    """Check a real and a made-up identifier."""
    print_section("Identifier validation")

    for identifier in identifiers[:1] + ["0000000"]:
        is_valid = await client.validate(identifier)
        print(f"  {identifier}: {'valid' if is_valid else 'invalid'}")


async def demo_enrichment(service: DrugLookupService, identifiers: list[str]) -> None:
    """Enrich a saved list; the details come straight from the cache."""
    print_section("Medication list enrichment")

    enricher = MedicationEnricher(lookup_service=service)
    start = time.time()
    records = await enricher.enrich(identifiers[:3])
    duration = (time.time() - start) * 1000
    print(f"  Enriched {len(records)} saved drugs in {duration:.1f}ms")

    try:
        await service.detail_cached("0000000")
    except NotFound as e:
        print(f"  Unknown identifier: {e}")


async def main() -> None:
    """Run all demos."""
    print("\nDrug Lookup Demo")
    print("=" * 70)

    client = TerminologyClient.create()
    service = DrugLookupService.create(
        terminology_client=client,
        cache=InMemoryCacheRepository.create(),
    )

    try:
        identifiers = await demo_search(service)
        await demo_validation(client, identifiers)
        await demo_enrichment(service, identifiers)

        print("\n" + "=" * 70)
        print("Demo completed successfully!")
        print("=" * 70)

    except UpstreamUnavailable as e:
        print(f"\nRxNav is unavailable: {e}")
        print("Check your network connection or set RXNORM_BASE_URL.")
    finally:
        await client.close()


if __name__ == "__main__":
    asyncio.run(main())
